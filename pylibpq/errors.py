"""
pylibpq exceptions

The hierarchy follows the DBAPI one, restricted to the errors a libpq binding
can raise::

    Exceptions
    |__Warning
    |__Error
       |__InterfaceError
       |  |__FreedObjectError
       |__DatabaseError
          |__OperationalError
          |__NotSupportedError

Failures reported by libpq are not raised: they are returned to the caller
together with the error message (see `pylibpq.misc.Outcome`). Exceptions are
reserved to programming errors and to explicit checks requested by the caller.
"""

# Copyright (C) 2022 The Psycopg Team

from typing import Any, Dict, Optional, Sequence, Tuple, Union
from typing import cast

from .abc import PGresult
from ._enums import DiagnosticField


class Warning(Exception):
    """
    Exception raised for important warnings.

    Defined for DBAPI compatibility, but never raised by ``pylibpq``.
    """

    __module__ = "pylibpq"


ErrorInfo = Union[None, PGresult, Dict[int, Optional[bytes]]]


class Error(Exception):
    """
    Base exception for all the errors pylibpq will raise.

    This exception is guaranteed to be picklable.
    """

    __module__ = "pylibpq"

    def __init__(
        self,
        *args: Sequence[Any],
        info: ErrorInfo = None,
        encoding: str = "utf-8"
    ):
        super().__init__(*args)
        self._info = info
        self._encoding = encoding

    @property
    def diag(self) -> "Diagnostic":
        """
        A `Diagnostic` object to inspect details of the errors from the database.
        """
        return Diagnostic(self._info, encoding=self._encoding)

    def __reduce__(self) -> Union[str, Tuple[Any, ...]]:
        res = super().__reduce__()
        if isinstance(res, tuple) and len(res) >= 3:
            res[2]["_info"] = self._info_to_dict(self._info)

        return res

    @classmethod
    def _info_to_dict(cls, info: ErrorInfo) -> ErrorInfo:
        """
        Convert a PGresult to a dictionary to make the info picklable.
        """
        # PGresult is a protocol, can't use isinstance
        if hasattr(info, "error_field"):
            info = cast(PGresult, info)
            return {v: info.error_field(v) for v in DiagnosticField}
        else:
            return info


class InterfaceError(Error):
    """
    An error related to the database interface rather than the database itself.
    """

    __module__ = "pylibpq"


class FreedObjectError(InterfaceError):
    """
    An operation was attempted on a handle already released.

    Raised by any method of a connection, result, cancel or notification
    object after `!finish()`, `!clear()` or `!free()` has been called on it.
    """

    __module__ = "pylibpq"

    def __init__(self, *args: Any, **kwargs: Any):
        if not args:
            args = ("attempt to use a freed object",)
        super().__init__(*args, **kwargs)


class DatabaseError(Error):
    """
    Exception raised for errors that are related to the database.
    """

    __module__ = "pylibpq"


class OperationalError(DatabaseError):
    """
    An error related to the database's operation.

    Raised by `Outcome.check()` when libpq reported a failure.
    """

    __module__ = "pylibpq"


class NotSupportedError(DatabaseError):
    """
    A libpq function was used which is not available in the library loaded.
    """

    __module__ = "pylibpq"


class Diagnostic:
    """Details from a database error report."""

    def __init__(self, info: ErrorInfo, encoding: str = "utf-8"):
        self._info = info
        self._encoding = encoding

    @property
    def severity(self) -> Optional[str]:
        return self._error_message(DiagnosticField.SEVERITY)

    @property
    def severity_nonlocalized(self) -> Optional[str]:
        return self._error_message(DiagnosticField.SEVERITY_NONLOCALIZED)

    @property
    def sqlstate(self) -> Optional[str]:
        return self._error_message(DiagnosticField.SQLSTATE)

    @property
    def message_primary(self) -> Optional[str]:
        return self._error_message(DiagnosticField.MESSAGE_PRIMARY)

    @property
    def message_detail(self) -> Optional[str]:
        return self._error_message(DiagnosticField.MESSAGE_DETAIL)

    @property
    def message_hint(self) -> Optional[str]:
        return self._error_message(DiagnosticField.MESSAGE_HINT)

    @property
    def statement_position(self) -> Optional[str]:
        return self._error_message(DiagnosticField.STATEMENT_POSITION)

    @property
    def context(self) -> Optional[str]:
        return self._error_message(DiagnosticField.CONTEXT)

    @property
    def schema_name(self) -> Optional[str]:
        return self._error_message(DiagnosticField.SCHEMA_NAME)

    @property
    def table_name(self) -> Optional[str]:
        return self._error_message(DiagnosticField.TABLE_NAME)

    @property
    def column_name(self) -> Optional[str]:
        return self._error_message(DiagnosticField.COLUMN_NAME)

    @property
    def constraint_name(self) -> Optional[str]:
        return self._error_message(DiagnosticField.CONSTRAINT_NAME)

    def _error_message(self, field: DiagnosticField) -> Optional[str]:
        if self._info:
            if isinstance(self._info, dict):
                val = self._info.get(field)
            else:
                val = self._info.error_field(field)

            if val is not None:
                return val.decode(self._encoding, "replace")

        return None

    def __reduce__(self) -> Union[str, Tuple[Any, ...]]:
        res = super().__reduce__()
        if isinstance(res, tuple) and len(res) >= 3:
            res[2]["_info"] = Error._info_to_dict(self._info)

        return res
