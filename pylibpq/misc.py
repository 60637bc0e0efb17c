"""
Various functionalities to make easier to work with the libpq.
"""

# Copyright (C) 2022 The Psycopg Team

import re
from typing import NamedTuple, Optional, Tuple, TypeVar, Union

from . import errors as e
from .abc import PGconn, PGresult
from ._enums import ConnStatus, ExecStatus, TransactionStatus

T = TypeVar("T")

ErrorInfo = Union[str, OSError]
"""
The error slot of a value returned: a message from libpq or an `!OSError`
for failures coming from the environment (typically memory allocation).
"""

Value = Tuple[Optional[T], Optional[ErrorInfo]]
"""A ``(value, error)`` pair: only one of the two is not `!None`."""


class Outcome(NamedTuple):
    """
    The result of a libpq operation not returning data.

    Possible values are:

    - ``(True, None, False)``: the operation succeeded;
    - ``(False, message, False)``: the operation failed;
    - ``(False, None, True)``: the operation could not complete without
      blocking and should be retried when the socket is ready.

    The object is true only if the operation succeeded.
    """

    ok: bool
    error: Optional[str] = None
    again: bool = False

    def __bool__(self) -> bool:
        return self.ok

    def check(self, result: Optional[PGresult] = None) -> "Outcome":
        """
        Raise `OperationalError` if the operation failed.

        If *result* is specified, typically the result of the failed command,
        its error fields are exposed by the exception `~Error.diag`.
        """
        if self.error is not None:
            raise e.OperationalError(self.error, info=result)
        return self


OK = Outcome(True)
AGAIN = Outcome(False, None, True)


def failed(message: str) -> Outcome:
    return Outcome(False, message)


class CopyData(NamedTuple):
    """
    The result of `~pylibpq.pq.PGconn.get_copy_data()`.

    Possible values are:

    - ``(data, None, False)``: a row of data was received;
    - ``(None, None, False)``: the copy is complete;
    - ``(None, None, True)``: no data available yet (only in async mode);
    - ``(None, message, False)``: the operation failed.
    """

    data: Optional[bytes]
    error: Optional[str] = None
    again: bool = False


class ConninfoOption(NamedTuple):
    keyword: bytes
    envvar: Optional[bytes]
    compiled: Optional[bytes]
    val: Optional[bytes]
    label: bytes
    dispchar: bytes
    dispsize: int


def decode_message(msg: Optional[bytes], encoding: str = "utf-8") -> str:
    """
    Decode a message returned by the libpq, never failing.
    """
    if not msg:
        return ""
    return msg.decode(encoding, "replace")


_re_digits = re.compile(rb"[0-9]+")


def parse_cmd_tuples(text: Optional[bytes]) -> Optional[int]:
    """
    Convert the value returned by :pq:`PQcmdTuples` into a number.

    Return `!None` if the string is empty or is not a number.
    """
    if not text or not _re_digits.fullmatch(text):
        return None
    return int(text)


def res_status_text(status: int) -> str:
    """
    Return the name of an `ExecStatus`, as :pq:`PQresStatus` does.
    """
    try:
        return f"PGRES_{ExecStatus(status).name}"
    except ValueError:
        return "invalid ExecStatusType code"


def connection_summary(pgconn: PGconn) -> str:
    """
    Return summary information on a connection.

    Useful for __repr__
    """
    parts = []
    if pgconn.status == ConnStatus.OK:

        status = TransactionStatus(pgconn.transaction_status).name
        host = pgconn.host or b""
        if not host.startswith(b"/"):
            parts.append(("host", decode_message(host)))
        if pgconn.port != b"5432":
            parts.append(("port", decode_message(pgconn.port)))
        if pgconn.user != pgconn.db:
            parts.append(("user", decode_message(pgconn.user)))
        parts.append(("database", decode_message(pgconn.db)))
    else:
        status = ConnStatus(pgconn.status).name

    sparts = " ".join("%s=%s" % part for part in parts)
    if sparts:
        sparts = f" ({sparts})"
    return f"[{status}]{sparts}"
