"""
Protocol objects to represent objects exposed by the libpq binding.

They allow the pure Python helpers (error reporting, result summaries) to
work with the ctypes objects and with any object behaving the same way.
"""

# Copyright (C) 2022 The Psycopg Team

from typing import Optional
from typing_extensions import Protocol


class PGconn(Protocol):
    @property
    def status(self) -> int:
        ...

    @property
    def transaction_status(self) -> int:
        ...

    @property
    def error_message(self) -> Optional[str]:
        ...

    @property
    def host(self) -> Optional[bytes]:
        ...

    @property
    def port(self) -> Optional[bytes]:
        ...

    @property
    def user(self) -> Optional[bytes]:
        ...

    @property
    def db(self) -> Optional[bytes]:
        ...

    def parameter_status(self, name: bytes) -> Optional[bytes]:
        ...


class PGresult(Protocol):
    """
    A libpq result, addressed with 1-based row, column and parameter numbers.
    """

    @property
    def status(self) -> int:
        ...

    @property
    def error_message(self) -> Optional[str]:
        ...

    def error_field(self, fieldcode: int) -> Optional[bytes]:
        ...

    @property
    def ntuples(self) -> int:
        ...

    @property
    def nfields(self) -> int:
        ...

    @property
    def binary_tuples(self) -> bool:
        ...

    def fname(self, column_number: int) -> Optional[bytes]:
        ...

    def ftable(self, column_number: int) -> int:
        ...

    def ftablecol(self, column_number: int) -> int:
        ...

    def fformat(self, column_number: int) -> int:
        ...

    def ftype(self, column_number: int) -> int:
        ...

    def fsize(self, column_number: int) -> int:
        ...

    def fmod(self, column_number: int) -> int:
        ...

    @property
    def cmd_status(self) -> Optional[bytes]:
        ...

    @property
    def cmd_tuples(self) -> Optional[int]:
        ...

    @property
    def oid_value(self) -> int:
        ...

    @property
    def nparams(self) -> int:
        ...

    def param_type(self, param_number: int) -> int:
        ...
