"""
Conversion of Python objects to query parameters.
"""

# Copyright (C) 2022 The Psycopg Team

from typing import Any, List, Optional, Sequence, Union

Buffer = Union[bytes, bytearray, memoryview]


def to_bytes(obj: Union[str, Buffer], name: str = "argument") -> bytes:
    """
    Convert a string or buffer argument to bytes to pass to the libpq.

    Strings are encoded in UTF-8.
    """
    if isinstance(obj, bytes):
        return obj
    elif isinstance(obj, str):
        return obj.encode("utf-8")
    elif isinstance(obj, (bytearray, memoryview)):
        return bytes(obj)
    else:
        raise TypeError(
            f"{name}: str or bytes expected, got {type(obj).__name__} instead"
        )


def to_bytes_or_none(
    obj: Union[None, str, Buffer], name: str = "argument"
) -> Optional[bytes]:
    return None if obj is None else to_bytes(obj, name)


def dump_param(obj: Any, pos: int) -> Optional[bytes]:
    """
    Convert a query parameter to its text representation.

    `!None` is a SQL NULL. *pos* is the 1-based position of the parameter,
    only used to report an unsupported type.
    """
    if obj is None:
        return None
    # bool is a subclass of int: check it first
    elif isinstance(obj, bool):
        return b"TRUE" if obj else b"FALSE"
    # int and float subclasses, such as IntEnum, may override __str__
    elif isinstance(obj, int):
        return str(int(obj)).encode("ascii")
    elif isinstance(obj, float):
        return str(float(obj)).encode("ascii")
    elif isinstance(obj, str):
        return obj.encode("utf-8")
    elif isinstance(obj, bytes):
        return obj
    elif isinstance(obj, (bytearray, memoryview)):
        return bytes(obj)
    else:
        raise TypeError(f"{pos}: {type(obj).__name__} param is not supported")


def dump_params(params: Sequence[Any]) -> List[Optional[bytes]]:
    return [dump_param(obj, i) for i, obj in enumerate(params, 1)]
