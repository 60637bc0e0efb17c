import pytest

from pylibpq._enums import ExecStatus, Trace
from pylibpq._params import to_bytes, to_bytes_or_none, dump_param, dump_params


@pytest.mark.parametrize(
    "obj, want",
    [
        (b"hello", b"hello"),
        ("hello", b"hello"),
        ("€", b"\xe2\x82\xac"),
        (bytearray(b"ba"), b"ba"),
        (memoryview(b"mv"), b"mv"),
        ("", b""),
    ],
)
def test_to_bytes(obj, want):
    got = to_bytes(obj)
    assert got == want
    assert type(got) is bytes


@pytest.mark.parametrize("obj", [None, 1, 1.0, object()])
def test_to_bytes_bad(obj):
    with pytest.raises(TypeError, match="conninfo: str or bytes expected"):
        to_bytes(obj, "conninfo")


def test_to_bytes_or_none():
    assert to_bytes_or_none(None) is None
    assert to_bytes_or_none("x") == b"x"


@pytest.mark.parametrize(
    "obj, want",
    [
        (None, None),
        (True, b"TRUE"),
        (False, b"FALSE"),
        (0, b"0"),
        (-42, b"-42"),
        (10**30, b"1" + b"0" * 30),
        (1.5, b"1.5"),
        (float("inf"), b"inf"),
        ("café", b"caf\xc3\xa9"),
        ("", b""),
        (b"\x00\xff", b"\x00\xff"),
        (bytearray(b"abc"), b"abc"),
        (memoryview(b"abc"), b"abc"),
    ],
)
def test_dump_param(obj, want):
    assert dump_param(obj, 1) == want


class Money(float):
    def __str__(self):
        return f"${float(self):.2f}"


class Answer(int):
    def __str__(self):
        return "forty-two"


@pytest.mark.parametrize(
    "obj, want",
    [
        (ExecStatus.TUPLES_OK, b"2"),
        (Trace.REGRESS_MODE, b"2"),
        (Answer(42), b"42"),
        (Money(1.5), b"1.5"),
    ],
)
def test_dump_param_number_subclass(obj, want):
    assert dump_param(obj, 1) == want


@pytest.mark.parametrize("obj", [[1], {}, object(), (1, 2)])
def test_dump_param_bad(obj):
    with pytest.raises(TypeError) as excinfo:
        dump_param(obj, 3)
    assert str(excinfo.value) == f"3: {type(obj).__name__} param is not supported"


def test_dump_params():
    assert dump_params([]) == []
    assert dump_params([1, None, "a", True]) == [b"1", None, b"a", b"TRUE"]


def test_dump_params_position():
    with pytest.raises(TypeError, match="^2: dict param"):
        dump_params([1, {}])
