import os
import logging

import pytest

pq = pytest.importorskip("pylibpq.pq")

from pylibpq import errors as e  # noqa: E402

from ..utils import check_libpq_version  # noqa: E402


def test_version():
    rv = pq.version()
    assert rv > 90500
    assert rv < 200000  # you are good for a while
    assert pq.lib_version() == rv


@pytest.mark.skipif("not os.environ.get('PYLIBPQ_TEST_WANT_LIBPQ_IMPORT')")
def test_want_import_version():
    want = os.environ["PYLIBPQ_TEST_WANT_LIBPQ_IMPORT"]
    got = pq.version()
    assert not check_libpq_version(got, want)


def test_logger_quiet():
    assert logging.getLogger("pylibpq").level != logging.NOTSET


def test_exports():
    import pylibpq

    assert pq.ExecStatus is pylibpq.ExecStatus
    assert pq.PGRES_TUPLES_OK == pq.ExecStatus.TUPLES_OK
    for name in pq.__all__:
        assert hasattr(pq, name), name


def test_is_threadsafe():
    assert isinstance(pq.is_threadsafe(), bool)


def test_parse_conninfo():
    opts, error = pq.parse_conninfo("dbname=foo user=bar port=5433")
    assert error is None
    assert opts[b"dbname"].val == b"foo"
    assert opts[b"user"].val == b"bar"
    assert opts[b"port"].val == b"5433"
    assert opts[b"host"].val is None
    assert opts[b"password"].dispchar == b"*"


def test_parse_conninfo_uri():
    opts, error = pq.parse_conninfo(b"postgresql://someone@example.com/thedb")
    assert error is None
    assert opts[b"host"].val == b"example.com"
    assert opts[b"user"].val == b"someone"
    assert opts[b"dbname"].val == b"thedb"


def test_parse_conninfo_error():
    opts, error = pq.parse_conninfo("dbname=foo nosuchopt=bar")
    assert opts is None
    assert isinstance(error, str)
    assert "nosuchopt" in error


@pytest.mark.parametrize("arg", [None, 42])
def test_parse_conninfo_bad_type(arg):
    with pytest.raises(TypeError):
        pq.parse_conninfo(arg)


def test_default_conninfo(setpgenv):
    setpgenv({"PGAPPNAME": "pylibpq-test", "PGPORT": "15432"})
    opts, error = pq.default_conninfo()
    assert error is None
    assert opts[b"application_name"].envvar == b"PGAPPNAME"
    assert opts[b"application_name"].val == b"pylibpq-test"
    assert opts[b"port"].val == b"15432"
    assert isinstance(opts[b"port"], pq.ConninfoOption)


def test_ping_no_attempt():
    assert pq.ping("nosuchopt=1") == pq.Ping.NO_ATTEMPT


def test_ping_no_response():
    rv = pq.ping("host=127.0.0.1 port=1 connect_timeout=1")
    assert rv == pq.Ping.NO_RESPONSE


def test_ping_ok(dsn):
    assert pq.ping(dsn) == pq.Ping.OK


def test_unescape_bytea():
    rv, error = pq.unescape_bytea(b"\\x666f6f00ff")
    assert error is None
    assert rv == b"foo\x00\xff"

    rv, error = pq.unescape_bytea("")
    assert (rv, error) == (b"", None)


def test_encrypt_password():
    rv, error = pq.encrypt_password("psycopg2", "ashesh")
    assert error is None
    assert rv == b"md594839d658c28a357126f105b9cb14cfc"


def test_encodings():
    utf8 = pq.char_to_encoding("UTF8")
    assert utf8 >= 0
    assert pq.encoding_to_char(utf8) == "UTF8"
    assert pq.char_to_encoding(b"utf-8") == utf8
    assert pq.char_to_encoding("nosuchencoding") == -1
    assert pq.valid_server_encoding_id(utf8)
    assert not pq.valid_server_encoding_id(pq.char_to_encoding("SJIS"))


def test_encoding_to_char_invalid():
    assert pq.encoding_to_char(-1) == ""


def test_env2encoding(setpgenv):
    setpgenv({"PGCLIENTENCODING": "LATIN1"})
    assert pq.env2encoding() == pq.char_to_encoding("LATIN1")


def test_mblen():
    utf8 = pq.char_to_encoding("UTF8")
    assert pq.mblen("a", utf8) == 1
    assert pq.mblen("€", utf8) == 3
    assert pq.dsplen("a", utf8) == 1
    assert pq.dsplen(b"\n", utf8) == -1


@pytest.mark.libpq(">= 14")
def test_mblen_bounded():
    utf8 = pq.char_to_encoding("UTF8")
    assert pq.mblen_bounded("€", utf8) == 3
    assert pq.mblen_bounded(b"\xe2", utf8) == 1


@pytest.mark.libpq("< 14")
def test_mblen_bounded_not_supported():
    utf8 = pq.char_to_encoding("UTF8")
    with pytest.raises(e.NotSupportedError):
        pq.mblen_bounded("a", utf8)


@pytest.mark.parametrize("status", pq.ExecStatus)
def test_res_status(status):
    assert pq.res_status(status) == f"PGRES_{status.name}"


def test_res_status_invalid():
    assert pq.res_status(42) == "invalid ExecStatusType code"
