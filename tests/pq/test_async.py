from select import select

import pytest

pq = pytest.importorskip("pylibpq.pq")

from pylibpq import errors as e  # noqa: E402


def execute_wait(pgconn):
    """Wait for the results of a query sent, return them in a list."""
    results = []
    while True:
        busy, error = pgconn.is_busy()
        assert error is None, error
        if busy:
            select([pgconn.socket], [], [])
            continue
        res, error = pgconn.get_result()
        assert error is None, error
        if res is None:
            break
        results.append(res)

    return results


def test_send_query(pgconn):
    # This test shows how to process an async query in all its glory
    assert pgconn.set_nonblocking(True)

    # Long query to make sure we have to wait on send
    rv = pgconn.send_query(
        b"/* %s */ select 'x' as f from pg_sleep(0.01); select 1 as foo;"
        % (b"x" * 1_000_000)
    )
    assert rv == (True, None, False)

    # send loop
    while True:
        rv = pgconn.flush()
        assert rv.error is None
        if rv.ok:
            break

        assert rv.again
        rl, wl, xl = select([pgconn.socket], [pgconn.socket], [])
        if wl:
            continue  # call flush again()
        if rl:
            assert pgconn.consume_input()
            continue

    # read loop
    results = []
    while True:
        assert pgconn.consume_input()
        busy, error = pgconn.is_busy()
        assert error is None
        if busy:
            select([pgconn.socket], [], [])
            continue
        res, error = pgconn.get_result()
        assert error is None
        if res is None:
            break
        assert res.status == pq.ExecStatus.TUPLES_OK
        results.append(res)

    assert len(results) == 2
    assert results[0].nfields == 1
    assert results[0].fname(1) == b"f"
    assert results[0].get_value(1, 1) == b"x"
    assert results[1].nfields == 1
    assert results[1].fname(1) == b"foo"
    assert results[1].get_value(1, 1) == b"1"


def test_send_query_compact(pgconn):
    assert pgconn.send_query("select 'x' as f; select 1 as foo")
    results = execute_wait(pgconn)

    assert len(results) == 2
    assert results[0].get_value(1, 1) == b"x"
    assert results[1].get_value(1, 1) == b"1"

    pgconn.finish()
    with pytest.raises(e.FreedObjectError):
        pgconn.send_query("select 1")


def test_send_query_busy(pgconn):
    assert pgconn.send_query("select 1")
    rv = pgconn.send_query("select 2")
    assert not rv
    assert rv.again is False
    assert "another command is already in progress" in rv.error
    with pytest.raises(e.OperationalError, match="already in progress"):
        rv.check()
    execute_wait(pgconn)


def test_get_result_idle(pgconn):
    pgconn.exec_("select 1")
    assert pgconn.get_result() == (None, None)


def test_single_row_mode(pgconn):
    assert pgconn.send_query("select generate_series(1,2)")
    assert pgconn.set_single_row_mode() is True

    results = execute_wait(pgconn)
    assert len(results) == 3

    res = results[0]
    assert res.status == pq.ExecStatus.SINGLE_TUPLE
    assert res.ntuples == 1
    assert res.get_value(1, 1) == b"1"

    res = results[1]
    assert res.status == pq.ExecStatus.SINGLE_TUPLE
    assert res.ntuples == 1
    assert res.get_value(1, 1) == b"2"

    res = results[2]
    assert res.status == pq.ExecStatus.TUPLES_OK
    assert res.ntuples == 0


def test_single_row_mode_no_query(pgconn):
    assert pgconn.set_single_row_mode() is False


def test_send_query_params(pgconn):
    assert pgconn.send_query_params("select $1::int + $2", "5", 3)
    (res,) = execute_wait(pgconn)
    assert res.status == pq.ExecStatus.TUPLES_OK
    assert res.get_value(1, 1) == b"8"

    pgconn.finish()
    with pytest.raises(e.FreedObjectError):
        pgconn.send_query_params("select $1", 1)


def test_send_query_params_bad_type(pgconn):
    with pytest.raises(TypeError, match="1: object param"):
        pgconn.send_query_params("select $1", object())
    # nothing was sent
    res, _ = pgconn.exec_("select 1")
    assert res.status == pq.ExecStatus.TUPLES_OK


def test_consume_input_closed(pgconn):
    pgconn.exec_(f"select pg_terminate_backend({pgconn.backend_pid})")
    rv = pgconn.consume_input()
    assert not rv
    assert rv.error

    busy, error = pgconn.is_busy()
    assert busy is False
    assert error


def test_get_result_after_error(pgconn):
    assert pgconn.send_query("select 1; select wat")
    res, error = pgconn.get_result()
    assert res.status == pq.ExecStatus.TUPLES_OK
    res, error = pgconn.get_result()
    assert res.status == pq.ExecStatus.FATAL_ERROR

    # the end of the results is reported with the last error
    res, error = pgconn.get_result()
    assert res is None
    assert "wat" in error
