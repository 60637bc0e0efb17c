"""
libpq Python wrapper using ctypes bindings.

Clients shouldn't use this module directly: they should use the `pq` module
instead, which exposes the same objects.
"""

# Copyright (C) 2022 The Psycopg Team

import os
import logging
from weakref import ref
from functools import partial

from ctypes import byref, get_errno, string_at, create_string_buffer
from ctypes import addressof, c_char_p, c_int, c_size_t
from typing import Any, Callable, Dict, IO, List, Optional, Sequence, Union

from .. import errors as e
from . import _pq_ctypes as impl
from ..misc import Outcome, CopyData, ConninfoOption, Value
from ..misc import OK, AGAIN, failed, decode_message, parse_cmd_tuples
from ..misc import connection_summary
from .._enums import ContextVisibility, ExecStatus, Verbosity
from .._params import Buffer, to_bytes, to_bytes_or_none, dump_params

logger = logging.getLogger("pylibpq")

Conninfo = Dict[bytes, ConninfoOption]
NoticeHandler = Callable[..., Any]


def version() -> int:
    """Return the version number of the libpq currently loaded.

    The number is in the same format of `PGconn.server_version`.

    Certain features might not be available if the libpq library used is too old.
    """
    return impl.PQlibVersion()


lib_version = version


def _os_error(fname: str) -> OSError:
    """
    Return an error describing the failure of a libpq allocation.
    """
    errno = get_errno()
    return OSError(errno, f"{fname}: {os.strerror(errno)}")


def connect(
    conninfo: Union[str, bytes] = "", nonblocking: bool = False
) -> Value["PGconn"]:
    """
    Open a new connection to the database.

    Use :pq:`PQconnectdb` or, if *nonblocking*, :pq:`PQconnectStart`: in the
    latter case the connection must be completed using
    `PGconn.connect_poll()`.

    Return a `PGconn` even if the connection failed: check its `~PGconn.status`
    and `~PGconn.error_message`. Return an `!OSError` as error only if the
    connection object couldn't be allocated.
    """
    bconninfo = to_bytes(conninfo, "conninfo")
    if nonblocking:
        pgconn_ptr = impl.PQconnectStart(bconninfo)
    else:
        pgconn_ptr = impl.PQconnectdb(bconninfo)

    if not pgconn_ptr:
        return None, _os_error("connect")
    return PGconn(pgconn_ptr), None


def ping(conninfo: Union[str, bytes] = "") -> int:
    return impl.PQping(to_bytes(conninfo, "conninfo"))


def parse_conninfo(conninfo: Union[str, bytes]) -> Value[Conninfo]:
    """
    Parse a connection string into the options it specifies.

    See :pq:`PQconninfoParse` for details.
    """
    errmsg = c_char_p()
    rv = impl.PQconninfoParse(to_bytes(conninfo, "conninfo"), byref(errmsg))
    if not rv:
        if not errmsg:
            return None, _os_error("parse_conninfo")
        msg = decode_message(errmsg.value)
        impl.PQfreemem(errmsg)
        return None, msg

    try:
        return _options_from_array(rv), None
    finally:
        impl.PQconninfoFree(rv)


def default_conninfo() -> Value[Conninfo]:
    opts = impl.PQconndefaults()
    if not opts:
        return None, _os_error("default_conninfo")
    try:
        return _options_from_array(opts), None
    finally:
        impl.PQconninfoFree(opts)


def _options_from_array(opts: Sequence[impl.PQconninfoOption_struct]) -> Conninfo:
    rv = {}
    skws = "keyword envvar compiled val label dispchar".split()
    for opt in opts:
        if not opt.keyword:
            break
        d = {kw: getattr(opt, kw) for kw in skws}
        d["dispsize"] = opt.dispsize
        rv[opt.keyword] = ConninfoOption(**d)

    return rv


def is_threadsafe() -> bool:
    return bool(impl.PQisthreadsafe())


def unescape_bytea(data: Union[str, Buffer]) -> Value[bytes]:
    """
    Convert the textual representation of a bytea value into binary data.

    See :pq:`PQunescapeBytea` for details.
    """
    len_out = c_size_t()
    out = impl.PQunescapeBytea(to_bytes(data, "data"), byref(len_out))
    if not out:
        return None, _os_error("unescape_bytea")

    rv = string_at(out, len_out.value)
    impl.PQfreemem(out)
    return rv, None


def encrypt_password(
    passwd: Union[str, bytes], user: Union[str, bytes]
) -> Value[bytes]:
    out = impl.PQencryptPassword(
        to_bytes(passwd, "passwd"), to_bytes(user, "user")
    )
    if not out:
        return None, _os_error("encrypt_password")

    rv = string_at(out)
    impl.PQfreemem(out)
    return rv, None


def env2encoding() -> int:
    """Return the encoding id set in the :envvar:`PGCLIENTENCODING` variable."""
    return impl.PQenv2encoding()


def mblen(s: Union[str, bytes], encoding: int) -> int:
    return impl.PQmblen(to_bytes(s, "s"), encoding)


def mblen_bounded(s: Union[str, bytes], encoding: int) -> int:
    return impl.PQmblenBounded(to_bytes(s, "s"), encoding)


def dsplen(s: Union[str, bytes], encoding: int) -> int:
    return impl.PQdsplen(to_bytes(s, "s"), encoding)


def char_to_encoding(name: Union[str, bytes]) -> int:
    """Return the encoding id of an encoding name, -1 if not valid."""
    return impl.pg_char_to_encoding(to_bytes(name, "name"))


def encoding_to_char(encoding: int) -> str:
    """Return the name of an encoding id, an empty string if not valid."""
    return decode_message(impl.pg_encoding_to_char(encoding), "ascii")


def valid_server_encoding_id(encoding: int) -> bool:
    return bool(impl.pg_valid_server_encoding_id(encoding))


def res_status(status: int) -> str:
    """Return the name of a result status, according to :pq:`PQresStatus`."""
    return decode_message(impl.PQresStatus(status), "ascii")


def notice_receiver(
    arg: Any, result_ptr: impl.PGresult_struct, wconn: "ref[PGconn]"
) -> None:
    pgconn = wconn()
    if not (pgconn and pgconn._notice_receiver):
        return

    res = PGresult(result_ptr, pgconn, noclear=True)
    try:
        pgconn._notice_receiver(res)
    except Exception as ex:
        logger.exception("error in notice receiver: %s", ex)
    finally:
        # the result is owned by the libpq and will be freed on return
        res.clear()


def notice_processor(arg: Any, message: bytes, wconn: "ref[PGconn]") -> None:
    pgconn = wconn()
    if not (pgconn and pgconn._notice_processor):
        return

    try:
        pgconn._notice_processor(message)
    except Exception as ex:
        logger.exception("error in notice processor: %s", ex)


class PGconn:
    """
    Python representation of a libpq connection.
    """

    __module__ = "pylibpq.pq"
    __slots__ = (
        "_pgconn_ptr",
        "_notice_processor",
        "_notice_receiver",
        "_notice_processor_cb",
        "_notice_receiver_cb",
        "_default_notice_processor",
        "_default_notice_receiver",
        "_trace_file",
        "_trace_fp",
        "_procpid",
        "__weakref__",
    )

    def __init__(self, pgconn_ptr: impl.PGconn_struct):
        self._pgconn_ptr: Optional[impl.PGconn_struct] = pgconn_ptr

        # The Python callables registered, already bound to their arguments
        self._notice_processor: Optional[Callable[[bytes], Any]] = None
        self._notice_receiver: Optional[Callable[[PGresult], Any]] = None

        # The C functions wrapping the callables and the ones they replaced
        self._notice_processor_cb: Any = None
        self._notice_receiver_cb: Any = None
        self._default_notice_processor: Any = None
        self._default_notice_receiver: Any = None

        self._trace_file: Optional[IO[Any]] = None
        self._trace_fp: Any = None

        self._procpid = os.getpid()

    def __del__(self) -> None:
        # Close the connection only if it was created in this process,
        # not if this object is being GC'd after fork.
        if os.getpid() == self._procpid:
            self.finish()

    def __repr__(self) -> str:
        cls = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        info = connection_summary(self) if self._pgconn_ptr else "[FREED]"
        return f"<{cls} {info} at 0x{id(self):x}>"

    def finish(self) -> None:
        """
        Close the connection and release the callbacks registered on it.

        Calling the method more than once has no effect.
        """
        self._pgconn_ptr, p = None, self._pgconn_ptr
        if p:
            impl.PQfinish(p)
            self._close_trace()

        self._notice_processor = self._notice_receiver = None
        self._notice_processor_cb = self._notice_receiver_cb = None
        self._default_notice_processor = None
        self._default_notice_receiver = None

    @property
    def pgconn_ptr(self) -> Optional[int]:
        """The pointer to the underlying ``PGconn`` structure, as integer.

        `!None` if the connection is closed.

        The value can be used to pass the structure to libpq functions which
        pylibpq doesn't wrap, using FFI libraries such as `ctypes`.
        """
        if self._pgconn_ptr is None:
            return None

        return addressof(self._pgconn_ptr.contents)  # type: ignore[attr-defined]

    def conninfo(self) -> Value[Conninfo]:
        """Return the connection options used by the open connection."""
        self._ensure_pgconn()
        opts = impl.PQconninfo(self._pgconn_ptr)
        if not opts:
            return None, _os_error("conninfo")
        try:
            return _options_from_array(opts), None
        finally:
            impl.PQconninfoFree(opts)

    def connect_poll(self) -> int:
        return self._call_int(impl.PQconnectPoll)

    def get_cancel(self) -> Value["PGcancel"]:
        """
        Create an object with the information needed to cancel a command.

        See :pq:`PQgetCancel` for details.
        """
        self._ensure_pgconn()
        rv = impl.PQgetCancel(self._pgconn_ptr)
        if not rv:
            return None, _os_error("get_cancel")
        return PGcancel(rv), None

    def request_cancel(self) -> Outcome:
        self._ensure_pgconn()
        return self._outcome(impl.PQrequestCancel(self._pgconn_ptr))

    @property
    def db(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQdb)

    @property
    def user(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQuser)

    @property
    def password(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQpass)

    @property
    def host(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQhost)

    @property
    def hostaddr(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQhostaddr)

    @property
    def port(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQport)

    @property
    def options(self) -> Optional[bytes]:
        return self._call_bytes(impl.PQoptions)

    @property
    def status(self) -> int:
        return self._call_int(impl.PQstatus)

    @property
    def transaction_status(self) -> int:
        return self._call_int(impl.PQtransactionStatus)

    def parameter_status(self, name: Union[str, bytes]) -> Optional[bytes]:
        self._ensure_pgconn()
        return impl.PQparameterStatus(self._pgconn_ptr, to_bytes(name, "name"))

    @property
    def error_message(self) -> Optional[str]:
        """The last error reported on the connection, `!None` if empty."""
        self._ensure_pgconn()
        return self._error() or None

    @property
    def protocol_version(self) -> int:
        return self._call_int(impl.PQprotocolVersion)

    @property
    def server_version(self) -> int:
        return self._call_int(impl.PQserverVersion)

    @property
    def socket(self) -> int:
        """The file descriptor of the connection socket, -1 if not open."""
        return self._call_int(impl.PQsocket)

    @property
    def backend_pid(self) -> int:
        return self._call_int(impl.PQbackendPID)

    @property
    def pipeline_status(self) -> int:
        if version() < 140000:
            self._ensure_pgconn()
            return 0
        return self._call_int(impl.PQpipelineStatus)

    @property
    def needs_password(self) -> bool:
        return self._call_bool(impl.PQconnectionNeedsPassword)

    @property
    def used_password(self) -> bool:
        return self._call_bool(impl.PQconnectionUsedPassword)

    @property
    def client_encoding(self) -> str:
        """The name of the connection client encoding, e.g. ``UTF8``."""
        encoding = self._call_int(impl.PQclientEncoding)
        return encoding_to_char(encoding)

    def set_client_encoding(self, encoding: Union[str, bytes]) -> Outcome:
        self._ensure_pgconn()
        rv = impl.PQsetClientEncoding(
            self._pgconn_ptr, to_bytes(encoding, "encoding")
        )
        return OK if rv == 0 else failed(self._error())

    @property
    def ssl_in_use(self) -> bool:
        return self._call_bool(impl.PQsslInUse)

    def ssl_attribute(self, name: Union[str, bytes]) -> Optional[bytes]:
        self._ensure_pgconn()
        return impl.PQsslAttribute(self._pgconn_ptr, to_bytes(name, "name"))

    def ssl_attribute_names(self) -> List[bytes]:
        self._ensure_pgconn()
        names = impl.PQsslAttributeNames(self._pgconn_ptr)
        rv = []
        if names:
            i = 0
            while names[i] is not None:
                rv.append(names[i])
                i += 1
        return rv

    def set_error_verbosity(self, verbosity: int) -> int:
        """Set the verbosity of the error messages; return the previous one."""
        self._ensure_pgconn()
        return impl.PQsetErrorVerbosity(self._pgconn_ptr, verbosity)

    def set_error_context_visibility(self, visibility: int) -> int:
        """Set when to show the CONTEXT field; return the previous setting."""
        self._ensure_pgconn()
        return impl.PQsetErrorContextVisibility(self._pgconn_ptr, visibility)

    def set_notice_processor(
        self, handler: Optional[NoticeHandler] = None, *args: Any
    ) -> None:
        """
        Register a function to receive the notice messages.

        The function is called as ``handler(*args, message)``, with the
        message as bytes. If *handler* is `!None` restore the default libpq
        behaviour (print the messages on stderr).
        """
        self._ensure_pgconn()
        if handler is not None and not callable(handler):
            raise TypeError(
                f"callable expected, got {type(handler).__name__} instead"
            )
        self._notice_processor = None
        if handler is not None:
            self._notice_processor = partial(handler, *args)
            if self._notice_processor_cb is None:
                self._notice_processor_cb = impl.PQnoticeProcessor(
                    partial(notice_processor, wconn=ref(self))
                )
                self._default_notice_processor = impl.PQsetNoticeProcessor(
                    self._pgconn_ptr, self._notice_processor_cb, None
                )

        elif self._notice_processor_cb is not None:
            impl.PQsetNoticeProcessor(
                self._pgconn_ptr, self._default_notice_processor, None
            )
            self._notice_processor_cb = self._default_notice_processor = None

    def set_notice_receiver(
        self, handler: Optional[NoticeHandler] = None, *args: Any
    ) -> None:
        """
        Register a function to receive the notices as results.

        The function is called as ``handler(*args, result)``. The `PGresult`
        received is only valid until the function returns. If *handler* is
        `!None` restore the default libpq behaviour (pass the notice message
        to the notice processor).
        """
        self._ensure_pgconn()
        if handler is not None and not callable(handler):
            raise TypeError(
                f"callable expected, got {type(handler).__name__} instead"
            )
        self._notice_receiver = None
        if handler is not None:
            self._notice_receiver = partial(handler, *args)
            if self._notice_receiver_cb is None:
                self._notice_receiver_cb = impl.PQnoticeReceiver(
                    partial(notice_receiver, wconn=ref(self))
                )
                self._default_notice_receiver = impl.PQsetNoticeReceiver(
                    self._pgconn_ptr, self._notice_receiver_cb, None
                )

        elif self._notice_receiver_cb is not None:
            impl.PQsetNoticeReceiver(
                self._pgconn_ptr, self._default_notice_receiver, None
            )
            self._notice_receiver_cb = self._default_notice_receiver = None

    def call_notice_processor(self, message: Union[str, bytes]) -> bool:
        """
        Call the registered notice processor with *message*.

        Return `!False` if no processor is registered.
        """
        self._ensure_pgconn()
        bmessage = to_bytes(message, "message")
        if not self._notice_processor:
            return False
        self._notice_processor(bmessage)
        return True

    def call_notice_receiver(self, result: "PGresult") -> bool:
        """
        Call the registered notice receiver with *result*.

        Return `!False` if no receiver is registered.
        """
        self._ensure_pgconn()
        if not isinstance(result, PGresult):
            raise TypeError(
                f"PGresult expected, got {type(result).__name__} instead"
            )
        if not self._notice_receiver:
            return False
        self._notice_receiver(result)
        return True

    def trace(self, file: IO[Any]) -> Optional[IO[Any]]:
        """
        Start tracing the client/server communication to *file*.

        *file* must be a file open for writing with a file descriptor.
        Return the file previously traced, if any.
        """
        self._ensure_pgconn()
        if impl.fdopen is None:
            raise e.NotSupportedError("trace is not supported on Windows")

        # don't interleave data still buffered on the Python side
        file.flush()
        fd = os.dup(file.fileno())
        fp = impl.fdopen(fd, b"w")
        if not fp:
            os.close(fd)
            raise _os_error("trace")

        prev = self.untrace()
        impl.PQtrace(self._pgconn_ptr, fp)
        self._trace_file, self._trace_fp = file, fp
        return prev

    def untrace(self) -> Optional[IO[Any]]:
        """
        Stop tracing the communication; return the file traced, if any.
        """
        self._ensure_pgconn()
        impl.PQuntrace(self._pgconn_ptr)
        return self._close_trace()

    def set_trace_flags(self, flags: int = 0) -> None:
        self._ensure_pgconn()
        impl.PQsetTraceFlags(self._pgconn_ptr, flags)

    def _close_trace(self) -> Optional[IO[Any]]:
        fp, self._trace_fp = self._trace_fp, None
        file, self._trace_file = self._trace_file, None
        if fp:
            # also flushes the data written by the libpq
            impl.fclose(fp)
        return file

    def exec_(self, command: Union[str, bytes]) -> Value["PGresult"]:
        bcommand = to_bytes(command, "command")
        self._ensure_pgconn()
        rv = impl.PQexec(self._pgconn_ptr, bcommand)
        if not rv:
            return None, self._error()
        return PGresult(rv, self), None

    def exec_params(
        self, command: Union[str, bytes], *params: Any
    ) -> Value["PGresult"]:
        """
        Execute *command* with the positional *params* sent separately.

        Parameters are referred to as ``$1``, ``$2``... in the command. They
        are all passed in text format and their type is inferred by the
        server.
        """
        args = self._query_params_args(command, params)
        self._ensure_pgconn()
        rv = impl.PQexecParams(*args)
        if not rv:
            return None, self._error()
        return PGresult(rv, self), None

    def send_query(self, command: Union[str, bytes]) -> Outcome:
        bcommand = to_bytes(command, "command")
        self._ensure_pgconn()
        return self._outcome(impl.PQsendQuery(self._pgconn_ptr, bcommand))

    def send_query_params(
        self, command: Union[str, bytes], *params: Any
    ) -> Outcome:
        args = self._query_params_args(command, params)
        self._ensure_pgconn()
        return self._outcome(impl.PQsendQueryParams(*args))

    def _query_params_args(
        self, command: Union[str, bytes], params: Sequence[Any]
    ) -> Any:
        bcommand = to_bytes(command, "command")
        values = dump_params(params)
        if values:
            nparams = len(values)
            aparams = (c_char_p * nparams)(*values)
        else:
            nparams = 0
            aparams = None

        # No types, lengths, formats: text parameters and text results
        return (self._pgconn_ptr, bcommand, nparams, None, aparams, None, None, 0)

    def set_single_row_mode(self) -> bool:
        return self._call_bool(impl.PQsetSingleRowMode)

    def get_result(self) -> Value["PGresult"]:
        """
        Return the next result of a query sent, or ``(None, None)`` if done.
        """
        self._ensure_pgconn()
        rv = impl.PQgetResult(self._pgconn_ptr)
        if rv:
            return PGresult(rv, self), None
        return None, self._error() or None

    def consume_input(self) -> Outcome:
        self._ensure_pgconn()
        return self._outcome(impl.PQconsumeInput(self._pgconn_ptr))

    def is_busy(self) -> Value[bool]:
        """
        Consume the input available and return if a result is still pending.
        """
        self._ensure_pgconn()
        if not impl.PQconsumeInput(self._pgconn_ptr):
            return False, self._error()
        return bool(impl.PQisBusy(self._pgconn_ptr)), None

    def enter_pipeline_mode(self) -> Outcome:
        self._ensure_pgconn()
        return self._outcome(impl.PQenterPipelineMode(self._pgconn_ptr))

    def exit_pipeline_mode(self) -> Outcome:
        self._ensure_pgconn()
        return self._outcome(impl.PQexitPipelineMode(self._pgconn_ptr))

    def pipeline_sync(self) -> Outcome:
        """Mark a synchronization point in a pipeline."""
        self._ensure_pgconn()
        return self._outcome(impl.PQpipelineSync(self._pgconn_ptr))

    def send_flush_request(self) -> Outcome:
        """Send a request for the server to flush its output buffer."""
        self._ensure_pgconn()
        return self._outcome(impl.PQsendFlushRequest(self._pgconn_ptr))

    def notifies(self) -> Value["PGnotify"]:
        """
        Consume the input available and return the next notification.

        Return ``(None, None)`` if there is no notification pending.
        """
        self._ensure_pgconn()
        if not impl.PQconsumeInput(self._pgconn_ptr):
            return None, self._error()
        ptr = impl.PQnotifies(self._pgconn_ptr)
        return (PGnotify(ptr) if ptr else None), None

    def put_copy_data(self, buffer: Union[str, Buffer]) -> Outcome:
        data = to_bytes(buffer, "buffer")
        self._ensure_pgconn()
        rv = impl.PQputCopyData(self._pgconn_ptr, data, len(data))
        if rv < 0:
            return failed(self._error())
        # 0 if there is no space to queue the data, only if nonblocking
        return OK if rv else AGAIN

    def put_copy_end(self, errormsg: Union[None, str, bytes] = None) -> Outcome:
        """
        Signal the end of COPY FROM STDIN.

        If *errormsg* is specified the COPY fails with that message.
        """
        berrormsg = to_bytes_or_none(errormsg, "errormsg")
        self._ensure_pgconn()
        rv = impl.PQputCopyEnd(self._pgconn_ptr, berrormsg)
        if rv < 0:
            return failed(self._error())
        return OK if rv else AGAIN

    def get_copy_data(self, async_: bool = False) -> CopyData:
        """
        Receive the next row of data during a COPY TO STDOUT.
        """
        self._ensure_pgconn()
        buffer_ptr = c_char_p()
        nbytes = impl.PQgetCopyData(
            self._pgconn_ptr, byref(buffer_ptr), int(bool(async_))
        )
        if nbytes == -2:
            return CopyData(None, self._error())
        elif nbytes == -1:
            return CopyData(None)
        elif nbytes == 0:
            return CopyData(None, None, True)

        data = string_at(buffer_ptr, nbytes)
        impl.PQfreemem(buffer_ptr)
        return CopyData(data)

    def set_nonblocking(self, enabled: bool) -> Outcome:
        self._ensure_pgconn()
        if impl.PQsetnonblocking(self._pgconn_ptr, int(bool(enabled))) < 0:
            return failed(self._error())
        return OK

    def is_nonblocking(self) -> bool:
        return self._call_bool(impl.PQisnonblocking)

    def flush(self) -> Outcome:
        """
        Try to send the data queued to the server.

        Return an outcome with *again* set if not all the data was sent.
        """
        self._ensure_pgconn()
        rv = impl.PQflush(self._pgconn_ptr)
        if rv < 0:
            return failed(self._error())
        return AGAIN if rv else OK

    def make_empty_result(
        self, status: int = ExecStatus.COMMAND_OK
    ) -> Value["PGresult"]:
        self._ensure_pgconn()
        rv = impl.PQmakeEmptyPGresult(self._pgconn_ptr, status)
        if not rv:
            return None, self._error()
        return PGresult(rv, self), None

    def escape_string_conn(self, data: Union[str, Buffer]) -> Value[bytes]:
        bdata = to_bytes(data, "data")
        self._ensure_pgconn()
        error = c_int()
        out = create_string_buffer(len(bdata) * 2 + 1)
        nbytes = impl.PQescapeStringConn(
            self._pgconn_ptr, out, bdata, len(bdata), byref(error)
        )
        if error.value:
            return None, self._error()
        return out.raw[:nbytes], None

    def escape_literal(self, data: Union[str, Buffer]) -> Value[bytes]:
        bdata = to_bytes(data, "data")
        self._ensure_pgconn()
        out = impl.PQescapeLiteral(self._pgconn_ptr, bdata, len(bdata))
        return self._freemem_string(out)

    def escape_identifier(self, data: Union[str, Buffer]) -> Value[bytes]:
        bdata = to_bytes(data, "data")
        self._ensure_pgconn()
        out = impl.PQescapeIdentifier(self._pgconn_ptr, bdata, len(bdata))
        return self._freemem_string(out)

    def escape_bytea_conn(self, data: Union[str, Buffer]) -> Value[bytes]:
        bdata = to_bytes(data, "data")
        self._ensure_pgconn()
        len_out = c_size_t()
        out = impl.PQescapeByteaConn(
            self._pgconn_ptr, bdata, len(bdata), byref(len_out)
        )
        if not out:
            return None, self._error()

        rv = string_at(out, len_out.value - 1)  # out includes final 0
        impl.PQfreemem(out)
        return rv, None

    def encrypt_password_conn(
        self,
        passwd: Union[str, bytes],
        user: Union[str, bytes],
        algorithm: Union[None, str, bytes] = None,
    ) -> Value[bytes]:
        """
        Encrypt a password using the algorithm requested or the server one.

        See :pq:`PQencryptPasswordConn` for details.
        """
        args = (
            to_bytes(passwd, "passwd"),
            to_bytes(user, "user"),
            to_bytes_or_none(algorithm, "algorithm"),
        )
        self._ensure_pgconn()
        out = impl.PQencryptPasswordConn(self._pgconn_ptr, *args)
        return self._freemem_string(out)

    def _freemem_string(self, out: Any) -> Value[bytes]:
        """
        Return a null-terminated string allocated by the libpq and free it.

        A null pointer is a failure reported in the connection error message.
        """
        if not out:
            return None, self._error()
        rv = string_at(out)
        impl.PQfreemem(out)
        return rv, None

    def _error(self) -> str:
        return decode_message(impl.PQerrorMessage(self._pgconn_ptr))

    def _outcome(self, rv: int) -> Outcome:
        return OK if rv else failed(self._error())

    def _call_bytes(
        self, func: Callable[[impl.PGconn_struct], Optional[bytes]]
    ) -> Optional[bytes]:
        """
        Call one of the pgconn libpq functions returning a bytes pointer.
        """
        self._ensure_pgconn()
        return func(self._pgconn_ptr)

    def _call_int(self, func: Callable[[impl.PGconn_struct], int]) -> int:
        """
        Call one of the pgconn libpq functions returning an int.
        """
        self._ensure_pgconn()
        return func(self._pgconn_ptr)

    def _call_bool(self, func: Callable[[impl.PGconn_struct], int]) -> bool:
        """
        Call one of the pgconn libpq functions returning a logical value.
        """
        self._ensure_pgconn()
        return bool(func(self._pgconn_ptr))

    def _ensure_pgconn(self) -> None:
        if not self._pgconn_ptr:
            raise e.FreedObjectError()


def _index(number: int, what: str) -> int:
    """
    Convert a 1-based row, column or parameter number to the libpq index.
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError(
            f"{what} number must be an int, got {type(number).__name__} instead"
        )
    if number < 1:
        raise ValueError(f"{what} number must be 1 or greater, got {number}")
    return number - 1


class PGresult:
    """
    Python representation of a libpq result.

    Rows, columns and parameters are numbered from 1.
    """

    __module__ = "pylibpq.pq"
    __slots__ = ("_pgresult_ptr", "_conn", "_noclear")

    def __init__(
        self,
        pgresult_ptr: impl.PGresult_struct,
        conn: Optional[PGconn] = None,
        noclear: bool = False,
    ):
        self._pgresult_ptr: Optional[impl.PGresult_struct] = pgresult_ptr
        self._conn = conn
        self._noclear = noclear

    def __del__(self) -> None:
        self.clear()

    def __repr__(self) -> str:
        cls = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        if self._pgresult_ptr:
            status = res_status(self.status)
        else:
            status = "FREED"
        return f"<{cls} [{status}] at 0x{id(self):x}>"

    def clear(self) -> None:
        """
        Release the result and the reference to its connection.

        If the result is not owned (a notice received) only forget about it.
        Calling the method more than once has no effect.
        """
        self._conn = None
        self._pgresult_ptr, p = None, self._pgresult_ptr
        if p and not self._noclear:
            impl.PQclear(p)

    @property
    def pgresult_ptr(self) -> Optional[int]:
        """The pointer to the underlying ``PGresult`` structure, as integer.

        `!None` if the result was cleared.

        The value can be used to pass the structure to libpq functions which
        pylibpq doesn't wrap, using FFI libraries such as `ctypes`.
        """
        if self._pgresult_ptr is None:
            return None

        return addressof(self._pgresult_ptr.contents)  # type: ignore[attr-defined]

    @property
    def connection(self) -> Optional[PGconn]:
        """The connection which generated the result, `!None` if cleared."""
        return self._conn

    @property
    def status(self) -> int:
        self._ensure_pgresult()
        return impl.PQresultStatus(self._pgresult_ptr)

    @property
    def error_message(self) -> Optional[str]:
        self._ensure_pgresult()
        msg = impl.PQresultErrorMessage(self._pgresult_ptr)
        return decode_message(msg) or None

    def verbose_error_message(
        self,
        verbosity: int = Verbosity.DEFAULT,
        show_context: int = ContextVisibility.ERRORS,
    ) -> Value[str]:
        """
        Return the error message of the result formatted as requested.

        See :pq:`PQresultVerboseErrorMessage` for details.
        """
        self._ensure_pgresult()
        out = impl.PQresultVerboseErrorMessage(
            self._pgresult_ptr, verbosity, show_context
        )
        if not out:
            return None, _os_error("verbose_error_message")
        rv = string_at(out)
        impl.PQfreemem(out)
        return decode_message(rv), None

    def error_field(self, fieldcode: int) -> Optional[bytes]:
        self._ensure_pgresult()
        return impl.PQresultErrorField(self._pgresult_ptr, fieldcode)

    @property
    def ntuples(self) -> int:
        self._ensure_pgresult()
        return impl.PQntuples(self._pgresult_ptr)

    @property
    def nfields(self) -> int:
        self._ensure_pgresult()
        return impl.PQnfields(self._pgresult_ptr)

    @property
    def binary_tuples(self) -> bool:
        self._ensure_pgresult()
        return bool(impl.PQbinaryTuples(self._pgresult_ptr))

    def fname(self, column_number: int) -> Optional[bytes]:
        return self._call_column(impl.PQfname, column_number)

    def fnumber(self, name: Union[str, bytes]) -> int:
        """
        Return the number of the column called *name*, 0 if not found.
        """
        bname = to_bytes(name, "name")
        self._ensure_pgresult()
        return impl.PQfnumber(self._pgresult_ptr, bname) + 1

    def ftable(self, column_number: int) -> int:
        return self._call_column(impl.PQftable, column_number)

    def ftablecol(self, column_number: int) -> int:
        return self._call_column(impl.PQftablecol, column_number)

    def fformat(self, column_number: int) -> int:
        return self._call_column(impl.PQfformat, column_number)

    def ftype(self, column_number: int) -> int:
        return self._call_column(impl.PQftype, column_number)

    def fmod(self, column_number: int) -> int:
        return self._call_column(impl.PQfmod, column_number)

    def fsize(self, column_number: int) -> int:
        return self._call_column(impl.PQfsize, column_number)

    def get_value(self, row_number: int, column_number: int) -> Optional[bytes]:
        """
        Return the value of a field; `!None` if the value is NULL.
        """
        row, col = _index(row_number, "row"), _index(column_number, "column")
        self._ensure_pgresult()
        length: int = impl.PQgetlength(self._pgresult_ptr, row, col)
        if length:
            v = impl.PQgetvalue(self._pgresult_ptr, row, col)
            return string_at(v, length)
        else:
            if impl.PQgetisnull(self._pgresult_ptr, row, col):
                return None
            else:
                return b""

    def get_length(self, row_number: int, column_number: int) -> int:
        row, col = _index(row_number, "row"), _index(column_number, "column")
        self._ensure_pgresult()
        return impl.PQgetlength(self._pgresult_ptr, row, col)

    def get_is_null(self, row_number: int, column_number: int) -> bool:
        row, col = _index(row_number, "row"), _index(column_number, "column")
        self._ensure_pgresult()
        return bool(impl.PQgetisnull(self._pgresult_ptr, row, col))

    @property
    def nparams(self) -> int:
        self._ensure_pgresult()
        return impl.PQnparams(self._pgresult_ptr)

    def param_type(self, param_number: int) -> int:
        param = _index(param_number, "param")
        self._ensure_pgresult()
        return impl.PQparamtype(self._pgresult_ptr, param)

    @property
    def cmd_status(self) -> Optional[bytes]:
        self._ensure_pgresult()
        return impl.PQcmdStatus(self._pgresult_ptr)

    @property
    def cmd_tuples(self) -> Optional[int]:
        """
        The number of rows affected by the command, `!None` if not available.
        """
        self._ensure_pgresult()
        return parse_cmd_tuples(impl.PQcmdTuples(self._pgresult_ptr))

    @property
    def oid_value(self) -> int:
        self._ensure_pgresult()
        return impl.PQoidValue(self._pgresult_ptr)

    def _call_column(self, func: Callable[[Any, int], Any], number: int) -> Any:
        col = _index(number, "column")
        self._ensure_pgresult()
        return func(self._pgresult_ptr, col)

    def _ensure_pgresult(self) -> None:
        if not self._pgresult_ptr:
            raise e.FreedObjectError()


class PGcancel:
    """
    Token to cancel the current operation on a connection.

    Created by `PGconn.get_cancel()`.
    """

    __module__ = "pylibpq.pq"
    __slots__ = ("_pgcancel_ptr",)

    def __init__(self, pgcancel_ptr: impl.PGcancel_struct):
        self._pgcancel_ptr: Optional[impl.PGcancel_struct] = pgcancel_ptr

    def __del__(self) -> None:
        self.free()

    def __repr__(self) -> str:
        cls = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        status = "" if self._pgcancel_ptr else " [FREED]"
        return f"<{cls}{status} at 0x{id(self):x}>"

    def free(self) -> None:
        """
        Free the data structure created by :pq:`PQgetCancel()`.

        Automatically invoked by `!__del__()`.

        See :pq:`PQfreeCancel()` for details.
        """
        self._pgcancel_ptr, p = None, self._pgcancel_ptr
        if p:
            impl.PQfreeCancel(p)

    def cancel(self) -> Outcome:
        """Requests that the server abandon processing of the current command.

        The method can be called from a different thread than the one using
        the connection. See :pq:`PQcancel()` for details.
        """
        if not self._pgcancel_ptr:
            raise e.FreedObjectError()
        buf = create_string_buffer(256)
        if impl.PQcancel(self._pgcancel_ptr, buf, len(buf)):
            return OK
        return failed(decode_message(buf.value))


class PGnotify:
    """
    A notification received from the server by `PGconn.notifies()`.
    """

    __module__ = "pylibpq.pq"
    __slots__ = ("_pgnotify_ptr",)

    def __init__(self, pgnotify_ptr: impl.PGnotify_struct):
        self._pgnotify_ptr: Optional[impl.PGnotify_struct] = pgnotify_ptr

    def __del__(self) -> None:
        self.free()

    def __repr__(self) -> str:
        cls = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        if self._pgnotify_ptr:
            info = f" {self.relname!r} from {self.be_pid}"
        else:
            info = " [FREED]"
        return f"<{cls}{info} at 0x{id(self):x}>"

    def free(self) -> None:
        self._pgnotify_ptr, p = None, self._pgnotify_ptr
        if p:
            impl.PQfreemem(p)

    @property
    def relname(self) -> bytes:
        """The name of the channel the notification was sent on."""
        return self._contents().relname or b""

    @property
    def be_pid(self) -> int:
        """The process id of the notifying server process."""
        return self._contents().be_pid

    @property
    def extra(self) -> bytes:
        """The payload of the notification."""
        return self._contents().extra or b""

    def _contents(self) -> Any:
        if not self._pgnotify_ptr:
            raise e.FreedObjectError()
        return self._pgnotify_ptr.contents  # type: ignore[attr-defined]


# importing the ssl module sets up Python's libcrypto callbacks
import ssl  # noqa

# disable libcrypto setup in libpq, so it won't stomp on the callbacks
# that have already been set up
impl.PQinitOpenSSL(1, 0)

__all__ = [
    "PGconn",
    "PGresult",
    "PGcancel",
    "PGnotify",
    "connect",
    "ping",
    "parse_conninfo",
    "default_conninfo",
    "version",
    "lib_version",
    "is_threadsafe",
    "unescape_bytea",
    "encrypt_password",
    "env2encoding",
    "mblen",
    "mblen_bounded",
    "dsplen",
    "char_to_encoding",
    "encoding_to_char",
    "valid_server_encoding_id",
    "res_status",
]
