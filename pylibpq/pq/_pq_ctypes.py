"""
libpq access using ctypes
"""

# Copyright (C) 2022 The Psycopg Team

import os
import sys
import ctypes
import ctypes.util
import logging
from ctypes import Structure, CFUNCTYPE, POINTER
from ctypes import c_char, c_char_p, c_int, c_size_t, c_uint, c_void_p
from typing import Any, Callable, List, Optional, Tuple

from ..errors import NotSupportedError

logger = logging.getLogger("pylibpq")

libname = os.environ.get("PYLIBPQ_LIBPQ") or ctypes.util.find_library("pq")
if not libname:
    raise ImportError("libpq library not found")

# CDLL releases the GIL during the calls: PQcancel can be used from a
# different thread while another one is blocked on the connection.
pq = ctypes.CDLL(libname, use_errno=True)
logger.debug("libpq loaded from %s", libname)


# Get the libpq version to define what functions are available.

PQlibVersion = pq.PQlibVersion
PQlibVersion.argtypes = []
PQlibVersion.restype = c_int

libpq_version = PQlibVersion()


def not_supported_before(fname: str, pgversion: int) -> Any:
    def not_supported(*args: Any, **kwargs: Any) -> Any:
        raise NotSupportedError(
            f"{fname} requires libpq from PostgreSQL {pgversion} on the client;"
            f" version {libpq_version // 10000} available instead"
        )

    return not_supported


# libpq data types


Oid = c_uint


class PGconn_struct(Structure):
    _fields_: List[Tuple[str, type]] = []


class PGresult_struct(Structure):
    _fields_: List[Tuple[str, type]] = []


class PGcancel_struct(Structure):
    _fields_: List[Tuple[str, type]] = []


class PQconninfoOption_struct(Structure):
    _fields_ = [
        ("keyword", c_char_p),
        ("envvar", c_char_p),
        ("compiled", c_char_p),
        ("val", c_char_p),
        ("label", c_char_p),
        ("dispchar", c_char_p),
        ("dispsize", c_int),
    ]


class PGnotify_struct(Structure):
    _fields_ = [
        ("relname", c_char_p),
        ("be_pid", c_int),
        ("extra", c_char_p),
        ("next", c_void_p),
    ]


class FILE_struct(Structure):
    _fields_: List[Tuple[str, type]] = []


PGconn_ptr = POINTER(PGconn_struct)
PGresult_ptr = POINTER(PGresult_struct)
PGcancel_ptr = POINTER(PGcancel_struct)
PQconninfoOption_ptr = POINTER(PQconninfoOption_struct)
PGnotify_ptr = POINTER(PGnotify_struct)
FILE_ptr = POINTER(FILE_struct)


# Function definitions as explained in PostgreSQL 14 documentation

# 34.1. Database Connection Control Functions

PQconnectdb = pq.PQconnectdb
PQconnectdb.argtypes = [c_char_p]
PQconnectdb.restype = PGconn_ptr

PQconnectStart = pq.PQconnectStart
PQconnectStart.argtypes = [c_char_p]
PQconnectStart.restype = PGconn_ptr

PQconnectPoll = pq.PQconnectPoll
PQconnectPoll.argtypes = [PGconn_ptr]
PQconnectPoll.restype = c_int

PQconndefaults = pq.PQconndefaults
PQconndefaults.argtypes = []
PQconndefaults.restype = PQconninfoOption_ptr

PQconninfoFree = pq.PQconninfoFree
PQconninfoFree.argtypes = [PQconninfoOption_ptr]
PQconninfoFree.restype = None

PQconninfo = pq.PQconninfo
PQconninfo.argtypes = [PGconn_ptr]
PQconninfo.restype = PQconninfoOption_ptr

PQconninfoParse = pq.PQconninfoParse
PQconninfoParse.argtypes = [c_char_p, POINTER(c_char_p)]
PQconninfoParse.restype = PQconninfoOption_ptr

PQfinish = pq.PQfinish
PQfinish.argtypes = [PGconn_ptr]
PQfinish.restype = None

PQping = pq.PQping
PQping.argtypes = [c_char_p]
PQping.restype = c_int


# 34.2. Connection Status Functions

PQdb = pq.PQdb
PQdb.argtypes = [PGconn_ptr]
PQdb.restype = c_char_p

PQuser = pq.PQuser
PQuser.argtypes = [PGconn_ptr]
PQuser.restype = c_char_p

PQpass = pq.PQpass
PQpass.argtypes = [PGconn_ptr]
PQpass.restype = c_char_p

PQhost = pq.PQhost
PQhost.argtypes = [PGconn_ptr]
PQhost.restype = c_char_p

_PQhostaddr = None

if libpq_version >= 120000:
    _PQhostaddr = pq.PQhostaddr
    _PQhostaddr.argtypes = [PGconn_ptr]
    _PQhostaddr.restype = c_char_p


def PQhostaddr(pgconn: Any) -> Any:
    if not _PQhostaddr:
        raise NotSupportedError(
            "PQhostaddr requires libpq from PostgreSQL 12,"
            f" {libpq_version} available instead"
        )

    return _PQhostaddr(pgconn)


PQport = pq.PQport
PQport.argtypes = [PGconn_ptr]
PQport.restype = c_char_p

PQoptions = pq.PQoptions
PQoptions.argtypes = [PGconn_ptr]
PQoptions.restype = c_char_p

PQstatus = pq.PQstatus
PQstatus.argtypes = [PGconn_ptr]
PQstatus.restype = c_int

PQtransactionStatus = pq.PQtransactionStatus
PQtransactionStatus.argtypes = [PGconn_ptr]
PQtransactionStatus.restype = c_int

PQparameterStatus = pq.PQparameterStatus
PQparameterStatus.argtypes = [PGconn_ptr, c_char_p]
PQparameterStatus.restype = c_char_p

PQprotocolVersion = pq.PQprotocolVersion
PQprotocolVersion.argtypes = [PGconn_ptr]
PQprotocolVersion.restype = c_int

PQserverVersion = pq.PQserverVersion
PQserverVersion.argtypes = [PGconn_ptr]
PQserverVersion.restype = c_int

PQerrorMessage = pq.PQerrorMessage
PQerrorMessage.argtypes = [PGconn_ptr]
PQerrorMessage.restype = c_char_p

PQsocket = pq.PQsocket
PQsocket.argtypes = [PGconn_ptr]
PQsocket.restype = c_int

PQbackendPID = pq.PQbackendPID
PQbackendPID.argtypes = [PGconn_ptr]
PQbackendPID.restype = c_int

PQconnectionNeedsPassword = pq.PQconnectionNeedsPassword
PQconnectionNeedsPassword.argtypes = [PGconn_ptr]
PQconnectionNeedsPassword.restype = c_int

PQconnectionUsedPassword = pq.PQconnectionUsedPassword
PQconnectionUsedPassword.argtypes = [PGconn_ptr]
PQconnectionUsedPassword.restype = c_int

PQsslInUse = pq.PQsslInUse
PQsslInUse.argtypes = [PGconn_ptr]
PQsslInUse.restype = c_int

PQsslAttribute = pq.PQsslAttribute
PQsslAttribute.argtypes = [PGconn_ptr, c_char_p]
PQsslAttribute.restype = c_char_p

PQsslAttributeNames = pq.PQsslAttributeNames
PQsslAttributeNames.argtypes = [PGconn_ptr]
PQsslAttributeNames.restype = POINTER(c_char_p)


# 34.3. Command Execution Functions

PQexec = pq.PQexec
PQexec.argtypes = [PGconn_ptr, c_char_p]
PQexec.restype = PGresult_ptr

PQexecParams = pq.PQexecParams
PQexecParams.argtypes = [
    PGconn_ptr,
    c_char_p,
    c_int,
    POINTER(Oid),
    POINTER(c_char_p),
    POINTER(c_int),
    POINTER(c_int),
    c_int,
]
PQexecParams.restype = PGresult_ptr

PQresultStatus = pq.PQresultStatus
PQresultStatus.argtypes = [PGresult_ptr]
PQresultStatus.restype = c_int

PQresStatus = pq.PQresStatus
PQresStatus.argtypes = [c_int]
PQresStatus.restype = c_char_p

PQresultErrorMessage = pq.PQresultErrorMessage
PQresultErrorMessage.argtypes = [PGresult_ptr]
PQresultErrorMessage.restype = c_char_p

PQresultVerboseErrorMessage = pq.PQresultVerboseErrorMessage
PQresultVerboseErrorMessage.argtypes = [PGresult_ptr, c_int, c_int]
PQresultVerboseErrorMessage.restype = POINTER(c_char)

PQresultErrorField = pq.PQresultErrorField
PQresultErrorField.argtypes = [PGresult_ptr, c_int]
PQresultErrorField.restype = c_char_p

PQclear = pq.PQclear
PQclear.argtypes = [PGresult_ptr]
PQclear.restype = None


# 34.3.2. Retrieving Query Result Information

PQntuples = pq.PQntuples
PQntuples.argtypes = [PGresult_ptr]
PQntuples.restype = c_int

PQnfields = pq.PQnfields
PQnfields.argtypes = [PGresult_ptr]
PQnfields.restype = c_int

PQfname = pq.PQfname
PQfname.argtypes = [PGresult_ptr, c_int]
PQfname.restype = c_char_p

PQfnumber = pq.PQfnumber
PQfnumber.argtypes = [PGresult_ptr, c_char_p]
PQfnumber.restype = c_int

PQftable = pq.PQftable
PQftable.argtypes = [PGresult_ptr, c_int]
PQftable.restype = Oid

PQftablecol = pq.PQftablecol
PQftablecol.argtypes = [PGresult_ptr, c_int]
PQftablecol.restype = c_int

PQfformat = pq.PQfformat
PQfformat.argtypes = [PGresult_ptr, c_int]
PQfformat.restype = c_int

PQftype = pq.PQftype
PQftype.argtypes = [PGresult_ptr, c_int]
PQftype.restype = Oid

PQfmod = pq.PQfmod
PQfmod.argtypes = [PGresult_ptr, c_int]
PQfmod.restype = c_int

PQfsize = pq.PQfsize
PQfsize.argtypes = [PGresult_ptr, c_int]
PQfsize.restype = c_int

PQbinaryTuples = pq.PQbinaryTuples
PQbinaryTuples.argtypes = [PGresult_ptr]
PQbinaryTuples.restype = c_int

PQgetvalue = pq.PQgetvalue
PQgetvalue.argtypes = [PGresult_ptr, c_int, c_int]
PQgetvalue.restype = POINTER(c_char)  # not a null-terminated string

PQgetisnull = pq.PQgetisnull
PQgetisnull.argtypes = [PGresult_ptr, c_int, c_int]
PQgetisnull.restype = c_int

PQgetlength = pq.PQgetlength
PQgetlength.argtypes = [PGresult_ptr, c_int, c_int]
PQgetlength.restype = c_int

PQnparams = pq.PQnparams
PQnparams.argtypes = [PGresult_ptr]
PQnparams.restype = c_int

PQparamtype = pq.PQparamtype
PQparamtype.argtypes = [PGresult_ptr, c_int]
PQparamtype.restype = Oid


# 34.3.3. Retrieving Other Result Information

PQcmdStatus = pq.PQcmdStatus
PQcmdStatus.argtypes = [PGresult_ptr]
PQcmdStatus.restype = c_char_p

PQcmdTuples = pq.PQcmdTuples
PQcmdTuples.argtypes = [PGresult_ptr]
PQcmdTuples.restype = c_char_p

PQoidValue = pq.PQoidValue
PQoidValue.argtypes = [PGresult_ptr]
PQoidValue.restype = Oid


# 34.3.4. Escaping Strings for Inclusion in SQL Commands

PQescapeLiteral = pq.PQescapeLiteral
PQescapeLiteral.argtypes = [PGconn_ptr, c_char_p, c_size_t]
PQescapeLiteral.restype = POINTER(c_char)

PQescapeIdentifier = pq.PQescapeIdentifier
PQescapeIdentifier.argtypes = [PGconn_ptr, c_char_p, c_size_t]
PQescapeIdentifier.restype = POINTER(c_char)

PQescapeStringConn = pq.PQescapeStringConn
PQescapeStringConn.argtypes = [
    PGconn_ptr,
    c_char_p,  # the output buffer, a create_string_buffer()
    c_char_p,
    c_size_t,
    POINTER(c_int),
]
PQescapeStringConn.restype = c_size_t

PQescapeByteaConn = pq.PQescapeByteaConn
PQescapeByteaConn.argtypes = [
    PGconn_ptr,
    c_char_p,  # actually unsigned char *, binary data with explicit length
    c_size_t,
    POINTER(c_size_t),
]
PQescapeByteaConn.restype = POINTER(c_char)

PQunescapeBytea = pq.PQunescapeBytea
PQunescapeBytea.argtypes = [
    c_char_p,  # actually unsigned char *, null-terminated
    POINTER(c_size_t),
]
PQunescapeBytea.restype = POINTER(c_char)


# 34.4. Asynchronous Command Processing

PQsendQuery = pq.PQsendQuery
PQsendQuery.argtypes = [PGconn_ptr, c_char_p]
PQsendQuery.restype = c_int

PQsendQueryParams = pq.PQsendQueryParams
PQsendQueryParams.argtypes = [
    PGconn_ptr,
    c_char_p,
    c_int,
    POINTER(Oid),
    POINTER(c_char_p),
    POINTER(c_int),
    POINTER(c_int),
    c_int,
]
PQsendQueryParams.restype = c_int

PQgetResult = pq.PQgetResult
PQgetResult.argtypes = [PGconn_ptr]
PQgetResult.restype = PGresult_ptr

PQconsumeInput = pq.PQconsumeInput
PQconsumeInput.argtypes = [PGconn_ptr]
PQconsumeInput.restype = c_int

PQisBusy = pq.PQisBusy
PQisBusy.argtypes = [PGconn_ptr]
PQisBusy.restype = c_int

PQsetnonblocking = pq.PQsetnonblocking
PQsetnonblocking.argtypes = [PGconn_ptr, c_int]
PQsetnonblocking.restype = c_int

PQisnonblocking = pq.PQisnonblocking
PQisnonblocking.argtypes = [PGconn_ptr]
PQisnonblocking.restype = c_int

PQflush = pq.PQflush
PQflush.argtypes = [PGconn_ptr]
PQflush.restype = c_int


# 34.5. Pipeline Mode

_PQpipelineStatus = None
_PQenterPipelineMode = None
_PQexitPipelineMode = None
_PQpipelineSync = None
_PQsendFlushRequest = None

if libpq_version >= 140000:
    _PQpipelineStatus = pq.PQpipelineStatus
    _PQpipelineStatus.argtypes = [PGconn_ptr]
    _PQpipelineStatus.restype = c_int

    _PQenterPipelineMode = pq.PQenterPipelineMode
    _PQenterPipelineMode.argtypes = [PGconn_ptr]
    _PQenterPipelineMode.restype = c_int

    _PQexitPipelineMode = pq.PQexitPipelineMode
    _PQexitPipelineMode.argtypes = [PGconn_ptr]
    _PQexitPipelineMode.restype = c_int

    _PQpipelineSync = pq.PQpipelineSync
    _PQpipelineSync.argtypes = [PGconn_ptr]
    _PQpipelineSync.restype = c_int

    _PQsendFlushRequest = pq.PQsendFlushRequest
    _PQsendFlushRequest.argtypes = [PGconn_ptr]
    _PQsendFlushRequest.restype = c_int

PQpipelineStatus = _PQpipelineStatus or not_supported_before(
    "PQpipelineStatus", 14
)
PQenterPipelineMode = _PQenterPipelineMode or not_supported_before(
    "PQenterPipelineMode", 14
)
PQexitPipelineMode = _PQexitPipelineMode or not_supported_before(
    "PQexitPipelineMode", 14
)
PQpipelineSync = _PQpipelineSync or not_supported_before("PQpipelineSync", 14)
PQsendFlushRequest = _PQsendFlushRequest or not_supported_before(
    "PQsendFlushRequest", 14
)


# 34.6. Retrieving Query Results Row-by-Row

PQsetSingleRowMode = pq.PQsetSingleRowMode
PQsetSingleRowMode.argtypes = [PGconn_ptr]
PQsetSingleRowMode.restype = c_int


# 34.7. Canceling Queries in Progress

PQgetCancel = pq.PQgetCancel
PQgetCancel.argtypes = [PGconn_ptr]
PQgetCancel.restype = PGcancel_ptr

PQfreeCancel = pq.PQfreeCancel
PQfreeCancel.argtypes = [PGcancel_ptr]
PQfreeCancel.restype = None

PQcancel = pq.PQcancel
PQcancel.argtypes = [PGcancel_ptr, c_char_p, c_int]
PQcancel.restype = c_int

PQrequestCancel = pq.PQrequestCancel
PQrequestCancel.argtypes = [PGconn_ptr]
PQrequestCancel.restype = c_int


# 34.9. Asynchronous Notification

PQnotifies = pq.PQnotifies
PQnotifies.argtypes = [PGconn_ptr]
PQnotifies.restype = PGnotify_ptr


# 34.10. Functions Associated with the COPY Command

PQputCopyData = pq.PQputCopyData
PQputCopyData.argtypes = [PGconn_ptr, c_char_p, c_int]
PQputCopyData.restype = c_int

PQputCopyEnd = pq.PQputCopyEnd
PQputCopyEnd.argtypes = [PGconn_ptr, c_char_p]
PQputCopyEnd.restype = c_int

PQgetCopyData = pq.PQgetCopyData
PQgetCopyData.argtypes = [PGconn_ptr, POINTER(c_char_p), c_int]
PQgetCopyData.restype = c_int


# 34.11. Control Functions

PQclientEncoding = pq.PQclientEncoding
PQclientEncoding.argtypes = [PGconn_ptr]
PQclientEncoding.restype = c_int

PQsetClientEncoding = pq.PQsetClientEncoding
PQsetClientEncoding.argtypes = [PGconn_ptr, c_char_p]
PQsetClientEncoding.restype = c_int

PQsetErrorVerbosity = pq.PQsetErrorVerbosity
PQsetErrorVerbosity.argtypes = [PGconn_ptr, c_int]
PQsetErrorVerbosity.restype = c_int

PQsetErrorContextVisibility = pq.PQsetErrorContextVisibility
PQsetErrorContextVisibility.argtypes = [PGconn_ptr, c_int]
PQsetErrorContextVisibility.restype = c_int

PQtrace = pq.PQtrace
PQtrace.argtypes = [PGconn_ptr, FILE_ptr]
PQtrace.restype = None

_PQsetTraceFlags = None

if libpq_version >= 140000:
    _PQsetTraceFlags = pq.PQsetTraceFlags
    _PQsetTraceFlags.argtypes = [PGconn_ptr, c_int]
    _PQsetTraceFlags.restype = None

PQsetTraceFlags = _PQsetTraceFlags or not_supported_before(
    "PQsetTraceFlags", 14
)

PQuntrace = pq.PQuntrace
PQuntrace.argtypes = [PGconn_ptr]
PQuntrace.restype = None


# 34.12. Miscellaneous Functions

PQfreemem = pq.PQfreemem
PQfreemem.argtypes = [c_void_p]
PQfreemem.restype = None

PQencryptPassword = pq.PQencryptPassword
PQencryptPassword.argtypes = [c_char_p, c_char_p]
PQencryptPassword.restype = POINTER(c_char)

PQencryptPasswordConn = pq.PQencryptPasswordConn
PQencryptPasswordConn.argtypes = [PGconn_ptr, c_char_p, c_char_p, c_char_p]
PQencryptPasswordConn.restype = POINTER(c_char)

PQmakeEmptyPGresult = pq.PQmakeEmptyPGresult
PQmakeEmptyPGresult.argtypes = [PGconn_ptr, c_int]
PQmakeEmptyPGresult.restype = PGresult_ptr

PQmblen = pq.PQmblen
PQmblen.argtypes = [c_char_p, c_int]
PQmblen.restype = c_int

_PQmblenBounded = None

if libpq_version >= 140000:
    _PQmblenBounded = pq.PQmblenBounded
    _PQmblenBounded.argtypes = [c_char_p, c_int]
    _PQmblenBounded.restype = c_int

PQmblenBounded = _PQmblenBounded or not_supported_before("PQmblenBounded", 14)

PQdsplen = pq.PQdsplen
PQdsplen.argtypes = [c_char_p, c_int]
PQdsplen.restype = c_int

PQenv2encoding = pq.PQenv2encoding
PQenv2encoding.argtypes = []
PQenv2encoding.restype = c_int

pg_char_to_encoding = pq.pg_char_to_encoding
pg_char_to_encoding.argtypes = [c_char_p]
pg_char_to_encoding.restype = c_int

pg_encoding_to_char = pq.pg_encoding_to_char
pg_encoding_to_char.argtypes = [c_int]
pg_encoding_to_char.restype = c_char_p

pg_valid_server_encoding_id = pq.pg_valid_server_encoding_id
pg_valid_server_encoding_id.argtypes = [c_int]
pg_valid_server_encoding_id.restype = c_int


# 34.13. Notice Processing

PQnoticeReceiver = CFUNCTYPE(None, c_void_p, PGresult_ptr)
PQnoticeProcessor = CFUNCTYPE(None, c_void_p, c_char_p)

PQsetNoticeReceiver = pq.PQsetNoticeReceiver
PQsetNoticeReceiver.argtypes = [PGconn_ptr, PQnoticeReceiver, c_void_p]
PQsetNoticeReceiver.restype = PQnoticeReceiver

PQsetNoticeProcessor = pq.PQsetNoticeProcessor
PQsetNoticeProcessor.argtypes = [PGconn_ptr, PQnoticeProcessor, c_void_p]
PQsetNoticeProcessor.restype = PQnoticeProcessor


# 34.19. Behavior in Threaded Programs

PQisthreadsafe = pq.PQisthreadsafe
PQisthreadsafe.argtypes = []
PQisthreadsafe.restype = c_int


# 34.20. SSL Support

PQinitOpenSSL = pq.PQinitOpenSSL
PQinitOpenSSL.argtypes = [c_int, c_int]
PQinitOpenSSL.restype = None


# C stdio functions, used to pass a Python file to PQtrace.
# Not available on Windows.

fdopen: Optional[Callable[..., Any]] = None
fclose: Optional[Callable[..., Any]] = None

if sys.platform != "win32":
    libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)

    fdopen = libc.fdopen
    fdopen.argtypes = [c_int, c_char_p]
    fdopen.restype = FILE_ptr

    fclose = libc.fclose
    fclose.argtypes = [FILE_ptr]
    fclose.restype = c_int
