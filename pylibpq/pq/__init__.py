"""
pylibpq libpq wrapper

This package exposes the libpq functionalities as Python objects and functions.

The libpq shared library is loaded on import: the :envvar:`PYLIBPQ_LIBPQ`
environment variable can be used to specify its path, otherwise it is
searched in the system.
"""

# Copyright (C) 2022 The Psycopg Team

import logging

from ..misc import Outcome, CopyData, ConninfoOption
from .._enums import ConnStatus, PollingStatus, ExecStatus, TransactionStatus
from .._enums import Verbosity, ContextVisibility, Ping, PipelineStatus
from .._enums import Trace, DiagnosticField, Format, CopyResult
from ..constants import *  # noqa: F401, F403
from ..constants import __all__ as _constants_all

from .pq_ctypes import PGconn, PGresult, PGcancel, PGnotify
from .pq_ctypes import connect, ping, parse_conninfo, default_conninfo
from .pq_ctypes import version, lib_version, is_threadsafe
from .pq_ctypes import unescape_bytea, encrypt_password
from .pq_ctypes import env2encoding, mblen, mblen_bounded, dsplen
from .pq_ctypes import char_to_encoding, encoding_to_char
from .pq_ctypes import valid_server_encoding_id, res_status

logger = logging.getLogger("pylibpq")
logger.debug("libpq version %s loaded", version())

__all__ = [
    "ConnStatus",
    "PollingStatus",
    "ExecStatus",
    "TransactionStatus",
    "Verbosity",
    "ContextVisibility",
    "Ping",
    "PipelineStatus",
    "Trace",
    "DiagnosticField",
    "Format",
    "CopyResult",
    "Outcome",
    "CopyData",
    "ConninfoOption",
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
] + _constants_all
