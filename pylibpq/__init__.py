"""
pylibpq -- thin Python binding of the PostgreSQL client library

The libpq functions are exposed by the `pylibpq.pq` module, which loads the
library on import. The objects in this package (errors, enums, constants,
result summaries) can be used without the libpq available.
"""

# Copyright (C) 2022 The Psycopg Team

import logging

from . import constants
from ._enums import ConnStatus, PollingStatus, ExecStatus, TransactionStatus
from ._enums import Verbosity, ContextVisibility, Ping, PipelineStatus
from ._enums import Trace, DiagnosticField, Format, CopyResult
from .misc import Outcome, CopyData, ConninfoOption
from .util import summarize, get_result_stat
from .errors import Warning, Error, InterfaceError, FreedObjectError
from .errors import DatabaseError, OperationalError, NotSupportedError

from .version import __version__

# Set the logger to a quiet default, can be enabled if needed
logger = logging.getLogger("pylibpq")
if logger.level == logging.NOTSET:
    logger.setLevel(logging.WARNING)

__all__ = [
    "__version__",
    "constants",
    "summarize",
    "get_result_stat",
    "Outcome",
    "CopyData",
    "ConninfoOption",
    # Enums
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
    # Exceptions
    "Warning",
    "Error",
    "InterfaceError",
    "FreedObjectError",
    "DatabaseError",
    "OperationalError",
    "NotSupportedError",
]
