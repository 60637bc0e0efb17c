"""
libpq constants exported with their C names.

Each name is bound to the member of the matching enum in `pylibpq._enums`,
so the values compare equal to the integers defined in ``libpq-fe.h``.
"""

# Copyright (C) 2022 The Psycopg Team

from ._enums import ConnStatus, PollingStatus, ExecStatus, TransactionStatus
from ._enums import Verbosity, ContextVisibility, Ping, PipelineStatus
from ._enums import Trace, DiagnosticField, CopyResult

# Option flags for PQcopyResult
PG_COPYRES_ATTRS = CopyResult.ATTRS
PG_COPYRES_TUPLES = CopyResult.TUPLES
PG_COPYRES_EVENTS = CopyResult.EVENTS
PG_COPYRES_NOTICEHOOKS = CopyResult.NOTICEHOOKS

# ConnStatusType
CONNECTION_OK = ConnStatus.OK
CONNECTION_BAD = ConnStatus.BAD
# Non-blocking mode only below here
CONNECTION_STARTED = ConnStatus.STARTED
CONNECTION_MADE = ConnStatus.MADE
CONNECTION_AWAITING_RESPONSE = ConnStatus.AWAITING_RESPONSE
CONNECTION_AUTH_OK = ConnStatus.AUTH_OK
CONNECTION_SETENV = ConnStatus.SETENV
CONNECTION_SSL_STARTUP = ConnStatus.SSL_STARTUP
CONNECTION_NEEDED = ConnStatus.NEEDED
CONNECTION_CHECK_WRITABLE = ConnStatus.CHECK_WRITABLE
CONNECTION_CONSUME = ConnStatus.CONSUME
CONNECTION_GSS_STARTUP = ConnStatus.GSS_STARTUP
CONNECTION_CHECK_TARGET = ConnStatus.CHECK_TARGET
CONNECTION_CHECK_STANDBY = ConnStatus.CHECK_STANDBY

# PostgresPollingStatusType
PGRES_POLLING_FAILED = PollingStatus.FAILED
PGRES_POLLING_READING = PollingStatus.READING
PGRES_POLLING_WRITING = PollingStatus.WRITING
PGRES_POLLING_OK = PollingStatus.OK
PGRES_POLLING_ACTIVE = PollingStatus.ACTIVE

# ExecStatusType
PGRES_EMPTY_QUERY = ExecStatus.EMPTY_QUERY
PGRES_COMMAND_OK = ExecStatus.COMMAND_OK
PGRES_TUPLES_OK = ExecStatus.TUPLES_OK
PGRES_COPY_OUT = ExecStatus.COPY_OUT
PGRES_COPY_IN = ExecStatus.COPY_IN
PGRES_BAD_RESPONSE = ExecStatus.BAD_RESPONSE
PGRES_NONFATAL_ERROR = ExecStatus.NONFATAL_ERROR
PGRES_FATAL_ERROR = ExecStatus.FATAL_ERROR
PGRES_COPY_BOTH = ExecStatus.COPY_BOTH
PGRES_SINGLE_TUPLE = ExecStatus.SINGLE_TUPLE
PGRES_PIPELINE_SYNC = ExecStatus.PIPELINE_SYNC
PGRES_PIPELINE_ABORTED = ExecStatus.PIPELINE_ABORTED

# PGTransactionStatusType
PQTRANS_IDLE = TransactionStatus.IDLE
PQTRANS_ACTIVE = TransactionStatus.ACTIVE
PQTRANS_INTRANS = TransactionStatus.INTRANS
PQTRANS_INERROR = TransactionStatus.INERROR
PQTRANS_UNKNOWN = TransactionStatus.UNKNOWN

# PGVerbosity
PQERRORS_TERSE = Verbosity.TERSE
PQERRORS_DEFAULT = Verbosity.DEFAULT
PQERRORS_VERBOSE = Verbosity.VERBOSE
PQERRORS_SQLSTATE = Verbosity.SQLSTATE

# PGContextVisibility
PQSHOW_CONTEXT_NEVER = ContextVisibility.NEVER
PQSHOW_CONTEXT_ERRORS = ContextVisibility.ERRORS
PQSHOW_CONTEXT_ALWAYS = ContextVisibility.ALWAYS

# PGPing
PQPING_OK = Ping.OK
PQPING_REJECT = Ping.REJECT
PQPING_NO_RESPONSE = Ping.NO_RESPONSE
PQPING_NO_ATTEMPT = Ping.NO_ATTEMPT

# PGpipelineStatus
PQ_PIPELINE_OFF = PipelineStatus.OFF
PQ_PIPELINE_ON = PipelineStatus.ON
PQ_PIPELINE_ABORTED = PipelineStatus.ABORTED

# Flags controlling trace output
PQTRACE_SUPPRESS_TIMESTAMPS = Trace.SUPPRESS_TIMESTAMPS
PQTRACE_REGRESS_MODE = Trace.REGRESS_MODE

# Maximum number of parameters of a query
PQ_QUERY_PARAM_MAX_LIMIT = 65535

# Identifiers of error message fields
PG_DIAG_SEVERITY = DiagnosticField.SEVERITY
PG_DIAG_SEVERITY_NONLOCALIZED = DiagnosticField.SEVERITY_NONLOCALIZED
PG_DIAG_SQLSTATE = DiagnosticField.SQLSTATE
PG_DIAG_MESSAGE_PRIMARY = DiagnosticField.MESSAGE_PRIMARY
PG_DIAG_MESSAGE_DETAIL = DiagnosticField.MESSAGE_DETAIL
PG_DIAG_MESSAGE_HINT = DiagnosticField.MESSAGE_HINT
PG_DIAG_STATEMENT_POSITION = DiagnosticField.STATEMENT_POSITION
PG_DIAG_INTERNAL_POSITION = DiagnosticField.INTERNAL_POSITION
PG_DIAG_INTERNAL_QUERY = DiagnosticField.INTERNAL_QUERY
PG_DIAG_CONTEXT = DiagnosticField.CONTEXT
PG_DIAG_SCHEMA_NAME = DiagnosticField.SCHEMA_NAME
PG_DIAG_TABLE_NAME = DiagnosticField.TABLE_NAME
PG_DIAG_COLUMN_NAME = DiagnosticField.COLUMN_NAME
PG_DIAG_DATATYPE_NAME = DiagnosticField.DATATYPE_NAME
PG_DIAG_CONSTRAINT_NAME = DiagnosticField.CONSTRAINT_NAME
PG_DIAG_SOURCE_FILE = DiagnosticField.SOURCE_FILE
PG_DIAG_SOURCE_LINE = DiagnosticField.SOURCE_LINE
PG_DIAG_SOURCE_FUNCTION = DiagnosticField.SOURCE_FUNCTION

__all__ = [name for name in list(globals()) if name.isupper()]
