"""
Helpers to inspect query results.
"""

# Copyright (C) 2022 The Psycopg Team

from typing import List, Optional
from typing_extensions import TypedDict

from .abc import PGresult
from .misc import res_status_text
from ._enums import ExecStatus


class FieldStat(TypedDict):
    name: Optional[bytes]
    table: int
    tablecol: int
    format: int
    type: int
    size: int
    mod: int


class ResultStat(TypedDict, total=False):
    status: int
    status_text: str
    cmd_status: Optional[bytes]
    error: str
    ntuples: int
    nfields: int
    binary_tuples: bool
    fields: List[FieldStat]
    cmd_tuples: int
    oid_value: int
    nparams: int
    params: List[int]


TUPLES_STATUS = frozenset((ExecStatus.TUPLES_OK, ExecStatus.SINGLE_TUPLE))
SUCCESS_STATUS = TUPLES_STATUS | {ExecStatus.COMMAND_OK}
NO_DATA_STATUS = frozenset(
    (
        ExecStatus.EMPTY_QUERY,
        ExecStatus.PIPELINE_SYNC,
        ExecStatus.COPY_OUT,
        ExecStatus.COPY_IN,
        ExecStatus.COPY_BOTH,
    )
)


def summarize(result: PGresult) -> ResultStat:
    """
    Return a dictionary describing the content of a result.

    The keys present depend on the result status: tuples-returning results
    describe their rows and columns, successful results the outcome of the
    command, failed results their error message. Column and parameter
    numbers are 1-based as in the rest of the `~pylibpq.pq` module.
    """
    status = result.status
    rv: ResultStat = {
        "status": status,
        "status_text": res_status_text(status),
        "cmd_status": result.cmd_status,
    }

    if status in TUPLES_STATUS:
        rv["ntuples"] = ntuples = result.ntuples
        if ntuples > 0:
            rv["nfields"] = nfields = result.nfields
            rv["binary_tuples"] = bool(result.binary_tuples)
            rv["fields"] = [_field_stat(result, i) for i in range(1, nfields + 1)]

    if status in SUCCESS_STATUS:
        cmd_tuples = result.cmd_tuples
        if cmd_tuples is not None:
            rv["cmd_tuples"] = cmd_tuples
        rv["oid_value"] = result.oid_value
        nparams = result.nparams
        if nparams > 0:
            rv["nparams"] = nparams
            rv["params"] = [result.param_type(i) for i in range(1, nparams + 1)]

    elif status not in NO_DATA_STATUS:
        rv["error"] = result.error_message or ""

    return rv


get_result_stat = summarize


def _field_stat(result: PGresult, col: int) -> FieldStat:
    return {
        "name": result.fname(col),
        "table": result.ftable(col),
        "tablecol": result.ftablecol(col),
        "format": result.fformat(col),
        "type": result.ftype(col),
        "size": result.fsize(col),
        "mod": result.fmod(col),
    }
