"""
sqlgate: a thin access layer over DB-API drivers.

Pooled connections, list-parameter expansion, query logging and one error kind
per operation.
"""

from sqlgate.core.errors import (
    DatabaseConnectionError,
    ExecutionError,
    GateError,
    IntegrityViolationError,
    PrepareError,
    QueryAllError,
    QueryColumnError,
    QueryError,
    QueryObjectError,
    QueryOneError,
    TransactionError,
)
from sqlgate.core.param_type import ParamType, ParamTypeError
from sqlgate.core.pool import ConnectionPool, get_connection_pool
from sqlgate.core.query_log import CallerContext
from sqlgate.engines.sql import Bind, CursorOrientation, ExpandedStatement, FetchMode, PreparedStatement, Sql, expand
from sqlgate.gate import Gate

__all__ = [
    "Bind",
    "CallerContext",
    "ConnectionPool",
    "CursorOrientation",
    "DatabaseConnectionError",
    "ExecutionError",
    "ExpandedStatement",
    "FetchMode",
    "Gate",
    "GateError",
    "IntegrityViolationError",
    "ParamType",
    "ParamTypeError",
    "PrepareError",
    "PreparedStatement",
    "QueryAllError",
    "QueryColumnError",
    "QueryError",
    "QueryObjectError",
    "QueryOneError",
    "Sql",
    "TransactionError",
    "expand",
    "get_connection_pool",
]
