"""
SQL statements: list-parameter expansion, placeholder compilation, cursors.

Exports: Sql, Bind, ExpandedStatement, expand, PreparedStatement, FetchMode,
CursorOrientation.
"""

from sqlgate.engines.sql.cursor import CursorOrientation, FetchMode, PreparedStatement
from sqlgate.engines.sql.placeholders import compile_placeholders
from sqlgate.engines.sql.statement import Bind, ExpandedStatement, Sql, as_expanded, expand

__all__ = [
    "Bind",
    "CursorOrientation",
    "ExpandedStatement",
    "FetchMode",
    "PreparedStatement",
    "Sql",
    "as_expanded",
    "compile_placeholders",
    "expand",
]
