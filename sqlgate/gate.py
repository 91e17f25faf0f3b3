"""
Gate: execute SQL through a pooled connection with query logging and typed errors.

Every operation accepts raw SQL text or a ``Sql`` statement. Driver failures are
logged (when a logger is set) and re-raised as the GateError kind of the
operation, with the driver message preserved and the driver error chained.
"""

import logging
from types import SimpleNamespace
from typing import Any, Callable, Mapping, Sequence

from sqlgate.core.config import settings
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
from sqlgate.core.pool import ConnectionPool, get_connection_pool, is_integrity_violation, resolve_driver
from sqlgate.core.query_log import CallerContext, QueryLogger
from sqlgate.engines.sql import (
    CursorOrientation,
    FetchMode,
    PreparedStatement,
    Sql,
    as_expanded,
)


def _is_blank(value: Any) -> bool:
    """Zero-length values are left out of INSERTs so the column default applies."""
    return value is None or (isinstance(value, (str, bytes)) and len(value) == 0)


class Gate:
    """
    Facade over one database endpoint.

    - endpoint, username, password, options: connection arguments, passed to the
      pool (see ``sqlgate.core.pool.connection`` for endpoint descriptors).
    - pool: ConnectionPool to acquire from; defaults to the process-wide pool.
    - logger: ``logging.Logger`` receiving query log records; None disables them.

    Each public method takes an optional ``caller`` CallerContext used to
    attribute log records; without it the nearest frame outside sqlgate is used.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        username: str = "",
        password: str = "",
        options: Mapping[Any, Any] | None = None,
        *,
        pool: ConnectionPool | None = None,
        logger: Any = None,
    ) -> None:
        self.endpoint = endpoint or settings.DEFAULT_DSN
        self.username = username
        self.password = password
        self.options = dict(options or {})
        self.driver = resolve_driver(self.endpoint)
        self._pool = pool
        self._conn: Any = None
        self._query_log = QueryLogger(logger)

    def set_logger(self, logger: Any) -> None:
        self._query_log.logger = logger

    # ------------------------------------------------------------------
    # Connection / transactions
    # ------------------------------------------------------------------

    def get_connection(self, *, caller: CallerContext | None = None) -> Any:
        """Return the DB-API connection, acquiring it from the pool on first use."""
        if self._conn is None:
            pool = self._pool or get_connection_pool()
            try:
                self._conn = pool.acquire(self.endpoint, self.username, self.password, self.options)
            except DatabaseConnectionError as e:
                self._query_log.log_error(str(e), caller=caller)
                raise
        return self._conn

    def set_connection(self, conn: Any) -> None:
        """Use *conn* instead of a pooled connection (same driver as the endpoint)."""
        self._conn = conn

    def begin_transaction(self, *, caller: CallerContext | None = None) -> None:
        self._run_transaction_statement(self.driver.begin_sql, caller)

    def commit(self, *, caller: CallerContext | None = None) -> None:
        self._run_transaction_statement("COMMIT", caller)

    def roll_back(self, *, caller: CallerContext | None = None) -> None:
        self._run_transaction_statement("ROLLBACK", caller)

    def _run_transaction_statement(self, sql: str, caller: CallerContext | None) -> None:
        conn = self.get_connection(caller=caller)
        try:
            cur = conn.cursor()
            try:
                cur.execute(sql)
            finally:
                cur.close()
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise TransactionError(str(e)) from e

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def prepare(
        self,
        sql: str,
        options: Mapping[str, Any] | None = None,
        *,
        caller: CallerContext | None = None,
    ) -> PreparedStatement:
        """
        Open a cursor for *sql* and return it as a PreparedStatement.

        options: keyword arguments for ``connection.cursor()``. DB-API drivers
        parse SQL at execution, so syntax errors surface from execute/query.
        """
        conn = self.get_connection(caller=caller)
        try:
            cursor = conn.cursor(**(options or {}))
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise PrepareError(str(e)) from e
        return PreparedStatement(cursor, sql, self.driver)

    def execute(self, sql: str | Sql, *, caller: CallerContext | None = None) -> int:
        """Run a non-query statement (INSERT, UPDATE, DELETE, DDL); return the affected row count."""
        stmt = as_expanded(sql)
        statement = self.prepare(stmt.text, caller=caller)
        try:
            statement.bind_values(stmt.params)
            statement.execute()
        except Exception as e:
            statement.close()
            if isinstance(e, GateError):
                raise
            self._query_log.log_query(
                stmt.text, stmt.params, caller=caller, level=logging.ERROR, message=str(e)
            )
            if is_integrity_violation(e):
                raise IntegrityViolationError(str(e)) from e
            raise ExecutionError(str(e)) from e
        self._query_log.log_query(stmt.text, stmt.params, caller=caller)
        try:
            return statement.row_count
        finally:
            statement.close()

    def query(self, sql: str | Sql, *, caller: CallerContext | None = None) -> PreparedStatement:
        """Run a statement returning rows; the caller reads (and closes) the returned cursor."""
        stmt = as_expanded(sql)
        statement = self.prepare(stmt.text, caller=caller)
        try:
            statement.bind_values(stmt.params)
            statement.execute()
        except Exception as e:
            statement.close()
            if isinstance(e, GateError):
                raise
            self._query_log.log_query(
                stmt.text, stmt.params, caller=caller, level=logging.ERROR, message=str(e)
            )
            raise QueryError(str(e)) from e
        self._query_log.log_query(stmt.text, stmt.params, caller=caller)
        return statement

    def query_all(
        self,
        sql: str | Sql,
        fetch_mode: FetchMode = FetchMode.BOTH,
        fetch_args: Any = None,
        ctor_args: Sequence[Any] = (),
        *,
        caller: CallerContext | None = None,
    ) -> list[Any] | dict[Any, Any]:
        """All rows; see PreparedStatement.fetch_all for fetch_args / ctor_args."""
        statement = self.query(sql, caller=caller)
        try:
            return statement.fetch_all(fetch_mode, fetch_args, ctor_args)
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise QueryAllError(str(e)) from e
        finally:
            statement.close()

    def query_column(
        self,
        sql: str | Sql,
        column: int = 0,
        default: Any = None,
        *,
        caller: CallerContext | None = None,
    ) -> Any:
        """
        Value of *column* in the first row, e.g. a COUNT(*).

        *default* is returned when the result has no row; pass a sentinel to
        tell "no row" from a NULL column.
        """
        statement = self.query(sql, caller=caller)
        try:
            return statement.fetch_column(column, default)
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise QueryColumnError(str(e)) from e
        finally:
            statement.close()

    def query_object(
        self,
        sql: str | Sql,
        cls: Callable[..., Any] = SimpleNamespace,
        ctor_args: Sequence[Any] = (),
        *,
        caller: CallerContext | None = None,
    ) -> Any:
        """First row as ``cls(*ctor_args, **row)``, or None."""
        statement = self.query(sql, caller=caller)
        try:
            return statement.fetch_object(cls, ctor_args)
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise QueryObjectError(str(e)) from e
        finally:
            statement.close()

    def query_one(
        self,
        sql: str | Sql,
        fetch_mode: FetchMode = FetchMode.BOTH,
        orientation: CursorOrientation = CursorOrientation.NEXT,
        offset: int = 0,
        *,
        caller: CallerContext | None = None,
    ) -> Any:
        """One row (the first, unless *orientation* says otherwise), or None."""
        statement = self.query(sql, caller=caller)
        try:
            return statement.fetch(fetch_mode, orientation, offset)
        except Exception as e:
            self._query_log.log_error(str(e), caller=caller)
            raise QueryOneError(str(e)) from e
        finally:
            statement.close()

    def insert(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        caller: CallerContext | None = None,
    ) -> int:
        """Insert one row; None and empty values are omitted. Returns the affected row count."""
        kept = {column: value for column, value in values.items() if not _is_blank(value)}
        q = self.driver.identifier_quote
        columns = ",".join(q + column.replace(q, q + q) + q for column in kept)
        markers = ",".join("?" for _ in kept)
        sql = Sql(f"INSERT INTO {table} ({columns}) VALUES ({markers})", list(kept.values()))
        return self.execute(sql, caller=caller)
