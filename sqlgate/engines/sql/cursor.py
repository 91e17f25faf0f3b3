"""
PreparedStatement: a DB-API cursor with bound values and shaped fetches.

Rows are buffered as they are read from the driver, so scrolling
(PRIOR / FIRST / LAST / ABS / REL) works on drivers without scrollable cursors.
"""

from __future__ import annotations

from enum import Enum
from types import SimpleNamespace
from typing import Any, Callable, Iterator, Mapping, Sequence

from sqlgate.core.param_type import ParamType, coerce_param
from sqlgate.core.pool import DriverEnum
from sqlgate.engines.sql.placeholders import compile_placeholders
from sqlgate.engines.sql.statement import Bind, placeholder_name


class FetchMode(str, Enum):
    """Shape of fetched rows."""

    ASSOC = "assoc"  # {column: value}
    NUM = "num"  # (value, ...)
    BOTH = "both"  # {column: value, index: value}
    OBJ = "obj"  # SimpleNamespace(column=value)
    CLASS = "class"  # cls(*ctor_args, **{column: value})
    COLUMN = "column"  # fetch_all only: one column per row
    KEY_PAIR = "key_pair"  # fetch_all only: {first column: second column}


class CursorOrientation(str, Enum):
    """Which row fetch() returns, relative to the current position."""

    NEXT = "next"
    PRIOR = "prior"
    FIRST = "first"
    LAST = "last"
    ABS = "abs"  # 0-based row number given by offset
    REL = "rel"  # offset rows from the current one


class PreparedStatement:
    """Statement text bound to a cursor; ``execute()`` runs it with the bound values."""

    def __init__(self, cursor: Any, sql: str, driver: DriverEnum) -> None:
        self.sql = sql
        self._cursor = cursor
        self._driver = driver
        self._params: dict[int | str, Any] = {}
        self._rows: list[tuple[Any, ...]] = []
        self._exhausted = True
        self._pos = -1

    # ------------------------------------------------------------------
    # Binding / execution
    # ------------------------------------------------------------------

    def bind_value(self, key: int | str, value: Any, type_hint: ParamType | str | None = None) -> None:
        """Bind *value* to ``:name`` (str key) or a 1-based position (int key)."""
        if isinstance(key, str):
            key = ":" + placeholder_name(key)
        self._params[key] = coerce_param(value, type_hint)

    def bind_values(self, params: Mapping[int | str, Any]) -> None:
        for key, value in params.items():
            if isinstance(value, Bind):
                self.bind_value(value.target, value.value, value.type_hint)
            else:
                self.bind_value(key, value)

    @property
    def bound_values(self) -> dict[int | str, Any]:
        return dict(self._params)

    def execute(self) -> None:
        sql, values = compile_placeholders(
            self.sql,
            self._params,
            marker=self._driver.placeholder,
            escape_percent=self._driver.escapes_percent,
        )
        self._rows = []
        self._pos = -1
        if values is None:
            self._cursor.execute(sql)
        else:
            self._cursor.execute(sql, values)
        self._exhausted = self._cursor.description is None

    @property
    def row_count(self) -> int:
        """Rows affected by the last INSERT/UPDATE/DELETE (0 when the driver cannot tell)."""
        rc = self._cursor.rowcount
        return rc if rc is not None and rc >= 0 else 0

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(d[0] for d in self._cursor.description or ())

    def close(self) -> None:
        self._cursor.close()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch(
        self,
        mode: FetchMode = FetchMode.BOTH,
        orientation: CursorOrientation = CursorOrientation.NEXT,
        offset: int = 0,
    ) -> Any:
        """Return one row shaped by *mode*, or None past either end of the result."""
        orientation = CursorOrientation(orientation)
        if orientation == CursorOrientation.NEXT:
            target = self._pos + 1
        elif orientation == CursorOrientation.PRIOR:
            target = self._pos - 1
        elif orientation == CursorOrientation.FIRST:
            target = 0
        elif orientation == CursorOrientation.LAST:
            self._read_all()
            target = len(self._rows) - 1
        elif orientation == CursorOrientation.ABS:
            target = offset
        else:
            target = self._pos + offset

        row = self._row_at(target)
        if row is None:
            self._pos = -1 if target < 0 else len(self._rows)
            return None
        self._pos = target
        return self._shape(row, FetchMode(mode))

    def fetch_all(
        self,
        mode: FetchMode = FetchMode.BOTH,
        fetch_args: Any = None,
        ctor_args: Sequence[Any] = (),
    ) -> list[Any] | dict[Any, Any]:
        """
        Return the remaining rows.

        fetch_args: the class for FetchMode.CLASS, the column index for
        FetchMode.COLUMN (default 0); unused otherwise.
        """
        mode = FetchMode(mode)
        self._read_all()
        rows = self._rows[self._pos + 1 :]
        self._pos = len(self._rows)
        if mode == FetchMode.COLUMN:
            column = fetch_args or 0
            return [row[column] for row in rows]
        if mode == FetchMode.KEY_PAIR:
            if len(self.column_names) != 2:
                raise ValueError("FetchMode.KEY_PAIR requires exactly two columns")
            return {row[0]: row[1] for row in rows}
        return [self._shape(row, mode, fetch_args, ctor_args) for row in rows]

    def fetch_column(self, column: int = 0, default: Any = None) -> Any:
        """Value of *column* in the next row, *default* when there is no row."""
        row = self.fetch(FetchMode.NUM)
        if row is None:
            return default
        return row[column]

    def fetch_object(self, cls: Callable[..., Any] = SimpleNamespace, ctor_args: Sequence[Any] = ()) -> Any:
        """Next row as ``cls(*ctor_args, **row)``, or None."""
        row = self.fetch(FetchMode.ASSOC)
        if row is None:
            return None
        return cls(*ctor_args, **row)

    def __iter__(self) -> Iterator[Any]:
        while True:
            row = self.fetch()
            if row is None:
                return
            yield row

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _row_at(self, index: int) -> tuple[Any, ...] | None:
        if index < 0:
            return None
        while len(self._rows) <= index and not self._exhausted:
            row = self._cursor.fetchone()
            if row is None:
                self._exhausted = True
            else:
                self._rows.append(tuple(row))
        return self._rows[index] if index < len(self._rows) else None

    def _read_all(self) -> None:
        if not self._exhausted:
            self._rows.extend(tuple(row) for row in self._cursor.fetchall())
            self._exhausted = True

    def _shape(
        self,
        row: tuple[Any, ...],
        mode: FetchMode,
        cls: Any = None,
        ctor_args: Sequence[Any] = (),
    ) -> Any:
        if mode == FetchMode.NUM:
            return row
        names = self.column_names
        if mode == FetchMode.BOTH:
            both: dict[Any, Any] = {}
            for i, (name, value) in enumerate(zip(names, row)):
                both[name] = value
                both[i] = value
            return both
        assoc = dict(zip(names, row))
        if mode == FetchMode.ASSOC:
            return assoc
        if mode == FetchMode.OBJ:
            return SimpleNamespace(**assoc)
        if mode == FetchMode.CLASS:
            if cls is None:
                raise ValueError("FetchMode.CLASS requires a class in fetch_args")
            return cls(*ctor_args, **assoc)
        raise ValueError(f"{mode} is only valid for fetch_all()")
