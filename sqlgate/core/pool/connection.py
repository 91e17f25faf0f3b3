"""
DB connection helpers: open a DB-API connection from an endpoint descriptor.

Endpoint descriptors follow the ``<driver>:<details>`` form:

- ``sqlite:/path/to/file.db`` or ``sqlite::memory:`` (sqlite3)
- ``pgsql:host=localhost;port=5432;dbname=app`` or ``postgresql://...`` (psycopg)
- ``mysql:host=localhost;port=3306;dbname=app;charset=utf8mb4`` (pymysql)

Connections are opened in autocommit mode; transactions are begun explicitly.
"""

import sqlite3
from enum import Enum
from typing import Any, Mapping

import psycopg
import pymysql

from sqlgate.core.config import settings

# Base error classes of every supported driver; anything else is not a DB failure.
DRIVER_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, psycopg.Error, pymysql.Error)

_INTEGRITY_ERRORS: tuple[type[Exception], ...] = (
    sqlite3.IntegrityError,
    psycopg.IntegrityError,
    pymysql.IntegrityError,
)


class DriverEnum(str, Enum):
    """Supported drivers (sqlite, postgres, mysql)."""

    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"

    @property
    def placeholder(self) -> str:
        """Positional marker of the driver's DB-API paramstyle."""
        return "?" if self is DriverEnum.SQLITE else "%s"

    @property
    def escapes_percent(self) -> bool:
        """True when literal ``%`` must be doubled in parameterized SQL."""
        return self is not DriverEnum.SQLITE

    @property
    def identifier_quote(self) -> str:
        return "`" if self is DriverEnum.MYSQL else '"'

    @property
    def begin_sql(self) -> str:
        return "START TRANSACTION" if self is DriverEnum.MYSQL else "BEGIN"


_SCHEMES: dict[str, DriverEnum] = {
    "sqlite": DriverEnum.SQLITE,
    "pgsql": DriverEnum.POSTGRES,
    "postgres": DriverEnum.POSTGRES,
    "postgresql": DriverEnum.POSTGRES,
    "mysql": DriverEnum.MYSQL,
}


def resolve_driver(endpoint: str) -> DriverEnum:
    """Return the driver named by the endpoint prefix (text before the first ``:``)."""
    scheme, sep, _ = endpoint.partition(":")
    driver = _SCHEMES.get(scheme.strip().lower()) if sep else None
    if driver is None:
        raise ValueError(f"Unsupported endpoint descriptor: {endpoint!r}")
    return driver


def _parse_pairs(details: str) -> dict[str, str]:
    """Parse ``key=value;key=value`` details into a dict (empty parts ignored)."""
    pairs: dict[str, str] = {}
    for part in details.split(";"):
        key, sep, value = part.partition("=")
        if sep and key.strip():
            pairs[key.strip().lower()] = value.strip()
    return pairs


def connect(
    endpoint: str,
    username: str = "",
    password: str = "",
    options: Mapping[str, Any] | None = None,
) -> Any:
    """
    Open a DB-API connection for *endpoint*.

    - username / password: ignored by sqlite3; empty means "not given".
    - options: driver keyword arguments, passed through and taking precedence
      over the defaults set here (timeout, autocommit).

    Driver failures propagate unchanged (members of DRIVER_ERRORS).
    """
    driver = resolve_driver(endpoint)
    details = endpoint.partition(":")[2]
    kwargs: dict[str, Any] = dict(options or {})
    timeout = settings.CONNECT_TIMEOUT

    if driver == DriverEnum.SQLITE:
        kwargs.setdefault("timeout", timeout)
        kwargs.setdefault("isolation_level", None)
        kwargs.setdefault("check_same_thread", False)
        return sqlite3.connect(details, **kwargs)

    if driver == DriverEnum.POSTGRES:
        kwargs.setdefault("autocommit", True)
        kwargs.setdefault("connect_timeout", max(1, int(timeout)))
        if username:
            kwargs.setdefault("user", username)
        if password:
            kwargs.setdefault("password", password)
        if details.startswith("//"):
            return psycopg.connect(endpoint, **kwargs)
        for key, value in _parse_pairs(details).items():
            kwargs.setdefault(key, value)
        return psycopg.connect(**kwargs)

    pairs = _parse_pairs(details)
    kwargs.setdefault("autocommit", True)
    kwargs.setdefault("connect_timeout", timeout)
    if "host" in pairs:
        kwargs.setdefault("host", pairs["host"])
    if "port" in pairs:
        kwargs.setdefault("port", int(pairs["port"]))
    if "dbname" in pairs:
        kwargs.setdefault("database", pairs["dbname"])
    if "unix_socket" in pairs:
        kwargs.setdefault("unix_socket", pairs["unix_socket"])
    if "charset" in pairs:
        kwargs.setdefault("charset", pairs["charset"])
    if username:
        kwargs.setdefault("user", username)
    kwargs.setdefault("password", password or "")
    return pymysql.connect(**kwargs)


def is_integrity_violation(exc: BaseException) -> bool:
    """True for driver IntegrityError or any error carrying SQLSTATE class 23."""
    if isinstance(exc, _INTEGRITY_ERRORS):
        return True
    sqlstate = getattr(exc, "sqlstate", None)
    return isinstance(sqlstate, str) and sqlstate.startswith("23")
