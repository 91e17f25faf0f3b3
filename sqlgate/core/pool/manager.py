"""
Connection pool: one live connection per (endpoint, username, password, options).

Handles are opened lazily on first acquire and kept until dispose(); there is no
health check or refresh. Lookup-or-create is serialized per key so concurrent
first callers never open duplicates.
"""

import hashlib
import logging
import threading
from typing import Any, Mapping

from sqlgate.core.errors import DatabaseConnectionError

from .connection import DRIVER_ERRORS, connect

_log = logging.getLogger(__name__)


def connection_key(
    endpoint: str,
    username: str = "",
    password: str = "",
    options: Mapping[Any, Any] | None = None,
) -> str:
    """Deterministic memoization key; options are sorted so insertion order is irrelevant."""
    canonical = sorted((options or {}).items(), key=lambda kv: repr(kv[0]))
    raw = repr((endpoint, username, password, canonical))
    return hashlib.md5(raw.encode(), usedforsecurity=False).hexdigest()


class ConnectionPool:
    """Memoizes connection handles by connection key."""

    def __init__(self) -> None:
        self._connections: dict[str, Any] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def acquire(
        self,
        endpoint: str,
        username: str = "",
        password: str = "",
        options: Mapping[Any, Any] | None = None,
    ) -> Any:
        """
        Return the handle for these connection arguments, opening it on first use.

        Raises DatabaseConnectionError when the driver cannot connect; the failure
        is not cached, so the next call tries again.
        """
        key = connection_key(endpoint, username, password, options)
        conn = self._connections.get(key)
        if conn is not None:
            return conn

        with self._key_lock(key):
            conn = self._connections.get(key)
            if conn is not None:
                return conn
            try:
                conn = connect(endpoint, username, password, options)
            except DRIVER_ERRORS as e:
                raise DatabaseConnectionError(str(e)) from e
            with self._lock:
                self._connections[key] = conn
            _log.debug("Opened connection %s", key[:8])
            return conn

    def dispose(self, key: str | None = None) -> None:
        """Close and forget pooled handles. ``None`` = all of them."""
        with self._lock:
            if key is not None:
                conns = [c for c in (self._connections.pop(key, None),) if c is not None]
            else:
                conns = list(self._connections.values())
                self._connections.clear()
        for conn in conns:
            self._close_quiet(conn)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {"connections": len(self._connections)}

    def __contains__(self, key: object) -> bool:
        return key in self._connections

    def _key_lock(self, key: str) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.Lock())

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except Exception:
            _log.debug("Ignoring error while closing connection", exc_info=True)


_connection_pool: ConnectionPool | None = None
_pool_lock = threading.Lock()


def get_connection_pool() -> ConnectionPool:
    """Return the process-wide default pool (thread-safe double-checked locking)."""
    global _connection_pool
    if _connection_pool is None:
        with _pool_lock:
            if _connection_pool is None:
                _connection_pool = ConnectionPool()
    return _connection_pool
