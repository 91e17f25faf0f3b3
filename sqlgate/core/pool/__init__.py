"""
DB connections and the memoizing connection pool.

Drivers: sqlite3, psycopg (PostgreSQL) and pymysql (MySQL), chosen from the
endpoint descriptor prefix.
"""

from .connection import DRIVER_ERRORS, DriverEnum, connect, is_integrity_violation, resolve_driver
from .manager import ConnectionPool, connection_key, get_connection_pool

__all__ = [
    "DRIVER_ERRORS",
    "DriverEnum",
    "connect",
    "is_integrity_violation",
    "resolve_driver",
    "ConnectionPool",
    "connection_key",
    "get_connection_pool",
]
