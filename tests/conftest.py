"""Shared fixtures: an isolated connection pool and Gates over in-memory sqlite."""

import pytest

from sqlgate import ConnectionPool, Gate

USERS = [
    {"id": 1, "firstname": "John", "lastname": "Doe"},
    {"id": 2, "firstname": "Jane", "lastname": "Doe"},
    {"id": 3, "firstname": "John", "lastname": "Wick"},
]


@pytest.fixture
def pool() -> ConnectionPool:
    pool = ConnectionPool()
    yield pool
    pool.dispose()


@pytest.fixture
def gate(pool: ConnectionPool) -> Gate:
    g = Gate("sqlite::memory:", pool=pool)
    g.execute(
        """
        CREATE TABLE test_table (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL DEFAULT 'anonymous'
        )
        """
    )
    return g


@pytest.fixture
def user_gate(gate: Gate) -> Gate:
    gate.execute("CREATE TABLE t_user (id INTEGER PRIMARY KEY, firstname TEXT, lastname TEXT)")
    for user in USERS:
        gate.insert("t_user", user)
    return gate
