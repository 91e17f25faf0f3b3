"""Unit tests for core.config."""

import pytest

from sqlgate.core.config import Settings


def test_defaults_when_env_empty() -> None:
    s = Settings.from_env({})
    assert s.DEFAULT_DSN == "sqlite::memory:"
    assert s.CONNECT_TIMEOUT == 10.0
    assert s.QUERY_LOG_TYPE == "QueryLog"


def test_values_read_from_prefixed_env() -> None:
    s = Settings.from_env(
        {
            "SQLGATE_DEFAULT_DSN": "pgsql:host=db;dbname=app",
            "SQLGATE_CONNECT_TIMEOUT": " 2.5 ",
            "DEFAULT_DSN": "ignored",
        }
    )
    assert s.DEFAULT_DSN == "pgsql:host=db;dbname=app"
    assert s.CONNECT_TIMEOUT == 2.5


def test_blank_value_keeps_default() -> None:
    s = Settings.from_env({"SQLGATE_QUERY_LOG_TYPE": "   "})
    assert s.QUERY_LOG_TYPE == "QueryLog"


def test_invalid_value_raises() -> None:
    with pytest.raises(ValueError, match="SQLGATE_"):
        Settings.from_env({"SQLGATE_CONNECT_TIMEOUT": "soon"})
