"""
Library settings, read from SQLGATE_* environment variables.
"""

import os
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

_ENV_PREFIX = "SQLGATE_"


class Settings(BaseModel):
    """Defaults applied when a Gate or the connection pool is not told otherwise."""

    DEFAULT_DSN: str = "sqlite::memory:"
    CONNECT_TIMEOUT: float = 10.0
    QUERY_LOG_TYPE: str = "QueryLog"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``SQLGATE_<FIELD>`` variables; unset fields keep defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = env.get(_ENV_PREFIX + name)
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        try:
            return cls(**values)
        except ValidationError as e:
            raise ValueError(f"Invalid {_ENV_PREFIX}* environment: {e}") from e


settings = Settings.from_env()
