"""
Type hints for explicit bind directives.

A ``Bind(target, value, type_hint)`` asks for the value to be coerced before it
reaches the driver. Coercion mirrors what a driver would do for a typed bind:
NULL always binds ``None``; INT/STR/BOOL/LOB coerce or raise ParamTypeError.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable


class ParamTypeError(ValueError):
    """Raised when a bound value cannot be coerced to its type hint."""

    pass


class ParamType(str, Enum):
    """Type hints accepted by ``Bind`` and ``PreparedStatement.bind_value``."""

    NULL = "null"
    INT = "int"
    STR = "str"
    BOOL = "bool"
    LOB = "lob"


def _coerce_null(value: Any) -> None:
    return None


def _coerce_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ParamTypeError(f"Expected integer, got float: {value}")
        return int(value)
    s = str(value).strip()
    if not s:
        raise ParamTypeError("Value is empty")
    try:
        return int(s)
    except ValueError as e:
        raise ParamTypeError(f"Invalid integer: {s!r}") from e


def _coerce_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def _coerce_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ParamTypeError(f"Expected boolean, got integer: {value}")
    s = str(value).strip().lower()
    if s in ("true", "1", "yes"):
        return True
    if s in ("false", "0", "no", ""):
        return False
    raise ParamTypeError(f"Expected boolean (true/false, 1/0, yes/no), got: {value!r}")


def _coerce_lob(value: Any) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode()
    if hasattr(value, "read"):
        data = value.read()
        return data.encode() if isinstance(data, str) else bytes(data)
    raise ParamTypeError(f"Expected bytes, str or file-like object, got: {type(value).__name__}")


_COERCERS: dict[ParamType, Callable[[Any], Any]] = {
    ParamType.NULL: _coerce_null,
    ParamType.INT: _coerce_int,
    ParamType.STR: _coerce_str,
    ParamType.BOOL: _coerce_bool,
    ParamType.LOB: _coerce_lob,
}


def coerce_param(value: Any, type_hint: ParamType | str | None) -> Any:
    """Return *value* coerced to *type_hint*; ``None`` hint leaves it untouched."""
    if type_hint is None:
        return value
    try:
        hint = ParamType(type_hint)
    except ValueError as e:
        raise ParamTypeError(f"Unknown type hint: {type_hint!r}") from e
    return _COERCERS[hint](value)
