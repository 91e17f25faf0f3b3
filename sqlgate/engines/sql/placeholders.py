"""
Rewrite ``:name`` / ``?`` placeholders into a driver's DB-API paramstyle.

The scanner respects quoted strings (``'...'``, ``"..."``, backticks),
dollar-quoted literals (``$$...$$``), comments and ``::`` casts, so markers
inside them are left alone. Values are collected positionally in order of
occurrence, which lets one statement mix named and positional markers and
reuse a name several times.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlgate.core.param_type import coerce_param
from sqlgate.engines.sql.statement import Bind, placeholder_name


def _is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def resolve_bindings(params: Mapping[int | str, Any]) -> tuple[dict[int, Any], dict[str, Any]]:
    """
    Split bindings into ``{position: value}`` and ``{name: value}``.

    Bind directives are routed to their own target with the type hint applied.
    Raises ValueError when two entries target the same placeholder.
    """
    positional: dict[int, Any] = {}
    named: dict[str, Any] = {}
    for key, value in params.items():
        target: int | str = key
        if isinstance(value, Bind):
            target = value.target
            value = coerce_param(value.value, value.type_hint)
        if isinstance(target, int) and not isinstance(target, bool):
            if target in positional:
                raise ValueError(f"Positional parameter {target} is bound twice")
            positional[target] = value
        else:
            name = placeholder_name(str(target))
            if name in named:
                raise ValueError(f"Parameter :{name} is bound twice")
            named[name] = value
    return positional, named


def compile_placeholders(
    sql: str,
    params: Mapping[int | str, Any] | None = None,
    *,
    marker: str = "?",
    escape_percent: bool = False,
) -> tuple[str, tuple[Any, ...] | None]:
    """
    Return ``(sql, values)`` ready for ``cursor.execute``.

    - marker: positional marker of the target paramstyle (``?`` or ``%s``).
    - escape_percent: double literal ``%`` (format/pyformat drivers); only done
      when the statement has parameters, since those drivers leave
      parameterless SQL untouched.

    ``values`` is None when the statement has no placeholders. Raises ValueError
    when a placeholder has no binding or a binding has no placeholder.
    """
    positional, named = resolve_bindings(params or {})
    parts: list[tuple[bool, str]] = []  # (is_marker, text)
    current: list[str] = []
    values: list[Any] = []
    used_names: set[str] = set()
    position = 0
    i = 0
    length = len(sql)

    def flush() -> None:
        if current:
            parts.append((False, "".join(current)))
            current.clear()

    while i < length:
        ch = sql[i]

        if ch in ("'", '"', "`"):
            quote = ch
            current.append(ch)
            i += 1
            while i < length:
                c = sql[i]
                current.append(c)
                if c == quote:
                    if i + 1 < length and sql[i + 1] == quote:
                        current.append(sql[i + 1])
                        i += 2
                        continue
                    i += 1
                    break
                if c == "\\" and i + 1 < length:
                    current.append(sql[i + 1])
                    i += 2
                    continue
                i += 1
            continue

        if ch == "$" and i + 1 < length and sql[i + 1] == "$":
            tag_end = sql.find("$$", i + 2)
            end = length if tag_end == -1 else tag_end + 2
            current.append(sql[i:end])
            i = end
            continue

        if ch == "-" and i + 1 < length and sql[i + 1] == "-":
            end = sql.find("\n", i)
            end = length if end == -1 else end + 1
            current.append(sql[i:end])
            i = end
            continue

        if ch == "/" and i + 1 < length and sql[i + 1] == "*":
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if ch == ":" and i + 1 < length and sql[i + 1] == ":":
            current.append("::")
            i += 2
            continue

        if ch == ":" and i + 1 < length and _is_name_start(sql[i + 1]):
            j = i + 1
            while j < length and _is_name_char(sql[j]):
                j += 1
            name = sql[i + 1 : j]
            if name not in named:
                raise ValueError(f"No value bound for :{name}")
            flush()
            parts.append((True, marker))
            values.append(named[name])
            used_names.add(name)
            i = j
            continue

        if ch == "?":
            position += 1
            if position not in positional:
                raise ValueError(f"No value bound for positional parameter {position}")
            flush()
            parts.append((True, marker))
            values.append(positional[position])
            i += 1
            continue

        current.append(ch)
        i += 1

    flush()

    unused = [f":{n}" for n in named if n not in used_names]
    unused += [str(p) for p in positional if not 1 <= p <= position]
    if unused:
        raise ValueError(f"Parameters not used in the statement: {', '.join(unused)}")

    if not values:
        return sql, None
    text = "".join(
        t if is_marker or not escape_percent else t.replace("%", "%%") for is_marker, t in parts
    )
    return text, tuple(values)
