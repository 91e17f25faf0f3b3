"""
Parameterized SQL statements and list-parameter expansion.

``Sql("... WHERE x IN (:v)", {":v": ["a", "b"]})`` expands to
``"... WHERE x IN (:v0,:v1)"`` with bindings ``{":v0": "a", ":v1": "b"}``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple, Sequence

from sqlgate.core.param_type import ParamType

_NAME_RE = re.compile(r"^:?([A-Za-z_][A-Za-z0-9_]*)$")


class Bind(NamedTuple):
    """Explicit bind directive: bound as-is to *target*, never expanded."""

    target: int | str
    value: Any
    type_hint: ParamType | str | None = None


@dataclass(frozen=True, slots=True)
class ExpandedStatement:
    """Statement text with list placeholders replaced, plus the flat bindings."""

    text: str
    params: dict[int | str, Any] = field(default_factory=dict)


def placeholder_name(key: str) -> str:
    """``":name"`` or ``"name"`` -> ``"name"``; raises ValueError for anything else."""
    m = _NAME_RE.match(key)
    if m is None:
        raise ValueError(f"Invalid named placeholder: {key!r}")
    return m.group(1)


def _is_list_value(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and not isinstance(value, Bind)


def expand(template: str, params: Mapping[int | str, Any] | None = None) -> ExpandedStatement:
    """
    Expand *params* against *template*. Pure: neither argument is modified.

    - int keys become 1-based positions (0 -> 1).
    - a list/tuple bound to ``:name`` replaces every ``:name`` token with
      ``:name0,:name1,...`` and yields one binding per element, in order.
    - scalars and Bind directives pass through unchanged.

    Raises ValueError for an empty list, a list bound to a position, or a
    generated key that clashes with another binding.
    """
    params = params or {}
    # base names of every named key, lists included; expansions must not reuse them
    originals = {placeholder_name(k) for k in params if isinstance(k, str)}
    generated_so_far: set[str] = set()
    text = template
    out: dict[int | str, Any] = {}

    for key, value in params.items():
        if isinstance(key, int) and not isinstance(key, bool):
            if _is_list_value(value):
                raise ValueError(f"List value bound to positional parameter {key}; use a named placeholder")
            out[key + 1] = value
            continue
        if not isinstance(key, str):
            raise ValueError(f"Parameter keys must be int or str, got {type(key).__name__}")
        if not _is_list_value(value):
            out[key] = value
            continue

        name = placeholder_name(key)
        if not value:
            raise ValueError(f"Empty list bound to :{name}")
        if name in generated_so_far:
            raise ValueError(f"Placeholder :{name} clashes with an expanded list placeholder")
        generated = [f"{name}{i}" for i in range(len(value))]
        for g in generated:
            if g in originals or g in generated_so_far:
                raise ValueError(f"Expanded placeholder :{g} clashes with another parameter")
            generated_so_far.add(g)
        joined = ",".join(":" + g for g in generated)
        token = re.compile(r"(?<![:\w]):" + re.escape(name) + r"(?!\w)")
        text = token.sub(lambda _m: joined, text)
        for g, item in zip(generated, value):
            out[":" + g] = item

    return ExpandedStatement(text=text, params=out)


@dataclass(frozen=True, slots=True)
class Sql:
    """
    SQL template plus parameters.

    params: mapping of ``":name"``/``"name"`` or 0-based int position to a value;
    a plain sequence is taken as positional values.
    """

    template: str
    params: Mapping[int | str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        params: Mapping[int | str, Any] | Sequence[Any] = self.params
        if isinstance(params, Mapping):
            object.__setattr__(self, "params", dict(params))
        else:
            object.__setattr__(self, "params", dict(enumerate(params)))

    def expand(self) -> ExpandedStatement:
        return expand(self.template, self.params)


def as_expanded(sql: str | Sql) -> ExpandedStatement:
    """Resolve raw SQL text or a Sql to text + bindings."""
    if isinstance(sql, Sql):
        return sql.expand()
    if isinstance(sql, str):
        return ExpandedStatement(text=sql)
    raise TypeError(f"Expected str or Sql, got {type(sql).__name__}")
