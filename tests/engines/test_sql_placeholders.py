"""Unit tests for engines.sql.placeholders (paramstyle compilation)."""

import pytest

from sqlgate.core.param_type import ParamType
from sqlgate.engines.sql import Bind, compile_placeholders
from sqlgate.engines.sql.placeholders import resolve_bindings


def test_named_to_qmark() -> None:
    sql, values = compile_placeholders(
        "SELECT * FROM t WHERE a = :a AND b = :b", {":a": 1, "b": 2}
    )
    assert sql == "SELECT * FROM t WHERE a = ? AND b = ?"
    assert values == (1, 2)


def test_positional_values_in_order() -> None:
    sql, values = compile_placeholders("INSERT INTO t VALUES (?,?)", {2: "y", 1: "x"})
    assert sql == "INSERT INTO t VALUES (?,?)"
    assert values == ("x", "y")


def test_mixed_named_and_positional() -> None:
    sql, values = compile_placeholders("SELECT ? , :n, ?", {1: "p1", ":n": "n", 2: "p2"}, marker="%s")
    assert sql == "SELECT %s , %s, %s"
    assert values == ("p1", "n", "p2")


def test_reused_name_binds_twice() -> None:
    _, values = compile_placeholders("SELECT * FROM t WHERE a = :v OR b = :v", {":v": 1})
    assert values == (1, 1)


def test_format_marker_escapes_percent() -> None:
    sql, values = compile_placeholders(
        "SELECT * FROM t WHERE name LIKE 'a%' AND pct > 5 % 2 AND id = :id",
        {":id": 3},
        marker="%s",
        escape_percent=True,
    )
    assert sql == "SELECT * FROM t WHERE name LIKE 'a%%' AND pct > 5 %% 2 AND id = %s"
    assert values == (3,)


def test_no_parameters_leaves_sql_untouched() -> None:
    sql, values = compile_placeholders("SELECT '50%'", None, marker="%s", escape_percent=True)
    assert sql == "SELECT '50%'"
    assert values is None


class TestLiteralsAreSkipped:
    def test_quoted_markers(self):
        sql, values = compile_placeholders(
            "SELECT ':x', \"?\", `:y` FROM t WHERE id = ?", {1: 7}, marker="%s"
        )
        assert sql == "SELECT ':x', \"?\", `:y` FROM t WHERE id = %s"
        assert values == (7,)

    def test_doubled_quote_inside_literal(self):
        sql, _ = compile_placeholders("SELECT 'it''s :x' , :y", {":y": 1})
        assert sql == "SELECT 'it''s :x' , ?"

    def test_comments(self):
        sql, values = compile_placeholders(
            "SELECT 1 -- :x ?\n, /* :z */ :y", {":y": 1}
        )
        assert sql == "SELECT 1 -- :x ?\n, /* :z */ ?"
        assert values == (1,)

    def test_dollar_quoting(self):
        sql, _ = compile_placeholders("SELECT $$:x?$$, :y", {":y": 1})
        assert sql == "SELECT $$:x?$$, ?"

    def test_cast(self):
        sql, values = compile_placeholders("SELECT :v::int", {":v": "3"}, marker="%s")
        assert sql == "SELECT %s::int"
        assert values == ("3",)


class TestBindingErrors:
    def test_missing_named(self):
        with pytest.raises(ValueError, match="No value bound for :a"):
            compile_placeholders("SELECT :a", {})

    def test_missing_positional(self):
        with pytest.raises(ValueError, match="positional parameter 2"):
            compile_placeholders("SELECT ?, ?", {1: "x"})

    def test_unused_binding(self):
        with pytest.raises(ValueError, match="not used"):
            compile_placeholders("SELECT :a", {":a": 1, ":b": 2})

    def test_unused_position(self):
        with pytest.raises(ValueError, match="not used"):
            compile_placeholders("SELECT ?", {1: "x", 2: "y"})

    def test_bound_twice(self):
        with pytest.raises(ValueError, match="bound twice"):
            compile_placeholders("SELECT :a", {":a": 1, "a": 2})


def test_bind_directive_routed_to_target_with_type_hint() -> None:
    sql, values = compile_placeholders(
        "SELECT * FROM t WHERE id = :id AND n = ?",
        {"anything": Bind(":id", "5", ParamType.INT), "other": Bind(1, 0, ParamType.BOOL)},
    )
    assert sql == "SELECT * FROM t WHERE id = ? AND n = ?"
    assert values == (5, False)


def test_resolve_bindings_splits_named_and_positional() -> None:
    positional, named = resolve_bindings({1: "a", ":b": "b", "c": Bind(2, "7", "int")})
    assert positional == {1: "a", 2: 7}
    assert named == {"b": "b"}
