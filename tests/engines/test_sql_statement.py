"""Unit tests for engines.sql.statement (Sql and list-parameter expansion)."""

import dataclasses

import pytest

from sqlgate.core.param_type import ParamType
from sqlgate.engines.sql import Bind, ExpandedStatement, Sql, as_expanded, expand


def test_list_parameter_expanded() -> None:
    sql = Sql(
        "SELECT * FROM t_user WHERE firstname IN (:firstname)",
        {":firstname": ["John", "Jane"]},
    )
    out = sql.expand()
    assert out.text == "SELECT * FROM t_user WHERE firstname IN (:firstname0,:firstname1)"
    assert out.params == {":firstname0": "John", ":firstname1": "Jane"}


def test_expanded_keys_follow_list_order() -> None:
    out = expand("SELECT * FROM t WHERE x IN (:v)", {":v": ("c", "a", "b")})
    assert list(out.params.items()) == [(":v0", "c"), (":v1", "a"), (":v2", "b")]


def test_scalar_parameter_unchanged() -> None:
    out = expand("SELECT * FROM t WHERE id = :id", {":id": 5})
    assert out == ExpandedStatement("SELECT * FROM t WHERE id = :id", {":id": 5})


def test_every_occurrence_replaced() -> None:
    out = expand("SELECT * FROM t WHERE a IN (:v) OR b IN (:v)", {"v": [1, 2]})
    assert out.text == "SELECT * FROM t WHERE a IN (:v0,:v1) OR b IN (:v0,:v1)"
    assert out.params == {":v0": 1, ":v1": 2}


def test_longer_name_with_same_prefix_untouched() -> None:
    out = expand("SELECT * FROM t WHERE a IN (:v) AND b = :vx", {":v": [1], ":vx": 9})
    assert out.text == "SELECT * FROM t WHERE a IN (:v0) AND b = :vx"
    assert out.params == {":v0": 1, ":vx": 9}


def test_cast_is_not_a_placeholder() -> None:
    out = expand("SELECT a::text FROM t WHERE text IN (:text)", {":text": ["a", "b"]})
    assert out.text == "SELECT a::text FROM t WHERE text IN (:text0,:text1)"


def test_positional_keys_become_one_based() -> None:
    out = Sql("INSERT INTO t (a, b) VALUES (?,?)", ["x", 2]).expand()
    assert out.params == {1: "x", 2: 2}
    assert out.text == "INSERT INTO t (a, b) VALUES (?,?)"


def test_strings_and_bytes_are_scalars() -> None:
    out = expand("SELECT :s, :b", {":s": "abc", ":b": b"\x00"})
    assert out.params == {":s": "abc", ":b": b"\x00"}


def test_bind_directive_passes_through() -> None:
    directive = Bind(":id", "5", ParamType.INT)
    out = expand("SELECT * FROM t WHERE id = :id", {":id": directive})
    assert out.params == {":id": directive}
    assert out.text == "SELECT * FROM t WHERE id = :id"


def test_input_not_mutated() -> None:
    params = {":v": ["a", "b"]}
    expand("SELECT :v", params)
    assert params == {":v": ["a", "b"]}


class TestExpansionErrors:
    def test_empty_list(self):
        with pytest.raises(ValueError, match="Empty list bound to :v"):
            expand("SELECT * FROM t WHERE x IN (:v)", {":v": []})

    def test_list_on_positional(self):
        with pytest.raises(ValueError, match="positional"):
            expand("SELECT * FROM t WHERE x IN (?)", {0: [1, 2]})

    def test_generated_key_clash(self):
        with pytest.raises(ValueError, match="clashes"):
            expand("SELECT :v, :v0", {":v": [1], ":v0": 2})

    def test_generated_keys_clash_between_lists(self):
        with pytest.raises(ValueError, match="clashes"):
            expand("SELECT :a1, :a", {":a1": [1], ":a": list(range(11))})

    @pytest.mark.parametrize(
        "params",
        [
            {":v": [1, 2], ":v1": [3]},
            {":v1": [3], ":v": [1, 2]},
        ],
    )
    def test_list_name_matching_earlier_expansion(self, params):
        with pytest.raises(ValueError, match="clashes"):
            expand("SELECT * FROM t WHERE a IN (:v) AND b IN (:v1)", params)

    def test_invalid_name(self):
        with pytest.raises(ValueError, match="Invalid named placeholder"):
            expand("SELECT 1", {":not a name": [1]})


def test_sql_is_immutable() -> None:
    sql = Sql("SELECT 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        sql.template = "SELECT 2"  # type: ignore[misc]


def test_sql_copies_params() -> None:
    params = {":a": 1}
    sql = Sql("SELECT :a", params)
    params[":a"] = 2
    assert sql.expand().params == {":a": 1}


class TestAsExpanded:
    def test_raw_text(self):
        assert as_expanded("SELECT 1") == ExpandedStatement("SELECT 1", {})

    def test_sql(self):
        assert as_expanded(Sql("SELECT :a", {"a": [1]})).text == "SELECT :a0"

    def test_other_type(self):
        with pytest.raises(TypeError):
            as_expanded(42)  # type: ignore[arg-type]
