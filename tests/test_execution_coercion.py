"""Tests for volley.execution.coercion - body_schema type coercion."""

import pytest

from volley.execution.coercion import coerce_body, coerce_value, parse_bool


class TestCoerceValue:
    """Tests for coerce_value per declared type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("123", 123), ("-7", -7), ("+4", 4), (5.0, 5), (9, 9)],
    )
    def test_int_conversions(self, value, expected):
        """Integer strings, whole floats, and ints become ints."""
        result = coerce_value(value, "int")
        assert result == expected
        assert type(result) is int

    @pytest.mark.parametrize("value", [1.5, "12a", "1.0", "", True, [1]])
    def test_int_leaves_unconvertible_alone(self, value):
        """Non-integral floats, bad strings, bools, and containers are unchanged."""
        assert coerce_value(value, "int") is value

    @pytest.mark.parametrize("declared", ["float", "float64"])
    def test_float_conversions(self, declared):
        """Ints and numeric strings become floats."""
        assert coerce_value(3, declared) == 3.0
        assert isinstance(coerce_value(3, declared), float)
        assert coerce_value("2.5", declared) == 2.5
        assert coerce_value("nope", declared) == "nope"

    @pytest.mark.parametrize("text", [" 1.5", "1.5 ", "1_000", "1_0.5"])
    def test_float_rejects_padding_and_separators(self, text):
        """Padded strings and digit separators are left unchanged."""
        assert coerce_value(text, "float") == text

    def test_string_conversion_uses_default_form(self):
        """Values are stringified with the default string form."""
        assert coerce_value(123.0, "string") == "123"
        assert coerce_value(True, "string") == "true"
        assert coerce_value({"a": 1}, "string") == '{"a":1}'

    @pytest.mark.parametrize("declared", ["bool", "boolean"])
    def test_bool_conversions(self, declared):
        """Go-style boolean spellings are parsed; others are unchanged."""
        assert coerce_value("true", declared) is True
        assert coerce_value("F", declared) is False
        assert coerce_value("0", declared) is False
        assert coerce_value("yes", declared) == "yes"
        assert coerce_value(True, declared) is True

    @pytest.mark.parametrize("declared", ["array", "slice", "object", "map", "uuid"])
    def test_passthrough_types(self, declared):
        """Container and unknown types pass values through."""
        value = {"k": [1]}
        assert coerce_value(value, declared) is value

    def test_none_unchanged(self):
        """None is never coerced."""
        assert coerce_value(None, "int") is None


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_spellings(self, text):
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false_spellings(self, text):
        assert parse_bool(text) is False

    def test_other_text(self):
        assert parse_bool("tRuE") is None


class TestCoerceBody:
    """Tests for coerce_body."""

    def test_top_level_and_nested_fields(self):
        """Dotted paths address nested fields."""
        body = {"id": "123", "user": {"age": "30", "active": "true"}}
        schema = {"id": "int", "user.age": "int", "user.active": "bool"}
        assert coerce_body(body, schema) == {"id": 123, "user": {"age": 30, "active": True}}

    def test_original_not_modified(self):
        """Coercion works on a deep copy."""
        body = {"user": {"age": "30"}}
        coerce_body(body, {"user.age": "int"})
        assert body == {"user": {"age": "30"}}

    def test_unresolvable_paths_ignored(self):
        """Missing fields and non-mapping parents are skipped."""
        body = {"a": "1", "b": 5}
        assert coerce_body(body, {"zzz": "int", "b.c": "int", "a.x.y": "int"}) == body

    def test_non_mapping_body_returned_unchanged(self):
        """Only mapping bodies are coerced."""
        body = ["1", "2"]
        assert coerce_body(body, {"0": "int"}) is body

    def test_never_raises_on_bad_values(self):
        """Unconvertible values stay as they are."""
        body = {"n": "abc", "f": "x", "b": "maybe"}
        assert coerce_body(body, {"n": "int", "f": "float", "b": "bool"}) == body
