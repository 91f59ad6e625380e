"""Tests for volley.templating.fieldpath and volley.templating.values."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from volley.templating import (
    MISSING,
    JsonKind,
    extract_field_value,
    format_value,
    kind_of,
    parse_field_path,
)
from volley.templating.fieldpath import PathSegment


class _User(BaseModel):
    id: int
    tags: list[str]


@dataclass
class _Box:
    items: list[int]


class TestParseFieldPath:
    """Tests for parse_field_path."""

    def test_dotted_names(self):
        """Dots separate name segments."""
        assert parse_field_path("a.b.c") == [
            PathSegment("a"),
            PathSegment("b"),
            PathSegment("c"),
        ]

    def test_indices(self):
        """A bracketed index attaches to the preceding name."""
        assert parse_field_path("data.items[0].name") == [
            PathSegment("data"),
            PathSegment("items", 0),
            PathSegment("name"),
        ]

    def test_multiple_indices(self):
        """Consecutive indices become separate index-only segments."""
        assert parse_field_path("grid[1][2]") == [PathSegment("grid", 1), PathSegment("", 2)]

    def test_malformed_brackets_skipped(self):
        """Non-numeric bracket contents are ignored."""
        assert parse_field_path("items[x].name") == [
            PathSegment("items"),
            PathSegment("name"),
        ]

    def test_non_ascii_digits_not_indices(self):
        """Only ASCII digits form an index."""
        assert parse_field_path("items[١]") == [PathSegment("items")]

    def test_empty_segments_dropped(self):
        """Leading, trailing, and doubled dots produce no segments."""
        assert parse_field_path(".a..b.") == [PathSegment("a"), PathSegment("b")]


class TestExtractFieldValue:
    """Tests for extract_field_value."""

    payload = {
        "data": {
            "id": "123",
            "items": [{"name": "first", "children": [{"name": "c0"}, {"name": "c1"}]}],
            "empty": None,
        }
    }

    def test_nested_lookup(self):
        """Names and indices descend through the payload."""
        assert extract_field_value(self.payload, "data.id") == "123"
        assert extract_field_value(self.payload, "data.items[0].children[1].name") == "c1"

    def test_empty_path_returns_payload(self):
        """An empty path yields the payload itself."""
        assert extract_field_value(self.payload, "") is self.payload

    def test_missing_key(self):
        """An absent key yields MISSING."""
        assert extract_field_value(self.payload, "data.nope") is MISSING

    def test_out_of_range_index(self):
        """An out-of-range index yields MISSING."""
        assert extract_field_value(self.payload, "data.items[5]") is MISSING

    def test_index_into_mapping(self):
        """Indexing a mapping yields MISSING."""
        assert extract_field_value(self.payload, "data[0]") is MISSING

    def test_key_into_scalar(self):
        """Descending into a scalar yields MISSING."""
        assert extract_field_value(self.payload, "data.id.more") is MISSING

    def test_null_value_is_returned(self):
        """A JSON null is a value, distinct from MISSING."""
        assert extract_field_value(self.payload, "data.empty") is None

    def test_pydantic_model_reencoded(self):
        """Opaque pydantic models are re-encoded before descent."""
        user = _User(id=7, tags=["a", "b"])
        assert extract_field_value({"user": user}, "user.id") == 7
        assert extract_field_value({"user": user}, "user.tags[1]") == "b"

    def test_dataclass_reencoded(self):
        """Dataclasses are re-encoded before descent."""
        assert extract_field_value(_Box(items=[4, 5]), "items[1]") == 5

    def test_missing_is_falsy_singleton(self):
        """MISSING is a single falsy sentinel."""
        assert not MISSING
        assert repr(MISSING) == "MISSING"


class TestValues:
    """Tests for kind_of and format_value."""

    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, JsonKind.NULL),
            (True, JsonKind.BOOLEAN),
            (0, JsonKind.NUMBER),
            (1.5, JsonKind.NUMBER),
            ("s", JsonKind.STRING),
            ([1], JsonKind.SEQUENCE),
            ({"a": 1}, JsonKind.MAPPING),
            ((1, 2), JsonKind.OPAQUE),
        ],
    )
    def test_kind_of(self, value, kind):
        """Each value maps to exactly one kind; bool is not a number."""
        assert kind_of(value) is kind

    @pytest.mark.parametrize(
        ("value", "text"),
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (123.0, "123"),
            (1.5, "1.5"),
            (42, "42"),
            ("abc", "abc"),
            ({"a": [1, 2]}, '{"a":[1,2]}'),
            (["中"], '["中"]'),
        ],
    )
    def test_format_value(self, value, text):
        """Default string forms used when splicing values into text."""
        assert format_value(value) == text
