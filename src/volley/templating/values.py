"""Tagged classification of JSON-like payload values.

Payloads walked by the field path evaluator are generic trees of
mappings, sequences and scalars. ``kind_of`` tags each node once so
that descent logic can branch exhaustively on JsonKind instead of
sprinkling isinstance checks around. Anything that is not a plain
JSON value (pydantic models, dataclasses, tuples...) is OPAQUE and
can be normalized with ``reencode``.
"""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


class JsonKind(str, Enum):
    """The shape of a payload node."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OPAQUE = "opaque"


def kind_of(value: Any) -> JsonKind:
    """Classify a value. ``bool`` is checked before numbers on purpose."""
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.SEQUENCE
    if isinstance(value, dict):
        return JsonKind.MAPPING
    return JsonKind.OPAQUE


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def reencode(value: Any) -> Any:
    """Round-trip a value through JSON to get a plain mapping/sequence tree.

    Returns None if the value cannot be encoded.
    """
    try:
        return json.loads(json.dumps(value, default=_to_jsonable))
    except (TypeError, ValueError):
        return None


def is_whole_number(value: Any) -> bool:
    """True for floats with no fractional part (and not inf/nan)."""
    return (
        isinstance(value, float)
        and value == value
        and value not in (float("inf"), float("-inf"))
        and value.is_integer()
    )


def format_value(value: Any) -> str:
    """Default string form used when a value is spliced into text.

    Booleans render as ``true``/``false``, whole floats drop their
    ``.0``, containers render as compact JSON.
    """
    kind = kind_of(value)
    if kind is JsonKind.NULL:
        return ""
    if kind is JsonKind.BOOLEAN:
        return "true" if value else "false"
    if kind is JsonKind.NUMBER:
        if is_whole_number(value):
            return str(int(value))
        return str(value)
    if kind is JsonKind.STRING:
        return value
    if kind in (JsonKind.SEQUENCE, JsonKind.MAPPING):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)
