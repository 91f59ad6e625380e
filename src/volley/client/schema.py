"""Strict pre-flight validation of a request body against ``body_schema``.

Unlike coercion, this check rejects: every declared field must exist,
be non-null, and already have the declared type.
"""

from __future__ import annotations

from typing import Any

from volley.client.base import BodySchemaError
from volley.templating.values import JsonKind, is_whole_number, kind_of, reencode

_MISSING = object()


def _type_name(value: Any) -> str:
    kind = kind_of(value)
    if kind is JsonKind.NUMBER:
        return "int" if isinstance(value, int) else "float"
    return {
        JsonKind.NULL: "null",
        JsonKind.BOOLEAN: "bool",
        JsonKind.STRING: "string",
        JsonKind.SEQUENCE: "array",
        JsonKind.MAPPING: "object",
    }.get(kind, type(value).__name__)


def get_nested_value(data: dict[str, Any], path: str) -> Any:
    """Follow a dotted path through nested mappings; ``_MISSING`` if absent."""
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def validate_field_type(field: str, value: Any, expected_type: str) -> None:
    """Check one value against its declared type.

    Raises:
        BodySchemaError: On a null value, a mismatch, or an unsupported type.
    """
    if value is None:
        raise BodySchemaError(field, f"field '{field}' is null, expected type '{expected_type}'")

    actual = _type_name(value)

    if expected_type == "int":
        ok = actual == "int" or (actual == "float" and is_whole_number(value))
    elif expected_type in ("float", "float64"):
        ok = actual == "float"
    elif expected_type == "string":
        ok = actual == "string"
    elif expected_type in ("bool", "boolean"):
        ok = actual == "bool"
    elif expected_type in ("array", "slice"):
        ok = actual == "array"
    elif expected_type in ("object", "map"):
        ok = actual == "object"
    else:
        raise BodySchemaError(field, f"unsupported type '{expected_type}' for field '{field}'")

    if not ok:
        raise BodySchemaError(
            field, f"field '{field}' has type '{actual}', expected '{expected_type}'"
        )


def validate_body_schema(body: Any, schema: dict[str, str]) -> None:
    """Validate every schema field of ``body``.

    Raises:
        BodySchemaError: On the first field that is missing or mistyped.
    """
    data = body if isinstance(body, dict) else reencode(body)
    if not isinstance(data, dict):
        raise BodySchemaError("<body>", "request body must be an object to apply body_schema")

    for field, expected_type in schema.items():
        value = get_nested_value(data, field)
        if value is _MISSING:
            raise BodySchemaError(field, f"field '{field}' not found in request body")
        validate_field_type(field, value, expected_type)
