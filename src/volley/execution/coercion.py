"""Best-effort request body type coercion driven by ``body_schema``.

After placeholders are substituted, values that came from earlier
responses or random generators are often strings. The schema maps
dotted field paths to declared types and each addressed value is
converted when that can be done losslessly. Coercion never raises:
anything it cannot convert is left as it is, and the stricter
pre-flight check in the HTTP client decides whether to send.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from volley.templating.values import format_value, is_whole_number

_INT_PATTERN = re.compile(r"[+-]?\d+")

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(text: str) -> bool | None:
    """Parse the boolean spellings accepted in suite files, else None."""
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    return None


def _to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # non-integral floats stay as they are
        return int(value) if is_whole_number(value) else value
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value):
        return int(value)
    return value


def _to_float(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        # float() also accepts surrounding whitespace and digit separators
        if value != value.strip() or "_" in value:
            return value
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _to_bool(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_bool(value)
        return value if parsed is None else parsed
    return value


def coerce_value(value: Any, declared_type: str) -> Any:
    """Convert a single value to ``declared_type`` if possible."""
    if value is None:
        return value

    if declared_type == "int":
        return _to_int(value)
    if declared_type in ("float", "float64"):
        return _to_float(value)
    if declared_type == "string":
        return format_value(value)
    if declared_type in ("bool", "boolean"):
        return _to_bool(value)
    # array/slice/object/map pass through, unknown types are ignored
    return value


def _coerce_path(data: dict[str, Any], field_path: str, declared_type: str) -> None:
    *parents, leaf = field_path.split(".")
    current: Any = data
    for part in parents:
        current = current.get(part)
        if not isinstance(current, dict):
            return
    if leaf in current:
        current[leaf] = coerce_value(current[leaf], declared_type)


def coerce_body(body: Any, schema: dict[str, str]) -> Any:
    """Return a copy of ``body`` with schema-declared fields converted.

    Only mapping bodies are coerced; any other body is returned as is.
    """
    if not isinstance(body, dict) or not schema:
        return body

    result = copy.deepcopy(body)
    for field_path, declared_type in schema.items():
        _coerce_path(result, field_path, declared_type)
    return result
