"""Field path evaluation over JSON-like payloads.

Paths are dot-separated names, each optionally followed by one or
more bracketed indices::

    data.items[0].children[1].name

Malformed bracket expressions are skipped rather than rejected, and
a path that cannot be followed yields MISSING instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from volley.templating.values import JsonKind, kind_of, reencode


class _Missing:
    """Sentinel for "path did not resolve" (distinct from a JSON null)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class PathSegment:
    """One step of a field path.

    A segment with ``index`` set first looks up ``name`` (if non-empty)
    and then indexes into the resulting sequence.
    """

    name: str
    index: int | None = None


def parse_field_path(path: str) -> list[PathSegment]:
    """Split a field path into segments.

    >>> parse_field_path("data.items[0].name")
    [PathSegment(name='data', index=None), PathSegment(name='items', index=0), PathSegment(name='name', index=None)]
    """
    segments: list[PathSegment] = []
    current: list[str] = []
    bracket: list[str] = []
    in_bracket = False

    for ch in path:
        if in_bracket:
            if ch == "]":
                in_bracket = False
                text = "".join(bracket)
                bracket.clear()
                if text.isascii() and text.isdigit():
                    segments.append(PathSegment(name="".join(current), index=int(text)))
                    current.clear()
            else:
                bracket.append(ch)
        elif ch == ".":
            if current:
                segments.append(PathSegment(name="".join(current)))
                current.clear()
        elif ch == "[":
            in_bracket = True
        else:
            current.append(ch)

    if current:
        segments.append(PathSegment(name="".join(current)))

    return segments


def _lookup_key(value: Any, key: str) -> Any:
    kind = kind_of(value)
    if kind is JsonKind.OPAQUE:
        value = reencode(value)
        kind = kind_of(value)
    if kind is JsonKind.MAPPING:
        return value.get(key, MISSING)
    return MISSING


def _lookup_index(value: Any, index: int) -> Any:
    kind = kind_of(value)
    if kind is JsonKind.OPAQUE:
        value = reencode(value)
        kind = kind_of(value)
    if kind is JsonKind.SEQUENCE and 0 <= index < len(value):
        return value[index]
    return MISSING


def extract_field_value(payload: Any, path: str) -> Any:
    """Follow ``path`` through ``payload``.

    Returns MISSING when any step fails. An empty path returns the
    payload itself.
    """
    current = payload
    for segment in parse_field_path(path):
        if segment.name:
            current = _lookup_key(current, segment.name)
            if current is MISSING:
                return MISSING
        if segment.index is not None:
            current = _lookup_index(current, segment.index)
            if current is MISSING:
                return MISSING
    return current
