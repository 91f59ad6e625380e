"""Templating: placeholder resolution, field paths, and random values."""

from volley.templating.engine import PLACEHOLDER, TemplateEngine, find_placeholders
from volley.templating.fieldpath import MISSING, extract_field_value, parse_field_path
from volley.templating.random_values import generate_random_value
from volley.templating.values import JsonKind, format_value, kind_of

__all__ = [
    "MISSING",
    "PLACEHOLDER",
    "JsonKind",
    "TemplateEngine",
    "extract_field_value",
    "find_placeholders",
    "format_value",
    "generate_random_value",
    "kind_of",
    "parse_field_path",
]
