"""Placeholder substitution for request templates.

Placeholders are ``{{...}}`` expressions of two forms:

- ``{{$random.<kind>[.<param>]}}`` -- a freshly generated value.
- ``{{<test>[.request.|.response.]<field.path>}}`` -- data from an
  earlier test's stored result. Without a scope prefix the response
  body is used.

Two substitution rules exist. ``substitute_string`` always builds a
string and is used for paths, headers and mixed text.
``substitute_value`` is used for query and body values: a string that
is exactly one placeholder is replaced by the resolved value with its
native type preserved. An unresolvable placeholder is always left in
place as literal text.
"""

from __future__ import annotations

import copy
import re
from typing import TYPE_CHECKING, Any

import structlog

from volley.models.testcase import RequestSpec
from volley.templating.fieldpath import MISSING, extract_field_value
from volley.templating.random_values import generate_random_value
from volley.templating.values import JsonKind, format_value, is_whole_number, kind_of

if TYPE_CHECKING:
    from volley.execution.store import ResultReader

logger = structlog.get_logger(__name__)

PLACEHOLDER = re.compile(r"\{\{([^}]+)\}\}")

RANDOM_PREFIX = "$random"
REQUEST_SCOPE = "request."
RESPONSE_SCOPE = "response."


def find_placeholders(text: str) -> list[str]:
    """Return the inner expressions of all placeholders in ``text``."""
    return PLACEHOLDER.findall(text)


class TemplateEngine:
    """Resolves placeholders against stored results and random generators.

    Args:
        results: Read-only view of the run's result store.
    """

    def __init__(self, results: ResultReader) -> None:
        self._results = results

    def resolve(self, expression: str) -> Any:
        """Resolve a placeholder expression, or return MISSING."""
        expression = expression.strip()

        if expression.startswith(RANDOM_PREFIX):
            generated = generate_random_value(expression)
            return generated if generated else MISSING

        name, _, field_path = expression.partition(".")
        result = self._results.get(name)
        if result is None:
            return MISSING

        if field_path.startswith(REQUEST_SCOPE):
            field_path = field_path[len(REQUEST_SCOPE):]
            source = result.request.body
        else:
            if field_path.startswith(RESPONSE_SCOPE):
                field_path = field_path[len(RESPONSE_SCOPE):]
            if result.response is None:
                return MISSING
            source = result.response.body_json

        value = extract_field_value(source, field_path) if field_path else source
        if value is None:
            return MISSING
        return value

    def substitute_string(self, text: str) -> str:
        """Replace every resolvable placeholder with its string form."""

        def _replace(match: re.Match[str]) -> str:
            value = self.resolve(match.group(1))
            if value is MISSING:
                logger.debug("placeholder_unresolved", placeholder=match.group(0))
                return match.group(0)
            return format_value(value)

        return PLACEHOLDER.sub(_replace, text)

    def substitute_value(self, value: Any) -> Any:
        """Recursively substitute placeholders inside a JSON-like value."""
        kind = kind_of(value)
        if kind is JsonKind.STRING:
            return self._substitute_scalar_string(value)
        if kind is JsonKind.MAPPING:
            return {key: self.substitute_value(item) for key, item in value.items()}
        if kind is JsonKind.SEQUENCE:
            return [self.substitute_value(item) for item in value]
        return value

    def _substitute_scalar_string(self, text: str) -> Any:
        whole = PLACEHOLDER.fullmatch(text.strip())
        if whole is not None:
            value = self.resolve(whole.group(1))
            if value is not MISSING:
                if is_whole_number(value):
                    return int(value)
                return copy.deepcopy(value)
        return self.substitute_string(text)

    def render_request(self, request: RequestSpec) -> RequestSpec:
        """Return a copy of ``request`` with all placeholders substituted.

        The original request is never modified.
        """
        update: dict[str, Any] = {"path": self.substitute_string(request.path)}
        if request.query:
            update["query"] = self.substitute_value(request.query)
        if request.body is not None:
            update["body"] = self.substitute_value(request.body)
        if request.headers:
            update["headers"] = {
                key: self.substitute_string(value)
                for key, value in request.headers.items()
            }
        return request.model_copy(update=update)
