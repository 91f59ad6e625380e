"""Response validator: checks an HTTPResponse against a ResponseExpectation.

Checks run in a fixed order (status code, headers, body substrings,
body fields, custom rules) and every failure is collected rather than
stopping at the first one.
"""

from __future__ import annotations

import json
import re
from typing import Any

import jmespath
import jmespath.exceptions

from volley.models.result import HTTPResponse, ValidationResult
from volley.models.testcase import ResponseExpectation, ValidatorRule
from volley.templating.values import JsonKind, format_value, is_whole_number, kind_of

# Accepted spellings for the "type" rule, keyed by JSON kind
TYPE_ALIASES: dict[JsonKind, frozenset[str]] = {
    JsonKind.NULL: frozenset({"null", "nil", "none"}),
    JsonKind.BOOLEAN: frozenset({"bool", "boolean"}),
    JsonKind.NUMBER: frozenset({"number", "float", "float64"}),
    JsonKind.STRING: frozenset({"string", "str"}),
    JsonKind.SEQUENCE: frozenset({"array", "list", "slice", "[]interface{}"}),
    JsonKind.MAPPING: frozenset({"object", "dict", "map", "map[string]interface{}"}),
}


def lookup_field(data: Any, path: str) -> Any:
    """Query ``data`` with a JMESPath expression.

    Falls back to a plain dotted-key walk when the path is not valid
    JMESPath (keys with dashes, non-ASCII names...).
    """
    if data is None:
        return None
    try:
        return jmespath.search(path, data)
    except jmespath.exceptions.JMESPathError:
        current = data
        for part in path.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current


def _normalize(value: Any) -> Any:
    kind = kind_of(value)
    if kind is JsonKind.NUMBER and is_whole_number(value):
        return int(value)
    if kind is JsonKind.MAPPING:
        return {str(k): _normalize(v) for k, v in value.items()}
    if kind is JsonKind.SEQUENCE:
        return [_normalize(v) for v in value]
    return value


def values_equal(expected: Any, actual: Any) -> bool:
    """Compare two values by their canonical JSON encoding."""
    if expected is None or actual is None:
        return expected is None and actual is None
    try:
        return json.dumps(_normalize(expected), sort_keys=True) == json.dumps(
            _normalize(actual), sort_keys=True
        )
    except (TypeError, ValueError):
        return expected == actual


def matches_type(value: Any, expected_type: str) -> bool:
    """Check a value against a type name from a ``type`` rule."""
    wanted = expected_type.replace(" ", "").lower()
    kind = kind_of(value)
    if kind is JsonKind.NUMBER and wanted in ("int", "integer", "int64"):
        return isinstance(value, int) or is_whole_number(value)
    return wanted in TYPE_ALIASES.get(kind, frozenset())


def check_rule(rule: ValidatorRule, body_json: Any) -> str | None:
    """Evaluate a single custom rule; return an error message or None."""
    actual = lookup_field(body_json, rule.field)
    expected = rule.expected
    rule_type = rule.type.lower()

    if rule_type in ("equals", "equal", "eq"):
        if not values_equal(expected, actual):
            return f"expected {format_value(expected)}, got {format_value(actual)}"
        return None

    if rule_type == "contains":
        field_str = format_value(actual)
        expected_str = format_value(expected)
        if expected_str not in field_str:
            return f"expected to contain '{expected_str}', got '{field_str}'"
        return None

    if rule_type in ("regex", "regexp"):
        field_str = format_value(actual)
        pattern = format_value(expected)
        try:
            matched = re.search(pattern, field_str) is not None
        except re.error as exc:
            return f"invalid regex pattern: {exc}"
        if not matched:
            return f"value '{field_str}' does not match pattern '{pattern}'"
        return None

    if rule_type in ("not_empty", "notempty"):
        if actual is None or actual == "":
            return "field should not be empty"
        return None

    if rule_type == "type":
        expected_type = format_value(expected)
        if actual is None:
            return f"expected type {expected_type}, got null"
        if not matches_type(actual, expected_type):
            return f"expected type {expected_type}, got {kind_of(actual).value}"
        return None

    return f"unknown validator type: {rule.type}"


class ResponseValidator:
    """Validates responses against one test's expectation."""

    def __init__(self, expectation: ResponseExpectation) -> None:
        self.expectation = expectation

    def validate(self, response: HTTPResponse) -> ValidationResult:
        result = ValidationResult()
        self._check_status(response, result)
        self._check_headers(response, result)
        self._check_body_contains(response, result)
        self._check_body_excludes(response, result)
        self._check_body_fields(response, result)
        self._check_rules(response, result)
        return result

    def _check_status(self, response: HTTPResponse, result: ValidationResult) -> None:
        expected = self.expectation.status_code
        if expected and response.status_code != expected:
            result.add_error(
                "StatusCode",
                f"Expected status code {expected}, got {response.status_code}",
                expected=expected,
                actual=response.status_code,
            )

    def _check_headers(self, response: HTTPResponse, result: ValidationResult) -> None:
        for key, expected in self.expectation.headers.items():
            actual = response.header(key)
            if actual != expected:
                result.add_error(
                    f"Header[{key}]",
                    f"Expected header {key}={expected}, got {actual}",
                    expected=expected,
                    actual=actual,
                )

    def _check_body_contains(self, response: HTTPResponse, result: ValidationResult) -> None:
        text = response.text
        for content in self.expectation.body_contains:
            if content not in text:
                result.add_error(
                    "Body",
                    f"Response body should contain '{content}'",
                    expected=f"contains '{content}'",
                    actual="not found",
                )

    def _check_body_excludes(self, response: HTTPResponse, result: ValidationResult) -> None:
        text = response.text
        for content in self.expectation.body_excludes:
            if content in text:
                result.add_error(
                    "Body",
                    f"Response body should not contain '{content}'",
                    expected=f"excludes '{content}'",
                    actual="found",
                )

    def _check_body_fields(self, response: HTTPResponse, result: ValidationResult) -> None:
        if not self.expectation.body:
            return
        if response.body_json is None:
            result.add_error("Body", "Expected JSON response, but got non-JSON content")
            return
        for field, expected in self.expectation.body.items():
            actual = lookup_field(response.body_json, field)
            if not values_equal(expected, actual):
                result.add_error(
                    f"Body.{field}",
                    f"Field '{field}': expected {format_value(expected)}, got {format_value(actual)}",
                    expected=expected,
                    actual=actual,
                )

    def _check_rules(self, response: HTTPResponse, result: ValidationResult) -> None:
        for rule in self.expectation.validators:
            message = check_rule(rule, response.body_json)
            if message is not None:
                result.add_error(rule.field, message, expected=rule.expected)
