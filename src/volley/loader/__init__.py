"""Volley suite loader - YAML parsing, validation, error reporting, and loading."""

from volley.loader.errors import ErrorFormatter
from volley.loader.suite import SuiteLoadError, apply_overrides, filter_by_version, load_suite
from volley.loader.validator import (
    ValidationErrorDetail,
    validate_suite,
    validate_suite_file,
    validate_suite_string,
)
from volley.loader.yaml_parser import YAMLParseError, parse_yaml_file, parse_yaml_with_lines

__all__ = [
    "ErrorFormatter",
    "SuiteLoadError",
    "ValidationErrorDetail",
    "YAMLParseError",
    "apply_overrides",
    "filter_by_version",
    "load_suite",
    "parse_yaml_file",
    "parse_yaml_with_lines",
    "validate_suite",
    "validate_suite_file",
    "validate_suite_string",
]
