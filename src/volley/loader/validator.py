"""Suite validation: YAML parsing followed by pydantic model validation.

Every problem found in a suite file is collected as a
ValidationErrorDetail carrying its source position, so a single
``volley validate`` run can report all of them at once.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from volley.loader.yaml_parser import (
    Position,
    YAMLParseError,
    parse_yaml_file,
    parse_yaml_with_lines,
)
from volley.models.suite import CertificateConfig, SuiteConfig
from volley.models.testcase import (
    ApiTest,
    RequestSpec,
    ResponseExpectation,
    RetryPolicy,
    ValidatorRule,
)

# Known field names per nesting level, for "did you mean" hints
_SECTION_MODELS: dict[str, type[BaseModel]] = {
    "certificate": CertificateConfig,
    "request": RequestSpec,
    "response": ResponseExpectation,
    "retry_policy": RetryPolicy,
    "validators": ValidatorRule,
}


@dataclass
class ValidationErrorDetail:
    """One problem in a suite file.

    Attributes:
        field: Dotted path of the offending field.
        message: Human-readable description.
        type: pydantic error type, or a loader type such as ``yaml_syntax_error``.
        line: 1-indexed line in the source, if known.
        col: 1-indexed column in the source, if known.
        suggestion: A "did you mean" hint for unknown fields.
        input_value: The rejected input, if any.
    """

    field: str
    message: str
    type: str
    line: int | None = None
    col: int | None = None
    suggestion: str | None = None
    input_value: Any = field(default=None)


def _field_path(loc: tuple[str | int, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _position_for(path: str, positions: dict[str, Position]) -> tuple[int | None, int | None]:
    """Position of ``path`` or of its nearest recorded ancestor."""
    parts = path.split(".")
    while parts:
        candidate = ".".join(parts)
        if candidate in positions:
            return positions[candidate]
        parts.pop()
    return None, None


def _model_for(loc: tuple[str | int, ...]) -> type[BaseModel]:
    """Pick the model whose fields are valid at the parent of ``loc``."""
    names = [part for part in loc[:-1] if isinstance(part, str)]
    if not names:
        return SuiteConfig
    parent = names[-1]
    if parent == "apis":
        return ApiTest
    return _SECTION_MODELS.get(parent, SuiteConfig)


def _suggest(loc: tuple[str | int, ...]) -> str | None:
    if not loc:
        return None
    candidates = list(_model_for(loc).model_fields)
    matches = difflib.get_close_matches(str(loc[-1]), candidates, n=1, cutoff=0.6)
    if matches:
        return f"Did you mean '{matches[0]}'?"
    return None


def validate_suite(
    raw_data: dict[str, Any],
    positions: dict[str, Position],
) -> tuple[SuiteConfig | None, list[ValidationErrorDetail]]:
    """Validate parsed YAML against SuiteConfig.

    Returns:
        ``(config, [])`` on success, ``(None, errors)`` otherwise.
    """
    try:
        return SuiteConfig.model_validate(raw_data), []
    except ValidationError as exc:
        errors: list[ValidationErrorDetail] = []
        for err in exc.errors():
            loc = tuple(err.get("loc", ()))
            path = _field_path(loc) or "<suite>"
            error_type = err.get("type", "unknown")
            line, col = _position_for(path, positions)
            errors.append(
                ValidationErrorDetail(
                    field=path,
                    message=err.get("msg", "Validation error"),
                    type=error_type,
                    line=line,
                    col=col,
                    suggestion=_suggest(loc) if error_type == "extra_forbidden" else None,
                    input_value=err.get("input"),
                )
            )
        return None, errors


def _yaml_error(exc: YAMLParseError) -> ValidationErrorDetail:
    return ValidationErrorDetail(
        field="<yaml>",
        message=exc.message,
        type="yaml_syntax_error",
        line=exc.line,
        col=exc.column,
    )


def validate_suite_file(filepath: Path) -> tuple[SuiteConfig | None, list[ValidationErrorDetail]]:
    """Parse and validate a suite file.

    Raises:
        OSError: If the file cannot be read.
    """
    try:
        raw_data, positions = parse_yaml_file(filepath)
    except YAMLParseError as exc:
        return None, [_yaml_error(exc)]

    if raw_data is None:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message="File is empty or is not a YAML mapping",
                type="empty_file",
            )
        ]
    return validate_suite(raw_data, positions)


def validate_suite_string(
    source: str,
    filename: str = "<string>",
    base_dir: Path | None = None,
) -> tuple[SuiteConfig | None, list[ValidationErrorDetail]]:
    """Parse and validate suite YAML held in a string."""
    try:
        raw_data, positions = parse_yaml_with_lines(source, filename=filename, base_dir=base_dir)
    except YAMLParseError as exc:
        return None, [_yaml_error(exc)]

    if raw_data is None:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message="Input is empty or is not a YAML mapping",
                type="empty_input",
            )
        ]
    return validate_suite(raw_data, positions)
