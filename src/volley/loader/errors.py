"""Formatting of suite validation errors for terminals and CI logs.

Human mode renders an annotated source excerpt per error; CI mode
renders one ``file:line:col -- field: message`` line per error.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from volley.loader.validator import ValidationErrorDetail


ERROR_CODES: dict[str, str] = {
    "extra_forbidden": "E001",
    "missing": "E002",
    "value_error": "E003",
    "greater_than_equal": "E003",
    "string_too_short": "E003",
    "string_type": "E004",
    "int_type": "E004",
    "int_parsing": "E004",
    "int_from_float": "E004",
    "float_type": "E004",
    "float_parsing": "E004",
    "bool_type": "E004",
    "bool_parsing": "E004",
    "dict_type": "E004",
    "list_type": "E004",
    "model_type": "E004",
    "yaml_syntax_error": "E005",
    "empty_file": "E006",
    "empty_input": "E006",
}

ERROR_DESCRIPTIONS: dict[str, str] = {
    "E001": "unknown field",
    "E002": "required field missing",
    "E003": "invalid value",
    "E004": "type mismatch",
    "E005": "YAML syntax error",
    "E006": "empty suite",
}


def ci_mode_from_env() -> bool:
    return os.environ.get("CI", "").lower() in ("true", "1", "yes")


def error_code(error_type: str) -> str:
    """Map a pydantic or loader error type to a stable code (E999 if unknown)."""
    return ERROR_CODES.get(error_type, "E999")


class ErrorFormatter:
    """Renders ValidationErrorDetail lists.

    Args:
        ci_mode: Force CI output on or off; None reads the ``CI`` env var.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        self.ci_mode = ci_mode_from_env() if ci_mode is None else ci_mode

    def format_error(
        self,
        error: ValidationErrorDetail,
        source_lines: list[str],
        filename: str,
    ) -> str:
        if self.ci_mode:
            return self._format_ci(error, filename)
        return self._format_annotated(error, source_lines, filename)

    def _format_ci(self, error: ValidationErrorDetail, filename: str) -> str:
        hint = f" ({error.suggestion})" if error.suggestion else ""
        return (
            f"{filename}:{error.line or 0}:{error.col or 0} -- "
            f"{error.field}: {error.message}{hint}"
        )

    def _format_annotated(
        self,
        error: ValidationErrorDetail,
        source_lines: list[str],
        filename: str,
    ) -> str:
        """Render one error with a source excerpt, e.g.::

            error[E001]: unknown field
              --> suite.yaml:4:5
               |
             4 |     reqest:
               |     ^^^^^^ Extra inputs are not permitted
               |
               = help: Did you mean 'request'?
        """
        code = error_code(error.type)
        out = [f"error[{code}]: {ERROR_DESCRIPTIONS.get(code, 'validation error')}"]

        index = error.line - 1 if error.line is not None else -1
        if 0 <= index < len(source_lines):
            out.append(f"  --> {filename}:{error.line}:{error.col or 1}")
            out.append("   |")
            text = source_lines[index].rstrip()
            number = str(error.line)
            gutter = " " * len(number)
            out.append(f" {number} | {text}")
            name = error.field.rsplit(".", 1)[-1]
            start = text.find(name)
            if start >= 0:
                out.append(f" {gutter} | {' ' * start}{'^' * len(name)} {error.message}")
            else:
                out.append(f" {gutter} | {error.message}")
        else:
            location = f"{filename}:{error.line}" if error.line is not None else filename
            out.append(f"  --> {location}")
            out.append("   |")
            out.append(f"   | {error.field}: {error.message}")
        out.append("   |")

        if error.suggestion:
            out.append(f"   = help: {error.suggestion}")
        return "\n".join(out)

    def format_all(
        self,
        errors: list[ValidationErrorDetail],
        source: str,
        filename: str,
    ) -> str:
        """Format every error, separated by blank lines."""
        lines = source.splitlines()
        return "\n\n".join(self.format_error(e, lines, filename) for e in errors)
