"""Result data models for volley run outputs.

These models encode the execution output contract: the HTTP response
captured for a test, the validator's verdict, the per-test execution
result, and the aggregate run report.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer

from volley.models.testcase import RequestSpec


class HTTPResponse(BaseModel):
    """A response returned by the HTTP client."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    body_json: Any = None
    duration: float = 0.0

    @field_serializer("body")
    def _serialize_body(self, body: bytes) -> str:
        return body.decode("utf-8", errors="replace")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def header(self, name: str) -> str:
        """Case-insensitive header lookup; empty string when absent."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return ""


class FieldError(BaseModel):
    """A single failed expectation reported by the validator."""

    field: str
    expected: Any = None
    actual: Any = None
    message: str = ""


class ValidationResult(BaseModel):
    """Outcome of validating a response against its expectation."""

    passed: bool = True
    errors: list[FieldError] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def add_error(
        self,
        field: str,
        message: str,
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        self.passed = False
        self.errors.append(
            FieldError(field=field, expected=expected, actual=actual, message=message)
        )


class ExecutionResult(BaseModel):
    """Outcome of one test, aggregating all of its retry attempts.

    ``request`` is the request actually sent, after placeholder
    substitution and schema coercion. For skipped tests it is the
    untouched template.
    """

    name: str
    description: str = ""
    version: str | None = None
    passed: bool = False
    skipped: bool = False
    skip_reason: str = ""
    root_cause: str | None = None
    duration: float = 0.0
    status_code: int = 0
    request: RequestSpec
    response: HTTPResponse | None = None
    validation: ValidationResult | None = None
    error: str | None = None
    retry_count: int = 0
    executed_at: datetime

    @property
    def failed(self) -> bool:
        """True when the test ran and did not pass."""
        return not self.passed and not self.skipped


class RunReport(BaseModel):
    """Aggregate report for one run, results in execution order."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: float = 0.0
    results: list[ExecutionResult] = Field(default_factory=list)
    start_time: datetime
    end_time: datetime | None = None
    version: str = ""
    base_url: str = ""
    config_name: str = ""

    def record(self, result: ExecutionResult) -> None:
        """Append a result and bump the matching counter."""
        self.results.append(result)
        self.total += 1
        if result.skipped:
            self.skipped += 1
        elif result.passed:
            self.passed += 1
        else:
            self.failed += 1

    def finalize(self, end_time: datetime) -> None:
        self.end_time = end_time
        self.duration = (end_time - self.start_time).total_seconds()

    @property
    def success_rate(self) -> float:
        """Passed tests as a percentage of all recorded tests."""
        return self.passed / self.total * 100 if self.total else 0.0
