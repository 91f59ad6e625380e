"""Test definition models for volley suite files.

These models encode the user-facing YAML contract for a single API
test: the request template, the response expectation, and the
retry policy.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from volley.models.duration import parse_duration


def _stringify_headers(value: Any) -> Any:
    """YAML scalars in header maps (ints, bools) become header strings."""
    if not isinstance(value, dict):
        return value
    result: dict[Any, Any] = {}
    for key, item in value.items():
        if isinstance(item, bool):
            result[key] = "true" if item else "false"
        elif isinstance(item, (int, float)):
            result[key] = str(item)
        else:
            result[key] = item
    return result


class RequestSpec(BaseModel):
    """Request template for a test, possibly containing ``{{...}}`` placeholders."""

    model_config = {"extra": "forbid", "frozen": True}

    method: str = "GET"
    path: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    body_schema: dict[str, str] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        return _stringify_headers(value)


class ValidatorRule(BaseModel):
    """A custom field assertion evaluated against the JSON response body."""

    model_config = {"extra": "forbid", "frozen": True}

    type: str
    field: str = ""
    value: Any = None
    expect: Any = None

    @property
    def expected(self) -> Any:
        """Expected value, ``value`` taking precedence over its ``expect`` alias."""
        return self.value if self.value is not None else self.expect


class ResponseExpectation(BaseModel):
    """What a response must look like for the test to pass."""

    model_config = {"extra": "forbid", "frozen": True}

    status_code: int = 0
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)
    body_contains: list[str] = Field(default_factory=list)
    body_excludes: list[str] = Field(default_factory=list)
    validators: list[ValidatorRule] = Field(default_factory=list)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        return _stringify_headers(value)


class RetryPolicy(BaseModel):
    """Retry settings; ``interval`` is stored in seconds."""

    model_config = {"extra": "forbid", "frozen": True}

    max_retries: int = Field(default=0, ge=0)
    interval: float = 0.0

    @field_validator("interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: Any) -> float:
        return parse_duration(value)


class ApiTest(BaseModel):
    """A single named API test loaded from a suite file.

    ``depends_on`` may name a test that does not exist; that is handled
    at execution time by skipping, not rejected at load time.
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(min_length=1)
    description: str = ""
    version: str | None = None
    versions: list[str] = Field(default_factory=list)
    weight: int = 0
    depends_on: str | None = None
    request: RequestSpec = Field(default_factory=RequestSpec)
    response: ResponseExpectation = Field(default_factory=ResponseExpectation)
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @field_validator("depends_on", "version", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("versions", mode="before")
    @classmethod
    def _versions_to_str(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [
                str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v
                for v in value
            ]
        return value

    def applies_to(self, target_version: str | None) -> bool:
        """Return True if this test should run against ``target_version``.

        Tests that declare no version at all apply to every version.
        """
        if self.version is None and not self.versions:
            return True
        if self.version is not None and self.version == target_version:
            return True
        return target_version in self.versions
