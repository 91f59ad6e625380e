"""Suite configuration model.

Captures the top-level fields of a volley suite file: target
base URL and version, TLS material, timeout, global headers, and
the ordered list of API tests.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from volley.models.duration import parse_duration
from volley.models.testcase import ApiTest

DEFAULT_TIMEOUT_SECONDS = 30.0


class CertificateConfig(BaseModel):
    """Client certificate, key, and CA bundle paths for TLS."""

    model_config = {"extra": "forbid"}

    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""


class SuiteConfig(BaseModel):
    """A complete suite file: run-level settings plus its tests."""

    model_config = {"extra": "forbid"}

    base_url: str = ""
    version: str = ""
    certificate: CertificateConfig = Field(default_factory=CertificateConfig)
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    headers: dict[str, str] = Field(default_factory=dict)
    apis: list[ApiTest] = Field(default_factory=list)

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> float:
        seconds = parse_duration(value)
        return seconds if seconds > 0 else DEFAULT_TIMEOUT_SECONDS

    @field_validator("version", mode="before")
    @classmethod
    def _version_to_str(cls, value: Any) -> Any:
        # "version: 2" in YAML parses as an int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return "" if value is None else value

    @model_validator(mode="after")
    def _unique_names(self) -> SuiteConfig:
        seen: set[str] = set()
        for api in self.apis:
            if api.name in seen:
                raise ValueError(f"duplicate test name '{api.name}'")
            seen.add(api.name)
        return self

    def test_names(self) -> list[str]:
        """Names of all tests in declaration order."""
        return [api.name for api in self.apis]

    def find_test(self, name: str) -> ApiTest | None:
        """Look up a test by name."""
        for api in self.apis:
            if api.name == name:
                return api
        return None
