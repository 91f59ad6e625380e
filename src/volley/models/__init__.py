"""volley data models - re-exports all public model classes."""

from volley.models.result import (
    ExecutionResult,
    FieldError,
    HTTPResponse,
    RunReport,
    ValidationResult,
)
from volley.models.suite import CertificateConfig, SuiteConfig
from volley.models.testcase import (
    ApiTest,
    RequestSpec,
    ResponseExpectation,
    RetryPolicy,
    ValidatorRule,
)

__all__ = [
    "ApiTest",
    "CertificateConfig",
    "ExecutionResult",
    "FieldError",
    "HTTPResponse",
    "RequestSpec",
    "ResponseExpectation",
    "RetryPolicy",
    "RunReport",
    "SuiteConfig",
    "ValidationResult",
    "ValidatorRule",
]
