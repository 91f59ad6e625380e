"""Attempt loop for a single test: send, validate, retry.

A transport failure and a failed validation both consume an attempt.
The loop stops on the first attempt whose validation passes. A body
schema violation is not retried: the request would be rejected the
same way every time.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from volley.client.base import BaseClient, BodySchemaError, ClientError
from volley.evaluation.validator import ResponseValidator
from volley.models.result import HTTPResponse, ValidationResult
from volley.models.testcase import RequestSpec, ResponseExpectation, RetryPolicy

logger = structlog.get_logger(__name__)


@dataclass
class AttemptOutcome:
    """What the attempt loop produced for one test."""

    passed: bool = False
    response: HTTPResponse | None = None
    validation: ValidationResult | None = None
    error: str | None = None
    retry_count: int = 0
    duration: float = 0.0


def attempt_count(policy: RetryPolicy) -> int:
    """Total attempts allowed: ``max_retries + 1``, or exactly 1 with no retries."""
    return policy.max_retries + 1 if policy.max_retries > 0 else 1


async def execute_with_retry(
    client: BaseClient,
    request: RequestSpec,
    expectation: ResponseExpectation,
    policy: RetryPolicy,
    test_name: str = "",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AttemptOutcome:
    """Run the attempt loop for one resolved request.

    Args:
        client: Client used to send the request.
        request: The request after templating and coercion.
        expectation: Expected response, checked by ResponseValidator.
        policy: Retry count and interval.
        test_name: Used only for log context.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        AttemptOutcome. On exhaustion the last transport error (if any)
        is kept in ``error``; otherwise only the failed validation is set.
    """
    outcome = AttemptOutcome()
    validator = ResponseValidator(expectation)
    attempts = attempt_count(policy)
    last_error: str | None = None
    log = logger.bind(test=test_name)

    for attempt in range(attempts):
        if attempt > 0:
            outcome.retry_count += 1
            if policy.interval > 0:
                await sleep(policy.interval)

        start = time.perf_counter()
        try:
            response = await client.send(request)
        except BodySchemaError as exc:
            outcome.duration = time.perf_counter() - start
            outcome.error = f"body schema validation failed: {exc}"
            log.warning("body_schema_rejected", field=exc.field, error=str(exc))
            return outcome
        except ClientError as exc:
            outcome.duration = time.perf_counter() - start
            last_error = str(exc)
            log.info("attempt_failed", attempt=attempt + 1, attempts=attempts, error=last_error)
            continue
        outcome.duration = time.perf_counter() - start

        outcome.response = response
        outcome.validation = validator.validate(response)
        if outcome.validation.passed:
            outcome.passed = True
            return outcome

        log.info(
            "attempt_failed",
            attempt=attempt + 1,
            attempts=attempts,
            status_code=response.status_code,
            errors=len(outcome.validation.errors),
        )

    outcome.error = last_error
    return outcome
