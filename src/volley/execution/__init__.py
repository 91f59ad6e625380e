"""Volley execution - ordering, coercion, retry, result store, and orchestration."""

from volley.execution.coercion import coerce_body, coerce_value
from volley.execution.orchestrator import Orchestrator, TestNotFoundError
from volley.execution.ordering import (
    DependencyCycleError,
    resolve_execution_order,
    sort_by_weight,
    topological_order,
)
from volley.execution.retry import AttemptOutcome, execute_with_retry
from volley.execution.store import ResultReader, ResultStore

__all__ = [
    "AttemptOutcome",
    "DependencyCycleError",
    "Orchestrator",
    "ResultReader",
    "ResultStore",
    "TestNotFoundError",
    "coerce_body",
    "coerce_value",
    "execute_with_retry",
    "resolve_execution_order",
    "sort_by_weight",
    "topological_order",
]
