"""Dependency resolver: turns a test list into an execution order.

Higher weight runs earlier (stable for ties), and a test always runs
after the test named in its ``depends_on``. A dependency cycle is not
fatal: the weight-sorted order is returned unchanged and the tests in
the cycle end up skipped at execution time.
"""

from __future__ import annotations

import structlog

from volley.models.testcase import ApiTest

logger = structlog.get_logger(__name__)


class DependencyCycleError(Exception):
    """Raised internally when the topological walk revisits an in-progress test.

    Attributes:
        name: The test at which the cycle was detected.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"dependency cycle detected at '{name}'")


def sort_by_weight(apis: list[ApiTest]) -> list[ApiTest]:
    """Return tests sorted by weight, highest first, ties in declaration order."""
    return sorted(apis, key=lambda api: -api.weight)


def topological_order(apis: list[ApiTest]) -> list[ApiTest]:
    """Depth-first topological sort seeded by the given order.

    Dependencies that name an unknown test are ignored here.

    Raises:
        DependencyCycleError: If the dependency graph contains a cycle.
    """
    index_by_name = {api.name: idx for idx, api in enumerate(apis)}
    visited: set[int] = set()
    visiting: set[int] = set()
    order: list[ApiTest] = []

    for start in range(len(apis)):
        # walk the depends_on chain with an explicit stack; each test has
        # at most one dependency, so the chain is a simple path
        stack = [start]
        while stack:
            idx = stack[-1]
            if idx in visited:
                stack.pop()
                continue
            if idx not in visiting:
                visiting.add(idx)
                dep_name = apis[idx].depends_on
                dep_idx = index_by_name.get(dep_name) if dep_name is not None else None
                if dep_idx is not None and dep_idx not in visited:
                    if dep_idx in visiting:
                        raise DependencyCycleError(apis[dep_idx].name)
                    stack.append(dep_idx)
                    continue
            stack.pop()
            visiting.discard(idx)
            visited.add(idx)
            order.append(apis[idx])

    return order


def resolve_execution_order(apis: list[ApiTest]) -> list[ApiTest]:
    """Compute the sequential execution order for a suite.

    Falls back to the weight-sorted order when a cycle is found.
    """
    weighted = sort_by_weight(apis)
    try:
        return topological_order(weighted)
    except DependencyCycleError as exc:
        logger.warning(
            "dependency_cycle_detected",
            test=exc.name,
            fallback="weight_order",
        )
        return weighted
