"""Orchestrator: drives a suite run in sequential or concurrent mode.

Sequential mode runs tests in dependency-resolved order and gates each
test on its dependency's stored result. Concurrent mode runs every
test as an independent task behind a semaphore and does NOT evaluate
``depends_on``: it is a smoke-test mode, and suites that rely on data
from earlier tests should run sequentially.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from volley.client.base import BaseClient
from volley.execution.coercion import coerce_body
from volley.execution.ordering import resolve_execution_order
from volley.execution.retry import AttemptOutcome, execute_with_retry
from volley.execution.store import ResultReader, ResultStore
from volley.models.result import ExecutionResult, RunReport
from volley.models.suite import SuiteConfig
from volley.models.testcase import ApiTest, RequestSpec
from volley.templating.engine import TemplateEngine

logger = structlog.get_logger(__name__)


class TestNotFoundError(Exception):
    """Raised when a test is requested by a name the suite does not define."""

    __test__ = False

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"test '{name}' not found")


class Orchestrator:
    """Runs the tests of one suite against a client.

    The orchestrator owns the run's ResultStore and is the only code
    that writes to it; templating and root-cause tracing read through
    a ResultReader.

    Args:
        client: Client used to send requests.
        config: The loaded (and version-filtered) suite.
        config_name: Suite name recorded on the report.
        sleep: Awaitable sleep used between retries.
    """

    def __init__(
        self,
        client: BaseClient,
        config: SuiteConfig,
        config_name: str = "",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config
        self._config_name = config_name
        self._sleep = sleep
        self._store = ResultStore()
        self._templates = TemplateEngine(self._store.reader())

    @property
    def results(self) -> ResultReader:
        return self._store.reader()

    def test_names(self) -> list[str]:
        return self._config.test_names()

    def execution_order(self) -> list[ApiTest]:
        return resolve_execution_order(self._config.apis)

    def _new_report(self) -> RunReport:
        return RunReport(
            start_time=datetime.now(),
            version=self._config.version,
            base_url=self._config.base_url,
            config_name=self._config_name,
        )

    def _finish(self, report: RunReport) -> RunReport:
        report.finalize(datetime.now())
        logger.info(
            "run_finished",
            total=report.total,
            passed=report.passed,
            failed=report.failed,
            skipped=report.skipped,
            duration=round(report.duration, 3),
        )
        return report

    async def run_sequential(self) -> RunReport:
        """Run every test in dependency order and return the report."""
        report = self._new_report()
        order = self.execution_order()
        logger.info("run_started", mode="sequential", tests=len(order))

        for api in order:
            result = self._check_dependency(api)
            if result is None:
                result = await self._execute(api)
            self._store.put(result)
            report.record(result)

        return self._finish(report)

    async def run_concurrent(self, max_workers: int) -> RunReport:
        """Run every test as its own task, at most ``max_workers`` at a time.

        Tests start in declaration order and dependencies are ignored.
        Results appear in the report in completion order.
        """
        report = self._new_report()
        workers = max(1, max_workers)
        semaphore = asyncio.Semaphore(workers)
        lock = asyncio.Lock()
        logger.info(
            "run_started",
            mode="concurrent",
            tests=len(self._config.apis),
            workers=workers,
        )

        async def run_one(api: ApiTest) -> None:
            async with semaphore:
                result = await self._execute(api)
            self._store.put(result)
            async with lock:
                report.record(result)

        async with asyncio.TaskGroup() as tg:
            for api in self._config.apis:
                tg.create_task(run_one(api))

        return self._finish(report)

    async def run_one(self, name: str) -> ExecutionResult:
        """Run a single test by name, without dependency gating.

        Raises:
            TestNotFoundError: If the suite has no test with that name.
        """
        api = self._config.find_test(name)
        if api is None:
            raise TestNotFoundError(name)
        result = await self._execute(api)
        self._store.put(result)
        return result

    def find_root_cause(self, name: str) -> str:
        """Walk a chain of skipped tests back to the first real failure.

        Stops at a test with no result, a test that failed outright, a
        skipped test with no dependency of its own, a passed test, or a
        name already visited (a cycle).
        """
        visited: set[str] = set()
        current = name

        while True:
            if current in visited:
                return current
            visited.add(current)

            result = self._store.get(current)
            if result is None or not result.skipped:
                return current

            api = self._config.find_test(current)
            if api is None or api.depends_on is None:
                return current
            current = api.depends_on

    def _check_dependency(self, api: ApiTest) -> ExecutionResult | None:
        """Return a skipped result if ``api`` cannot run yet, else None."""
        dep_name = api.depends_on
        if dep_name is None:
            return None

        dep = self._store.get(dep_name)
        if dep is None:
            return self._skipped(
                api, f"dependency '{dep_name}' not found or not yet executed"
            )

        if dep.passed and not dep.skipped:
            return None

        status = "was skipped" if dep.skipped else "failed"
        root_cause = self.find_root_cause(dep_name)
        reason = f"dependency '{dep_name}' {status}"
        if root_cause != dep_name:
            reason += f" (root cause: '{root_cause}' failed)"
        return self._skipped(api, reason, root_cause=root_cause)

    def _skipped(
        self,
        api: ApiTest,
        reason: str,
        root_cause: str | None = None,
    ) -> ExecutionResult:
        logger.info("test_skipped", test=api.name, reason=reason)
        return ExecutionResult(
            name=api.name,
            description=api.description,
            version=self._resolved_version(api),
            skipped=True,
            skip_reason=reason,
            root_cause=root_cause,
            request=api.request,
            executed_at=datetime.now(),
        )

    def _resolved_version(self, api: ApiTest) -> str | None:
        return api.version or self._config.version or None

    def prepare_request(self, api: ApiTest) -> RequestSpec:
        """Substitute placeholders, then coerce body types if a schema is set."""
        request = self._templates.render_request(api.request)
        if request.body_schema and request.body is not None:
            request = request.model_copy(
                update={"body": coerce_body(request.body, request.body_schema)}
            )
        return request

    async def _execute(self, api: ApiTest) -> ExecutionResult:
        executed_at = datetime.now()
        request = api.request
        try:
            request = self.prepare_request(api)
            outcome = await execute_with_retry(
                self._client,
                request,
                api.response,
                api.retry_policy,
                test_name=api.name,
                sleep=self._sleep,
            )
        except Exception as exc:
            # contained to this test
            logger.exception("test_errored", test=api.name)
            outcome = AttemptOutcome(error=f"unexpected error: {exc}")

        result = ExecutionResult(
            name=api.name,
            description=api.description,
            version=self._resolved_version(api),
            passed=outcome.passed,
            duration=outcome.duration,
            status_code=outcome.response.status_code if outcome.response else 0,
            request=request,
            response=outcome.response,
            validation=outcome.validation,
            error=outcome.error,
            retry_count=outcome.retry_count,
            executed_at=executed_at,
        )

        if result.passed:
            logger.info("test_passed", test=api.name, retries=result.retry_count)
        else:
            logger.warning(
                "test_failed",
                test=api.name,
                status_code=result.status_code,
                error=result.error,
                retries=result.retry_count,
            )
        return result
