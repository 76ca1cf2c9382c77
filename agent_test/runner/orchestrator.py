"""Test orchestrator - runs every registered case once.

Coordinates a single pass over a registry:
1. Select cases by name filter
2. Report run start
3. Run each case under the shared deadline, strictly in order
4. Report each outcome
5. Report the run summary and return the ordered results
"""

import inspect
from typing import TYPE_CHECKING, Optional

from ..models import TestCase, TestResult
from .deadline import Stopwatch, race_deadline

if TYPE_CHECKING:
    from ..registry.registry import TestRegistry
    from ..reporting.base import Reporter


def matches_filter(name: str, name_filter: Optional[str]) -> bool:
    """Whether a case named ``name`` is selected by ``name_filter`` (substring)."""
    return not name_filter or name_filter in name


class TestOrchestrator:
    """Runs the cases of a registry and aggregates their results.

    Exit-code decisions and bail-out belong to the caller.
    """

    __test__ = False

    def __init__(
        self,
        registry: "TestRegistry",
        reporter: "Reporter",
        name_filter: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Registry whose cases are executed.
            reporter: Receives start/outcome/summary events.
            name_filter: Only run cases whose name contains this substring.
            timeout_ms: Deadline applied to each case (None = no deadline).
        """
        self.registry = registry
        self.reporter = reporter
        self.name_filter = name_filter
        self.timeout_ms = timeout_ms

    def select_cases(self) -> list[TestCase]:
        """Cases that pass the name filter, in registration order."""
        return [
            case for case in self.registry.cases
            if matches_filter(case.name, self.name_filter)
        ]

    async def execute(self) -> list[TestResult]:
        """Run every selected case once.

        Returns:
            One TestResult per executed case, in invocation order.
        """
        cases = self.select_cases()
        self.reporter.on_run_start(cases)

        results: list[TestResult] = []
        for case in cases:
            self.reporter.on_test_start(case)
            result = await self._run_case(case)
            results.append(result)
            self.reporter.on_test_end(result)

        self.reporter.on_run_end(results)
        return results

    async def _run_case(self, case: TestCase) -> TestResult:
        """Run one case under the deadline and convert its outcome."""
        stopwatch = Stopwatch().start()

        try:
            outcome = case.fn()
            if inspect.isawaitable(outcome):
                await race_deadline(outcome, self.timeout_ms)

        except Exception as e:
            stopwatch.stop()
            return TestResult(
                name=case.name,
                passed=False,
                duration_ms=stopwatch.elapsed_ms,
                error=str(e) or type(e).__name__,
                error_type=type(e).__name__,
            )

        stopwatch.stop()
        return TestResult(
            name=case.name,
            passed=True,
            duration_ms=stopwatch.elapsed_ms,
        )


async def run_tests(
    registry: "TestRegistry",
    reporter: "Reporter",
    name_filter: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> list[TestResult]:
    """Run ``registry`` once with the given reporter, filter and deadline."""
    orchestrator = TestOrchestrator(
        registry=registry,
        reporter=reporter,
        name_filter=name_filter,
        timeout_ms=timeout_ms,
    )
    return await orchestrator.execute()
