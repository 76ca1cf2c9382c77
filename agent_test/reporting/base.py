"""Reporter interface."""

from ..models import TestCase, TestResult


class Reporter:
    """Receives test run events. Every hook is a no-op by default."""

    def on_run_start(self, cases: list[TestCase]) -> None:
        """Called once before the selected cases run."""

    def on_test_start(self, case: TestCase) -> None:
        """Called before each case runs."""

    def on_test_end(self, result: TestResult) -> None:
        """Called after each case with its outcome."""

    def on_run_end(self, results: list[TestResult]) -> None:
        """Called once with every result of the run."""


def summarize(results: list[TestResult]) -> dict[str, int]:
    """Count totals for a list of results."""
    passed = sum(1 for r in results if r.passed)
    return {
        "total": len(results),
        "passed": passed,
        "failed": len(results) - passed,
        "duration_ms": sum(r.duration_ms for r in results),
    }
