"""Console reporters."""

import click

from ..models import TestCase, TestResult
from .base import Reporter, summarize

PASS_MARK = "✓"
FAIL_MARK = "✗"


class DefaultReporter(Reporter):
    """One line per test plus a summary."""

    def on_test_end(self, result: TestResult) -> None:
        if result.passed:
            mark = click.style(PASS_MARK, fg="green")
            click.echo(f"  {mark} {result.name} ({result.duration_ms}ms)")
        else:
            mark = click.style(FAIL_MARK, fg="red")
            click.echo(f"  {mark} {result.name} ({result.duration_ms}ms)")
            click.echo(click.style(f"    {result.error}", fg="red"))

    def on_run_end(self, results: list[TestResult]) -> None:
        summary = summarize(results)
        line = (
            f"\n{summary['passed']} passed, {summary['failed']} failed "
            f"({summary['duration_ms']}ms)"
        )
        click.echo(click.style(line, fg="red" if summary["failed"] else "green"))


class VerboseReporter(DefaultReporter):
    """Default output plus test start lines and error types."""

    def on_run_start(self, cases: list[TestCase]) -> None:
        click.echo(f"Running {len(cases)} test(s)")

    def on_test_start(self, case: TestCase) -> None:
        click.echo(click.style(f"  ▶ {case.name}", dim=True))

    def on_test_end(self, result: TestResult) -> None:
        super().on_test_end(result)
        if not result.passed and result.error_type:
            click.echo(click.style(f"    ({result.error_type})", dim=True))


class MinimalReporter(Reporter):
    """One character per test, failures listed at the end."""

    def on_test_end(self, result: TestResult) -> None:
        if result.passed:
            click.echo(click.style(".", fg="green"), nl=False)
        else:
            click.echo(click.style("F", fg="red"), nl=False)

    def on_run_end(self, results: list[TestResult]) -> None:
        click.echo()
        for r in results:
            if not r.passed:
                click.echo(f"{FAIL_MARK} {r.name}: {r.error}")
        summary = summarize(results)
        click.echo(f"{summary['passed']}/{summary['total']} passed")
