"""JSON report generator for agent test results.

Generates structured JSON reports from test run results.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import click

from ..models import TestResult
from .base import Reporter, summarize


class JsonReporter(Reporter):
    """Prints one JSON document per run."""

    def __init__(self, pretty: bool = True):
        """Initialize JSON reporter.

        Args:
            pretty: If True, format output with indentation.
        """
        self.pretty = pretty
        self.last_report: Optional[dict[str, Any]] = None

    def on_run_end(self, results: list[TestResult]) -> None:
        self.last_report = self.generate(results)
        click.echo(self.to_json_string(self.last_report, pretty=self.pretty))

    def generate(
        self,
        results: list[TestResult],
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a JSON report from test results.

        Args:
            results: Results of the run, in invocation order.
            error: Overall error message if the run itself failed.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        summary = summarize(results)
        all_passed = summary["failed"] == 0 and error is None

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "passed" if all_passed else "failed",
            "summary": summary,
            "tests": [r.to_dict() for r in results],
            "error": error,
        }

    def save(self, report: dict[str, Any], path: Union[str, Path]) -> Path:
        """Write ``report`` to ``path`` as indented JSON, creating parent dirs."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json_string(report, pretty=True) + "\n", encoding="utf-8")
        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        return json.dumps(report, indent=2 if pretty else None, ensure_ascii=False)
