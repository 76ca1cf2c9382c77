"""Result collector for multi-file runs.

Aggregates per-file test results and load failures into a single verdict.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ..models import TestResult


@dataclass
class FileResults:
    """Results produced by one test file."""
    path: str
    results: list[TestResult] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(not r.passed for r in self.results)


@dataclass
class RunSummary:
    """Aggregated collection of results across every file of a run."""
    files: list[FileResults] = field(default_factory=list)
    load_errors: dict[str, str] = field(default_factory=dict)

    def add_results(self, path: Union[str, Path], results: list[TestResult]) -> FileResults:
        """Record the results of one file."""
        entry = FileResults(path=str(path), results=list(results))
        self.files.append(entry)
        return entry

    def add_load_error(self, path: Union[str, Path], error: Union[str, Exception]) -> None:
        """Record a file that could not be loaded."""
        self.load_errors[str(path)] = str(error)

    @property
    def results(self) -> list[TestResult]:
        return [r for f in self.files for r in f.results]

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    @property
    def all_passed(self) -> bool:
        """True when no test failed and every file loaded."""
        return not self.has_failures and not self.load_errors
