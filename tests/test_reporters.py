import json

import pytest

from agent_test.models import TestCase, TestResult
from agent_test.reporting import (
    DefaultReporter,
    JsonReporter,
    MinimalReporter,
    Reporter,
    VerboseReporter,
    create_reporter,
    summarize,
)
from agent_test.runner.result_collector import RunSummary

RESULTS = [
    TestResult(name="greets", passed=True, duration_ms=12),
    TestResult(
        name="calls tool",
        passed=False,
        duration_ms=30,
        error="Expected get_weather",
        error_type="AssertionError",
    ),
]


def _replay(reporter: Reporter) -> None:
    cases = [TestCase(name=r.name, fn=lambda: None) for r in RESULTS]
    reporter.on_run_start(cases)
    for case, result in zip(cases, RESULTS):
        reporter.on_test_start(case)
        reporter.on_test_end(result)
    reporter.on_run_end(RESULTS)


@pytest.mark.parametrize(
    "kind, expected",
    [
        ("default", DefaultReporter),
        ("verbose", VerboseReporter),
        ("minimal", MinimalReporter),
        ("json", JsonReporter),
        ("unknown", DefaultReporter),
    ],
)
def test_create_reporter(kind, expected):
    assert type(create_reporter(kind)) is expected


def test_summarize():
    assert summarize(RESULTS) == {"total": 2, "passed": 1, "failed": 1, "duration_ms": 42}


def test_default_reporter_output(capsys):
    _replay(DefaultReporter())

    out = capsys.readouterr().out
    assert "✓ greets (12ms)" in out
    assert "✗ calls tool (30ms)" in out
    assert "Expected get_weather" in out
    assert "1 passed, 1 failed (42ms)" in out


def test_verbose_reporter_output(capsys):
    _replay(VerboseReporter())

    out = capsys.readouterr().out
    assert "Running 2 test(s)" in out
    assert "▶ greets" in out
    assert "(AssertionError)" in out


def test_minimal_reporter_output(capsys):
    _replay(MinimalReporter())

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == ".F"
    assert lines[1] == "✗ calls tool: Expected get_weather"
    assert lines[2] == "1/2 passed"


def test_json_reporter_prints_report(capsys):
    reporter = JsonReporter()
    _replay(reporter)

    report = json.loads(capsys.readouterr().out)
    assert report == reporter.last_report
    assert report["status"] == "failed"
    assert report["summary"] == {"total": 2, "passed": 1, "failed": 1, "duration_ms": 42}
    assert [t["name"] for t in report["tests"]] == ["greets", "calls tool"]
    assert report["tests"][1]["error_type"] == "AssertionError"


def test_json_reporter_save(tmp_path):
    reporter = JsonReporter()
    report = reporter.generate(RESULTS[:1])

    path = reporter.save(report, tmp_path / "out" / "report.json")

    assert json.loads(path.read_text(encoding="utf-8"))["status"] == "passed"
    assert reporter.to_json_string(report, pretty=False).startswith('{"timestamp"')


def test_run_summary():
    summary = RunSummary()
    summary.add_results("a.test.py", RESULTS[:1])
    assert summary.all_passed

    entry = summary.add_results("b.test.py", RESULTS[1:])
    assert entry.has_failures
    assert (summary.total_count, summary.passed_count, summary.failed_count) == (2, 1, 1)
    assert not summary.all_passed


def test_run_summary_load_error_fails_run():
    summary = RunSummary()
    summary.add_results("a.test.py", RESULTS[:1])
    summary.add_load_error("b.test.py", SyntaxError("bad"))

    assert not summary.has_failures
    assert not summary.all_passed
    assert summary.load_errors == {"b.test.py": "bad"}
