import asyncio
import textwrap
from pathlib import Path

import pytest
from watchdog.events import DirModifiedEvent, FileModifiedEvent

from agent_test.models import TestCase, TestResult
from agent_test.reporting.base import Reporter


class RecordingReporter(Reporter):
    """Reporter that records every event it receives."""

    def __init__(self):
        self.events: list[tuple] = []
        self.runs: list[list[TestResult]] = []

    def on_run_start(self, cases: list[TestCase]) -> None:
        self.events.append(("run_start", [c.name for c in cases]))

    def on_test_start(self, case: TestCase) -> None:
        self.events.append(("test_start", case.name))

    def on_test_end(self, result: TestResult) -> None:
        self.events.append(("test_end", result.name, result.passed))

    def on_run_end(self, results: list[TestResult]) -> None:
        self.events.append(("run_end", [r.name for r in results]))
        self.runs.append(results)

    @property
    def run_start_count(self) -> int:
        return sum(1 for e in self.events if e[0] == "run_start")


class FakeObserver:
    """In-process stand-in for a watchdog observer."""

    def __init__(self):
        self.handlers: list[tuple] = []
        self.started = False
        self.stopped = False

    def schedule(self, handler, path, recursive=False):
        watch = (path, recursive)
        self.handlers.append((watch, handler))
        return watch

    def remove_handler_for_watch(self, handler, watch):
        self.handlers.remove((watch, handler))

    def unschedule_all(self):
        self.handlers.clear()

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def is_alive(self):
        return False

    def emit(self, path, directory=False):
        event = DirModifiedEvent(str(path)) if directory else FileModifiedEvent(str(path))
        for _, handler in list(self.handlers):
            handler.dispatch(event)


async def wait_for(predicate, timeout=2.0, interval=0.01):
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(interval)


def write_test_file(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def fake_observer() -> FakeObserver:
    return FakeObserver()
