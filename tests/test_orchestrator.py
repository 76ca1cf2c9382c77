"""Tests for TestOrchestrator."""

import asyncio

from agent_test.registry import TestRegistry
from agent_test.runner.orchestrator import TestOrchestrator, matches_filter, run_tests


def _registry(**cases) -> TestRegistry:
    registry = TestRegistry()
    for name, fn in cases.items():
        registry.add(name, fn)
    return registry


async def _passes():
    await asyncio.sleep(0)


async def _fails():
    raise AssertionError("math is broken")


def test_matches_filter():
    assert matches_filter("greets user", None)
    assert matches_filter("greets user", "")
    assert matches_filter("greets user", "greet")
    assert not matches_filter("greets user", "Greet")


async def test_runs_cases_in_registration_order(reporter):
    registry = _registry(c=_passes, a=_fails, b=_passes)

    results = await run_tests(registry, reporter)

    assert [r.name for r in results] == ["c", "a", "b"]
    assert [r.passed for r in results] == [True, False, True]


async def test_failure_carries_error_message(reporter):
    results = await run_tests(_registry(broken=_fails), reporter)

    assert results[0].error == "math is broken"
    assert results[0].error_type == "AssertionError"


async def test_bare_exception_uses_type_name(reporter):
    def raises():
        raise ValueError()

    results = await run_tests(_registry(bare=raises), reporter)

    assert results[0].error == "ValueError"


async def test_sync_cases_are_supported(reporter):
    calls = []
    registry = _registry(sync=lambda: calls.append("ran"))

    results = await run_tests(registry, reporter)

    assert calls == ["ran"]
    assert results[0].passed


async def test_name_filter_skips_cases(reporter):
    registry = _registry(**{"weather tokyo": _passes, "weather oslo": _passes, "greeting": _passes})

    results = await run_tests(registry, reporter, name_filter="weather")

    assert [r.name for r in results] == ["weather tokyo", "weather oslo"]
    assert reporter.events[0] == ("run_start", ["weather tokyo", "weather oslo"])


async def test_timeout_fails_case_and_continues(reporter):
    async def hangs():
        await asyncio.Event().wait()

    registry = _registry(hangs=hangs, after=_passes)

    results = await run_tests(registry, reporter, timeout_ms=30)

    assert results[0].passed is False
    assert results[0].error == "Test timeout after 30ms"
    assert results[0].error_type == "AgentTimeoutError"
    assert results[0].duration_ms >= 25
    assert results[1].passed is True


async def test_cases_run_sequentially(reporter):
    active = []
    overlap = []

    def make_case(name):
        async def case():
            if active:
                overlap.append(name)
            active.append(name)
            await asyncio.sleep(0.01)
            active.remove(name)

        return case

    registry = _registry(one=make_case("one"), two=make_case("two"), three=make_case("three"))

    await run_tests(registry, reporter)

    assert overlap == []


async def test_reporter_event_sequence(reporter):
    registry = _registry(ok=_passes, bad=_fails)

    await TestOrchestrator(registry, reporter).execute()

    assert reporter.events == [
        ("run_start", ["ok", "bad"]),
        ("test_start", "ok"),
        ("test_end", "ok", True),
        ("test_start", "bad"),
        ("test_end", "bad", False),
        ("run_end", ["ok", "bad"]),
    ]


async def test_empty_registry(reporter):
    results = await TestRegistry().run_tests(reporter)

    assert results == []
    assert reporter.events == [("run_start", []), ("run_end", [])]
