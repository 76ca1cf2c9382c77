import asyncio

import pytest

from agent_test.errors import AgentTimeoutError
from agent_test.runner.deadline import Stopwatch, race_deadline


async def test_race_returns_value_before_deadline():
    async def quick():
        return "done"

    assert await race_deadline(quick(), 100) == "done"


async def test_race_without_deadline_waits():
    async def slow():
        await asyncio.sleep(0.05)
        return "done"

    assert await race_deadline(slow(), None) == "done"


async def test_race_propagates_exception():
    async def failing():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        await race_deadline(failing(), 100)


async def test_late_failure_after_timeout_is_discarded():
    async def fails_late():
        await asyncio.sleep(0.03)
        raise RuntimeError("late")

    loop = asyncio.get_running_loop()
    reported = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        with pytest.raises(AgentTimeoutError, match="Test timeout after 10ms"):
            await race_deadline(fails_late(), 10)
        await asyncio.sleep(0.06)
    finally:
        loop.set_exception_handler(None)

    assert reported == []


def test_stopwatch_measures_elapsed():
    stopwatch = Stopwatch()
    assert stopwatch.elapsed_ms == 0

    stopwatch.start()
    end_time = stopwatch.stop()

    assert end_time >= stopwatch.start_time
    assert stopwatch.elapsed_ms == end_time - stopwatch.start_time


def test_stopwatch_requires_start():
    with pytest.raises(RuntimeError):
        Stopwatch().stop()
