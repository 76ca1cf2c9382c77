"""Deadline handling for agent calls and test cases."""

import asyncio
import time
from collections.abc import Awaitable
from typing import Optional, TypeVar

from ..errors import AgentTimeoutError

T = TypeVar("T")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class Stopwatch:
    """Measures elapsed time in milliseconds for a single execution."""

    def __init__(self):
        self._start_time: Optional[int] = None
        self._end_time: Optional[int] = None

    @property
    def start_time(self) -> int:
        if self._start_time is None:
            raise RuntimeError("Stopwatch has not been started")
        return self._start_time

    @property
    def end_time(self) -> Optional[int]:
        return self._end_time

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds since start, or the final duration once stopped."""
        if self._start_time is None:
            return 0
        end = self._end_time if self._end_time is not None else now_ms()
        return max(0, end - self._start_time)

    def start(self) -> "Stopwatch":
        self._start_time = now_ms()
        self._end_time = None
        return self

    def stop(self) -> int:
        """Stop the stopwatch and return the end time.

        The end time is clamped so it never precedes the start time, even if
        the wall clock stepped backwards in between.
        """
        self._end_time = max(now_ms(), self.start_time)
        return self._end_time


def _discard_outcome(task: asyncio.Future) -> None:
    # Abandoned work: retrieve the late exception so it is never reported.
    if not task.cancelled():
        task.exception()


async def race_deadline(awaitable: Awaitable[T], timeout_ms: Optional[int]) -> T:
    """Await ``awaitable``, racing it against a ``timeout_ms`` deadline.

    The awaitable is not cancelled when the deadline wins: it keeps running
    in the background and whatever it eventually produces is discarded.

    Args:
        awaitable: Coroutine or future to wait for.
        timeout_ms: Deadline in milliseconds. ``None`` or 0 disables it.

    Returns:
        The awaitable's result.

    Raises:
        AgentTimeoutError: If the deadline elapses first.
        Exception: Whatever the awaitable raised, unchanged.
    """
    if not timeout_ms:
        return await awaitable

    task = asyncio.ensure_future(awaitable)
    done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)

    if task in done:
        return task.result()

    task.add_done_callback(_discard_outcome)
    raise AgentTimeoutError(timeout_ms)
