"""Single-invocation runner for agent functions.

Runs one prompt through one agent, optionally bounded by a deadline, and
keeps a trace of the last invocation whether it succeeded or not.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Union

from ..errors import AgentError
from ..models import AgentResult, ExecutionTrace
from .deadline import Stopwatch, race_deadline

AgentFunction = Callable[[str], Union[Awaitable[Any], Any]]


def _coerce_result(value: Any) -> AgentResult:
    """Normalize an agent's return value into an AgentResult."""
    if isinstance(value, AgentResult):
        return value
    if isinstance(value, dict):
        try:
            return AgentResult.from_dict(value)
        except (TypeError, ValueError) as e:
            raise AgentError(f"Invalid agent result: {e}") from e
    raise AgentError(
        f"Agent must return an AgentResult or a mapping, got {type(value).__name__}"
    )


class AgentRunner:
    """Runs prompts through an agent function and records execution traces.

    A runner is reusable. Each ``run`` call replaces the previous result and
    trace; there is no history.
    """

    def __init__(self, agent: AgentFunction):
        """Initialize the runner.

        Args:
            agent: Callable taking a prompt. May be ``async def`` or a plain
                function returning an AgentResult (or an equivalent mapping).
        """
        self.agent = agent
        self._result: Optional[AgentResult] = None
        self._trace: Optional[ExecutionTrace] = None

    async def run(self, prompt: str, timeout_ms: Optional[int] = None) -> AgentResult:
        """Run ``prompt`` through the agent.

        Args:
            prompt: Prompt text passed to the agent.
            timeout_ms: Optional deadline in milliseconds.

        Returns:
            The agent's result, with ``duration_ms`` filled in if the agent
            left it unset.

        Raises:
            AgentTimeoutError: If the deadline elapsed before the agent settled.
            AgentError: If the agent returned something unusable.
            Exception: Whatever the agent raised, unchanged.
        """
        stopwatch = Stopwatch().start()

        try:
            outcome = self.agent(prompt)
            if inspect.isawaitable(outcome):
                outcome = await race_deadline(outcome, timeout_ms)

            result = _coerce_result(outcome)
            end_time = stopwatch.stop()

            if result.duration_ms is None:
                result.duration_ms = end_time - stopwatch.start_time

            self._result = result
            self._trace = ExecutionTrace(
                prompt=prompt,
                result=result,
                start_time=stopwatch.start_time,
                end_time=end_time,
                duration_ms=result.duration_ms,
            )
            return result

        except Exception:
            end_time = stopwatch.stop()
            self._result = None
            self._trace = ExecutionTrace(
                prompt=prompt,
                result=AgentResult.empty(),
                start_time=stopwatch.start_time,
                end_time=end_time,
                duration_ms=end_time - stopwatch.start_time,
            )
            raise

    def get_result(self) -> Optional[AgentResult]:
        """Result of the last successful ``run`` call, if the last call succeeded."""
        return self._result

    def get_trace(self) -> Optional[ExecutionTrace]:
        """Trace of the last ``run`` call."""
        return self._trace
