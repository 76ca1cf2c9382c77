"""agent-test - run agent functions under a deadline and watch for changes.

Declare tests in ``*.test.py`` files::

    from agent_test import AgentRunner, test

    @test("greets the user")
    async def _():
        runner = AgentRunner(my_agent)
        result = await runner.run("Hello", timeout_ms=5000)
        assert "hello" in result.output.lower()

and run them with ``agent-test`` (add ``--watch`` to re-run on save).
"""

from .errors import (
    AgentError,
    AgentTestError,
    AgentTimeoutError,
    ConfigError,
    DiscoveryError,
    LoadError,
)
from .models import AgentResult, ExecutionTrace, TestCase, TestResult, ToolCall
from .registry import TestRegistry, clear_tests, run_tests, test, use_registry
from .runner import AgentRunner, TestOrchestrator
from .watch import TestWatcher, WatcherOptions

__all__ = [
    "AgentError",
    "AgentResult",
    "AgentRunner",
    "AgentTestError",
    "AgentTimeoutError",
    "ConfigError",
    "DiscoveryError",
    "ExecutionTrace",
    "LoadError",
    "TestCase",
    "TestOrchestrator",
    "TestRegistry",
    "TestResult",
    "TestWatcher",
    "ToolCall",
    "WatcherOptions",
    "clear_tests",
    "run_tests",
    "test",
    "use_registry",
]
