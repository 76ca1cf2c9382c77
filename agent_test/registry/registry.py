"""Test case registry and the declaration API used by test files."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Optional

from ..models import TestCase, TestResult

if TYPE_CHECKING:
    from ..reporting.base import Reporter


class TestRegistry:
    """Ordered set of declared test cases for one run or watch cycle."""

    __test__ = False

    def __init__(self):
        self._cases: list[TestCase] = []

    @property
    def cases(self) -> list[TestCase]:
        """Registered cases, in registration order."""
        return list(self._cases)

    def __len__(self) -> int:
        return len(self._cases)

    def add(self, name: str, fn: Callable[[], Any]) -> TestCase:
        """Register a test case."""
        if not callable(fn):
            raise TypeError(f"Test '{name}' must be callable, got {type(fn).__name__}")
        case = TestCase(name=name, fn=fn)
        self._cases.append(case)
        return case

    def clear_tests(self) -> None:
        """Remove every registered case."""
        self._cases.clear()

    async def run_tests(
        self,
        reporter: "Reporter",
        name_filter: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> list[TestResult]:
        """Run all registered cases once. See ``TestOrchestrator``."""
        from ..runner.orchestrator import TestOrchestrator

        orchestrator = TestOrchestrator(
            registry=self,
            reporter=reporter,
            name_filter=name_filter,
            timeout_ms=timeout_ms,
        )
        return await orchestrator.execute()


default_registry = TestRegistry()

_active_registry: ContextVar[TestRegistry] = ContextVar(
    "agent_test_active_registry", default=default_registry
)


def current_registry() -> TestRegistry:
    """Registry that ``test()`` declarations currently go to."""
    return _active_registry.get()


@contextmanager
def use_registry(registry: TestRegistry) -> Iterator[TestRegistry]:
    """Make ``registry`` the target of ``test()`` declarations within the block."""
    token = _active_registry.set(registry)
    try:
        yield registry
    finally:
        _active_registry.reset(token)


def test(name: str, fn: Optional[Callable[[], Any]] = None):
    """Declare a test case in the active registry.

    Usable directly or as a decorator::

        test("greets the user", check_greeting)

        @test("calls the weather tool")
        async def _():
            ...
    """
    if fn is not None:
        current_registry().add(name, fn)
        return fn

    def decorator(func: Callable[[], Any]) -> Callable[[], Any]:
        current_registry().add(name, func)
        return func

    return decorator


test.__test__ = False


def clear_tests() -> None:
    """Clear the default registry."""
    default_registry.clear_tests()


async def run_tests(
    reporter: "Reporter",
    name_filter: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> list[TestResult]:
    """Run the default registry's cases."""
    return await default_registry.run_tests(
        reporter, name_filter=name_filter, timeout_ms=timeout_ms
    )
