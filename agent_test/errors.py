"""Exception types raised by the agent test engine."""

from pathlib import Path
from typing import Optional, Union


class AgentTestError(Exception):
    """Base class for all agent-test errors."""


class AgentTimeoutError(AgentTestError, TimeoutError):
    """An agent call or test case did not settle before its deadline."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Test timeout after {timeout_ms}ms")


class AgentError(AgentTestError):
    """An agent produced a result that cannot be used.

    Exceptions raised by the agent itself are never wrapped in this type;
    they propagate unchanged.
    """


class LoadError(AgentTestError):
    """A test file failed to read, compile or execute."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {type(cause).__name__}: {cause}" if cause is not None else ""
        super().__init__(f"Failed to load {path}{detail}")


class DiscoveryError(AgentTestError):
    """No test files matched the configured pattern."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"No test files found matching pattern: {pattern}")


class ConfigError(AgentTestError):
    """The configuration file is malformed or holds invalid values."""
