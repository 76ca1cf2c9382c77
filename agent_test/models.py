"""Data models shared by the runner, orchestrator and reporters."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ToolCall:
    """A single tool invocation made by an agent."""
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    output: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> "ToolCall":
        return cls(
            name=str(data.get("name", "")),
            arguments=dict(data.get("arguments") or {}),
            output=data.get("output"),
        )


@dataclass
class AgentResult:
    """Structured result returned by an agent function."""
    output: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    duration_ms: Optional[int] = None

    @classmethod
    def empty(cls) -> "AgentResult":
        """Sentinel result recorded when an invocation fails."""
        return cls(output="", tool_calls=[])

    @classmethod
    def from_dict(cls, data: dict) -> "AgentResult":
        """Build a result from a mapping.

        Accepts both ``toolCalls``/``durationMs`` and
        ``tool_calls``/``duration_ms`` keys.

        Raises:
            ValueError: If ``output`` is missing or ``duration_ms`` is negative.
        """
        if "output" not in data:
            raise ValueError("Agent result is missing required field 'output'")

        raw_calls = data.get("tool_calls", data.get("toolCalls")) or []
        tool_calls = [
            call if isinstance(call, ToolCall) else ToolCall.from_dict(call)
            for call in raw_calls
        ]

        duration_ms = data.get("duration_ms", data.get("durationMs"))
        if duration_ms is not None:
            duration_ms = int(duration_ms)
            if duration_ms < 0:
                raise ValueError(f"duration_ms must be non-negative, got {duration_ms}")

        return cls(
            output=str(data["output"]),
            tool_calls=tool_calls,
            duration_ms=duration_ms,
        )


@dataclass(frozen=True)
class ExecutionTrace:
    """Snapshot of one agent invocation: prompt, result and timings (epoch ms)."""
    prompt: str
    result: AgentResult
    start_time: int
    end_time: int
    duration_ms: int


@dataclass
class TestCase:
    """A registered test case. ``fn`` takes no arguments and may be async."""
    __test__ = False

    name: str
    fn: Callable[[], Any]


@dataclass
class TestResult:
    """Outcome of one executed test case."""
    __test__ = False

    name: str
    passed: bool
    duration_ms: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": "passed" if self.passed else "failed",
            "duration_ms": self.duration_ms,
            "error": self.error,
            "error_type": self.error_type,
        }
