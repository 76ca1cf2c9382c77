"""Runner module - Agent invocation and test orchestration."""

from .agent_runner import AgentFunction, AgentRunner
from .deadline import Stopwatch, now_ms, race_deadline
from .orchestrator import TestOrchestrator, matches_filter, run_tests
from .result_collector import FileResults, RunSummary

__all__ = [
    "AgentFunction",
    "AgentRunner",
    "Stopwatch",
    "now_ms",
    "race_deadline",
    "TestOrchestrator",
    "matches_filter",
    "run_tests",
    "FileResults",
    "RunSummary",
]
