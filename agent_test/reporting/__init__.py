"""Reporting module - Console and JSON reporters."""

from .base import Reporter, summarize
from .console import DefaultReporter, MinimalReporter, VerboseReporter
from .json_reporter import JsonReporter

REPORTER_KINDS = ("default", "verbose", "minimal", "json")


def create_reporter(kind: str) -> Reporter:
    """Build a reporter by name. Unknown names fall back to the default."""
    if kind == "verbose":
        return VerboseReporter()
    if kind == "minimal":
        return MinimalReporter()
    if kind == "json":
        return JsonReporter()
    return DefaultReporter()


__all__ = [
    "REPORTER_KINDS",
    "Reporter",
    "DefaultReporter",
    "VerboseReporter",
    "MinimalReporter",
    "JsonReporter",
    "create_reporter",
    "summarize",
]
