"""Watch module - Debounced re-runs on file changes."""

from .watcher import DEBOUNCE_MS, TestWatcher, WatcherOptions

__all__ = [
    "DEBOUNCE_MS",
    "TestWatcher",
    "WatcherOptions",
]
