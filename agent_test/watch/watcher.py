"""Watch mode: re-run tests when test files change.

One filesystem watch is attached per test file at ``start()``. Bursts of
change events are debounced into a single re-run cycle, and at most one
cycle is in flight at any time; a cycle that would start while another is
running is dropped, not queued.

All state below is touched only from the event loop thread. Observer
callbacks arrive on the watchdog thread and are handed over with
``call_soon_threadsafe``.
"""

import asyncio
import os
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import click
from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

from ..discovery.file_finder import require_test_files
from ..errors import LoadError
from ..registry.loader import evict_test_module, load_test_file
from ..registry.registry import TestRegistry
from ..reporting.base import Reporter

# Quiet period after the last change event before a cycle starts
DEBOUNCE_MS = 100

RELEVANT_EVENT_TYPES = frozenset({
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MOVED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_CLOSED,
})


@dataclass(frozen=True)
class WatcherOptions:
    """Settings for a TestWatcher. Fixed for the watcher's lifetime."""
    pattern: str
    reporter: Reporter
    name_filter: Optional[str] = None
    timeout_ms: Optional[int] = None
    root: Path = field(default_factory=lambda: Path("."))
    debounce_ms: int = DEBOUNCE_MS
    clear_screen: bool = True


class _FileChangeHandler(FileSystemEventHandler):
    """Forwards events that touch one specific file."""

    def __init__(self, file_path: Path, on_change: Callable[[Path], None]):
        self.file_path = file_path
        self._target = os.path.abspath(file_path)
        self._on_change = on_change

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in RELEVANT_EVENT_TYPES:
            return

        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(p and os.path.abspath(os.fsdecode(p)) == self._target for p in paths):
            self._on_change(self.file_path)


class TestWatcher:
    """Keeps a test run synchronized with on-disk changes.

    States: IDLE -> RUNNING -> IDLE.
    """

    __test__ = False

    def __init__(
        self,
        options: WatcherOptions,
        registry: Optional[TestRegistry] = None,
        observer_factory: Optional[Callable[[], BaseObserver]] = None,
    ):
        """Initialize the watcher.

        Args:
            options: Pattern, reporter, name filter and timeout.
            registry: Registry cleared and refilled for every file. A private
                registry is created when omitted.
            observer_factory: Builds the filesystem observer. Defaults to
                watchdog's platform Observer.
        """
        self.options = options
        self.registry = registry if registry is not None else TestRegistry()
        self._observer_factory = observer_factory or Observer
        self._observer: Optional[BaseObserver] = None
        self._file_watch_list: list[tuple[ObservedWatch, FileSystemEventHandler]] = []
        self._file_path_list: list[Path] = []
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._cycle_tasks: set[asyncio.Task] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._is_running = False
        self._stopped = False
        self.cycle_count = 0

    @property
    def is_running(self) -> bool:
        """Whether a re-run cycle is in flight."""
        return self._is_running

    @property
    def watched_files(self) -> list[Path]:
        return list(self._file_path_list)

    async def start(self) -> None:
        """Attach file watches and run an initial full cycle.

        Raises:
            DiscoveryError: If the pattern matches no file.
        """
        print(f"\nWatching for changes in {self.options.pattern}...\n")

        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        self._stopped = False

        self._file_path_list = require_test_files(self.options.pattern, self.options.root)

        self._observer = self._observer_factory()
        for file_path in self._file_path_list:
            self._watch_file(file_path)
        self._observer.start()

        await self._execute_tests()

    async def wait_until_stopped(self) -> None:
        """Suspend until ``stop()`` is called."""
        if self._stop_event is None:
            return
        await self._stop_event.wait()

    def stop(self) -> None:
        """Release every file watch. An in-flight cycle is not interrupted."""
        self._stopped = True

        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

        if self._observer is not None:
            for watch, handler in self._file_watch_list:
                self._observer.remove_handler_for_watch(handler, watch)
            self._observer.unschedule_all()
            self._observer.stop()
            if self._observer.is_alive():
                self._observer.join()
            self._observer = None

        self._file_watch_list = []

        if self._stop_event is not None:
            self._stop_event.set()

    def _watch_file(self, file_path: Path) -> None:
        handler = _FileChangeHandler(file_path, self._on_file_event)
        watch = self._observer.schedule(
            handler, os.path.dirname(os.path.abspath(file_path)), recursive=False
        )
        self._file_watch_list.append((watch, handler))

    def _on_file_event(self, file_path: Path) -> None:
        # Observer thread
        loop = self._loop
        if self._stopped or loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._schedule_test_run, file_path)

    def _schedule_test_run(self, changed_file_path: Path) -> None:
        if self._stopped:
            return

        if self._debounce_handle is not None:
            self._debounce_handle.cancel()

        self._debounce_handle = self._loop.call_later(
            self.options.debounce_ms / 1000,
            self._on_debounce_elapsed,
            changed_file_path,
        )

    def _on_debounce_elapsed(self, changed_file_path: Path) -> None:
        self._debounce_handle = None
        task = self._loop.create_task(self._handle_file_change(changed_file_path))
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)

    async def _handle_file_change(self, file_path: Path) -> None:
        if self._stopped or self._is_running:
            return

        if self.options.clear_screen:
            click.clear()
        print(f"\nFile changed: {os.path.relpath(file_path)}")
        print("Re-running tests...\n")

        await self._execute_tests()

    async def _execute_tests(self) -> None:
        """Run one cycle: reload every tracked file and run its tests."""
        self._is_running = True
        self.cycle_count += 1

        try:
            for file_path in self._file_path_list:
                evict_test_module(file_path)
                self.registry.clear_tests()

                try:
                    load_test_file(file_path, self.registry)
                except LoadError as e:
                    print(f"Failed to load {file_path}:", file=sys.stderr)
                    traceback.print_exception(e.cause or e, file=sys.stderr)
                    continue

                await self.registry.run_tests(
                    reporter=self.options.reporter,
                    name_filter=self.options.name_filter,
                    timeout_ms=self.options.timeout_ms,
                )

        except Exception as e:
            print(f"Error running tests: {e}", file=sys.stderr)

        finally:
            self._is_running = False
            print("\nWatching for changes...")
