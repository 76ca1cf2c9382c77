"""CLI entry point for agent-test.

    agent-test [PATTERN] [options]
    python -m agent_test.cli [PATTERN] [options]

Settings come from ``agent-test.yaml`` (if present), overridden by any flag
given on the command line.
"""

import asyncio
import sys
import traceback
from pathlib import Path
from typing import Any, Optional

import click
from click.core import ParameterSource

from .config import DEFAULT_TIMEOUT_MS, TestConfig, load_config, merge_config
from .discovery.file_finder import DEFAULT_PATTERN, require_test_files
from .errors import ConfigError, DiscoveryError, LoadError
from .registry.loader import load_test_file
from .registry.registry import TestRegistry
from .reporting import REPORTER_KINDS, JsonReporter, Reporter, create_reporter
from .runner.result_collector import RunSummary
from .watch.watcher import TestWatcher, WatcherOptions

# Parameters that may override the config file
CONFIG_KEYS = ("pattern", "reporter", "name_filter", "bail", "timeout", "watch")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("pattern", required=False, default=DEFAULT_PATTERN)
@click.option(
    "-r",
    "--reporter",
    type=click.Choice(REPORTER_KINDS),
    default="default",
    show_default=True,
    help="Output format.",
)
@click.option(
    "-g",
    "--grep",
    "name_filter",
    default=None,
    metavar="TEXT",
    help="Only run tests whose name contains TEXT.",
)
@click.option(
    "-b",
    "--bail",
    is_flag=True,
    help="Stop after the first file with a failing test.",
)
@click.option(
    "-t",
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT_MS,
    show_default=True,
    metavar="MS",
    help="Per-test timeout in milliseconds.",
)
@click.option(
    "-w",
    "--watch",
    is_flag=True,
    help="Re-run tests when test files change.",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./agent-test.yaml if present).",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a JSON report of the whole run to this file.",
)
@click.version_option(package_name="agent-test")
@click.pass_context
def main(
    ctx: click.Context,
    pattern: str,
    reporter: str,
    name_filter: Optional[str],
    bail: bool,
    timeout: int,
    watch: bool,
    config_path: Optional[Path],
    output_path: Optional[Path],
):
    """Run agent tests matching PATTERN (default: **/*.test.py)."""
    try:
        config = merge_config(load_config(config_path), command_line_overrides(ctx))
    except ConfigError as e:
        output_error(f"Fatal error: {e}")
        sys.exit(1)

    test_reporter = create_reporter(config.reporter)

    try:
        if config.watch:
            exit_code = asyncio.run(watch_tests(config, test_reporter))
        else:
            exit_code = asyncio.run(run_once(config, test_reporter, output_path=output_path))

    except KeyboardInterrupt:
        if config.watch:
            print("\nStopped watching.")
            sys.exit(0)
        output_error("Test run interrupted by user")
        sys.exit(130)

    except DiscoveryError as e:
        output_error(str(e))
        sys.exit(1)

    except Exception as e:
        output_error(f"Fatal error: {e}")
        sys.exit(1)

    sys.exit(exit_code)


def command_line_overrides(ctx: click.Context) -> dict[str, Any]:
    """Values of the parameters that were actually given on the command line."""
    return {
        key: ctx.params[key]
        for key in CONFIG_KEYS
        if ctx.get_parameter_source(key) == ParameterSource.COMMANDLINE
    }


async def run_once(
    config: TestConfig,
    reporter: Reporter,
    root: Path = Path("."),
    output_path: Optional[Path] = None,
) -> int:
    """Run every matching test file once.

    Returns:
        Process exit code: 0 if every test passed and every file loaded.

    Raises:
        DiscoveryError: If no file matches the pattern.
    """
    file_path_list = require_test_files(config.pattern, root)
    registry = TestRegistry()
    summary = RunSummary()

    for file_path in file_path_list:
        registry.clear_tests()

        try:
            load_test_file(file_path, registry)
        except LoadError as e:
            print(f"Failed to load {file_path}:", file=sys.stderr)
            traceback.print_exception(e.cause or e, file=sys.stderr)
            summary.add_load_error(file_path, e)
            continue

        results = await registry.run_tests(
            reporter,
            name_filter=config.name_filter,
            timeout_ms=config.timeout,
        )
        file_results = summary.add_results(file_path, results)

        if file_results.has_failures and config.bail:
            break

    if output_path is not None:
        write_run_report(summary, output_path)

    return 0 if summary.all_passed else 1


async def watch_tests(
    config: TestConfig,
    reporter: Reporter,
    root: Path = Path("."),
) -> int:
    """Run the watcher until it is stopped or the task is cancelled."""
    watcher = TestWatcher(
        WatcherOptions(
            pattern=config.pattern,
            reporter=reporter,
            name_filter=config.name_filter,
            timeout_ms=config.timeout,
            root=root,
        )
    )

    try:
        await watcher.start()
        await watcher.wait_until_stopped()
    finally:
        watcher.stop()

    return 0


def write_run_report(summary: RunSummary, output_path: Path) -> Path:
    """Save a JSON report covering every file of the run."""
    error = None
    if summary.load_errors:
        error = "Failed to load: " + ", ".join(summary.load_errors)

    json_reporter = JsonReporter()
    report = json_reporter.generate(summary.results, error=error)
    return json_reporter.save(report, output_path)


def output_error(message: str) -> None:
    """Print an error message to stderr."""
    print(message, file=sys.stderr)


if __name__ == "__main__":
    main()
