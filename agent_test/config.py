"""Configuration loading for agent-test.

Reads an optional YAML config file and merges it with command-line
overrides. Command-line values win on conflict.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .discovery.file_finder import DEFAULT_PATTERN
from .errors import ConfigError
from .reporting import REPORTER_KINDS

CONFIG_FILE_NAMES = ("agent-test.yaml", "agent-test.yml")

DEFAULT_TIMEOUT_MS = 30000

# Alternate spellings accepted in config files
KEY_ALIASES = {"grep": "name_filter"}


@dataclass
class TestConfig:
    """Effective settings for a test run."""
    __test__ = False

    pattern: str = DEFAULT_PATTERN
    reporter: str = "default"
    name_filter: Optional[str] = None
    bail: bool = False
    timeout: int = DEFAULT_TIMEOUT_MS
    watch: bool = False


def find_config_file(directory: Union[str, Path] = ".") -> Optional[Path]:
    """Return the first config file present in ``directory``, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Union[str, Path]] = None) -> TestConfig:
    """Load configuration from a YAML file.

    Args:
        path: Explicit config file. If None, look for ``agent-test.yaml`` or
            ``agent-test.yml`` in the current directory.

    Returns:
        Parsed TestConfig, or defaults when no file is found.

    Raises:
        ConfigError: If the file is missing (explicit path), malformed, or
            holds invalid values.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            return TestConfig()
    else:
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return TestConfig()

    return parse_config_data(data, source=str(path))


def parse_config_data(data: Any, source: str = "<inline>") -> TestConfig:
    """Parse configuration from an already-loaded mapping.

    Unknown keys are ignored.

    Raises:
        ConfigError: If ``data`` is not a mapping or a value is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__} ({source})")

    known = {f.name for f in fields(TestConfig)}
    values = {}
    for key, value in data.items():
        key = KEY_ALIASES.get(key, key)
        if key in known:
            values[key] = value

    config = TestConfig(**values)
    errors = validate_config(config)
    if errors:
        raise ConfigError(f"Invalid config ({source}): " + "; ".join(errors))
    return config


def validate_config(config: TestConfig) -> list[str]:
    """Check config values. Returns a list of error messages (empty = valid)."""
    errors: list[str] = []

    if not isinstance(config.pattern, str) or not config.pattern:
        errors.append("'pattern' must be a non-empty string.")

    if config.reporter not in REPORTER_KINDS:
        errors.append(
            f"Invalid reporter '{config.reporter}'. Must be one of: {', '.join(REPORTER_KINDS)}"
        )

    if config.name_filter is not None and not isinstance(config.name_filter, str):
        errors.append("'name_filter' must be a string.")

    if isinstance(config.timeout, bool) or not isinstance(config.timeout, int):
        errors.append(f"'timeout' must be an integer number of milliseconds, got {config.timeout!r}.")
    elif config.timeout <= 0:
        errors.append(f"Timeout must be positive, got {config.timeout}.")

    for flag in ("bail", "watch"):
        if not isinstance(getattr(config, flag), bool):
            errors.append(f"'{flag}' must be true or false.")

    return errors


def merge_config(file_config: TestConfig, overrides: dict[str, Any]) -> TestConfig:
    """Return ``file_config`` with every non-None override applied."""
    known = {f.name for f in fields(TestConfig)}
    changes = {
        key: value for key, value in overrides.items()
        if key in known and value is not None
    }
    return replace(file_config, **changes)
