"""Test file discovery.

Expands a glob pattern into the list of test files to run. Build output and
dependency directories at the root are always excluded, and so are hidden
files and directories (``.venv``, ``.git``) unless the pattern names them.
"""

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Union

from ..errors import DiscoveryError

DEFAULT_PATTERN = "**/*.test.py"

# Top-level directories never searched, whatever the pattern
IGNORED_DIRS = frozenset({"node_modules", "dist", "build"})


def _is_excluded(path: Path, root: Path, dot_segments: list[str]) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        return False

    if parts and parts[0] in IGNORED_DIRS:
        return True

    return any(
        part.startswith(".") and not any(fnmatchcase(part, s) for s in dot_segments)
        for part in parts
    )


def find_test_files(pattern: str = DEFAULT_PATTERN, root: Union[str, Path] = ".") -> list[Path]:
    """Find test files matching ``pattern`` under ``root``.

    Args:
        pattern: Glob pattern relative to ``root``; ``**`` matches any depth.
            A hidden path component only matches a pattern segment that
            itself starts with a dot.
        root: Directory the pattern is resolved against.

    Returns:
        Sorted, de-duplicated list of matching files (paths include ``root``).
    """
    root_path = Path(root)
    if not pattern:
        return []

    # Path.glob only takes relative patterns
    if Path(pattern).is_absolute():
        anchor = Path(Path(pattern).anchor)
        pattern = str(Path(pattern).relative_to(anchor))
        root_path = anchor

    dot_segments = [s for s in Path(pattern).parts if s.startswith(".")]

    matches = {
        path for path in root_path.glob(pattern)
        if path.is_file() and not _is_excluded(path, root_path, dot_segments)
    }
    return sorted(matches)


def require_test_files(pattern: str = DEFAULT_PATTERN, root: Union[str, Path] = ".") -> list[Path]:
    """Like ``find_test_files`` but fail when nothing matches.

    Raises:
        DiscoveryError: If no file matches ``pattern``.
    """
    files = find_test_files(pattern, root)
    if not files:
        raise DiscoveryError(pattern)
    return files
