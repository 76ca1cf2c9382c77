"""Discovery module - Test file pattern expansion."""

from .file_finder import DEFAULT_PATTERN, IGNORED_DIRS, find_test_files, require_test_files

__all__ = [
    "DEFAULT_PATTERN",
    "IGNORED_DIRS",
    "find_test_files",
    "require_test_files",
]
