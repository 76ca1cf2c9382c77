"""Registry module - Test declaration and file loading."""

from .loader import evict_test_module, load_test_file, module_name_for
from .registry import (
    TestRegistry,
    clear_tests,
    current_registry,
    default_registry,
    run_tests,
    test,
    use_registry,
)

__all__ = [
    "TestRegistry",
    "clear_tests",
    "current_registry",
    "default_registry",
    "evict_test_module",
    "load_test_file",
    "module_name_for",
    "run_tests",
    "test",
    "use_registry",
]
