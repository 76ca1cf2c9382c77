"""Test file loading.

A test file is a Python module whose top-level ``test()`` declarations
populate a registry. Files are executed from their current on-disk source on
every load so that edits are picked up in watch mode.

Before a file runs, its own directory and the invocation directory are put at
the front of ``sys.path`` so that the file can import the agent it tests.
"""

import importlib.util
import os
import re
import sys
import tokenize
from pathlib import Path
from typing import Union

from ..errors import LoadError
from .registry import TestRegistry, use_registry

MODULE_PREFIX = "agent_test_file_"


def module_name_for(path: Union[str, Path]) -> str:
    """Stable ``sys.modules`` key for a test file."""
    resolved = str(Path(path).resolve())
    return MODULE_PREFIX + re.sub(r"\W", "_", resolved)


def evict_test_module(path: Union[str, Path]) -> bool:
    """Drop any cached module for ``path``. Returns True if one was cached."""
    return sys.modules.pop(module_name_for(path), None) is not None


def prepend_import_paths(file_path: Path) -> None:
    """Make modules beside ``file_path`` and in the cwd importable.

    Entries stay on ``sys.path`` so imports done inside test bodies still
    resolve. Directories already present are left where they are.
    """
    for directory in (os.getcwd(), str(file_path.parent)):
        if directory not in sys.path:
            sys.path.insert(0, directory)


def load_test_file(path: Union[str, Path], registry: TestRegistry) -> None:
    """Execute a test file with ``registry`` as the declaration target.

    Args:
        path: Path to the test file.
        registry: Registry that receives the file's test cases.

    Raises:
        LoadError: If the file cannot be read, compiled or executed.
    """
    file_path = Path(path).resolve()
    name = module_name_for(file_path)
    evict_test_module(file_path)

    try:
        spec = importlib.util.spec_from_file_location(name, file_path)
        if spec is None:
            raise ImportError(f"Cannot create module spec for {file_path}")
        module = importlib.util.module_from_spec(spec)

        # Compile the current source; cached bytecode could be stale.
        # tokenize.open honours coding cookies and a UTF-8 BOM.
        with tokenize.open(file_path) as f:
            source = f.read()
        code = compile(source, str(file_path), "exec")

        prepend_import_paths(file_path)
        sys.modules[name] = module
        with use_registry(registry):
            exec(code, module.__dict__)

    except Exception as e:
        sys.modules.pop(name, None)
        raise LoadError(path, e) from e
