"""Evaluates Python config modules straight from their file path."""

import hashlib
import importlib
import importlib.util
import sys
from types import ModuleType
from typing import Any

# Name a config module binds its contribution to
EXPORT_NAME = "config"

_MODULE_PREFIX = "_framework_config_source_"


def module_name(path: str) -> str:
    """Stable, importable module name for a config file path."""
    digest = hashlib.sha1(path.encode("utf-8")).hexdigest()[:16]
    return f"{_MODULE_PREFIX}{digest}"


def invalidate_cache(path: str) -> None:
    """Forget any previous evaluation of ``path`` so the next one re-runs the file."""
    sys.modules.pop(module_name(path), None)
    importlib.invalidate_caches()


def evaluate(path: str) -> ModuleType:
    """Execute the file at ``path`` as a fresh module and return it.

    Exceptions raised by the module body propagate unchanged.
    """
    name = module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load a module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def exported_value(module: ModuleType) -> Any:
    return getattr(module, EXPORT_NAME, None)
