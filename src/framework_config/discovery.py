"""
File discovery module - finds configuration directories and files.
"""

import fnmatch
import os
from importlib.metadata import entry_points
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from .logger import get_logger

logger = get_logger()

# Entry-point group through which installed packages contribute config dirs
ENTRY_POINT_GROUP = "framework_config.dirs"

# Directories never descended into
IGNORE_DIRS: Set[str] = {
    "__pycache__",
    ".git",
    ".hg",
    ".svn",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
}

# Files marking the root of a project
PROJECT_MARKERS: Sequence[str] = (
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    ".git",
)


def find_project_root(start: Optional[str] = None) -> str:
    """
    Walk up from ``start`` (default: the working directory) to the first
    directory holding a project marker. Falls back to ``start`` itself.
    """
    origin = Path(start or os.getcwd()).resolve()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in PROJECT_MARKERS):
            return str(candidate)
    return str(origin)


def existing_dirs(dirs: Iterable[str]) -> List[str]:
    """Keep only the directories that exist, preserving order."""
    found = []
    for d in dirs:
        if os.path.isdir(d):
            logger.trace(f"Found config dir at {d}")
            found.append(d)
        else:
            logger.trace(f"Config dir {d} not found, skipping")
    return found


def _matches(filename: str, patterns: Sequence[str], exclude: Sequence[str]) -> bool:
    if not any(fnmatch.fnmatchcase(filename, p) for p in patterns):
        return False
    return not any(fnmatch.fnmatchcase(filename, p) for p in exclude)


def find_files(
    root: str,
    patterns: Sequence[str],
    exclude: Sequence[str] = (),
) -> List[str]:
    """
    Recursively find files under ``root`` whose name matches one of
    ``patterns`` and none of ``exclude``.

    Files of a directory come before its subdirectories; both are visited in
    name order. Hidden entries are skipped. Paths are absolute and normalized.
    """
    files: List[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in IGNORE_DIRS and not d.startswith(".")
        )

        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            if _matches(filename, patterns, exclude):
                files.append(os.path.normpath(os.path.abspath(os.path.join(dirpath, filename))))

    return files


def discover_package_dirs(group: str = ENTRY_POINT_GROUP) -> List[str]:
    """
    Collect config directories contributed by installed packages.

    Each entry point may load to a path, a list of paths, or a zero-argument
    callable returning either.
    """
    dirs: List[str] = []

    for ep in entry_points(group=group):
        target = ep.load()
        value = target() if callable(target) else target

        if isinstance(value, (str, os.PathLike)):
            value = [value]

        for d in value or []:
            logger.debug(f"Package {ep.name} contributes config dir {d}")
            dirs.append(os.fspath(d))

    return dirs
