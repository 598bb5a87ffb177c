"""Named-app mode: give every system.dirs category an app-specific entry."""

import os
from collections.abc import Mapping
from typing import Optional

from .domain import ConfigTree
from .logger import get_logger
from .lookup import get_path

logger = get_logger()


def app_dir(app_base_dir: str, app: str, category: str) -> str:
    return os.path.normpath(os.path.join(os.path.abspath(app_base_dir), app, category))


def apply_app_dirs(tree: ConfigTree, app: Optional[str], app_base_dir: str) -> None:
    """
    Append ``<app_base_dir>/<app>/<category>`` to each list under ``system.dirs``.

    Lists are extended in place so earlier holders of a reference see the new
    entry. Must run after every source has been merged.
    """
    if not app:
        return

    dirs = get_path(tree, ["system", "dirs"], {})
    if not isinstance(dirs, Mapping):
        return

    for category, paths in dirs.items():
        if not isinstance(paths, list):
            logger.warn(f"system.dirs.{category} is not a list, no app dir added")
            continue
        paths.append(app_dir(app_base_dir, app, category))
