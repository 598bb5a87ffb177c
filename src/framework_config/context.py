"""Builds the ResolutionContext from explicit arguments, argv, the environment and defaults."""

import argparse
import os
import sys
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from dotenv import dotenv_values

from .discovery import discover_package_dirs, find_project_root
from .domain import ResolutionContext
from .logger import get_logger

logger = get_logger()

ENV_KEYS = ["APP_ENV"]
DEFAULT_APPS_DIR = "apps"
DOTENV_FILE = ".env"


def resolve(
    arg: Any,
    env_keys: Union[str, List[str]],
    config: Optional[Mapping[str, Any]],
    config_key: Optional[str],
    default: Any,
    environ: Optional[Mapping[str, str]] = None
) -> Any:
    """
    Resolve a context value from multiple sources in priority order:
    1. Direct argument (if not None)
    2. Environment variables
    3. Configuration mapping
    4. Default value
    """
    # 1. Argument
    if arg is not None:
        return arg

    # 2. Env Vars
    if isinstance(env_keys, str):
        env_keys = [env_keys]

    env = os.environ if environ is None else environ
    for key in env_keys:
        if key:
            val = env.get(key)
            if val is not None:
                return val

    # 3. Config mapping
    if config and config_key and config.get(config_key) is not None:
        return config[config_key]

    # 4. Default
    return default


def parse_argv(argv: Optional[Sequence[str]] = None) -> Dict[str, Optional[str]]:
    """Pick ``--app`` and ``--appPath`` out of the process arguments.

    Unknown arguments are ignored; a flag without a value yields None.
    """
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    parser.add_argument("--app", dest="app", nargs="?", default=None)
    parser.add_argument("--appPath", "--app-path", "--apppath", dest="app_path", nargs="?", default=None)

    args = list(sys.argv[1:] if argv is None else argv)
    known, _ = parser.parse_known_args(args)
    return vars(known)


def read_dotenv(project_root: str) -> Dict[str, Optional[str]]:
    """Values of ``<project_root>/.env`` without touching os.environ."""
    env_path = os.path.join(project_root, DOTENV_FILE)
    if not os.path.isfile(env_path):
        return {}
    logger.debug(f".env file: {env_path}")
    return dict(dotenv_values(env_path))


def _as_tuple(dirs: Optional[Iterable[Union[str, os.PathLike]]]) -> Optional[tuple]:
    if dirs is None:
        return None
    return tuple(os.fspath(d) for d in dirs)


def create_context(
    app: Optional[str] = None,
    app_base_dir: Optional[str] = None,
    custom_dirs: Optional[Iterable[str]] = None,
    environment: Optional[str] = None,
    config_dirs: Optional[Iterable[str]] = None,
    package_dirs: Optional[Iterable[str]] = None,
    project_root: Optional[str] = None,
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolutionContext:
    """
    Determine the per-run context.

    Explicit arguments win, then the process arguments (app, app base dir)
    or environment (``APP_ENV`` from the process, then from ``.env``), then
    built-in defaults.
    """
    root = os.fspath(project_root) if project_root is not None else find_project_root()
    args = parse_argv(argv)

    run_app = resolve(app, [], args, "app", None) or None
    base_dir = resolve(
        os.fspath(app_base_dir) if app_base_dir is not None else None,
        [], args, "app_path",
        os.path.join(root, DEFAULT_APPS_DIR)
    )
    env_name = resolve(environment, ENV_KEYS, read_dotenv(root), ENV_KEYS[0], None, environ=environ) or None

    packages = _as_tuple(package_dirs)
    if packages is None:
        packages = tuple(discover_package_dirs())

    return ResolutionContext(
        project_root=root,
        app_base_dir=base_dir,
        app=run_app,
        environment=env_name,
        custom_dirs=_as_tuple(custom_dirs) or (),
        config_dirs=_as_tuple(config_dirs),
        package_dirs=packages,
    )
