"""Runs the one-time ``configure`` hook of top-level config sections."""

from collections.abc import Mapping
from typing import Any, Callable, Optional

from .domain import ConfigTree, Configurable
from .logger import get_logger
from .validators import ConfigureHookError

logger = get_logger()

HOOK_NAME = "configure"


def _hook_for(section: Any) -> Optional[Callable[[], Any]]:
    if isinstance(section, Mapping):
        hook = section.get(HOOK_NAME)
        if callable(hook):
            return lambda: hook(section)
        return None

    # Classes match the protocol too, but only instances can be configured
    if isinstance(section, Configurable) and not isinstance(section, type) and callable(section.configure):
        return section.configure

    return None


def run_configure_hooks(tree: ConfigTree) -> None:
    """Call every section's hook once. A failing hook aborts with ConfigureHookError."""
    for name, section in list(tree.items()):
        hook = _hook_for(section)
        if hook is None:
            continue

        logger.debug(f"Running configure() of section '{name}'")
        try:
            hook()
        except Exception as e:
            raise ConfigureHookError(name, f"{type(e).__name__}: {e}") from e
