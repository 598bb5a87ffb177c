"""Data models for FrameworkConfiguration."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

ConfigTree = Dict[str, Any]

@dataclass(frozen=True)
class ResolutionContext:
    """Per-run parameters, fixed before any source is loaded.

    ``config_dirs`` replaces the built-in default directories when set.
    ``package_dirs`` holds the package-contributed directories.
    """
    project_root: str
    app_base_dir: str
    app: Optional[str] = None
    environment: Optional[str] = None
    custom_dirs: Tuple[str, ...] = ()
    config_dirs: Optional[Tuple[str, ...]] = None
    package_dirs: Tuple[str, ...] = ()

@dataclass
class SourceLoadResult:
    """What one source kind contributed during a resolution."""
    kind: str
    config: ConfigTree = field(default_factory=dict)
    files_loaded: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)

@dataclass
class LoadResult:
    """Result of a full resolution."""
    files_loaded: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    app_env: Optional[str] = None
    merge_order: List[str] = field(default_factory=list)

@runtime_checkable
class Configurable(Protocol):
    """A config section that wants a one-time initialization once merging is done."""

    def configure(self) -> None:
        ...
