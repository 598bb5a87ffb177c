from .core import FrameworkConfiguration
from .domain import (
    ConfigTree,
    Configurable,
    LoadResult,
    ResolutionContext,
    SourceLoadResult
)
from .validators import (
    ConfigurationError,
    SourceMissingError,
    FileParseError,
    ModuleEvaluationError,
    ConfigureHookError
)
from .sources import (
    ConfigurationSource,
    DataFileSource,
    PyFileSource,
    JsonFileSource,
    YamlFileSource,
    DEFAULT_CONFIG_DIRS,
    ENVIRONMENT_TAGS,
    default_sources,
    load_tree
)
from .merge import merge_config
from .context import create_context, parse_argv
from .app_dirs import apply_app_dirs
from .configurator import run_configure_hooks
from .lookup import get_path
from .logger import ConfigurationLogger, get_logger, set_log_level, get_log_level

__all__ = [
    "FrameworkConfiguration",
    "ConfigTree",
    "Configurable",
    "LoadResult",
    "ResolutionContext",
    "SourceLoadResult",
    "ConfigurationError",
    "SourceMissingError",
    "FileParseError",
    "ModuleEvaluationError",
    "ConfigureHookError",
    "ConfigurationSource",
    "DataFileSource",
    "PyFileSource",
    "JsonFileSource",
    "YamlFileSource",
    "DEFAULT_CONFIG_DIRS",
    "ENVIRONMENT_TAGS",
    "default_sources",
    "load_tree",
    "merge_config",
    "create_context",
    "parse_argv",
    "apply_app_dirs",
    "run_configure_hooks",
    "get_path",
    "ConfigurationLogger",
    "get_logger",
    "set_log_level",
    "get_log_level"
]
