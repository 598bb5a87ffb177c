"""Configuration source kinds: discovery, environment overlays and per-file loading."""

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import yaml

from . import module_loader
from .discovery import existing_dirs, find_files
from .domain import ConfigTree, ResolutionContext, SourceLoadResult
from .logger import get_logger
from .merge import merge_config
from .validators import FileParseError, ModuleEvaluationError

logger = get_logger()

# Project-relative directories searched by default, lowest priority first
DEFAULT_CONFIG_DIRS: Tuple[str, ...] = (
    "lib/config",
    "dist/config",
    "build/config",
    "config",
)

# Environment name -> file tag of its overlay layer
ENVIRONMENT_TAGS: Dict[str, str] = {
    "development": "dev",
    "production": "prod",
}

FileLoader = Callable[[str], Optional[ConfigTree]]


def load_tree(
    directories: Sequence[str],
    patterns: Sequence[str],
    loader: FileLoader,
    exclude: Sequence[str] = (),
    result: Optional[SourceLoadResult] = None,
) -> ConfigTree:
    """
    Load and merge every matching file found under ``directories``.

    Files are merged in directory order, so later directories win. A file
    raising FileParseError is logged and skipped; any other error propagates.
    """
    config: ConfigTree = {}

    files: List[str] = []
    for d in existing_dirs(directories):
        files.extend(find_files(d, patterns, exclude))

    for path in files:
        logger.trace(f"Found configuration file at {path}")
        try:
            data = loader(path)
        except FileParseError as e:
            logger.error(str(e), exc_info=e)
            if result is not None:
                result.errors.append({"file": path, "error": e.reason})
            continue

        if data is None:
            continue

        merge_config(config, data)
        if result is not None:
            result.files_loaded.append(path)

    return config


class ConfigurationSource(ABC):
    """One kind of configuration input.

    Stateless: everything run-specific comes in through the ResolutionContext.
    """

    kind: str = ""
    extensions: Tuple[str, ...] = ()
    default_dirs: Tuple[str, ...] = DEFAULT_CONFIG_DIRS
    environment_tags: Dict[str, str] = ENVIRONMENT_TAGS

    @abstractmethod
    def load_file(self, path: str) -> Optional[ConfigTree]:
        """Load one file. Return None when it contributes nothing."""
        pass

    def search_dirs(self, context: ResolutionContext) -> List[str]:
        """Ordered search directories for this kind, lowest priority first."""
        dirs = list(context.config_dirs if context.config_dirs is not None else self.default_dirs)
        dirs.extend(context.package_dirs)

        if context.app:
            dirs.append(os.path.join(context.app_base_dir, context.app, "config"))

        dirs.extend(context.custom_dirs)

        return [
            os.path.normpath(d if os.path.isabs(d) else os.path.join(context.project_root, d))
            for d in dirs
        ]

    def common_patterns(self) -> Tuple[List[str], List[str]]:
        """(patterns, exclude) of the base layer: every file not tagged for an environment."""
        patterns = [f"*.{ext}" for ext in self.extensions]
        exclude = [
            f"*.{tag}.{ext}"
            for tag in self.environment_tags.values()
            for ext in self.extensions
        ]
        return patterns, exclude

    def overlay_patterns(self, environment: Optional[str]) -> Optional[List[str]]:
        tag = self.environment_tags.get(environment) if environment else None
        if tag is None:
            return None
        return [f"*.{tag}.{ext}" for ext in self.extensions]

    def load(self, context: ResolutionContext) -> SourceLoadResult:
        """Base layer first, then the overlay of the active environment on top."""
        result = SourceLoadResult(kind=self.kind)
        dirs = self.search_dirs(context)

        patterns, exclude = self.common_patterns()
        common = load_tree(dirs, patterns, self.load_file, exclude, result)

        overlay_patterns = self.overlay_patterns(context.environment)
        if overlay_patterns:
            logger.debug(f"Applying {context.environment} overlay for {self.__class__.__name__}")
            overlay = load_tree(dirs, overlay_patterns, self.load_file, (), result)
            merge_config(common, overlay)

        result.config = common
        return result


class PyFileSource(ConfigurationSource):
    """Python modules binding a mapping to the module-level name ``config``."""

    kind = "scripted"
    extensions = ("py",)

    def load_file(self, path: str) -> Optional[ConfigTree]:
        module_loader.invalidate_cache(path)

        try:
            module = module_loader.evaluate(path)
        except Exception as e:
            raise ModuleEvaluationError(path, f"{type(e).__name__}: {e}") from e

        value = module_loader.exported_value(module)
        if value is None:
            logger.warn(f"Config module {path} defines no '{module_loader.EXPORT_NAME}', skipping")
            return None

        if not isinstance(value, Mapping):
            raise ModuleEvaluationError(
                path,
                f"'{module_loader.EXPORT_NAME}' must be a mapping, got {type(value).__name__}"
            )

        return dict(value)


class DataFileSource(ConfigurationSource):
    """Structured data files. A file that fails to parse is skipped, never fatal."""

    kind = "data"

    @abstractmethod
    def parse(self, text: str) -> Any:
        pass

    def load_file(self, path: str) -> Optional[ConfigTree]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = self.parse(f.read())
        except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
            raise FileParseError(path, str(e)) from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise FileParseError(path, f"root must be a mapping, got {type(data).__name__}")

        return data


class JsonFileSource(DataFileSource):
    extensions = ("json",)

    def parse(self, text: str) -> Any:
        return json.loads(text)


class YamlFileSource(DataFileSource):
    extensions = ("yaml", "yml")

    def parse(self, text: str) -> Any:
        return yaml.safe_load(text)


def default_sources() -> List[ConfigurationSource]:
    """Default registration, lowest priority first: data files win over scripted ones."""
    return [PyFileSource(), JsonFileSource(), YamlFileSource()]
