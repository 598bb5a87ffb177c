"""Core business logic for FrameworkConfiguration."""

import asyncio
from copy import deepcopy
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .app_dirs import apply_app_dirs
from .configurator import run_configure_hooks
from .context import create_context
from .domain import ConfigTree, LoadResult, ResolutionContext, SourceLoadResult
from .logger import get_logger
from .lookup import get_path
from .merge import merge_config
from .path_parser import ConfigPath
from .sources import ConfigurationSource, default_sources
from .validators import SourceMissingError

logger = get_logger()


class FrameworkConfiguration:
    """Merged application configuration.

    Loads every registered source (base layer plus environment overlay per
    kind), merges them in registration order, adds app-specific directories
    and runs section configure hooks. Read-only once resolved.
    """

    def __init__(
        self,
        app: Optional[str] = None,
        app_base_dir: Optional[str] = None,
        custom_dirs: Optional[Iterable[str]] = None,
        *,
        environment: Optional[str] = None,
        config_dirs: Optional[Iterable[str]] = None,
        package_dirs: Optional[Iterable[str]] = None,
        project_root: Optional[str] = None,
        sources: Optional[Sequence[ConfigurationSource]] = None,
        argv: Optional[Sequence[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        context: Optional[ResolutionContext] = None,
    ):
        """
        Args:
            app: Application name, pass it when running in application mode
            app_base_dir: Where application directories live
            custom_dirs: Extra config dirs with the highest priority (useful in tests)
            environment: Active environment ("development", "production", ...)
            config_dirs: Replaces the built-in default config dirs
            package_dirs: Package-contributed dirs; discovered from entry points when None
            project_root: Root relative dirs are resolved against
            sources: Source kinds in merge order; the default kinds when None
            argv: Process arguments to read --app/--appPath from (sys.argv when None)
            environ: Environment to read APP_ENV from (os.environ when None)
            context: A prebuilt context, bypassing all of the above
        """
        self._context = context or create_context(
            app=app,
            app_base_dir=app_base_dir,
            custom_dirs=custom_dirs,
            environment=environment,
            config_dirs=config_dirs,
            package_dirs=package_dirs,
            project_root=project_root,
            argv=argv,
            environ=environ,
        )
        self._sources: List[ConfigurationSource] = list(default_sources() if sources is None else sources)
        self._data: ConfigTree = {}
        self._load_result: Optional[LoadResult] = None
        self._resolved = False

        logger.info(f"Running app: {self._context.app}")
        logger.info(f"Base dir at: {self._context.app_base_dir}")

    @property
    def context(self) -> ResolutionContext:
        return self._context

    @property
    def run_app(self) -> Optional[str]:
        return self._context.app

    @property
    def app_base_dir(self) -> str:
        return self._context.app_base_dir

    def _require_sources(self) -> List[ConfigurationSource]:
        if not self._sources:
            raise SourceMissingError(
                "No configuration sources configured. Please ensure that config module have any source to read from!"
            )
        return self._sources

    def resolve(self) -> 'FrameworkConfiguration':
        """Load and merge every source, one after the other."""
        if self._resolved:
            logger.warn("Configuration already resolved. Call reset() to resolve again.")
            return self

        sources = self._require_sources()
        results = [source.load(self._context) for source in sources]
        self._commit(results)
        return self

    async def resolve_async(self) -> 'FrameworkConfiguration':
        """Load every source concurrently; merging still follows registration order."""
        if self._resolved:
            logger.warn("Configuration already resolved. Call reset() to resolve again.")
            return self

        sources = self._require_sources()
        results = await asyncio.gather(
            *(asyncio.to_thread(source.load, self._context) for source in sources)
        )
        self._commit(list(results))
        return self

    def _commit(self, results: List[SourceLoadResult]) -> None:
        load_result = LoadResult(app_env=self._context.environment)
        data: ConfigTree = {}

        for result in results:
            merge_config(data, result.config)
            load_result.files_loaded.extend(result.files_loaded)
            load_result.errors.extend(result.errors)
            load_result.merge_order.append(result.kind)

        self._log_version(data)
        apply_app_dirs(data, self._context.app, self._context.app_base_dir)
        run_configure_hooks(data)

        # Published only once every hook succeeded
        self._data = data
        self._load_result = load_result
        self._resolved = True
        logger.info(
            f"Configuration resolved. Loaded: {len(load_result.files_loaded)} files, "
            f"skipped: {len(load_result.errors)}."
        )

    def _log_version(self, data: ConfigTree) -> None:
        version = get_path(data, "system.version")
        if isinstance(version, Mapping):
            logger.info(f"APP VERSION: {version.get('major')}.{version.get('minor')}")
        else:
            logger.info("APP VERSION UNKNOWN")

    def get(self, path: ConfigPath, default: Any = None) -> Any:
        """
        Get config value for given property, eg. "system.dirs" or ["system", "dirs"].
        Returns ``default`` when the value does not exist.
        """
        return get_path(self._data, path, default)

    def get_all(self) -> ConfigTree:
        return deepcopy(self._data)

    def is_resolved(self) -> bool:
        return self._resolved

    def get_load_result(self) -> Optional[LoadResult]:
        return self._load_result

    def reset(self) -> None:
        """Back to the unresolved state; the next resolve() starts from scratch."""
        self._data = {}
        self._load_result = None
        self._resolved = False
