"""View engine facade.

Boots the registry from persisted cache text or a full directory scan,
compiles what is missing, and exposes rendering, compilation, cache
export and change watching to the host application.
"""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from viewforge.core.exceptions import CacheCorruptError, NotConfiguredError
from viewforge.engine.cache import (
    deserialize_cache,
    registry_from_cache,
    serialize_cache,
    write_cache_file,
)
from viewforge.engine.compiler import ViewCompiler
from viewforge.engine.loader import TemplateLoader
from viewforge.engine.models import TemplateRecord
from viewforge.engine.registry import ViewRegistry
from viewforge.engine.watcher import ChangeWatcher
from viewforge.interfaces.directive import BaseDirectiveHandler
from viewforge.interfaces.substitution import BaseSubstitutionHandler
from viewforge.interfaces.view import BaseViewRenderer

logger = logging.getLogger(__name__)


class ViewEngine(BaseViewRenderer):
    """Loads, compiles, renders and watches view templates.

    Example:
        ```python
        engine = ViewEngine(
            view_roots=["Views"],
            directive_handlers=[MasterPageDirective(), PartialPageDirective()],
            substitution_handlers=[CommentSubstitution(), HeadSubstitution()],
        )
        html = engine.render_view("App/Index", {"title": "Home"})
        ```
    """

    def __init__(
        self,
        view_roots: Sequence[str | Path],
        directive_handlers: Sequence[BaseDirectiveHandler],
        substitution_handlers: Sequence[BaseSubstitutionHandler],
        cache_text: str | None = None,
        extension: str = ".html",
        reload_max_attempts: int = 10,
        reload_poll_interval: float = 1.0,
    ) -> None:
        """Initialize the engine.

        Args:
            view_roots: Directories holding templates.
            directive_handlers: Directive handlers in run order.
            substitution_handlers: Substitution handlers in run order.
            cache_text: Previously persisted cache; a full scan is used when
                it is missing or corrupt.
            extension: Template file extension.
            reload_max_attempts: Readability polls per changed file.
            reload_poll_interval: Seconds between readability polls.

        Raises:
            NotConfiguredError: If no view roots are supplied.
            NoTemplatesFoundError: If a full scan finds no templates.
        """
        if not view_roots:
            raise NotConfiguredError(
                "At least one view root is required to load view templates from."
            )

        self._loader = TemplateLoader(view_roots, extension=extension)
        self._registry = self._boot_registry(cache_text)
        self._compiler = ViewCompiler(self._registry, directive_handlers, substitution_handlers)
        self.cache_updated = False

        if not self._registry.snapshot.compiled:
            self._compiler.compile_all()
            self.cache_updated = True

        self._watcher = ChangeWatcher(
            self._registry,
            self._compiler,
            self._loader,
            max_attempts=reload_max_attempts,
            poll_interval=reload_poll_interval,
            on_reloaded=self._on_reloaded,
        )
        self._cache_path: Path | None = None

    def _boot_registry(self, cache_text: str | None) -> ViewRegistry:
        if cache_text:
            try:
                cache = deserialize_cache(cache_text)
                logger.info(
                    f"Loaded view cache with {len(cache.templates)} templates "
                    f"and {len(cache.compiled_views)} compiled views"
                )
                if cache.templates:
                    return registry_from_cache(cache)
                logger.warning("View cache holds no templates, rescanning view roots")
            except CacheCorruptError as e:
                logger.warning(f"Ignoring corrupt view cache: {e}")

        return ViewRegistry(templates=self._loader.load())

    @property
    def compiler(self) -> ViewCompiler:
        return self._compiler

    @property
    def watcher(self) -> ChangeWatcher:
        return self._watcher

    @property
    def templates(self) -> Mapping[str, TemplateRecord]:
        """Raw templates by logical name (read-only snapshot)."""
        return self._registry.snapshot.templates

    @property
    def compiled_views(self) -> Mapping[str, TemplateRecord]:
        """Compiled views by logical name (read-only snapshot)."""
        return self._registry.snapshot.compiled

    @property
    def dependencies(self) -> Mapping[str, tuple[str, ...]]:
        """Dependency graph (read-only snapshot)."""
        return self._registry.snapshot.dependencies

    def render_view(self, logical_name: str, tags: Mapping[str, str] | None = None) -> str | None:
        return self._compiler.render(logical_name, tags)

    def compile(self, logical_name: str) -> TemplateRecord:
        """Compile one view.

        Raises:
            TemplateNotFoundError: If the view or one of its includes is unknown.
        """
        view = self._compiler.compile(logical_name)
        self.cache_updated = True
        return view

    def get_cache(self) -> str:
        """Serialize the current registry and clear the cache_updated flag."""
        self.cache_updated = False
        return serialize_cache(self._registry.snapshot)

    def persist_cache(self, path: Path) -> bool:
        """Write the cache to path; failures are logged, not raised."""
        self._cache_path = path
        return write_cache_file(path, self.get_cache())

    def start_watching(self, cache_path: Path | None = None) -> None:
        """Start the change watcher.

        Args:
            cache_path: If given, the cache is rewritten after every reload.
        """
        if cache_path is not None:
            self._cache_path = cache_path
        self._watcher.start()

    def stop_watching(self) -> None:
        self._watcher.stop()

    def _on_reloaded(self, logical_name: str) -> None:
        # The flag stays set until the host reads the cache via get_cache()
        if self._cache_path is not None:
            write_cache_file(self._cache_path, serialize_cache(self._registry.snapshot))
        self.cache_updated = True
