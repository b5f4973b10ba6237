"""Component Factory for handler and engine instantiation.

Handlers are registered explicitly here instead of being discovered at
runtime, so the host application controls exactly which directives and
substitutions run and in what order.
"""

import logging
from collections.abc import Callable

from viewforge.core.config import Settings, get_settings
from viewforge.core.tokens import TokenRegistry
from viewforge.engine.cache import read_cache_file, write_cache_file
from viewforge.engine.view_engine import ViewEngine
from viewforge.interfaces.directive import BaseDirectiveHandler
from viewforge.interfaces.substitution import BaseSubstitutionHandler
from viewforge.strategies.directives import (
    BundleDirective,
    MasterPageDirective,
    PartialPageDirective,
    PlaceholderDirective,
)
from viewforge.strategies.substitutions import (
    AntiForgeryTokenSubstitution,
    CommentSubstitution,
    HeadSubstitution,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating view engine components based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        engine = factory.get_view_engine()
        html = engine.render_view("App/Index", {"title": "Home"})
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        token_registry: TokenRegistry | None = None,
    ) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: View engine settings. If None, uses global settings.
            token_registry: Registry minting anti-forgery tokens. If None, a new one is created.
        """
        self._settings = settings or get_settings()
        self._token_registry = token_registry or TokenRegistry()
        self._view_engine_cache: ViewEngine | None = None

    @property
    def token_registry(self) -> TokenRegistry:
        return self._token_registry

    def get_directive_handlers(self) -> list[BaseDirectiveHandler]:
        """Build the directive handlers in run order.

        Returns:
            Master, Placeholder, Partial and Bundle handlers.
        """
        bundles = self._settings.bundles

        return [
            MasterPageDirective(),
            PlaceholderDirective(),
            PartialPageDirective(),
            BundleDirective(
                debug_mode=self._settings.debug_mode,
                shared_resource_path=self._settings.shared_resource_path,
                get_bundle_files=bundles.get,
            ),
        ]

    def get_substitution_handlers(
        self, create_token: Callable[[], str] | None = None
    ) -> list[BaseSubstitutionHandler]:
        """Build the substitution handlers in run order.

        Args:
            create_token: Token callback. If None, the factory's token registry is used.

        Returns:
            Comment, AntiForgeryToken and Head handlers.
        """
        return [
            CommentSubstitution(),
            AntiForgeryTokenSubstitution(create_token or self._token_registry.create_token),
            HeadSubstitution(),
        ]

    def get_view_engine(self) -> ViewEngine:
        """Get the view engine, booting it on first access.

        Outside debug mode the persisted cache is used when present. The
        cache is rewritten when it was missing or unusable, and always in
        debug mode.

        Returns:
            The ViewEngine instance.

        Raises:
            NotConfiguredError: If no view roots are configured.
            NoTemplatesFoundError: If no cache is usable and no templates exist.
        """
        if self._view_engine_cache is None:
            settings = self._settings
            cache_path = settings.cache_file_path

            cache_text = None
            if not settings.debug_mode:
                cache_text = read_cache_file(cache_path)

            logger.info(f"Instantiating view engine for roots {settings.resolved_view_roots}")

            engine = ViewEngine(
                view_roots=settings.resolved_view_roots,
                directive_handlers=self.get_directive_handlers(),
                substitution_handlers=self.get_substitution_handlers(),
                cache_text=cache_text,
                extension=settings.template_extension,
                reload_max_attempts=settings.reload_max_attempts,
                reload_poll_interval=settings.reload_poll_interval,
            )

            if engine.cache_updated or settings.debug_mode:
                write_cache_file(cache_path, engine.get_cache())

            self._view_engine_cache = engine

        return self._view_engine_cache

    def clear_cache(self) -> None:
        """Drop the cached engine, stopping its watcher.

        This forces a new engine to be booted on next access.
        """
        if self._view_engine_cache is not None:
            self._view_engine_cache.stop_watching()
        self._view_engine_cache = None
        logger.debug("Component factory cache cleared")
