"""View rendering interface consumed by host applications."""

from abc import ABC, abstractmethod
from collections.abc import Mapping


class BaseViewRenderer(ABC):
    """Renders compiled views by logical name.

    Host applications receive an implementation through their constructor
    or dependency injection and never reach into engine internals.
    """

    @abstractmethod
    def render_view(self, logical_name: str, tags: Mapping[str, str] | None = None) -> str | None:
        """Render a compiled view.

        Args:
            logical_name: The view to render, e.g. ``App/Index``.
            tags: Tag values substituted into ``{{key}}``, ``{|key|}`` and ``{!key!}``.

        Returns:
            The rendered page, or None if no such view is compiled.
        """
        ...
