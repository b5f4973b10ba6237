"""Abstract base class for compiler directive handlers.

The Strategy Pattern allows directive handlers to be registered with the
compiler at startup and run in registration order during each pass.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from viewforge.engine.models import TemplateRecord


class ProcessPhase(str, Enum):
    """Compiler phase a handler runs in."""

    COMPILE = "compile"
    AFTER_COMPILE = "after_compile"
    RENDER = "render"


@dataclass(frozen=True)
class DirectiveContext:
    """Everything a handler needs to process one located directive token.

    Attributes:
        token: The full matched token text, e.g. ``%%Partial=Nav%%``.
        directive: The directive name, e.g. ``Partial``.
        value: The directive value, e.g. ``Nav``.
        content: The page content at the time the handler runs.
        view_name: Logical name of the view being compiled.
        templates: Raw templates by logical name.
        resolve_name: Maps a directive value to a known logical name.
        add_dependency: Records that the view includes another view.
    """

    token: str
    directive: str
    value: str
    content: str
    view_name: str
    templates: Mapping[str, TemplateRecord]
    resolve_name: Callable[[str], str]
    add_dependency: Callable[[str], None]

    def splice(self, replacement: str) -> str:
        """Replace the located token (first occurrence only) with replacement.

        Returns the content unchanged if the token is no longer present.
        """
        index = self.content.find(self.token)
        if index < 0:
            return self.content
        return self.content[:index] + replacement + self.content[index + len(self.token):]


class BaseDirectiveHandler(ABC):
    """Abstract base class for ``%%Name=Value%%`` directive handlers.

    Example:
        ```python
        class PartialDirective(BaseDirectiveHandler):
            phase = ProcessPhase.AFTER_COMPILE
            directive = "Partial"

            def handle(self, context: DirectiveContext) -> str:
                ...
        ```
    """

    phase: ProcessPhase = ProcessPhase.COMPILE
    directive: str = ""

    def process(self, context: DirectiveContext) -> str:
        """Run the handler if the directive name matches.

        Args:
            context: The located directive and current page content.

        Returns:
            The new page content; unchanged for non-matching directives.
        """
        if context.directive != self.directive:
            return context.content
        return self.handle(context)

    @abstractmethod
    def handle(self, context: DirectiveContext) -> str:
        """Rewrite the content for a directive this handler responds to.

        Raises:
            TemplateNotFoundError: If the directive references an unknown template.
        """
        ...
