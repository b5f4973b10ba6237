"""Abstract base class for buffer-wide substitution handlers."""

from abc import ABC, abstractmethod

from viewforge.interfaces.directive import ProcessPhase


class BaseSubstitutionHandler(ABC):
    """Rewrites patterns across the whole content buffer.

    Unlike directive handlers, substitutions are not tied to a located
    token; they run once per phase over the entire page.
    """

    phase: ProcessPhase = ProcessPhase.COMPILE

    @abstractmethod
    def process(self, content: str) -> str:
        """Return the rewritten content.

        Args:
            content: The full page content.
        """
        ...
