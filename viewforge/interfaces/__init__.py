"""Abstract base classes for view engine strategies."""

from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase
from viewforge.interfaces.substitution import BaseSubstitutionHandler
from viewforge.interfaces.view import BaseViewRenderer

__all__ = [
    "BaseDirectiveHandler",
    "BaseSubstitutionHandler",
    "BaseViewRenderer",
    "DirectiveContext",
    "ProcessPhase",
]
