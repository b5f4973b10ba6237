"""viewforge - server-side view templating engine.

Loads HTML templates, expands layout/partial/placeholder/bundle directives,
substitutes tag values at render time and caches compiled views.
"""

from viewforge.core.exceptions import (
    CacheCorruptError,
    NoTemplatesFoundError,
    NotConfiguredError,
    ReloadTimeoutError,
    TemplateNotFoundError,
    TokenGenerationError,
    ViewEngineError,
)
from viewforge.engine.view_engine import ViewEngine

__version__ = "0.1.0"
__all__ = [
    "CacheCorruptError",
    "NoTemplatesFoundError",
    "NotConfiguredError",
    "ReloadTimeoutError",
    "TemplateNotFoundError",
    "TokenGenerationError",
    "ViewEngine",
    "ViewEngineError",
]
