"""Core configuration, errors and token components.

The ComponentFactory lives in ``viewforge.core.factory``; it is not
re-exported here because it imports the engine, which imports this package.
"""

from viewforge.core.config import Settings, get_settings
from viewforge.core.tokens import TokenRegistry

__all__ = [
    "Settings",
    "get_settings",
    "TokenRegistry",
]
