"""Persisted view cache.

The registry triple (templates, compiled views, dependency graph) is
written as one indented JSON document so a restarted process can skip the
directory scan and the compile step. Output is sorted by logical name,
making the text identical for identical registry contents.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from viewforge.core.exceptions import CacheCorruptError
from viewforge.engine.models import ViewCache
from viewforge.engine.registry import RegistrySnapshot, ViewRegistry

logger = logging.getLogger(__name__)


def serialize_cache(snapshot: RegistrySnapshot) -> str:
    """Serialize a registry snapshot to cache text.

    Args:
        snapshot: The registry state to persist.

    Returns:
        The JSON cache document.
    """
    cache = ViewCache(
        templates=[snapshot.templates[name] for name in sorted(snapshot.templates)],
        compiled_views=[snapshot.compiled[name] for name in sorted(snapshot.compiled)],
        dependencies={name: list(snapshot.dependencies[name]) for name in sorted(snapshot.dependencies)},
    )
    return cache.model_dump_json(indent=2)


def deserialize_cache(text: str) -> ViewCache:
    """Parse cache text.

    Args:
        text: A document produced by serialize_cache.

    Returns:
        The parsed cache.

    Raises:
        CacheCorruptError: If the text is not a valid cache document.
    """
    try:
        return ViewCache.model_validate_json(text)
    except ValidationError as e:
        raise CacheCorruptError(f"Invalid view cache: {e.error_count()} errors") from e


def registry_from_cache(cache: ViewCache) -> ViewRegistry:
    """Build a registry holding the cached templates, views and dependencies."""
    return ViewRegistry(
        templates=cache.templates,
        compiled=cache.compiled_views,
        dependencies=cache.dependencies,
    )


def read_cache_file(path: Path) -> str | None:
    """Read persisted cache text.

    Returns:
        The cache text, or None if the file is missing or unreadable.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"No view cache at {path}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read view cache {path}: {e}")
        return None


def write_cache_file(path: Path, text: str) -> bool:
    """Write cache text, creating the cache directory if needed.

    Persistence is best-effort: failures are logged and reported through
    the return value, never raised.

    Returns:
        True if the cache was written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not write view cache {path}: {e}")
        return False

    logger.info(f"View cache written to {path}")
    return True
