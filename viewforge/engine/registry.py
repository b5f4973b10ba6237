"""Shared view registry with single-writer, multi-reader access.

The registry owns three collections as one unit: raw templates, compiled
views and the dependency graph. Writers work on private copies inside a
transaction and publish a new immutable snapshot when the transaction
commits; readers take the current snapshot and never block.
"""

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType

from viewforge.engine.models import TemplateRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of the registry at one point in time.

    Attributes:
        templates: Raw template records by logical name.
        compiled: Compiled view records by logical name.
        dependencies: View name to the names of the views it includes.
    """

    templates: Mapping[str, TemplateRecord] = field(default_factory=lambda: MappingProxyType({}))
    compiled: Mapping[str, TemplateRecord] = field(default_factory=lambda: MappingProxyType({}))
    dependencies: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )


class RegistryTransaction:
    """Mutable working copy handed to the single writer.

    Records are replaced, never edited in place, so objects reachable from
    a published snapshot stay unchanged while the transaction is open.
    """

    def __init__(self, snapshot: RegistrySnapshot) -> None:
        self.templates: dict[str, TemplateRecord] = dict(snapshot.templates)
        self.compiled: dict[str, TemplateRecord] = dict(snapshot.compiled)
        self.dependencies: dict[str, list[str]] = {
            name: list(deps) for name, deps in snapshot.dependencies.items()
        }

    def add_dependency(self, view_name: str, dependency: str) -> None:
        """Record that view_name includes dependency (no duplicates)."""
        deps = self.dependencies.setdefault(view_name, [])
        if dependency not in deps:
            deps.append(dependency)

    def reset_dependencies(self, view_name: str) -> None:
        """Start a fresh dependency list for a view about to be recompiled."""
        self.dependencies[view_name] = []

    def dependents_of(self, logical_name: str) -> list[str]:
        """Return every view whose dependency list contains logical_name."""
        return [name for name, deps in self.dependencies.items() if logical_name in deps]

    def freeze(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            templates=MappingProxyType(dict(self.templates)),
            compiled=MappingProxyType(dict(self.compiled)),
            dependencies=MappingProxyType(
                {name: tuple(deps) for name, deps in self.dependencies.items()}
            ),
        )


class ViewRegistry:
    """Owner of the template store, compiled views and dependency graph."""

    def __init__(
        self,
        templates: Iterable[TemplateRecord] = (),
        compiled: Iterable[TemplateRecord] = (),
        dependencies: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        txn = RegistryTransaction(RegistrySnapshot())
        for record in templates:
            txn.templates[record.logical_name] = record
        for record in compiled:
            txn.compiled[record.logical_name] = record
        for name, deps in (dependencies or {}).items():
            txn.dependencies.setdefault(name, [])
            for dep in deps:
                txn.add_dependency(name, dep)

        self._snapshot = txn.freeze()
        self._lock = threading.RLock()
        self._local = threading.local()

    @property
    def snapshot(self) -> RegistrySnapshot:
        """The most recently published snapshot."""
        return self._snapshot

    @contextmanager
    def write(self) -> Iterator[RegistryTransaction]:
        """Open an exclusive write transaction.

        The snapshot is published only if the outermost block exits normally.
        A nested call on the same thread joins the open transaction.

        Yields:
            The transaction to mutate.
        """
        with self._lock:
            current = getattr(self._local, "txn", None)
            if current is not None:
                yield current
                return

            txn = RegistryTransaction(self._snapshot)
            self._local.txn = txn
            try:
                yield txn
            except BaseException:
                logger.debug("Registry transaction rolled back")
                raise
            else:
                self._snapshot = txn.freeze()
            finally:
                self._local.txn = None
