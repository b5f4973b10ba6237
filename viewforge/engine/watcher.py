"""Template change watcher.

Observes the view roots with watchdog. When a template file changes it is
reloaded, the template store is updated and either the view itself or every
view that includes it is recompiled.
"""

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from viewforge.core.exceptions import ReloadTimeoutError
from viewforge.engine.compiler import ViewCompiler
from viewforge.engine.loader import TemplateLoader
from viewforge.engine.models import TemplateRecord
from viewforge.engine.registry import ViewRegistry

logger = logging.getLogger(__name__)


def can_open_for_read(path: Path) -> bool:
    """Check whether a file can currently be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


class _TemplateEventHandler(FileSystemEventHandler):
    """Forwards template file events to the watcher."""

    def __init__(self, watcher: "ChangeWatcher") -> None:
        super().__init__()
        self._watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch_path(event)

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch_path(event)

    def _dispatch_path(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        path = Path(str(event.src_path))
        if self._watcher.loader.is_template(path):
            self._watcher.handle_change(path)


class ChangeWatcher:
    """Reloads and recompiles templates as their files change.

    Notifications are disabled while a change is being processed; events
    arriving in that window are dropped. Every failure is logged and the
    watcher re-arms itself, so the previously compiled views keep serving.
    """

    def __init__(
        self,
        registry: ViewRegistry,
        compiler: ViewCompiler,
        loader: TemplateLoader,
        max_attempts: int = 10,
        poll_interval: float = 1.0,
        on_reloaded: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            registry: Registry to update.
            compiler: Compiler used for recompiles.
            loader: Loader used to re-read changed files.
            max_attempts: Readability polls before a reload is abandoned.
            poll_interval: Seconds between readability polls.
            on_reloaded: Called with the logical name after a committed reload.
        """
        self._registry = registry
        self._compiler = compiler
        self._loader = loader
        self._max_attempts = max(1, max_attempts)
        self._poll_interval = poll_interval
        self._on_reloaded = on_reloaded

        self._enabled = threading.Event()
        self._enabled.set()
        self._observer: Observer | None = None

    @property
    def loader(self) -> TemplateLoader:
        return self._loader

    @property
    def enabled(self) -> bool:
        """Whether change notifications are currently processed."""
        return self._enabled.is_set()

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        """Start observing every existing view root recursively."""
        if self.is_running:
            return

        observer = Observer()
        handler = _TemplateEventHandler(self)
        for root in self._loader.view_roots:
            if root.is_dir():
                observer.schedule(handler, str(root), recursive=True)
                logger.info(f"Watching view root {root}")

        observer.daemon = True
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        """Stop observing and wait for the observer thread to exit."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info("Template watcher stopped")

    def handle_change(self, path: str | Path) -> bool:
        """Reload a changed template and recompile what depends on it.

        Args:
            path: The changed template file.

        Returns:
            True if the reload was committed, False if it was skipped or failed.
        """
        if not self._enabled.is_set():
            logger.debug(f"Change to {path} ignored while another reload is in progress")
            return False

        self._enabled.clear()
        try:
            path = Path(path)
            self._wait_until_readable(path)
            logical_name = self._reload(path)

            if self._on_reloaded is not None:
                self._on_reloaded(logical_name)
            return True
        except Exception as e:
            logger.error(f"Reload of {path} failed: {e}", exc_info=True)
            return False
        finally:
            self._enabled.set()

    def _wait_until_readable(self, path: Path) -> None:
        for attempt in range(1, self._max_attempts + 1):
            if can_open_for_read(path):
                return
            logger.debug(f"{path} not readable yet (attempt {attempt}/{self._max_attempts})")
            if attempt < self._max_attempts:
                time.sleep(self._poll_interval)

        raise ReloadTimeoutError(str(path), self._max_attempts)

    def _reload(self, path: Path) -> str:
        changed = self._loader.load_file(path)
        logical_name = changed.logical_name

        with self._registry.write() as txn:
            txn.templates[logical_name] = changed

            stale = txn.compiled.get(logical_name)
            if stale is not None and stale.content_fingerprint == changed.content_fingerprint:
                stale = None

            if stale is not None and not changed.is_fragment:
                txn.compiled[logical_name] = self._refresh(stale, changed)

            if stale is not None:
                self._compiler.recompile_dependencies(logical_name)
            else:
                self._compiler.compile(logical_name)

            # Views that failed on a missing layout or partial may resolve now
            if any(name not in txn.compiled for name in txn.templates):
                self._compiler.compile_pending()

        logger.info(f"Reloaded template {logical_name}")
        return logical_name

    @staticmethod
    def _refresh(stale: TemplateRecord, changed: TemplateRecord) -> TemplateRecord:
        return stale.model_copy(
            update={
                "raw_content": changed.raw_content,
                "content_fingerprint": changed.content_fingerprint,
                "compiled_content": changed.raw_content,
                "last_render_result": "",
                "source_path": changed.source_path,
            }
        )
