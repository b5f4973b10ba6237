"""Template loader.

Discovers template files under the configured view roots and turns each
into a TemplateRecord keyed by its logical name.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from viewforge.core.exceptions import (
    NoTemplatesFoundError,
    NotConfiguredError,
    TemplateNotFoundError,
)
from viewforge.engine.models import TemplateRecord, fingerprint

logger = logging.getLogger(__name__)


class TemplateLoader:
    """Loads templates from one or more view roots.

    The logical name of a template is its path relative to the root it was
    found under, without the extension, using forward slashes. Reloading a
    single file derives the same name, which is what targeted reloads key on.
    """

    def __init__(
        self,
        view_roots: Sequence[str | Path],
        extension: str = ".html",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the loader.

        Args:
            view_roots: Directories to scan, in priority order.
            extension: Extension of template files (with leading dot).
            encoding: Character encoding of template files.

        Raises:
            NotConfiguredError: If no view roots are supplied.
        """
        if not view_roots:
            raise NotConfiguredError(
                "At least one view root is required to load view templates from."
            )

        self._view_roots = [Path(root).resolve() for root in view_roots]
        self._extension = extension
        self._encoding = encoding

    @property
    def view_roots(self) -> list[Path]:
        """Resolved view roots."""
        return list(self._view_roots)

    @property
    def extension(self) -> str:
        """Template file extension."""
        return self._extension

    def load(self) -> list[TemplateRecord]:
        """Scan every view root recursively.

        Returns:
            One TemplateRecord per template file, in root then path order.

        Raises:
            NoTemplatesFoundError: If the scan yields no templates.
        """
        templates: list[TemplateRecord] = []
        seen: set[str] = set()

        for root in self._view_roots:
            if not root.is_dir():
                logger.warning(f"View root does not exist: {root}")
                continue

            for path in sorted(root.rglob(f"*{self._extension}")):
                if not path.is_file():
                    continue

                record = self.load_file(path)
                if record.logical_name in seen:
                    logger.warning(
                        f"Duplicate template {record.logical_name} at {path} ignored"
                    )
                    continue

                seen.add(record.logical_name)
                templates.append(record)

        if not templates:
            raise NoTemplatesFoundError("Failed to load any view templates.")

        logger.info(f"Loaded {len(templates)} templates from {len(self._view_roots)} view roots")
        return templates

    def load_file(self, path: str | Path) -> TemplateRecord:
        """Load a single template file.

        Args:
            path: The template file to read.

        Returns:
            A fresh TemplateRecord with a recomputed fingerprint.

        Raises:
            TemplateNotFoundError: If the file is not under any view root.
            OSError: If the file cannot be read.
        """
        path = Path(path).resolve()
        logical_name = self.logical_name_for(path)

        content = path.read_text(encoding=self._encoding)
        logger.debug(f"Read template {logical_name} ({len(content)} characters)")

        return TemplateRecord(
            logical_name=logical_name,
            display_name=path.stem,
            source_path=str(path),
            raw_content=content,
            content_fingerprint=fingerprint(content),
        )

    def logical_name_for(self, path: str | Path) -> str:
        """Derive the logical name of a template path.

        Raises:
            TemplateNotFoundError: If the path is not under any view root.
        """
        path = Path(path).resolve()

        for root in self._view_roots:
            try:
                relative = path.relative_to(root)
            except ValueError:
                continue
            return relative.with_suffix("").as_posix()

        raise TemplateNotFoundError(str(path), f"Template is outside every view root: {path}")

    def is_template(self, path: str | Path) -> bool:
        """Check whether a path names a template file under a view root."""
        path = Path(path)
        if path.suffix.lower() != self._extension:
            return False
        try:
            self.logical_name_for(path)
        except TemplateNotFoundError:
            return False
        return True
