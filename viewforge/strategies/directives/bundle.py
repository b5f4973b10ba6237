"""Resource bundle directive.

``%%Bundle=Name%%`` expands to ``<link>`` and ``<script>`` tags. In debug
mode every file of the named bundle is linked individually; otherwise the
bundle name itself is linked as one pre-built asset.
"""

import logging
from collections.abc import Callable, Sequence
from pathlib import PurePosixPath

from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase

logger = logging.getLogger(__name__)

CSS_INCLUDE_TAG = '<link href="{0}" rel="stylesheet" type="text/css" />'
JS_INCLUDE_TAG = '<script src="{0}" type="text/javascript"></script>'


class BundleDirective(BaseDirectiveHandler):
    """Resolves bundle names into asset include tags.

    Resolved markup is cached per bundle name for the lifetime of the
    handler instance.
    """

    phase = ProcessPhase.AFTER_COMPILE
    directive = "Bundle"

    def __init__(
        self,
        debug_mode: bool,
        shared_resource_path: str,
        get_bundle_files: Callable[[str], Sequence[str] | None],
    ) -> None:
        """Initialize the bundle directive.

        Args:
            debug_mode: Link each bundle file instead of the pre-built bundle.
            shared_resource_path: URL prefix for files given without a path.
            get_bundle_files: Returns the files of a bundle, or None if unknown.
        """
        self._debug_mode = debug_mode
        self._shared_resource_path = shared_resource_path.rstrip("/")
        self._get_bundle_files = get_bundle_files
        self._bundle_links: dict[str, str] = {}

    def bundle_link(self, bundle_path: str) -> str:
        """Build the include tag for one asset path.

        Bare file names are placed under ``<shared>/<extension>/``. Files
        that are neither css nor js produce no tag.
        """
        extension = PurePosixPath(bundle_path).suffix.lstrip(".").lower()

        href = bundle_path
        if "/" not in bundle_path:
            href = "/".join([self._shared_resource_path, extension, bundle_path])

        if extension == "css":
            return CSS_INCLUDE_TAG.format(href)
        if extension == "js":
            return JS_INCLUDE_TAG.format(href)

        logger.warning(f"Unsupported bundle file type: {bundle_path}")
        return ""

    def resolve(self, bundle_name: str) -> str:
        """Return the include markup for a bundle, resolving it once."""
        if bundle_name in self._bundle_links:
            return self._bundle_links[bundle_name]

        links: list[str] = []
        if bundle_name:
            if self._debug_mode:
                files = self._get_bundle_files(bundle_name) or []
                if not files:
                    logger.warning(f"Bundle {bundle_name} has no files")
                links.extend(self.bundle_link(path) for path in files)
            else:
                links.append(self.bundle_link(bundle_name))

        markup = "".join(f"{link}\n" for link in links if link)
        self._bundle_links[bundle_name] = markup
        return markup

    def handle(self, context: DirectiveContext) -> str:
        return context.splice(self.resolve(context.value))
