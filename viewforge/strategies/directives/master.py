"""Master page (layout) directive.

``%%Master=Layout%%`` wraps the current page in the shared layout template,
placing the page in every ``%%View%%`` slot the layout declares.
"""

import logging

from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase

logger = logging.getLogger(__name__)

VIEW_SLOT = "%%View%%"


class MasterPageDirective(BaseDirectiveHandler):
    """Splices the page into its layout and records the layout dependency."""

    phase = ProcessPhase.COMPILE
    directive = "Master"

    def handle(self, context: DirectiveContext) -> str:
        layout_name = context.resolve_name(context.value)
        layout = context.templates[layout_name]

        context.add_dependency(layout_name)
        logger.debug(f"Applying layout {layout_name} to {context.view_name}")

        child = context.splice("")
        return layout.raw_content.replace(VIEW_SLOT, child)
