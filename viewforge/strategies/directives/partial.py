"""Partial page directive.

``%%Partial=Name%%`` is replaced in place with the raw content of the
shared partial template.
"""

import logging

from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase

logger = logging.getLogger(__name__)


class PartialPageDirective(BaseDirectiveHandler):
    """Inlines a shared partial and records the dependency."""

    phase = ProcessPhase.AFTER_COMPILE
    directive = "Partial"

    def handle(self, context: DirectiveContext) -> str:
        partial_name = context.resolve_name(context.value)
        partial = context.templates[partial_name]

        context.add_dependency(partial_name)
        logger.debug(f"Inlining partial {partial_name} into {context.view_name}")

        return context.splice(partial.raw_content)
