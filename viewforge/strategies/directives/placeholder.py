"""Placeholder directive.

``%%Placeholder=Name%%`` pulls the block written as ``[Name]...[/Name]``
into the position of the token. Pages use it to fill slots declared by
their layout.
"""

import re

from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase


class PlaceholderDirective(BaseDirectiveHandler):
    """Moves a named bracketed block into the placeholder position."""

    phase = ProcessPhase.AFTER_COMPILE
    directive = "Placeholder"

    def __init__(self) -> None:
        self._block_patterns: dict[str, re.Pattern[str]] = {}

    def _block_pattern(self, name: str) -> re.Pattern[str]:
        pattern = self._block_patterns.get(name)
        if pattern is None:
            escaped = re.escape(name)
            pattern = re.compile(rf"\[{escaped}\](?P<block>[\s\S]+?)\[/{escaped}\]")
            self._block_patterns[name] = pattern
        return pattern

    def handle(self, context: DirectiveContext) -> str:
        match = self._block_pattern(context.value).search(context.content)
        if match is None:
            return context.content

        content = context.splice(match.group("block"))
        return content.replace(match.group(0), "", 1)
