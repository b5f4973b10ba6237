"""Head block hoisting.

Pages declare markup for the document head inside ``[[ ... ]]`` blocks
anywhere in their body. The blocks are gathered in document order and
written into the layout's ``%%Head%%`` slot.
"""

import re

from viewforge.interfaces.directive import ProcessPhase
from viewforge.interfaces.substitution import BaseSubstitutionHandler

HEAD_BLOCK_RE = re.compile(r"\[\[(?P<block>[\s\S]+?)\]\]")
LEADING_WHITESPACE_RE = re.compile(r"^(\s+)", re.MULTILINE)
HEAD_SLOT = "%%Head%%"


class HeadSubstitution(BaseSubstitutionHandler):
    """Moves head blocks into the ``%%Head%%`` slot."""

    phase = ProcessPhase.COMPILE

    def process(self, content: str) -> str:
        blocks: list[str] = []

        for match in HEAD_BLOCK_RE.finditer(content):
            blocks.append(LEADING_WHITESPACE_RE.sub("", match.group("block")))

        if blocks:
            content = HEAD_BLOCK_RE.sub("", content)
            content = content.replace(HEAD_SLOT, "".join(blocks), 1)

        return content.replace(HEAD_SLOT, "")
