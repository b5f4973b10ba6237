"""Template comment stripping."""

import re

from viewforge.interfaces.directive import ProcessPhase
from viewforge.interfaces.substitution import BaseSubstitutionHandler

COMMENT_BLOCK_RE = re.compile(r"@@(?P<block>[\s\S]+?)@@")


class CommentSubstitution(BaseSubstitutionHandler):
    """Removes ``@@ ... @@`` comment blocks at compile time."""

    phase = ProcessPhase.COMPILE

    def process(self, content: str) -> str:
        return COMMENT_BLOCK_RE.sub("", content)
