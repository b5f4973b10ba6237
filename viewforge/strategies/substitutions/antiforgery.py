"""Anti-forgery token injection at render time."""

import re
from collections.abc import Callable

from viewforge.interfaces.directive import ProcessPhase
from viewforge.interfaces.substitution import BaseSubstitutionHandler

ANTI_FORGERY_TOKEN_SLOT = "%%AntiForgeryToken%%"


class AntiForgeryTokenSubstitution(BaseSubstitutionHandler):
    """Replaces every token slot with a freshly minted token.

    Each occurrence gets its own token, so a page with several forms
    carries several distinct tokens.
    """

    phase = ProcessPhase.RENDER

    def __init__(self, create_token: Callable[[], str]) -> None:
        """Initialize the substitution.

        Args:
            create_token: Mints and registers a new token string.
        """
        self._create_token = create_token
        self._slot_re = re.compile(re.escape(ANTI_FORGERY_TOKEN_SLOT))

    def process(self, content: str) -> str:
        return self._slot_re.sub(lambda _: self._create_token(), content)
