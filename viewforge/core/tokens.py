"""In-memory anti-forgery token registry.

Supplies the zero-argument token callback consumed by the
AntiForgeryToken substitution and lets a form handler redeem a token once.
"""

import logging
import secrets
import threading

from viewforge.core.exceptions import TokenGenerationError

logger = logging.getLogger(__name__)


class TokenRegistry:
    """Mints and tracks single-use anti-forgery tokens.

    Tokens carry 256 bits of entropy, so a collision is practically
    impossible; the attempt cap turns a broken entropy source into a loud
    failure instead of an endless loop.
    """

    def __init__(self, token_bytes: int = 32, max_attempts: int = 8) -> None:
        """Initialize the registry.

        Args:
            token_bytes: Random bytes per token (hex encoded, so twice as many characters).
            max_attempts: Upper bound on retries when a minted token already exists.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._token_bytes = token_bytes
        self._max_attempts = max_attempts
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def create_token(self) -> str:
        """Mint a new token and register it.

        Returns:
            The newly registered token string.

        Raises:
            TokenGenerationError: If no unique token was produced within the attempt cap.
        """
        with self._lock:
            for _ in range(self._max_attempts):
                token = secrets.token_hex(self._token_bytes)
                if token not in self._tokens:
                    self._tokens.add(token)
                    return token

        logger.error(f"Failed to mint a unique token after {self._max_attempts} attempts")
        raise TokenGenerationError(
            f"Could not mint a unique token after {self._max_attempts} attempts"
        )

    def consume(self, token: str) -> bool:
        """Redeem a token, removing it from the registry.

        Returns:
            True if the token was registered, False otherwise.
        """
        with self._lock:
            if token in self._tokens:
                self._tokens.remove(token)
                return True
            return False

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
