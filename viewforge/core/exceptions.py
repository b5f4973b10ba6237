"""Exceptions raised by the view engine.

Every failure the engine reports derives from ViewEngineError so callers
can catch the whole family at a single boundary.
"""


class ViewEngineError(Exception):
    """Base class for all view engine errors."""

    pass


class NotConfiguredError(ViewEngineError):
    """Raised when no view roots were supplied."""

    pass


class NoTemplatesFoundError(ViewEngineError):
    """Raised when a full scan of the view roots yields no templates."""

    pass


class TemplateNotFoundError(ViewEngineError):
    """Raised when a directive or call references an unknown template.

    Attributes:
        logical_name: The logical name (or directive value) that failed to resolve.
    """

    def __init__(self, logical_name: str, message: str | None = None) -> None:
        self.logical_name = logical_name
        super().__init__(message or f"Cannot find view: {logical_name}")


class ReloadTimeoutError(ViewEngineError):
    """Raised when a changed file did not become readable in time.

    Attributes:
        path: The file that could not be opened.
        attempts: How many times the file was polled.
    """

    def __init__(self, path: str, attempts: int) -> None:
        self.path = path
        self.attempts = attempts
        super().__init__(f"File not readable after {attempts} attempts: {path}")


class CacheCorruptError(ViewEngineError):
    """Raised when persisted cache text cannot be deserialized."""

    pass


class TokenGenerationError(ViewEngineError):
    """Raised when a unique anti-forgery token cannot be minted."""

    pass
