"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the view engine.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """View engine settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file. Complex values (lists, mappings)
    are read from the environment as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Template discovery
    app_root: Path = Field(
        default=Path("."),
        description="Application root that relative view roots are resolved against.",
    )
    view_roots: list[Path] = Field(
        default_factory=lambda: [Path("Views")],
        description="Directories scanned recursively for templates.",
    )
    template_extension: str = Field(
        default=".html",
        description="File extension identifying template files.",
    )

    # Cache persistence
    cache_dir: Path = Field(
        default=Path("Views/Cache"),
        description="Directory holding the persisted view cache.",
    )
    cache_file_name: str = Field(
        default="viewsCache.json",
        description="File name of the persisted view cache.",
    )

    # Compilation
    debug_mode: bool = Field(
        default=False,
        description="Bypass the persisted cache and expand bundles file by file.",
    )
    shared_resource_path: str = Field(
        default="/Resources",
        description="URL prefix for bundle files given without a path.",
    )
    bundles: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Bundle name to the list of asset paths it groups.",
    )

    # Change watcher
    watch_templates: bool = Field(
        default=True,
        description="Recompile templates when their files change on disk.",
    )
    reload_max_attempts: int = Field(
        default=10,
        ge=1,
        description="How many times a changed file is polled before giving up.",
    )
    reload_poll_interval: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds between readability polls of a changed file.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Optional directory for info.log and error.log files.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("template_extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        """Ensure the extension carries a leading dot."""
        v = v.strip().lower()
        return v if v.startswith(".") else f".{v}"

    @property
    def resolved_view_roots(self) -> list[Path]:
        """View roots resolved against the application root."""
        return [
            root if root.is_absolute() else (self.app_root / root).resolve()
            for root in self.view_roots
        ]

    @property
    def cache_file_path(self) -> Path:
        """Absolute location of the persisted cache file."""
        cache_dir = self.cache_dir
        if not cache_dir.is_absolute():
            cache_dir = (self.app_root / cache_dir).resolve()
        return cache_dir / self.cache_file_name

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
