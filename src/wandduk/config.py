"""Application configuration."""

import logging
import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_DEFAULT_ROOT_NAME = ".wandduk"

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_root: Path | None = None
    image_directory: str = "WanddukImages"
    database_filename: str = "records.sqlite3"
    jpeg_quality: float = 0.8
    sample_capture_delay_seconds: float = 0.3
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="WANDDUK_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_storage_root(settings: Settings) -> Path | None:
    """Return the private storage root, or None if it cannot be located."""
    if settings.storage_root is not None:
        return settings.storage_root.expanduser()
    try:
        return Path.home() / _DEFAULT_ROOT_NAME
    except RuntimeError:
        _logger.warning("Could not determine a home directory for storage")
        return None
