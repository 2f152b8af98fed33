"""Engine configuration using environment variables."""
import logging
import os
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Engine settings loaded from environment variables."""

    # Generation defaults
    DEFAULT_WIDTH: int = int(os.getenv("MAPFORGE_DEFAULT_WIDTH", "40"))
    DEFAULT_HEIGHT: int = int(os.getenv("MAPFORGE_DEFAULT_HEIGHT", "30"))
    DEFAULT_GRID_SIZE: int = int(os.getenv("MAPFORGE_DEFAULT_GRID_SIZE", "100"))

    # Export
    PNG_COMPRESSION: int = int(os.getenv("MAPFORGE_PNG_COMPRESSION", "6"))
    ASSET_BASE_URL: str = os.getenv("MAPFORGE_ASSET_BASE_URL", "")

    # Diagnostics
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the ``mapforge`` logger hierarchy.

    Library code only ever calls ``logging.getLogger``; hosting applications
    (or scripts) call this once at startup to get console output.
    """
    settings = get_settings()
    level_name = (level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)).upper()

    logger = logging.getLogger("mapforge")
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)
