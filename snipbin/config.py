"""
Configuration module for Snipbin.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

from snipbin.ttl import DEFAULT_TTL, TTL_HOURS, is_valid_ttl

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    STORAGE_ROOT: str = os.getenv("STORAGE_ROOT", "pastes")
    SWEEP_INTERVAL_MINUTES: int = int(os.getenv("SWEEP_INTERVAL_MINUTES", "30"))
    SWEEP_WINDOW: int = int(os.getenv("SWEEP_WINDOW", "16"))
    DEFAULT_TTL: str = os.getenv("DEFAULT_TTL", DEFAULT_TTL)
    MAX_TITLE_LENGTH: int = int(os.getenv("MAX_TITLE_LENGTH", "200"))
    MAX_BODY_BYTES: int = int(os.getenv("MAX_BODY_BYTES", str(1024 * 1024)))
    APP_DOMAIN: str = os.getenv("APP_DOMAIN", "http://localhost:8080")
    PORT: int = int(os.getenv("PORT", "8080"))
    DEBUG: bool = _env_flag("DEBUG", "False")
    TEST_MODE: bool = _env_flag("TEST_MODE", "0")


settings = Settings()


def validate_settings() -> None:
    """
    Check settings that can't be validated at parse time.

    Raises:
        ValueError: If DEFAULT_TTL is not a registry label
    """
    if not is_valid_ttl(settings.DEFAULT_TTL):
        raise ValueError(
            f"DEFAULT_TTL={settings.DEFAULT_TTL!r} is not one of {', '.join(TTL_HOURS)}"
        )
