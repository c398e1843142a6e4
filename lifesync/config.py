"""Environment configuration for the LifeSync reminder service."""

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./lifesync.db")
        self.FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        # Local timezone used to interpret manual date/time form input
        self.TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

        # Gemini inference backend
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

        # Alarm scanner
        self.ALARM_SCAN_INTERVAL_SECONDS: float = float(
            os.getenv("ALARM_SCAN_INTERVAL_SECONDS", "5")
        )
        self.ALARM_WINDOW_SECONDS: float = float(os.getenv("ALARM_WINDOW_SECONDS", "60"))

        self.SEED_DEMO_REMINDERS: bool = _env_bool("SEED_DEMO_REMINDERS", False)

        # Voice recordings with no chunk for this long are reclaimed
        self.RECORDING_IDLE_TIMEOUT_SECONDS: float = float(
            os.getenv("RECORDING_IDLE_TIMEOUT_SECONDS", "120")
        )

        # Sound assets signalled to clients
        self.ALARM_SOUND_URL: str = os.getenv(
            "ALARM_SOUND_URL",
            "https://assets.mixkit.co/active_storage/sfx/1862/1862-preview.mp3",
        )
        self.COMPLETE_SOUND_URL: str = os.getenv(
            "COMPLETE_SOUND_URL",
            "https://assets.mixkit.co/active_storage/sfx/2000/2000-preview.mp3",
        )

    @property
    def log_level(self) -> str:
        """LOG_LEVEL upper-cased, or INFO when it names no known level."""
        level = self.LOG_LEVEL.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level

    def validate(self) -> None:
        """Validate that settings are usable."""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required")
        if self.ALARM_SCAN_INTERVAL_SECONDS <= 0:
            raise ValueError("ALARM_SCAN_INTERVAL_SECONDS must be positive")
        if self.ALARM_WINDOW_SECONDS < self.ALARM_SCAN_INTERVAL_SECONDS:
            raise ValueError(
                "ALARM_WINDOW_SECONDS must be at least ALARM_SCAN_INTERVAL_SECONDS"
            )
        if self.log_level != self.LOG_LEVEL.strip().upper():
            raise ValueError(f"LOG_LEVEL {self.LOG_LEVEL!r} is not a logging level")
        if self.RECORDING_IDLE_TIMEOUT_SECONDS <= 0:
            raise ValueError("RECORDING_IDLE_TIMEOUT_SECONDS must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    return settings
