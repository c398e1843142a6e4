"""Persisted key-value preferences (theme, background, session user)."""

from datetime import datetime, timezone
from enum import Enum

from sqlmodel import Field, SQLModel

from lifesync.models.user import User


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PreferenceKey(str, Enum):
    """Known preference keys."""

    THEME = "theme"
    BACKGROUND = "background"
    USER = "user"


class ThemeMode(str, Enum):
    """Theme modes."""

    LIGHT = "light"
    DARK = "dark"


class Preference(SQLModel, table=True):
    """Preference database model. Absence of a row means default."""

    __tablename__ = "preferences"

    key: str = Field(primary_key=True, max_length=64)
    value: str
    updated_at: datetime = Field(default_factory=_utc_now)


class ThemePreset(SQLModel):
    """Named theme: a mode plus an optional background image."""

    name: str
    mode: ThemeMode
    background: str = ""


class ThemeUpdate(SQLModel):
    """Schema for setting the theme mode."""

    mode: ThemeMode


class BackgroundUpdate(SQLModel):
    """Schema for setting the background. An empty url clears it."""

    url: str = ""


class PreferencesResponse(SQLModel):
    """Resolved preferences with defaults applied."""

    theme: ThemeMode
    background: str | None
    user: User | None
