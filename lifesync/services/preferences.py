"""Persisted preferences: theme mode, background image and session user.

Each key is independently settable and clearable. A missing key means the
default: the client's system theme, no background, logged out.
"""

import json
import logging
import random
from datetime import datetime, timezone

from sqlmodel import Session

from lifesync.models.preference import (
    Preference,
    PreferenceKey,
    PreferencesResponse,
    ThemeMode,
    ThemePreset,
)
from lifesync.models.user import User

logger = logging.getLogger(__name__)

THEME_PRESETS: list[ThemePreset] = [
    ThemePreset(name="Default Light", mode=ThemeMode.LIGHT),
    ThemePreset(name="Default Dark", mode=ThemeMode.DARK),
    ThemePreset(
        name="Ocean Breeze",
        mode=ThemeMode.LIGHT,
        background="https://images.unsplash.com/photo-1507525428034-b723cf961d3e?q=80&w=2946&auto=format&fit=crop",
    ),
    ThemePreset(
        name="Midnight Space",
        mode=ThemeMode.DARK,
        background="https://images.unsplash.com/photo-1451187580459-43490279c0fa?q=80&w=2944&auto=format&fit=crop",
    ),
    ThemePreset(
        name="Forest Mist",
        mode=ThemeMode.LIGHT,
        background="https://images.unsplash.com/photo-1519681393798-3828fb4090bb?q=80&w=2940&auto=format&fit=crop",
    ),
    ThemePreset(
        name="Urban Sunset",
        mode=ThemeMode.DARK,
        background="https://images.unsplash.com/photo-1493246507139-91e8fad9978e?q=80&w=2940&auto=format&fit=crop",
    ),
]

# Used when the random pick lands on a gradient-only preset
FALLBACK_BACKGROUND = (
    "https://images.unsplash.com/photo-1550684848-fac1c5b4e853?q=80&w=2940&auto=format&fit=crop"
)


def find_preset(name: str) -> ThemePreset | None:
    """Case-insensitive preset lookup."""
    wanted = name.strip().lower()
    return next((p for p in THEME_PRESETS if p.name.lower() == wanted), None)


class PreferencesStore:
    """Key-value preferences backed by the ``preferences`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # -- raw key access -------------------------------------------------------

    def get(self, key: PreferenceKey) -> str | None:
        row = self.session.get(Preference, key.value)
        return row.value if row else None

    def set(self, key: PreferenceKey, value: str) -> None:
        row = self.session.get(Preference, key.value)
        if row is None:
            row = Preference(key=key.value, value=value)
        else:
            row.value = value
            row.updated_at = datetime.now(timezone.utc)
        self.session.add(row)
        self.session.commit()

    def clear(self, key: PreferenceKey) -> None:
        row = self.session.get(Preference, key.value)
        if row is not None:
            self.session.delete(row)
            self.session.commit()

    # -- load-or-default ------------------------------------------------------

    def init(self, prefers_dark: bool = False) -> PreferencesResponse:
        """Load every preference, applying defaults for missing keys."""
        return PreferencesResponse(
            theme=self.theme(prefers_dark),
            background=self.background(),
            user=self.user(),
        )

    # -- theme ----------------------------------------------------------------

    def theme(self, prefers_dark: bool = False) -> ThemeMode:
        """Saved theme, or the system preference when nothing is saved."""
        saved = self.get(PreferenceKey.THEME)
        if saved == ThemeMode.DARK.value:
            return ThemeMode.DARK
        if saved == ThemeMode.LIGHT.value:
            return ThemeMode.LIGHT
        return ThemeMode.DARK if prefers_dark else ThemeMode.LIGHT

    def set_theme(self, mode: ThemeMode) -> ThemeMode:
        self.set(PreferenceKey.THEME, mode.value)
        return mode

    def toggle_theme(self, prefers_dark: bool = False) -> ThemeMode:
        current = self.theme(prefers_dark)
        return self.set_theme(ThemeMode.LIGHT if current == ThemeMode.DARK else ThemeMode.DARK)

    # -- background -----------------------------------------------------------

    def background(self) -> str | None:
        return self.get(PreferenceKey.BACKGROUND) or None

    def set_background(self, url: str) -> str | None:
        """Set the background image; an empty value clears it."""
        if url:
            self.set(PreferenceKey.BACKGROUND, url)
            return url
        self.clear(PreferenceKey.BACKGROUND)
        return None

    def clear_background(self) -> None:
        self.clear(PreferenceKey.BACKGROUND)

    def apply_preset(self, preset: ThemePreset) -> None:
        """Set both the theme mode and the background of a preset."""
        self.set_theme(preset.mode)
        self.set_background(preset.background)

    def random_background(self, rng: random.Random | None = None) -> str:
        """Pick a preset background at random and apply it."""
        preset = (rng or random).choice(THEME_PRESETS)
        url = preset.background or FALLBACK_BACKGROUND
        self.set_background(url)
        return url

    # -- session user ---------------------------------------------------------

    def user(self) -> User | None:
        raw = self.get(PreferenceKey.USER)
        if not raw:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except ValueError:
            logger.warning("Stored user is unreadable, treating as logged out")
            return None

    def set_user(self, user: User) -> None:
        self.set(PreferenceKey.USER, user.model_dump_json())

    def clear_user(self) -> None:
        self.clear(PreferenceKey.USER)
