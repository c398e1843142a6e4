"""Preferences API endpoints: theme mode, background and presets."""

from fastapi import APIRouter, HTTPException, Query, status

from lifesync.api.deps import PrefsStore
from lifesync.models.preference import (
    BackgroundUpdate,
    PreferencesResponse,
    ThemePreset,
    ThemeUpdate,
)
from lifesync.services.preferences import THEME_PRESETS, find_preset

router = APIRouter(prefix="/api/preferences", tags=["Preferences"])

# The client's system color scheme, used when no theme has been saved
PrefersDark = Query(default=False, description="Client prefers a dark color scheme")


@router.get("", response_model=PreferencesResponse)
def get_preferences_endpoint(
    prefs: PrefsStore,
    prefers_dark: bool = PrefersDark,
) -> PreferencesResponse:
    """Load all preferences with defaults applied."""
    return prefs.init(prefers_dark)


@router.put("/theme", response_model=PreferencesResponse)
def set_theme_endpoint(prefs: PrefsStore, update: ThemeUpdate) -> PreferencesResponse:
    """Save the theme mode."""
    prefs.set_theme(update.mode)
    return prefs.init()


@router.post("/theme/toggle", response_model=PreferencesResponse)
def toggle_theme_endpoint(
    prefs: PrefsStore,
    prefers_dark: bool = PrefersDark,
) -> PreferencesResponse:
    """Switch between light and dark."""
    prefs.toggle_theme(prefers_dark)
    return prefs.init(prefers_dark)


@router.put("/background", response_model=PreferencesResponse)
def set_background_endpoint(
    prefs: PrefsStore,
    update: BackgroundUpdate,
    prefers_dark: bool = PrefersDark,
) -> PreferencesResponse:
    """Save a background image URL or data URI. An empty url clears it."""
    prefs.set_background(update.url.strip())
    return prefs.init(prefers_dark)


@router.delete("/background", response_model=PreferencesResponse)
def clear_background_endpoint(
    prefs: PrefsStore,
    prefers_dark: bool = PrefersDark,
) -> PreferencesResponse:
    """Remove the background image."""
    prefs.clear_background()
    return prefs.init(prefers_dark)


@router.post("/background/random", response_model=PreferencesResponse)
def random_background_endpoint(
    prefs: PrefsStore,
    prefers_dark: bool = PrefersDark,
) -> PreferencesResponse:
    """Apply a randomly chosen preset background."""
    prefs.random_background()
    return prefs.init(prefers_dark)


@router.get("/presets", response_model=list[ThemePreset])
def list_presets_endpoint() -> list[ThemePreset]:
    """List the built-in theme presets."""
    return THEME_PRESETS


@router.post("/presets/{name}", response_model=PreferencesResponse)
def apply_preset_endpoint(prefs: PrefsStore, name: str) -> PreferencesResponse:
    """Apply a preset's theme mode and background."""
    preset = find_preset(name)
    if preset is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Preset not found",
        )
    prefs.apply_preset(preset)
    return prefs.init()
