"""Entities and schemas for the LifeSync service."""

from lifesync.models.notification import SoundKind, SoundSignal
from lifesync.models.preference import Preference, PreferenceKey, ThemeMode
from lifesync.models.reminder import (
    ALL_CATEGORIES,
    Category,
    Priority,
    Reminder,
    ReminderCreate,
    ReminderDraft,
)
from lifesync.models.user import User

__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "Priority",
    "Reminder",
    "ReminderCreate",
    "ReminderDraft",
    "User",
    "Preference",
    "PreferenceKey",
    "ThemeMode",
    "SoundKind",
    "SoundSignal",
]
