"""Sound signal models for fire-and-forget client playback."""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class SoundKind(str, Enum):
    """Which sound the client should play."""

    ALARM = "alarm"
    COMPLETE = "complete"


class SoundSignal(BaseModel):
    """A single "play sound" request waiting for a client to drain it."""

    id: UUID = Field(default_factory=uuid4)
    kind: SoundKind
    sound_url: str
    reminder_id: UUID
    title: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationListResponse(BaseModel):
    """Drained sound signals."""

    signals: list[SoundSignal]
