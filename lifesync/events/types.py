"""Event type definitions for the reminder lifecycle."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Versioned event types for the reminder lifecycle."""

    REMINDER_CREATED = "reminder.created.v1"
    REMINDER_COMPLETED = "reminder.completed.v1"
    REMINDER_REOPENED = "reminder.reopened.v1"
    REMINDER_DELETED = "reminder.deleted.v1"
    REMINDER_ALARM = "reminder.alarm.v1"


class ReminderEventData(BaseModel):
    """Payload passed to in-process consumers."""

    event_id: UUID = Field(default_factory=uuid4, description="Unique event identifier")
    event_type: EventType = Field(description="Event type (versioned)")
    reminder_id: UUID = Field(description="Reminder the event is about")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Event timestamp (UTC)",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Event-specific payload data",
    )

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten for structured logging."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type.value,
            "reminder_id": str(self.reminder_id),
            "time": self.timestamp.isoformat(),
        }
