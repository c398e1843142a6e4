"""In-process reminder lifecycle events.

Components:
- types.py: Event type definitions
- consumers.py: Consumers and the dispatcher that routes events to them
"""

from lifesync.events.types import EventType, ReminderEventData
from lifesync.events.consumers import (
    ActivityLogConsumer,
    EventConsumer,
    EventDispatcher,
    SoundConsumer,
    build_dispatcher,
)

__all__ = [
    # Types
    "EventType",
    "ReminderEventData",
    # Consumers
    "EventConsumer",
    "EventDispatcher",
    "ActivityLogConsumer",
    "SoundConsumer",
    "build_dispatcher",
]
