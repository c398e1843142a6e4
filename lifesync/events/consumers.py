"""In-process event consumer layer.

Event Flow:
    ReminderStore / AlarmScanner → EventDispatcher → Consumers
                                         ↓
                              [ActivityLogConsumer, SoundConsumer]

Consumers run synchronously on the caller's event loop. A failing consumer
is logged and skipped so it never blocks the mutation that emitted the event.
"""

import logging
from abc import ABC, abstractmethod

from lifesync.config import get_settings
from lifesync.events.types import EventType, ReminderEventData
from lifesync.models.notification import SoundKind
from lifesync.services.sounds import SoundPlayer

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Consumer Base Class
# -----------------------------------------------------------------------------


class EventConsumer(ABC):
    """Abstract base class for event consumers."""

    @abstractmethod
    def handles(self, event_type: EventType) -> bool:
        """Check if this consumer handles the given event type."""
        pass

    @abstractmethod
    def process(self, event: ReminderEventData) -> None:
        """Process an event.

        Failures may propagate; the dispatcher isolates them.
        """
        pass


# -----------------------------------------------------------------------------
# Activity Log Consumer - Records every lifecycle event
# -----------------------------------------------------------------------------


class ActivityLogConsumer(EventConsumer):
    """Writes one structured log line per lifecycle event."""

    EVENT_TO_ACTION: dict[EventType, str] = {
        EventType.REMINDER_CREATED: "reminder.created",
        EventType.REMINDER_COMPLETED: "reminder.completed",
        EventType.REMINDER_REOPENED: "reminder.reopened",
        EventType.REMINDER_DELETED: "reminder.deleted",
        EventType.REMINDER_ALARM: "reminder.alarm",
    }

    def handles(self, event_type: EventType) -> bool:
        return event_type in self.EVENT_TO_ACTION

    def process(self, event: ReminderEventData) -> None:
        logger.info(
            f"Activity: {self.EVENT_TO_ACTION[event.event_type]}",
            extra={**event.to_log_dict(), "title": event.data.get("title")},
        )


# -----------------------------------------------------------------------------
# Sound Consumer - Completion chime and overdue alarm
# -----------------------------------------------------------------------------


class SoundConsumer(EventConsumer):
    """Turns completion and alarm events into sound signals."""

    EVENT_TO_SOUND: dict[EventType, SoundKind] = {
        EventType.REMINDER_COMPLETED: SoundKind.COMPLETE,
        EventType.REMINDER_ALARM: SoundKind.ALARM,
    }

    def __init__(self, player: SoundPlayer) -> None:
        settings = get_settings()
        self.player = player
        self.sound_urls: dict[SoundKind, str] = {
            SoundKind.ALARM: settings.ALARM_SOUND_URL,
            SoundKind.COMPLETE: settings.COMPLETE_SOUND_URL,
        }

    def handles(self, event_type: EventType) -> bool:
        return event_type in self.EVENT_TO_SOUND

    def process(self, event: ReminderEventData) -> None:
        kind = self.EVENT_TO_SOUND[event.event_type]
        try:
            self.player.play(
                kind,
                self.sound_urls[kind],
                event.reminder_id,
                event.data.get("title", ""),
            )
        except Exception as e:
            # Playback is best-effort: log and carry on
            logger.warning(
                "Sound playback failed",
                extra={**event.to_log_dict(), "sound": kind.value, "error": str(e)},
            )


# -----------------------------------------------------------------------------
# Event Dispatcher - Routes events to appropriate consumers
# -----------------------------------------------------------------------------


class EventDispatcher:
    """Routes events to registered consumers with error isolation."""

    def __init__(self, consumers: list[EventConsumer] | None = None) -> None:
        if consumers is None:
            consumers = [ActivityLogConsumer()]
        self._consumers: list[EventConsumer] = list(consumers)

    def register(self, consumer: EventConsumer) -> None:
        """Register an additional consumer."""
        self._consumers.append(consumer)

    def dispatch(self, event: ReminderEventData) -> None:
        """Dispatch an event to all interested consumers.

        Errors in one consumer do not affect other consumers.
        """
        for consumer in self._consumers:
            if not consumer.handles(event.event_type):
                continue

            try:
                consumer.process(event)
            except Exception as e:
                logger.error(
                    "Consumer processing failed",
                    extra={
                        **event.to_log_dict(),
                        "consumer": consumer.__class__.__name__,
                        "error": str(e),
                    },
                    exc_info=True,
                )


def build_dispatcher(player: SoundPlayer) -> EventDispatcher:
    """Dispatcher wired with the built-in consumers."""
    return EventDispatcher([ActivityLogConsumer(), SoundConsumer(player)])
