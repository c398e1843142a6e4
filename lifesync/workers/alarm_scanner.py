"""Alarm scanner: one overdue alarm per reminder.

Each sweep looks for reminders that are not completed and whose due time
fell within the trailing window ``(now - window, now]``. A reminder that
qualifies and has not alarmed yet is added to the notified set and one
``reminder.alarm`` event is emitted.

The notified set only grows, so an alarm fires at most once per process
lifetime, whatever happens to the reminder afterwards. Reminders overdue by
more than the window never fire, and a window missed entirely (no sweep ran)
is skipped for good.
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from lifesync.events.consumers import EventDispatcher
from lifesync.events.types import EventType, ReminderEventData
from lifesync.models.reminder import Reminder
from lifesync.services.reminders import ReminderStore, Snapshot
from lifesync.workers.base import WorkerBase

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 60.0


def in_alarm_window(reminder: Reminder, now: datetime, window: timedelta) -> bool:
    """True when ``now - window < due_at <= now`` and not completed."""
    if reminder.completed:
        return False
    return now - window < reminder.due_at <= now


def due_alarms(
    snapshot: Snapshot,
    notified: set[UUID] | frozenset[UUID],
    now: datetime,
    window: timedelta,
) -> list[Reminder]:
    """Reminders that should alarm on this sweep, in store order."""
    return [
        r for r in snapshot
        if r.id not in notified and in_alarm_window(r, now, window)
    ]


class AlarmScanner(WorkerBase[Reminder]):
    """Worker that signals overdue reminders exactly once.

    Owns the notified set. The id is recorded before the alarm is emitted,
    so a failing side effect never leads to a second alarm.
    """

    def __init__(
        self,
        store: ReminderStore,
        dispatcher: EventDispatcher,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        batch_size: int = 500,
    ) -> None:
        super().__init__(batch_size=batch_size)
        self.store = store
        self.dispatcher = dispatcher
        self.window = timedelta(seconds=window_seconds)
        self._notified: set[UUID] = set()

    @property
    def worker_name(self) -> str:
        return "AlarmScanner"

    @property
    def notified(self) -> frozenset[UUID]:
        """Ids that have already alarmed."""
        return frozenset(self._notified)

    def fetch_pending(self, now: datetime) -> list[Reminder]:
        return due_alarms(self.store.snapshot, self._notified, now, self.window)

    def mark_processing(self, item: Reminder) -> bool:
        if item.id in self._notified:
            return False
        self._notified.add(item.id)
        return True

    def process_item(self, item: Reminder, now: datetime) -> None:
        overdue = (now - item.due_at).total_seconds()
        self.dispatcher.dispatch(
            ReminderEventData(
                event_type=EventType.REMINDER_ALARM,
                reminder_id=item.id,
                timestamp=now,
                data={
                    "title": item.title,
                    "category": item.category.value,
                    "due_at": item.due_at.isoformat(),
                    "overdue_seconds": overdue,
                },
            )
        )

    def mark_completed(self, item: Reminder) -> None:
        logger.info(
            f"Alarm fired for reminder {item.id}",
            extra={"reminder_id": str(item.id), "title": item.title},
        )

    def mark_failed(self, item: Reminder, error: str) -> None:
        # The id stays notified: alarms are at most once
        logger.warning(
            f"Alarm for reminder {item.id} failed and will not be retried",
            extra={"reminder_id": str(item.id), "error": error},
        )

    def get_item_id(self, item: Reminder) -> UUID:
        return item.id
