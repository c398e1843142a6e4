"""Reminder store: the single owner of the in-memory reminder collection.

State is an immutable tuple snapshot, newest first. Every mutation is a pure
function from one snapshot to the next; ``ReminderStore`` only swaps the
snapshot and emits lifecycle events. Nothing is persisted beyond process
lifetime.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, tzinfo
from uuid import UUID

from lifesync.events.consumers import EventDispatcher
from lifesync.events.types import EventType, ReminderEventData
from lifesync.models.reminder import (
    ALL_CATEGORIES,
    Category,
    Priority,
    Reminder,
    ReminderCreate,
    ReminderDraft,
    ReminderStats,
)
from lifesync.services.clock import combine_local, ensure_aware, utc_now
from lifesync.services.errors import InputValidationError

logger = logging.getLogger(__name__)

Snapshot = tuple[Reminder, ...]


# -----------------------------------------------------------------------------
# Pure snapshot operations
# -----------------------------------------------------------------------------


def resolve_due_at(data: ReminderCreate, now: datetime, zone: tzinfo) -> datetime:
    """Pick the due time for manual input.

    An explicit ``due_at`` wins. Date and time fields only count when both
    are present; otherwise the reminder is due now.
    """
    if data.due_at is not None:
        return ensure_aware(data.due_at, zone)
    if data.due_date is not None and data.due_time is not None:
        return combine_local(data.due_date, data.due_time, zone)
    return now


def build_reminder(data: ReminderCreate, now: datetime, zone: tzinfo) -> Reminder:
    """Validate manual input and build a new reminder."""
    title = (data.title or "").strip()
    if not title:
        raise InputValidationError("Title is required")

    return Reminder(
        title=title,
        description=data.description or None,
        category=data.category,
        priority=data.priority,
        due_at=resolve_due_at(data, now, zone),
        created_at=now,
    )


def reminder_from_draft(draft: ReminderDraft, now: datetime, zone: tzinfo) -> Reminder:
    """Build a reminder from an extraction draft; due now if no time was found."""
    due_at = ensure_aware(draft.suggested_time, zone) if draft.suggested_time else now
    return Reminder(
        title=draft.title,
        description=draft.description or None,
        category=draft.category,
        priority=draft.priority,
        due_at=due_at,
        created_at=now,
    )


def insert_reminder(snapshot: Snapshot, reminder: Reminder) -> Snapshot:
    """Insert at the front (most recent first)."""
    return (reminder, *snapshot)


def toggle_reminder(snapshot: Snapshot, reminder_id: UUID) -> tuple[Snapshot, Reminder | None]:
    """Flip ``completed`` on one reminder. Returns the updated reminder or None."""
    updated: Reminder | None = None
    result: list[Reminder] = []
    for reminder in snapshot:
        if reminder.id == reminder_id:
            updated = reminder.model_copy(update={"completed": not reminder.completed})
            result.append(updated)
        else:
            result.append(reminder)
    if updated is None:
        return snapshot, None
    return tuple(result), updated


def remove_reminder(snapshot: Snapshot, reminder_id: UUID) -> tuple[Snapshot, Reminder | None]:
    """Remove one reminder. Returns the removed reminder or None."""
    removed = next((r for r in snapshot if r.id == reminder_id), None)
    if removed is None:
        return snapshot, None
    return tuple(r for r in snapshot if r.id != reminder_id), removed


def filter_reminders(snapshot: Snapshot, category: Category | str = ALL_CATEGORIES) -> list[Reminder]:
    """Category-scoped view in store order. ``"All"`` returns everything."""
    if category == ALL_CATEGORIES:
        return list(snapshot)
    return [r for r in snapshot if r.category == category]


def summarize(snapshot: Snapshot) -> ReminderStats:
    """Total, pending and completed counts."""
    completed = sum(1 for r in snapshot if r.completed)
    return ReminderStats(total=len(snapshot), pending=len(snapshot) - completed, completed=completed)


# -----------------------------------------------------------------------------
# Reminder Store
# -----------------------------------------------------------------------------


class ReminderStore:
    """Owning container for the reminder snapshot.

    Mutated only from the event loop (request handlers and the alarm
    scanner), so no locking is needed: readers always see a whole snapshot.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        zone: tzinfo | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._snapshot: Snapshot = ()
        self._dispatcher = dispatcher or EventDispatcher()
        self._zone = zone or clock().tzinfo
        self._clock = clock

    @property
    def snapshot(self) -> Snapshot:
        """Current immutable view of the store."""
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def create(self, data: ReminderCreate, now: datetime | None = None) -> Reminder:
        """Create a reminder from manual form input.

        Raises:
            InputValidationError: If the title is blank. The store is unchanged.
        """
        reminder = build_reminder(data, now or self._clock(), self._zone)
        return self._insert(reminder)

    def create_from_draft(self, draft: ReminderDraft, now: datetime | None = None) -> Reminder:
        """Create a reminder from an intake draft."""
        reminder = reminder_from_draft(draft, now or self._clock(), self._zone)
        return self._insert(reminder)

    def _insert(self, reminder: Reminder) -> Reminder:
        self._snapshot = insert_reminder(self._snapshot, reminder)
        self._emit(EventType.REMINDER_CREATED, reminder)
        return reminder

    def get(self, reminder_id: UUID) -> Reminder | None:
        """Look up a reminder by id."""
        return next((r for r in self._snapshot if r.id == reminder_id), None)

    def toggle_complete(self, reminder_id: UUID) -> bool | None:
        """Flip completion. Returns the new value, or None if not found."""
        self._snapshot, updated = toggle_reminder(self._snapshot, reminder_id)
        if updated is None:
            logger.debug(f"Toggle ignored, reminder {reminder_id} not found")
            return None

        event_type = (
            EventType.REMINDER_COMPLETED if updated.completed else EventType.REMINDER_REOPENED
        )
        self._emit(event_type, updated)
        return updated.completed

    def delete(self, reminder_id: UUID) -> bool:
        """Remove a reminder. Returns False (no-op) if it was not present."""
        self._snapshot, removed = remove_reminder(self._snapshot, reminder_id)
        if removed is None:
            logger.debug(f"Delete ignored, reminder {reminder_id} not found")
            return False
        self._emit(EventType.REMINDER_DELETED, removed)
        return True

    def list_reminders(self, category: Category | str = ALL_CATEGORIES) -> list[Reminder]:
        """Snapshot of the store, optionally filtered by category."""
        return filter_reminders(self._snapshot, category)

    def stats(self) -> ReminderStats:
        """Summary counts over the whole store."""
        return summarize(self._snapshot)

    def seed_demo(self, now: datetime | None = None) -> list[Reminder]:
        """Insert the two demo reminders shown to first-time users."""
        now = now or self._clock()
        demo = [
            ReminderCreate(
                title="Leg Day Workout",
                category=Category.GYM,
                priority=Priority.MEDIUM,
                due_at=now + timedelta(days=1),
            ),
            ReminderCreate(
                title="Meal Prep: Chicken & Rice",
                category=Category.FOOD,
                priority=Priority.HIGH,
                due_at=now,
            ),
        ]
        return [self.create(data, now=now) for data in demo]

    def _emit(self, event_type: EventType, reminder: Reminder) -> None:
        self._dispatcher.dispatch(
            ReminderEventData(
                event_type=event_type,
                reminder_id=reminder.id,
                data={
                    "title": reminder.title,
                    "category": reminder.category.value,
                    "completed": reminder.completed,
                },
            )
        )
