"""Tests for the reminder store.

Tests cover:
- Pure snapshot operations (insert, toggle, remove, filter, summarize)
- Manual creation and due time resolution
- Creation from intake drafts
- Lifecycle events and completion sounds
- Demo seeding
"""

from datetime import date, datetime, time, timedelta, timezone
from unittest.mock import Mock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from lifesync.events.consumers import EventDispatcher
from lifesync.events.types import EventType
from lifesync.models.notification import SoundKind
from lifesync.models.reminder import (
    Category,
    Priority,
    Reminder,
    ReminderCreate,
    ReminderDraft,
)
from lifesync.services.errors import InputValidationError
from lifesync.services.reminders import (
    ReminderStore,
    filter_reminders,
    insert_reminder,
    remove_reminder,
    resolve_due_at,
    summarize,
    toggle_reminder,
)


def make_reminder(title: str = "Task", category: Category = Category.WORK, **kwargs) -> Reminder:
    stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return Reminder(
        title=title,
        category=category,
        priority=kwargs.pop("priority", Priority.MEDIUM),
        due_at=kwargs.pop("due_at", stamp),
        created_at=stamp,
        **kwargs,
    )


# ============================================================================
# Snapshot Operation Tests
# ============================================================================

class TestSnapshotOperations:
    """Tests for the pure functions over reminder snapshots."""

    def test_insert_puts_newest_first(self):
        """insert_reminder prepends without touching the old snapshot."""
        first = make_reminder("First")
        second = make_reminder("Second")

        before = insert_reminder((), first)
        after = insert_reminder(before, second)

        assert [r.title for r in after] == ["Second", "First"]
        assert before == (first,)

    def test_toggle_flips_only_the_target(self):
        """toggle_reminder flips one reminder and returns it."""
        a, b = make_reminder("A"), make_reminder("B")

        snapshot, updated = toggle_reminder((a, b), b.id)

        assert updated is not None and updated.completed is True
        assert snapshot[0] is a
        assert snapshot[1].completed is True
        assert b.completed is False

    def test_toggle_twice_restores_state(self):
        """Toggling twice restores the starting completed value."""
        a = make_reminder("A")

        snapshot, _ = toggle_reminder((a,), a.id)
        snapshot, updated = toggle_reminder(snapshot, a.id)

        assert updated.completed is False

    def test_toggle_missing_is_noop(self):
        """Toggling an unknown id returns the same snapshot and None."""
        snapshot = (make_reminder(),)

        result, updated = toggle_reminder(snapshot, uuid4())

        assert result is snapshot
        assert updated is None

    def test_remove_returns_removed(self):
        """remove_reminder drops the reminder and reports it."""
        a, b = make_reminder("A"), make_reminder("B")

        snapshot, removed = remove_reminder((a, b), a.id)

        assert snapshot == (b,)
        assert removed == a

    def test_remove_missing_is_noop(self):
        snapshot = (make_reminder(),)

        result, removed = remove_reminder(snapshot, uuid4())

        assert result is snapshot
        assert removed is None

    def test_filter_by_category(self):
        """Only exact category matches are returned, in store order."""
        food = make_reminder("Lunch", Category.FOOD)
        gym = make_reminder("Run", Category.GYM)
        dinner = make_reminder("Dinner", Category.FOOD)
        snapshot = (food, gym, dinner)

        assert filter_reminders(snapshot, Category.FOOD) == [food, dinner]
        assert filter_reminders(snapshot, "Gym") == [gym]
        assert filter_reminders(snapshot, Category.HEALTH) == []

    def test_filter_all_returns_everything(self):
        snapshot = (make_reminder("A", Category.FOOD), make_reminder("B", Category.OTHER))

        assert filter_reminders(snapshot, "All") == list(snapshot)

    def test_summarize_counts(self):
        """Stats count total, pending and completed."""
        snapshot = (
            make_reminder("A"),
            make_reminder("B", completed=True),
            make_reminder("C"),
        )

        stats = summarize(snapshot)

        assert (stats.total, stats.pending, stats.completed) == (3, 2, 1)

    def test_reminder_is_immutable(self):
        """Reminders cannot be mutated in place."""
        reminder = make_reminder()

        with pytest.raises(ValidationError):
            reminder.completed = True


# ============================================================================
# Due Time Resolution Tests
# ============================================================================

class TestResolveDueAt:
    """Tests for manual due time resolution."""

    def test_date_and_time_combined(self, now: datetime):
        data = ReminderCreate(title="X", due_date=date(2026, 3, 15), due_time=time(18, 0))

        assert resolve_due_at(data, now, timezone.utc) == datetime(
            2026, 3, 15, 18, 0, tzinfo=timezone.utc
        )

    def test_date_and_time_use_local_zone(self, now: datetime):
        """Form fields are read in the configured zone."""
        plus_two = timezone(timedelta(hours=2))
        data = ReminderCreate(title="X", due_date=date(2026, 3, 15), due_time=time(18, 0))

        due_at = resolve_due_at(data, now, plus_two)

        assert due_at == datetime(2026, 3, 15, 16, 0, tzinfo=timezone.utc)

    def test_date_only_means_now(self, now: datetime):
        data = ReminderCreate(title="X", due_date=date(2026, 3, 15))

        assert resolve_due_at(data, now, timezone.utc) == now

    def test_time_only_means_now(self, now: datetime):
        data = ReminderCreate(title="X", due_time=time(7, 45))

        assert resolve_due_at(data, now, timezone.utc) == now

    def test_explicit_due_at_wins(self, now: datetime):
        explicit = now + timedelta(hours=3)
        data = ReminderCreate(
            title="X", due_at=explicit, due_date=date(2030, 1, 1), due_time=time(1, 0)
        )

        assert resolve_due_at(data, now, timezone.utc) == explicit

    def test_naive_due_at_gets_zone(self, now: datetime):
        data = ReminderCreate(title="X", due_at=datetime(2026, 3, 14, 12, 0))

        assert resolve_due_at(data, now, timezone.utc).tzinfo is not None


# ============================================================================
# ReminderStore Tests
# ============================================================================

class TestReminderStore:
    """Tests for ReminderStore."""

    def test_create_defaults(self, store: ReminderStore, now: datetime):
        """A new reminder is pending, due now and first in the list."""
        reminder = store.create(ReminderCreate(title="  Buy milk  ", category=Category.FOOD))

        assert reminder.title == "Buy milk"
        assert reminder.completed is False
        assert reminder.due_at == now
        assert reminder.created_at == now
        assert reminder.priority == Priority.MEDIUM
        assert store.list_reminders() == [reminder]

    def test_create_blank_title_rejected(self, store: ReminderStore):
        """A blank title raises and leaves the store untouched."""
        store.create(ReminderCreate(title="Existing"))
        before = store.snapshot

        with pytest.raises(InputValidationError):
            store.create(ReminderCreate(title="   "))

        assert store.snapshot is before

    def test_ids_are_unique(self, store: ReminderStore):
        ids = {store.create(ReminderCreate(title=f"R{i}")).id for i in range(20)}

        assert len(ids) == 20

    def test_create_from_draft_with_time(self, store: ReminderStore):
        suggested = datetime(2026, 3, 15, 17, 0, tzinfo=timezone.utc)
        draft = ReminderDraft(
            title="Gym session",
            category=Category.GYM,
            priority=Priority.HIGH,
            suggested_time=suggested,
        )

        reminder = store.create_from_draft(draft)

        assert reminder.due_at == suggested
        assert reminder.category == Category.GYM

    def test_create_from_draft_without_time_is_due_now(self, store: ReminderStore, now: datetime):
        draft = ReminderDraft(title="Call mom", category=Category.OTHER, priority=Priority.MEDIUM)

        assert store.create_from_draft(draft).due_at == now

    def test_toggle_complete(self, store: ReminderStore):
        reminder = store.create(ReminderCreate(title="Stretch"))

        assert store.toggle_complete(reminder.id) is True
        assert store.get(reminder.id).completed is True
        assert store.toggle_complete(reminder.id) is False
        assert store.get(reminder.id).completed is False

    def test_toggle_missing_returns_none(self, store: ReminderStore):
        store.create(ReminderCreate(title="Stretch"))
        before = store.snapshot

        assert store.toggle_complete(uuid4()) is None
        assert store.snapshot is before

    def test_delete_is_idempotent(self, store: ReminderStore):
        reminder = store.create(ReminderCreate(title="Stretch"))

        assert store.delete(reminder.id) is True
        assert store.delete(reminder.id) is False
        assert len(store) == 0

    def test_stats(self, store: ReminderStore):
        a = store.create(ReminderCreate(title="A"))
        store.create(ReminderCreate(title="B"))
        store.toggle_complete(a.id)

        stats = store.stats()

        assert (stats.total, stats.pending, stats.completed) == (2, 1, 1)

    def test_seed_demo(self, store: ReminderStore, now: datetime):
        """Seeding adds the meal prep (due now) ahead of the workout (tomorrow)."""
        store.seed_demo()

        meal, workout = store.list_reminders()
        assert meal.title == "Meal Prep: Chicken & Rice"
        assert meal.category == Category.FOOD
        assert meal.priority == Priority.HIGH
        assert meal.due_at == now
        assert workout.title == "Leg Day Workout"
        assert workout.category == Category.GYM
        assert workout.due_at == now + timedelta(days=1)


# ============================================================================
# Lifecycle Event Tests
# ============================================================================

class TestReminderEvents:
    """Tests for events emitted by the store."""

    def test_events_for_full_lifecycle(self):
        """create, complete, reopen and delete each emit one event."""
        dispatcher = Mock(spec=EventDispatcher)
        store = ReminderStore(dispatcher=dispatcher)

        reminder = store.create(ReminderCreate(title="Walk"))
        store.toggle_complete(reminder.id)
        store.toggle_complete(reminder.id)
        store.delete(reminder.id)

        types = [c.args[0].event_type for c in dispatcher.dispatch.call_args_list]
        assert types == [
            EventType.REMINDER_CREATED,
            EventType.REMINDER_COMPLETED,
            EventType.REMINDER_REOPENED,
            EventType.REMINDER_DELETED,
        ]
        assert all(c.args[0].reminder_id == reminder.id for c in dispatcher.dispatch.call_args_list)

    def test_noop_mutations_emit_nothing(self):
        dispatcher = Mock(spec=EventDispatcher)
        store = ReminderStore(dispatcher=dispatcher)

        store.toggle_complete(uuid4())
        store.delete(uuid4())

        dispatcher.dispatch.assert_not_called()

    def test_completion_plays_one_sound(self, store: ReminderStore, player):
        """Completing queues one chime; reopening queues none."""
        reminder = store.create(ReminderCreate(title="Walk"))

        store.toggle_complete(reminder.id)
        store.toggle_complete(reminder.id)

        signals = player.drain()
        assert len(signals) == 1
        assert signals[0].kind == SoundKind.COMPLETE
        assert signals[0].reminder_id == reminder.id
        assert signals[0].title == "Walk"

    def test_each_completion_is_distinct(self, store: ReminderStore, player):
        """Every false to true transition chimes again."""
        reminder = store.create(ReminderCreate(title="Walk"))

        for _ in range(3):
            store.toggle_complete(reminder.id)  # complete
            store.toggle_complete(reminder.id)  # reopen

        assert [s.kind for s in player.drain()] == [SoundKind.COMPLETE] * 3
