"""Tests for the alarm scanner.

Tests cover:
- Trailing window boundaries
- At-most-once alarms per reminder
- Completed and long-overdue reminders
- Failure handling (no retry)
- The recurring task lifecycle
"""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from lifesync.events.consumers import EventDispatcher, build_dispatcher
from lifesync.events.types import EventType
from lifesync.models.notification import SoundKind
from lifesync.models.reminder import Category, ReminderCreate
from lifesync.services.clock import utc_now
from lifesync.services.reminders import ReminderStore
from lifesync.services.sounds import QueuedSoundPlayer
from lifesync.workers.alarm_scanner import AlarmScanner, due_alarms, in_alarm_window
from lifesync.workers.base import WorkerResult, WorkerStatus
from lifesync.workers.runner import ScannerRunner

WINDOW = timedelta(seconds=60)


def add(store: ReminderStore, title: str, due_at: datetime):
    return store.create(ReminderCreate(title=title, category=Category.HEALTH, due_at=due_at))


# ============================================================================
# Window Tests
# ============================================================================

class TestAlarmWindow:
    """Tests for the trailing window predicate."""

    def test_due_exactly_now_is_in_window(self, store: ReminderStore, now: datetime):
        reminder = add(store, "Pills", now)

        assert in_alarm_window(reminder, now, WINDOW)

    def test_window_lower_bound_is_exclusive(self, store: ReminderStore, now: datetime):
        """A reminder exactly one window old is already too late."""
        reminder = add(store, "Pills", now - WINDOW)

        assert not in_alarm_window(reminder, now, WINDOW)
        assert in_alarm_window(reminder, now - timedelta(seconds=1), WINDOW)

    def test_future_reminder_not_in_window(self, store: ReminderStore, now: datetime):
        reminder = add(store, "Pills", now + timedelta(seconds=1))

        assert not in_alarm_window(reminder, now, WINDOW)

    def test_completed_reminder_not_in_window(self, store: ReminderStore, now: datetime):
        reminder = add(store, "Pills", now)
        store.toggle_complete(reminder.id)

        assert not in_alarm_window(store.get(reminder.id), now, WINDOW)

    def test_due_alarms_skips_notified(self, store: ReminderStore, now: datetime):
        a = add(store, "A", now)
        b = add(store, "B", now - timedelta(seconds=10))

        assert due_alarms(store.snapshot, {a.id}, now, WINDOW) == [b]


# ============================================================================
# AlarmScanner Tests
# ============================================================================

class TestAlarmScanner:
    """Tests for AlarmScanner."""

    def test_worker_name(self, scanner: AlarmScanner):
        assert scanner.worker_name == "AlarmScanner"

    def test_due_reminder_alarms_once(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        """A due reminder alarms on the first scan and never again."""
        reminder = add(store, "Take medicine", now)

        first = scanner.run(now)
        second = scanner.run(now + timedelta(seconds=5))

        assert first.status == WorkerStatus.SUCCESS
        assert first.processed_ids == [reminder.id]
        assert second.status == WorkerStatus.NO_WORK
        signals = player.drain()
        assert [s.kind for s in signals] == [SoundKind.ALARM]
        assert signals[0].reminder_id == reminder.id
        assert reminder.id in scanner.notified

    def test_future_reminder_alarms_when_due(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        reminder = add(store, "Stand up", now + timedelta(seconds=30))

        assert scanner.run(now).status == WorkerStatus.NO_WORK
        result = scanner.run(now + timedelta(seconds=31))

        assert result.processed_ids == [reminder.id]
        assert len(player.drain()) == 1

    def test_long_overdue_never_alarms(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        """Reminders more than a window late are skipped for good."""
        add(store, "Yesterday", now - timedelta(days=1))
        add(store, "Two minutes ago", now - timedelta(minutes=2))

        assert scanner.run(now).status == WorkerStatus.NO_WORK
        assert player.drain() == []

    def test_completed_reminder_never_alarms(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        reminder = add(store, "Done already", now)
        store.toggle_complete(reminder.id)
        player.drain()

        assert scanner.run(now).status == WorkerStatus.NO_WORK
        assert player.drain() == []
        assert reminder.id not in scanner.notified

    def test_reopened_reminder_does_not_realarm(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        """Once notified, completing and reopening does not alarm again."""
        reminder = add(store, "Water plants", now)
        scanner.run(now)
        store.toggle_complete(reminder.id)
        store.toggle_complete(reminder.id)
        player.drain()

        assert reminder.id in scanner.notified
        assert scanner.run(now + timedelta(seconds=5)).status == WorkerStatus.NO_WORK
        assert player.drain() == []

    def test_several_due_reminders_alarm_together(
        self, store: ReminderStore, scanner: AlarmScanner, player: QueuedSoundPlayer, now: datetime
    ):
        add(store, "A", now - timedelta(seconds=20))
        add(store, "B", now - timedelta(seconds=5))
        add(store, "C", now + timedelta(seconds=5))

        result = scanner.run(now)

        assert result.processed_count == 2
        assert sorted(s.title for s in player.drain()) == ["A", "B"]

    def test_alarm_event_payload(self, store: ReminderStore, now: datetime):
        dispatcher = Mock(spec=EventDispatcher)
        scanner = AlarmScanner(store, dispatcher)
        reminder = add(store, "Meds", now - timedelta(seconds=12))

        scanner.run(now)

        event = dispatcher.dispatch.call_args.args[0]
        assert event.event_type == EventType.REMINDER_ALARM
        assert event.reminder_id == reminder.id
        assert event.data["title"] == "Meds"
        assert event.data["overdue_seconds"] == 12.0

    def test_failed_alarm_is_not_retried(self, store: ReminderStore, now: datetime):
        """The id is marked before the side effect, so a failure is final."""
        dispatcher = Mock(spec=EventDispatcher)
        dispatcher.dispatch.side_effect = RuntimeError("speaker on fire")
        scanner = AlarmScanner(store, dispatcher)
        reminder = add(store, "Meds", now)

        first = scanner.run(now)
        second = scanner.run(now + timedelta(seconds=5))

        assert first.status == WorkerStatus.FAILED
        assert first.failed_count == 1
        assert "speaker on fire" in first.errors[0]["error"]
        assert reminder.id in scanner.notified
        assert second.status == WorkerStatus.NO_WORK
        assert dispatcher.dispatch.call_count == 1

    def test_mark_processing_claims_once(self, store: ReminderStore, scanner: AlarmScanner, now: datetime):
        reminder = add(store, "Meds", now)

        assert scanner.mark_processing(reminder) is True
        assert scanner.mark_processing(reminder) is False

    def test_notified_is_read_only_view(self, store: ReminderStore, scanner: AlarmScanner, now: datetime):
        add(store, "Meds", now)
        scanner.run(now)

        assert isinstance(scanner.notified, frozenset)
        assert len(scanner.notified) == 1

    def test_result_to_dict(self, store: ReminderStore, scanner: AlarmScanner, now: datetime):
        reminder = add(store, "Meds", now)

        d = scanner.run(now).to_dict()

        assert d["status"] == "success"
        assert d["processed_count"] == 1
        assert d["processed_ids"] == [str(reminder.id)]


# ============================================================================
# ScannerRunner Tests
# ============================================================================

class TestScannerRunner:
    """Tests for the recurring scan task."""

    def test_run_once_counts_iterations(self, scanner: AlarmScanner):
        runner = ScannerRunner(scanner, interval_seconds=5)

        runner.run_once()
        runner.run_once()

        assert runner.iterations == 2

    def test_run_once_never_raises(self, scanner: AlarmScanner):
        """A crashing sweep is logged and reported, not raised."""
        scanner.run = Mock(side_effect=RuntimeError("boom"))
        runner = ScannerRunner(scanner, interval_seconds=5)

        result = runner.run_once()

        assert isinstance(result, WorkerResult)
        assert result.status == WorkerStatus.FAILED

    def test_start_and_stop(self, player: QueuedSoundPlayer):
        """The recurring task sweeps until stopped."""
        dispatcher = build_dispatcher(player)
        store = ReminderStore(dispatcher=dispatcher)
        scanner = AlarmScanner(store, dispatcher)

        async def scenario() -> ScannerRunner:
            runner = ScannerRunner(scanner, interval_seconds=0.01)
            add(store, "Due now", utc_now())
            runner.start()
            assert runner.running
            await asyncio.sleep(0.1)
            await runner.stop()
            return runner

        runner = asyncio.run(scenario())

        assert not runner.running
        assert runner.iterations >= 1
        assert [s.kind for s in player.drain()] == [SoundKind.ALARM]

    def test_stop_without_start_is_noop(self, scanner: AlarmScanner):
        runner = ScannerRunner(scanner, interval_seconds=1)

        asyncio.run(runner.stop())

        assert not runner.running


# ============================================================================
# Pytest Fixtures
# ============================================================================

@pytest.fixture
def scanner(store: ReminderStore, player: QueuedSoundPlayer) -> AlarmScanner:
    """Scanner over the shared store, signalling into the shared queue."""
    return AlarmScanner(store, build_dispatcher(player), window_seconds=60)
