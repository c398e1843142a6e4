"""Shared fixtures: fake inference backend, sound queue, store and database."""

from datetime import datetime, timezone

import pytest
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from lifesync.events.consumers import build_dispatcher
from lifesync.models.reminder import Category, Priority, ReminderDraft
from lifesync.services.gemini import InferenceBackend
from lifesync.services.intake import IntakeAdapter
from lifesync.services.reminders import ReminderStore
from lifesync.services.sounds import QueuedSoundPlayer

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


class FakeInferenceBackend(InferenceBackend):
    """Scriptable stand-in for the remote model.

    Set ``draft``/``transcript``/``tip`` for successful calls, or ``error`` to
    make every call raise. Calls are recorded for assertions.
    """

    def __init__(self) -> None:
        self.draft: ReminderDraft | None = None
        self.transcript = ""
        self.tip = ""
        self.error: Exception | None = None
        self.extract_calls: list[tuple[str, datetime]] = []
        self.transcribe_calls: list[tuple[bytes, str]] = []
        self.prompts: list[str] = []

    async def extract(self, text: str, now: datetime) -> ReminderDraft:
        self.extract_calls.append((text, now))
        if self.error is not None:
            raise self.error
        if self.draft is None:
            raise ValueError("No response from AI")
        return self.draft

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        self.transcribe_calls.append((audio, mime_type))
        if self.error is not None:
            raise self.error
        return self.transcript

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.tip


@pytest.fixture
def now() -> datetime:
    """The frozen clock value used by ``store`` and ``intake``."""
    return FIXED_NOW


@pytest.fixture
def fake_backend() -> FakeInferenceBackend:
    """Backend whose extraction succeeds with a Gym/High draft."""
    backend = FakeInferenceBackend()
    backend.draft = ReminderDraft(
        title="Gym session",
        category=Category.GYM,
        priority=Priority.HIGH,
        description="Leg day",
    )
    return backend


@pytest.fixture
def intake(fake_backend: FakeInferenceBackend) -> IntakeAdapter:
    return IntakeAdapter(fake_backend, clock=lambda: FIXED_NOW)


@pytest.fixture
def player() -> QueuedSoundPlayer:
    return QueuedSoundPlayer()


@pytest.fixture
def store(player: QueuedSoundPlayer) -> ReminderStore:
    """Empty store wired to the sound queue, with a frozen clock."""
    return ReminderStore(
        dispatcher=build_dispatcher(player),
        zone=timezone.utc,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def db_session():
    """Create a test database session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import all models to register them
    from lifesync.models.preference import Preference  # noqa: F401

    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session
