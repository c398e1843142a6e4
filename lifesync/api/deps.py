"""API dependencies for dependency injection."""

from collections.abc import Generator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from lifesync.config import get_settings
from lifesync.db.session import get_session
from lifesync.events.consumers import EventDispatcher, build_dispatcher
from lifesync.models.user import User
from lifesync.services.clock import local_zone
from lifesync.services.errors import (
    DeviceUnavailableError,
    InputValidationError,
    LifeSyncError,
    OperationInProgressError,
    RecordingClosedError,
    RecordingNotFoundError,
)
from lifesync.services.gemini import GeminiBackend
from lifesync.services.intake import IntakeAdapter, SingleFlight
from lifesync.services.preferences import PreferencesStore
from lifesync.services.recording import RecordingManager
from lifesync.services.reminders import ReminderStore
from lifesync.services.sounds import QueuedSoundPlayer

settings = get_settings()


def get_db_session() -> Generator[Session, None, None]:
    """Get database session dependency."""
    yield from get_session()


DBSession = Annotated[Session, Depends(get_db_session)]


# Process-wide singletons. All of them are touched only from the event loop.


@lru_cache
def get_sound_player() -> QueuedSoundPlayer:
    return QueuedSoundPlayer()


@lru_cache
def get_dispatcher() -> EventDispatcher:
    return build_dispatcher(get_sound_player())


@lru_cache
def get_reminder_store() -> ReminderStore:
    return ReminderStore(dispatcher=get_dispatcher(), zone=local_zone(settings.TIMEZONE))


@lru_cache
def get_intake_adapter() -> IntakeAdapter:
    return IntakeAdapter(GeminiBackend(settings.GEMINI_API_KEY, settings.GEMINI_MODEL))


@lru_cache
def get_recording_manager() -> RecordingManager:
    return RecordingManager(
        get_intake_adapter(), idle_timeout_seconds=settings.RECORDING_IDLE_TIMEOUT_SECONDS
    )


@lru_cache
def get_create_guard() -> SingleFlight:
    return SingleFlight()


Store = Annotated[ReminderStore, Depends(get_reminder_store)]
Intake = Annotated[IntakeAdapter, Depends(get_intake_adapter)]
Recordings = Annotated[RecordingManager, Depends(get_recording_manager)]
CreateGuard = Annotated[SingleFlight, Depends(get_create_guard)]
SoundQueue = Annotated[QueuedSoundPlayer, Depends(get_sound_player)]


def get_preferences(session: DBSession) -> PreferencesStore:
    """Preferences store bound to the request's session."""
    return PreferencesStore(session)


PrefsStore = Annotated[PreferencesStore, Depends(get_preferences)]


def get_current_user(prefs: PrefsStore) -> User:
    """Get the logged-in user from the persisted session."""
    user = prefs.user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def to_http_error(exc: LifeSyncError) -> HTTPException:
    """Map a service error to the HTTP error shown to the user."""
    if isinstance(exc, InputValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, DeviceUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, (OperationInProgressError, RecordingClosedError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, RecordingNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(exc))
