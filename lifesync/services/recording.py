"""Audio capture sessions for voice intake.

A recording holds an audio source from ``start`` until ``stop`` or
``cancel``, or until it sits idle past the timeout and a later ``start``
reclaims it. Stopping releases the source and transcribes whatever was
buffered up to that point; cancelling (form reset) releases it and discards
the buffer. The source is released on every exit path, including a failing
transcription.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from lifesync.services.clock import utc_now
from lifesync.services.errors import (
    DeviceUnavailableError,
    InputValidationError,
    RecordingClosedError,
    RecordingNotFoundError,
)
from lifesync.services.intake import IntakeAdapter, compose_input

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = frozenset(
    {"audio/webm", "audio/mp4", "audio/ogg", "audio/wav", "audio/mpeg"}
)
MAX_ACTIVE_RECORDINGS = 4
MAX_RECORDING_BYTES = 10 * 1024 * 1024
DEFAULT_IDLE_TIMEOUT_SECONDS = 120.0


class AudioSource(ABC):
    """A capture device held for the lifetime of one recording."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the device.

        Raises:
            DeviceUnavailableError: If the device cannot be acquired.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the device. Must be safe to call more than once."""
        pass


class UploadAudioSource(AudioSource):
    """Source for audio captured by the client and uploaded in chunks."""

    def __init__(self) -> None:
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False


@dataclass
class Recording:
    """One in-progress capture."""

    mime_type: str
    source: AudioSource
    last_activity: datetime
    id: UUID = field(default_factory=uuid4)
    chunks: list[bytes] = field(default_factory=list)
    closed: bool = False

    @property
    def byte_count(self) -> int:
        return sum(len(c) for c in self.chunks)

    def append(self, chunk: bytes) -> None:
        if self.closed:
            raise RecordingClosedError(f"Recording {self.id} is no longer capturing")
        if chunk:
            self.chunks.append(chunk)

    def audio(self) -> bytes:
        return b"".join(self.chunks)


class RecordingManager:
    """Tracks active recordings and turns stopped ones into text."""

    def __init__(
        self,
        intake: IntakeAdapter,
        source_factory: Callable[[], AudioSource] = UploadAudioSource,
        max_active: int = MAX_ACTIVE_RECORDINGS,
        idle_timeout_seconds: float = DEFAULT_IDLE_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.intake = intake
        self._source_factory = source_factory
        self._max_active = max_active
        self._idle_timeout = timedelta(seconds=idle_timeout_seconds)
        self._clock = clock
        self._active: dict[UUID, Recording] = {}

    @property
    def active_count(self) -> int:
        return len(self._active)

    def get(self, recording_id: UUID) -> Recording:
        recording = self._active.get(recording_id)
        if recording is None:
            raise RecordingNotFoundError(f"Recording {recording_id} not found")
        return recording

    def start(self, mime_type: str = "audio/webm") -> Recording:
        """Acquire an audio source and begin buffering.

        Raises:
            InputValidationError: If the mime type is not supported.
            DeviceUnavailableError: If no source can be acquired.
        """
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise InputValidationError(f"Unsupported audio type: {mime_type}")
        now = self._clock()
        self.expire_idle(now)
        if len(self._active) >= self._max_active:
            raise DeviceUnavailableError("Could not access microphone.")

        source = self._source_factory()
        try:
            source.open()
        except DeviceUnavailableError:
            raise
        except Exception as e:
            logger.error("Error accessing microphone", exc_info=True)
            raise DeviceUnavailableError("Could not access microphone.") from e

        recording = Recording(mime_type=mime_type, source=source, last_activity=now)
        self._active[recording.id] = recording
        logger.info(f"Recording {recording.id} started", extra={"mime_type": mime_type})
        return recording

    def append(self, recording_id: UUID, chunk: bytes) -> Recording:
        """Buffer a chunk of captured audio."""
        recording = self.get(recording_id)
        if recording.byte_count + len(chunk) > MAX_RECORDING_BYTES:
            raise InputValidationError("Recording is too long")
        recording.append(chunk)
        recording.last_activity = self._clock()
        return recording

    async def stop(self, recording_id: UUID, existing_text: str = "") -> tuple[str, str]:
        """Stop capturing and transcribe the buffered audio.

        Returns:
            (transcript, composed) where ``composed`` is ``existing_text`` with
            the transcript appended.
        """
        recording = self._active.pop(recording_id, None)
        if recording is None:
            raise RecordingNotFoundError(f"Recording {recording_id} not found")

        try:
            self._release(recording)
            transcript = await self.intake.transcribe(recording.audio(), recording.mime_type)
        finally:
            recording.chunks.clear()

        logger.info(
            f"Recording {recording.id} stopped",
            extra={"transcript_chars": len(transcript)},
        )
        return transcript, compose_input(existing_text, transcript)

    def cancel(self, recording_id: UUID) -> bool:
        """Release the source and discard buffered audio. No-op if unknown."""
        recording = self._active.pop(recording_id, None)
        if recording is None:
            return False
        self._release(recording)
        recording.chunks.clear()
        logger.info(f"Recording {recording.id} cancelled")
        return True

    def expire_idle(self, now: datetime | None = None) -> list[UUID]:
        """Cancel recordings with no activity within the idle timeout.

        Covers clients that vanish without stopping or cancelling.
        """
        cutoff = (now or self._clock()) - self._idle_timeout
        expired = [r.id for r in self._active.values() if r.last_activity <= cutoff]
        for recording_id in expired:
            logger.warning(f"Recording {recording_id} abandoned, releasing")
            self.cancel(recording_id)
        return expired

    def cancel_all(self) -> None:
        for recording_id in list(self._active):
            self.cancel(recording_id)

    def _release(self, recording: Recording) -> None:
        recording.closed = True
        try:
            recording.source.close()
        except Exception:
            logger.warning(f"Failed to release audio source for {recording.id}", exc_info=True)
