"""Natural-language intake adapter.

Turns free text (typed, or transcribed from speech) into reminder drafts via
an inference backend. Remote failures never reach the caller:

- ``parse`` falls back to the text itself as title, category Other,
  priority Medium.
- ``transcribe`` falls back to an empty string.
- ``category_tip`` falls back to a canned tip.
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from lifesync.models.reminder import Category, Priority, ReminderDraft
from lifesync.services.clock import utc_now
from lifesync.services.errors import InputValidationError, OperationInProgressError
from lifesync.services.gemini import InferenceBackend, build_tip_prompt

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_MIME_TYPE = "audio/webm"
EMPTY_TIP = "Stay consistent!"
FAILED_TIP = "You got this!"


def fallback_draft(free_text: str) -> ReminderDraft:
    """Deterministic draft used whenever extraction fails."""
    return ReminderDraft(title=free_text, category=Category.OTHER, priority=Priority.MEDIUM)


def compose_input(existing: str, transcript: str) -> str:
    """Append a transcript to already-typed text, space-joined and trimmed."""
    return " ".join(part for part in (existing.strip(), transcript.strip()) if part)


class IntakeAdapter:
    """Best-effort bridge between user text/audio and reminder drafts."""

    def __init__(
        self,
        backend: InferenceBackend,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.backend = backend
        self._clock = clock

    async def parse(self, free_text: str, now: datetime | None = None) -> ReminderDraft:
        """Extract a draft from free text; always succeeds for non-empty input.

        Raises:
            InputValidationError: If ``free_text`` is blank (no remote call is made).
        """
        if not free_text or not free_text.strip():
            raise InputValidationError("Input is empty")

        try:
            draft = await self.backend.extract(free_text, now or self._clock())
        except Exception as e:
            logger.error(
                "Reminder extraction failed, using fallback",
                extra={"error": str(e)[:500]},
                exc_info=True,
            )
            return fallback_draft(free_text)

        logger.info(
            "Reminder extracted",
            extra={
                "category": draft.category.value,
                "priority": draft.priority.value,
                "has_time": draft.suggested_time is not None,
            },
        )
        return draft

    async def transcribe(self, audio: bytes, mime_type: str = DEFAULT_AUDIO_MIME_TYPE) -> str:
        """Transcribe audio; returns an empty string on any failure."""
        if not audio:
            return ""

        try:
            return (await self.backend.transcribe(audio, mime_type)).strip()
        except Exception as e:
            logger.error(
                "Transcription failed",
                extra={"mime_type": mime_type, "bytes": len(audio), "error": str(e)[:500]},
                exc_info=True,
            )
            return ""

    async def category_tip(self, category: Category) -> str:
        """One-sentence motivating tip for a category."""
        try:
            tip = await self.backend.generate_text(build_tip_prompt(category))
        except Exception as e:
            logger.warning(f"Tip generation failed for {category.value}: {e}")
            return FAILED_TIP
        return tip.strip() or EMPTY_TIP


class SingleFlight:
    """Allows at most one operation in flight at a time.

    Used on the AI create path so a second submission while the first is
    awaiting the backend is rejected instead of queued.
    """

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        if self._busy:
            raise OperationInProgressError("A create operation is already in progress")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
