"""Sound playback side effect.

The service cannot play audio itself, so "playing" a sound means queueing a
signal for the client to pick up. Signals that are never drained are
dropped once the queue is full.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from uuid import UUID

from lifesync.models.notification import SoundKind, SoundSignal

logger = logging.getLogger(__name__)

MAX_PENDING_SIGNALS = 100


class SoundPlayer(ABC):
    """Fire-and-forget sound output."""

    @abstractmethod
    def play(self, kind: SoundKind, sound_url: str, reminder_id: UUID, title: str) -> None:
        """Request playback of a sound."""
        pass


class QueuedSoundPlayer(SoundPlayer):
    """Queues sound signals until a client drains them."""

    def __init__(self, max_pending: int = MAX_PENDING_SIGNALS) -> None:
        self._pending: deque[SoundSignal] = deque(maxlen=max_pending)

    def play(self, kind: SoundKind, sound_url: str, reminder_id: UUID, title: str) -> None:
        if len(self._pending) == self._pending.maxlen:
            logger.warning(
                "Sound queue full, dropping oldest signal",
                extra={"max_pending": self._pending.maxlen},
            )
        self._pending.append(
            SoundSignal(kind=kind, sound_url=sound_url, reminder_id=reminder_id, title=title)
        )

    def pending(self) -> list[SoundSignal]:
        """Signals waiting to be drained, oldest first."""
        return list(self._pending)

    def drain(self) -> list[SoundSignal]:
        """Return and clear all waiting signals."""
        signals = list(self._pending)
        self._pending.clear()
        return signals
