"""Base worker abstraction for periodic sweeps over in-memory state.

Provides a clean interface for background workers that:
1. Poll for work items
2. Process items with at-most-once guarantees
3. Isolate per-item failures
4. Provide structured logging and observability
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID

from lifesync.services.clock import utc_now

logger = logging.getLogger(__name__)


class WorkerStatus(str, Enum):
    """Status of a worker run."""

    SUCCESS = "success"
    PARTIAL = "partial"  # Some items processed, some failed
    FAILED = "failed"
    NO_WORK = "no_work"


@dataclass
class WorkerResult:
    """Result of a worker processing cycle.

    Attributes:
        status: Overall status of the worker run
        processed_count: Number of items successfully processed
        failed_count: Number of items that failed
        duration_ms: Time taken for the processing cycle
        processed_ids: Ids of the items processed this cycle
        errors: List of error details for failed items
    """

    status: WorkerStatus
    processed_count: int = 0
    failed_count: int = 0
    duration_ms: float = 0.0
    processed_ids: list[UUID] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "status": self.status.value,
            "processed_count": self.processed_count,
            "failed_count": self.failed_count,
            "duration_ms": self.duration_ms,
            "processed_ids": [str(i) for i in self.processed_ids],
            "errors": self.errors,
        }


# Generic type for work items
T = TypeVar("T")


class WorkerBase(ABC, Generic[T]):
    """Abstract base class for background workers.

    Workers follow this lifecycle:
    1. fetch_pending() - Get items to process
    2. mark_processing() - Claim the item (idempotency)
    3. process_item() - Do the actual work
    4. mark_completed() or mark_failed() - Record the outcome

    Subclasses must implement all abstract methods.
    """

    def __init__(self, batch_size: int = 50) -> None:
        self.batch_size = batch_size
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def worker_name(self) -> str:
        """Return the worker name for logging."""
        pass

    @abstractmethod
    def fetch_pending(self, now: datetime) -> list[T]:
        """Fetch items to process (up to batch_size)."""
        pass

    @abstractmethod
    def mark_processing(self, item: T) -> bool:
        """Claim an item.

        Returns:
            True if claimed, False if it was already handled
        """
        pass

    @abstractmethod
    def process_item(self, item: T, now: datetime) -> None:
        """Process a single item.

        Raises:
            Exception: If processing fails
        """
        pass

    @abstractmethod
    def mark_completed(self, item: T) -> None:
        """Record a successfully processed item."""
        pass

    @abstractmethod
    def mark_failed(self, item: T, error: str) -> None:
        """Record a failed item."""
        pass

    @abstractmethod
    def get_item_id(self, item: T) -> UUID:
        """Get the unique identifier for an item."""
        pass

    def run(self, now: datetime | None = None) -> WorkerResult:
        """Execute one processing cycle.

        Args:
            now: Evaluation time (defaults to the current UTC time)

        Returns:
            WorkerResult with processing statistics
        """
        started = time.perf_counter()
        now = now or utc_now()
        processed_ids: list[UUID] = []
        failed = 0
        errors: list[dict[str, Any]] = []

        try:
            items = self.fetch_pending(now)[: self.batch_size]
        except Exception as e:
            self._logger.error(
                f"[{self.worker_name}] Worker cycle failed",
                extra={"error": str(e)},
                exc_info=True,
            )
            return WorkerResult(
                status=WorkerStatus.FAILED,
                duration_ms=self._elapsed_ms(started),
                errors=[{"error": str(e)}],
            )

        if not items:
            self._logger.debug(f"[{self.worker_name}] No pending items")
            return WorkerResult(
                status=WorkerStatus.NO_WORK,
                duration_ms=self._elapsed_ms(started),
            )

        for item in items:
            item_id = self.get_item_id(item)

            if not self.mark_processing(item):
                self._logger.debug(f"[{self.worker_name}] Item {item_id} already handled")
                continue

            try:
                self.process_item(item, now)
                self.mark_completed(item)
                processed_ids.append(item_id)
            except Exception as e:
                failed += 1
                error_msg = str(e)[:500]  # Truncate long errors
                self.mark_failed(item, error_msg)
                errors.append({"item_id": str(item_id), "error": error_msg})
                self._logger.error(
                    f"[{self.worker_name}] Failed to process item {item_id}",
                    extra={"item_id": str(item_id), "error": error_msg},
                    exc_info=True,
                )

        processed = len(processed_ids)
        if failed == 0 and processed > 0:
            status = WorkerStatus.SUCCESS
        elif processed > 0 and failed > 0:
            status = WorkerStatus.PARTIAL
        elif failed > 0:
            status = WorkerStatus.FAILED
        else:
            status = WorkerStatus.NO_WORK

        result = WorkerResult(
            status=status,
            processed_count=processed,
            failed_count=failed,
            duration_ms=self._elapsed_ms(started),
            processed_ids=processed_ids,
            errors=errors,
        )

        self._logger.info(
            f"[{self.worker_name}] Cycle complete",
            extra=result.to_dict(),
        )

        return result

    def _elapsed_ms(self, started: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - started) * 1000
