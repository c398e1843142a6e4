"""Recurring alarm scan.

Provides entry points for running the alarm scanner:
- ScannerRunner.run_once(): Single sweep
- ScannerRunner.start() / stop(): Cancellable recurring task on the running loop

The recurring task runs on the same event loop as the request handlers, so a
sweep always sees a complete store snapshot.
"""

import asyncio
import logging
from datetime import datetime

from lifesync.config import get_settings
from lifesync.workers.alarm_scanner import AlarmScanner
from lifesync.workers.base import WorkerResult, WorkerStatus

logger = logging.getLogger(__name__)


class ScannerRunner:
    """Schedules alarm sweeps at a fixed interval.

    Usage:
        runner = ScannerRunner(scanner)
        runner.start()      # inside a running event loop
        ...
        await runner.stop()
    """

    def __init__(self, scanner: AlarmScanner, interval_seconds: float | None = None) -> None:
        settings = get_settings()
        self.scanner = scanner
        self.interval = interval_seconds or settings.ALARM_SCAN_INTERVAL_SECONDS
        self.iterations = 0
        self._task: asyncio.Task | None = None
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self, now: datetime | None = None) -> WorkerResult:
        """Execute one sweep; errors are logged, never raised."""
        try:
            result = self.scanner.run(now)
        except Exception as e:
            self._logger.error("Alarm sweep failed", extra={"error": str(e)}, exc_info=True)
            result = WorkerResult(status=WorkerStatus.FAILED, errors=[{"error": str(e)}])
        self.iterations += 1
        return result

    def start(self) -> asyncio.Task:
        """Schedule the recurring sweep. Idempotent while running."""
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._loop())
        self._logger.info(
            "Alarm scanner started",
            extra={
                "interval_seconds": self.interval,
                "window_seconds": self.scanner.window.total_seconds(),
            },
        )
        return self._task

    async def stop(self) -> None:
        """Cancel the recurring sweep and wait for it to exit."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._logger.info("Alarm scanner stopped", extra={"total_iterations": self.iterations})

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.run_once()


def configure_worker_logging(level: int | str = logging.INFO) -> None:
    """Configure logging for the API process and the scanner script.

    Args:
        level: Logging level (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Set specific loggers
    logging.getLogger("lifesync.workers").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
