#!/usr/bin/env python3
"""Dev entrypoint for exercising the alarm scanner.

Builds a fresh in-memory store seeded with the demo reminders (one due now,
one due tomorrow), runs the scanner and prints every sound signal it queues.

Usage:
    # Single sweep
    python scripts/run_scanner.py --once

    # Continuous loop (Ctrl+C to stop)
    python scripts/run_scanner.py --loop

    # Add a reminder due a few seconds from now, sweep 5 times
    python scripts/run_scanner.py --loop --remind "Stretch" --in-seconds 8 --max-iterations 5

Environment variables:
    ALARM_SCAN_INTERVAL_SECONDS: Seconds between sweeps (default: 5)
    ALARM_WINDOW_SECONDS: Trailing alarm window (default: 60)
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lifesync.config import get_settings
from lifesync.events.consumers import build_dispatcher
from lifesync.models.reminder import Category, Priority, ReminderCreate
from lifesync.services.clock import utc_now
from lifesync.services.reminders import ReminderStore
from lifesync.services.sounds import QueuedSoundPlayer
from lifesync.workers import AlarmScanner, ScannerRunner, configure_worker_logging


def print_signals(player: QueuedSoundPlayer) -> None:
    for signal in player.drain():
        print(f"[{signal.kind.value}] {signal.title} ({signal.reminder_id})")


async def run_loop(runner: ScannerRunner, player: QueuedSoundPlayer, max_iterations: int | None) -> None:
    while max_iterations is None or runner.iterations < max_iterations:
        await asyncio.sleep(runner.interval)
        runner.run_once()
        print_signals(player)


def main() -> int:
    """Main entrypoint for the scanner runner."""
    parser = argparse.ArgumentParser(
        description="Run the LifeSync alarm scanner against a demo store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Mode selection
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--once",
        action="store_true",
        help="Sweep once and exit",
    )
    mode.add_argument(
        "--loop",
        action="store_true",
        help="Sweep continuously",
    )

    # Configuration
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (loop mode only)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum sweeps before stopping (loop mode only)",
    )
    parser.add_argument(
        "--remind",
        default=None,
        help="Title of an extra reminder to add",
    )
    parser.add_argument(
        "--in-seconds",
        type=float,
        default=0,
        help="Delay until the extra reminder is due",
    )

    # Logging
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging to warnings only",
    )

    args = parser.parse_args()

    # Configure logging
    if args.verbose:
        configure_worker_logging(logging.DEBUG)
    elif args.quiet:
        configure_worker_logging(logging.WARNING)
    else:
        configure_worker_logging(logging.INFO)

    logger = logging.getLogger(__name__)
    settings = get_settings()

    player = QueuedSoundPlayer()
    dispatcher = build_dispatcher(player)
    store = ReminderStore(dispatcher=dispatcher)
    store.seed_demo()
    if args.remind:
        store.create(
            ReminderCreate(
                title=args.remind,
                category=Category.OTHER,
                priority=Priority.MEDIUM,
                due_at=utc_now() + timedelta(seconds=args.in_seconds),
            )
        )

    runner = ScannerRunner(
        AlarmScanner(store, dispatcher, window_seconds=settings.ALARM_WINDOW_SECONDS),
        interval_seconds=args.interval,
    )

    try:
        if args.once:
            logger.info("Running scanner once...")
            result = runner.run_once()
            print_signals(player)

            # Print summary
            print("\n--- Scanner Run Summary ---")
            print(f"Status: {result.status.value}")
            print(f"Alarms fired: {result.processed_count}")
            print(f"Failed: {result.failed_count}")
            return 0 if not result.errors else 1

        elif args.loop:
            logger.info("Starting scanner loop (Ctrl+C to stop)...")
            asyncio.run(run_loop(runner, player, args.max_iterations))
            return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.error(f"Scanner failed: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
