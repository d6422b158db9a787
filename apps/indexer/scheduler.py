"""
Indexing Scheduler - Windowed Periodic Execution

Ticks on a fixed interval using APScheduler and starts a processing run only
inside the daily window (START_HOUR, minutes 0..WINDOW_MINUTES).

Features:
- Interval ticks (configurable via TICK_INTERVAL_SECONDS, 5 minutes by default)
- Stateless window gate; each run re-reads queue state from disk
- Overlapping ticks skipped while a run is in flight (max_instances=1)
- RUN_ONCE mode for an immediate, ungated run
- Graceful shutdown handling

Usage:
    # Scheduled mode (default)
    python -m apps.indexer

    # Run once and exit
    RUN_ONCE=true python -m apps.indexer
"""

import asyncio
import logging
import signal
import sys
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from apps.indexer.context import ServiceContext
from utils.config import get_settings
from utils.logging import setup_logging, shutdown_logging
from utils.schemas import RunReport

logger = logging.getLogger(__name__)

JOB_ID = "indexing_tick"


def in_run_window(now: datetime, start_hour: int, window_minutes: int = 15) -> bool:
    """
    Tell whether a run may start at `now`.

    Args:
        now: Current local time
        start_hour: Hour of day the window opens
        window_minutes: Last minute of that hour a run may still start

    Returns:
        True when now.hour == start_hour and now.minute <= window_minutes
    """
    return now.hour == start_hour and now.minute <= window_minutes


class IndexingScheduler:
    """
    Scheduler for windowed indexing runs.

    Handles:
    - APScheduler setup and management
    - Window gate evaluation on every tick
    - RUN_ONCE immediate execution
    - Signal handling for graceful shutdown
    """

    def __init__(self, context: ServiceContext) -> None:
        """
        Initialize scheduler.

        Args:
            context: Service context owning settings and the run coordinator
        """
        self.context = context
        self.settings = context.settings
        self.run_once = self.settings.RUN_ONCE
        self.shutdown_event = asyncio.Event()

        logger.info(
            "IndexingScheduler initialized",
            extra={
                "run_once": self.run_once,
                "start_hour": self.settings.START_HOUR,
                "window_minutes": self.settings.WINDOW_MINUTES,
                "tick_interval_seconds": self.settings.TICK_INTERVAL_SECONDS,
            },
        )

    async def execute_run(self) -> RunReport | None:
        """
        Execute one processing run.

        Errors are logged and swallowed so the next tick retries from the
        current on-disk state.

        Returns:
            Run summary, or None if the run failed
        """
        logger.info("Starting indexing run")

        try:
            report = await self.context.coordinator.run()

        except Exception as e:
            logger.error(
                "Indexing run failed",
                extra={"error": str(e)},
                exc_info=True,
            )
            return None

        logger.info(
            "Indexing run finished",
            extra={
                "confirmed": len(report.confirmed),
                "pending_after": report.pending_after,
                "stop_reason": report.stop_reason.value if report.stop_reason else None,
                "recycled": report.recycled,
            },
        )
        return report

    async def tick(self, now: datetime | None = None) -> RunReport | None:
        """
        Evaluate the window gate and run if eligible.

        Args:
            now: Time to evaluate, defaults to datetime.now()

        Returns:
            Run summary when a run happened, otherwise None
        """
        now = now or datetime.now()

        if not in_run_window(now, self.settings.START_HOUR, self.settings.WINDOW_MINUTES):
            logger.debug("Outside run window, skipping tick", extra={"now": now.isoformat()})
            return None

        return await self.execute_run()

    def build_scheduler(self) -> AsyncIOScheduler:
        """Create the APScheduler instance with the tick job registered."""
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.settings.TICK_INTERVAL_SECONDS),
            id=JOB_ID,
            name="Windowed URL Indexing",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        return scheduler

    def setup_signal_handlers(self) -> None:
        """
        Setup handlers for graceful shutdown on SIGINT/SIGTERM.

        Handlers run on the event loop so a signal wakes it immediately.
        Must be called from within the running loop.
        """
        loop = asyncio.get_running_loop()

        def signal_handler(signum: int) -> None:
            logger.info(f"Received signal {signum}, initiating graceful shutdown")
            self.shutdown_event.set()

        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, signal_handler, signum)
            except NotImplementedError:
                # Windows event loops have no add_signal_handler
                signal.signal(
                    signum,
                    lambda s, frame: loop.call_soon_threadsafe(signal_handler, s),
                )

    async def start(self) -> None:
        """
        Start ticking or execute once.

        In scheduled mode, runs continuously until shutdown signal.
        In RUN_ONCE mode, executes one ungated run and returns.
        """
        logger.info("Service started.")
        self.setup_signal_handlers()

        if self.run_once:
            logger.info("Running in RUN_ONCE mode")
            await self.execute_run()
            return

        # Scheduled mode
        logger.info("Running in scheduled mode")

        self.context.scheduler = self.build_scheduler()
        self.context.scheduler.start()
        logger.info("Scheduler started")

        job = self.context.scheduler.get_job(JOB_ID)
        next_run = getattr(job, "next_run_time", None)
        logger.info(
            "Scheduled indexing ticks",
            extra={
                "interval_seconds": self.settings.TICK_INTERVAL_SECONDS,
                "next_run": str(next_run) if next_run is not None else None,
            },
        )
        logger.info("Waiting for jobs...")

        # Wait for shutdown signal
        await self.shutdown_event.wait()

    def shutdown(self) -> None:
        """Stop ticking and flush logs."""
        if self.context.scheduler and self.context.scheduler.running:
            logger.info("Shutting down scheduler")
            self.context.scheduler.shutdown(wait=True)
        self.context.scheduler = None

        logger.info("Service stopped.")
        shutdown_logging()


async def main() -> None:
    """Main entry point for the indexing worker."""
    settings = get_settings()

    setup_logging(
        level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        output=settings.LOG_OUTPUT,
        log_dir=settings.LOG_DIR,
    )
    logger.info(
        "Starting indexing worker",
        extra={
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        },
    )

    try:
        context = ServiceContext.from_settings(settings)
    except Exception as e:
        logger.error("Failed to initialize indexing service", extra={"error": str(e)}, exc_info=True)
        shutdown_logging()
        sys.exit(1)

    scheduler = IndexingScheduler(context)

    try:
        await scheduler.start()
    except Exception as e:
        logger.error("Scheduler failed", extra={"error": str(e)}, exc_info=True)
        sys.exit(1)
    finally:
        scheduler.shutdown()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
