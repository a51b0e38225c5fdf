"""
Scheduled task module.

Runs the expiration sweep on a fixed interval with APScheduler. The job is a
plain function, so the asyncio scheduler hands it to its thread pool and the
filesystem scan stays off the event loop. max_instances=1 keeps passes from
overlapping.
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from snipbin.config import settings
from snipbin.sweeper import ExpirationSweeper, SweepReport

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "sweep_expired_pastes"

# Global scheduler and sweeper instances
_scheduler: Optional[AsyncIOScheduler] = None
sweeper = ExpirationSweeper(settings.STORAGE_ROOT, window=settings.SWEEP_WINDOW)


def sweep_expired_task() -> Optional[SweepReport]:
    """Run one sweep pass and log the outcome."""
    logger.info(f"Starting expiration sweep at shard offset {sweeper.offset:02x}")
    try:
        report = sweeper.sweep()
    except Exception as e:
        logger.error(f"Expiration sweep failed: {e}", exc_info=True)
        return None

    for shard, error in report.failed:
        logger.error(f"Could not list shard {shard}: {type(error).__name__}: {error}")

    logger.info(
        f"Expiration sweep completed: shards {report.shards[0]}-{report.shards[-1]}, "
        f"{report.examined} examined, {report.deleted} deleted"
    )
    return report


def start_scheduler():
    """Create the scheduler and register the sweep job."""
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already started")
        return

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        sweep_expired_task,
        trigger=IntervalTrigger(minutes=settings.SWEEP_INTERVAL_MINUTES),
        id=SWEEP_JOB_ID,
        name="Sweep expired pastes",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    _scheduler.start()

    logger.info(
        f"Scheduler started: expiration sweep every {settings.SWEEP_INTERVAL_MINUTES} minutes, "
        f"{sweeper.window} shards per pass"
    )


def shutdown_scheduler():
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Scheduler shutdown completed")


def get_scheduler() -> Optional[AsyncIOScheduler]:
    return _scheduler
