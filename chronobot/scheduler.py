"""Scheduler for recurring sweeps.

Runs one sweep immediately, then one every interval, until the process
is killed. Sweeps execute on the scheduler's thread pool, so a slow
sweep never delays the next tick; overlapping sweeps are allowed and
rely on the dedup registry to avoid double announcements.
"""

import logging
from datetime import datetime, timezone

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MAX_INSTANCES, JobEvent
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from chronobot.orchestrator import Orchestrator


logger = logging.getLogger(__name__)


JOB_ID = "chronodose_sweep"

# Sweeps allowed in flight at once; pool threads start on demand
MAX_CONCURRENT_SWEEPS = 1000


def _log_job_state(scheduler: BaseScheduler, event: JobEvent) -> None:
    """Log sweep completion, failure or skip with the next run time."""
    job = scheduler.get_job(event.job_id)
    job_next_run = getattr(job, "next_run_time", None) if job else None
    next_run = job_next_run.isoformat() if job_next_run else "none"

    if event.code == EVENT_JOB_MAX_INSTANCES:
        logger.warning(
            "Skipped sweep: %d sweeps still running; next run at %s",
            MAX_CONCURRENT_SWEEPS,
            next_run,
        )
        return

    exception = getattr(event, "exception", None)
    if exception:
        logger.error(
            "Sweep failed; next run at %s",
            next_run,
            exc_info=exception,
        )
        return

    logger.info("Sweep completed; next run at %s", next_run)


def build_scheduler(
    orchestrator: Orchestrator,
    interval_seconds: int,
    scheduler_class: type[BaseScheduler] = BlockingScheduler,
) -> BaseScheduler:
    """Build a scheduler running orchestrator sweeps at a fixed interval.

    Args:
        orchestrator: Orchestrator whose sweep() is scheduled
        interval_seconds: Seconds between two sweep starts
        scheduler_class: Scheduler type to build (BackgroundScheduler in tests)

    Returns:
        Configured, not yet started scheduler
    """
    scheduler = scheduler_class(
        executors={"default": ThreadPoolExecutor(MAX_CONCURRENT_SWEEPS)},
        timezone=timezone.utc,
    )

    scheduler.add_job(
        orchestrator.sweep,
        trigger=IntervalTrigger(seconds=interval_seconds),
        id=JOB_ID,
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),
        max_instances=MAX_CONCURRENT_SWEEPS,
        coalesce=False,
        misfire_grace_time=interval_seconds,
    )

    scheduler.add_listener(
        lambda event: _log_job_state(scheduler, event),
        EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MAX_INSTANCES,
    )

    logger.info(
        "Registered %s every %d seconds for departments %s",
        JOB_ID,
        interval_seconds,
        ", ".join(orchestrator.config.departments),
    )

    return scheduler


def run(orchestrator: Orchestrator, interval_seconds: int) -> None:
    """Sweep now and then every interval_seconds, forever."""
    scheduler = build_scheduler(orchestrator, interval_seconds)
    logger.info("Starting scheduler")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
