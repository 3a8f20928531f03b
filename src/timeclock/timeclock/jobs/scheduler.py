from __future__ import annotations

import atexit
import logging
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import DEFAULT_AUTO_CLOCK_OUT_POLL_SECONDS
from .auto_clock_out import AutoClockOutJob

logger = logging.getLogger(__name__)


def start_scheduler(
    job: AutoClockOutJob, *, tz: ZoneInfo, poll_seconds: int = DEFAULT_AUTO_CLOCK_OUT_POLL_SECONDS
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        timezone=tz,
        job_defaults={
            "coalesce": True,
            # a missed poll is simply skipped; the job itself never catches up
            "misfire_grace_time": max(int(poll_seconds) // 2, 1),
            "max_instances": 1,
        },
    )
    scheduler.add_job(job.tick, "interval", seconds=int(poll_seconds), id="auto-clock-out")
    scheduler.start()
    atexit.register(_shutdown, scheduler)

    logger.info(
        "Auto clock-out scheduled daily at %s %s (poll every %ss)",
        job.trigger_time.strftime("%H:%M"),
        tz.key,
        poll_seconds,
    )
    return scheduler


def _shutdown(scheduler: BackgroundScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
