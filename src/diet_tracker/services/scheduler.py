"""APScheduler wiring for the daily reset job."""

import logging
from dataclasses import dataclass, field

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from diet_tracker.services.reset import DailyResetJob

_logger = logging.getLogger(__name__)

DAILY_RESET_JOB_ID = "daily_nutrition_reset"


@dataclass
class ResetScheduler:
    """Owns the in-process scheduler that fires the daily reset."""

    job: DailyResetJob
    cron_expression: str = "45 3 * * *"
    timezone: str = "UTC"
    scheduler: AsyncIOScheduler | None = field(default=None, init=False)

    def start(self) -> None:
        """Register the reset job and start the scheduler."""
        if self.scheduler is not None and self.scheduler.running:
            _logger.warning("Reset scheduler already running")
            return
        self.scheduler = AsyncIOScheduler(
            timezone=self.timezone,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 3600,
            },
        )
        self.scheduler.add_job(
            self.job.run,
            trigger=CronTrigger.from_crontab(
                self.cron_expression, timezone=self.timezone
            ),
            id=DAILY_RESET_JOB_ID,
            name="Daily nutrition reset",
            replace_existing=True,
        )
        self.scheduler.start()
        _logger.info(
            "Reset scheduler started: cron=%s tz=%s",
            self.cron_expression,
            self.timezone,
        )

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for a running reset."""
        if self.scheduler is None or not self.scheduler.running:
            return
        self.scheduler.shutdown(wait=False)
        _logger.info("Reset scheduler stopped")

    def list_jobs(self) -> list[dict[str, str | None]]:
        """Describe registered jobs for the admin API."""
        if self.scheduler is None:
            return []
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": (
                    job.next_run_time.isoformat() if job.next_run_time else None
                ),
                "trigger": str(job.trigger),
            }
            for job in self.scheduler.get_jobs()
        ]
