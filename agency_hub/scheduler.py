"""APScheduler — runs the monthly report job for the previous month."""

import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from agency_hub.config import REPORT_CRON_DAY, REPORT_CRON_HOUR
from agency_hub.services.reports import ReportService, schedule_monthly_reports

logger = logging.getLogger(__name__)


def create_scheduler(service: ReportService) -> AsyncIOScheduler:
    """Scheduler with the monthly report job registered (not started)."""
    scheduler = AsyncIOScheduler()

    async def monthly_reports():
        result = await asyncio.to_thread(schedule_monthly_reports, service)
        if result["status"] != "ok":
            logger.error("Monthly report job failed for %s: %s",
                         result["month"], result.get("error", ""))

    scheduler.add_job(
        monthly_reports,
        CronTrigger(day=REPORT_CRON_DAY, hour=REPORT_CRON_HOUR, minute=0),
        id="monthly_reports",
        replace_existing=True,
    )
    return scheduler
