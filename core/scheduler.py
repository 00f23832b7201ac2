from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from core.config import settings
from services.ledger_service import LedgerService
from utils.logger import logger

DAILY_SUMMARY_JOB_ID = "daily_expense_summary"

def create_scheduler() -> AsyncIOScheduler:
    """New scheduler bound to the event loop it is started on.

    One per application lifespan; a started scheduler keeps its loop.
    """
    return AsyncIOScheduler(timezone="UTC")

async def log_daily_summary(ledger: LedgerService):
    """Log the total spent today."""
    summary = await ledger.daily_summary()
    logger.info(f"Daily Expense Summary for {summary.date}: ${summary.total}")
    return summary

def schedule_daily_summary(scheduler: AsyncIOScheduler, ledger: LedgerService, cron: str = None):
    """Register the daily summary job, replacing any previous registration."""
    cron = cron or settings.DAILY_SUMMARY_CRON
    trigger = CronTrigger.from_crontab(cron, timezone="UTC")

    # replace_existing does not dedupe jobs queued before the scheduler starts
    if scheduler.get_job(DAILY_SUMMARY_JOB_ID):
        scheduler.remove_job(DAILY_SUMMARY_JOB_ID)

    job = scheduler.add_job(
        log_daily_summary,
        trigger=trigger,
        args=[ledger],
        id=DAILY_SUMMARY_JOB_ID,
        replace_existing=True,
    )
    logger.info(f"Daily summary scheduled with cron '{cron}'")
    return job
