import logging

from aiogram import Bot
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sleepbot.services.actions import TrackerContext
from sleepbot.services.clock import TRACKER_ZONE
from sleepbot.services.reminders import remind_awake_users

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def get_scheduler() -> AsyncIOScheduler:
    """Get the global scheduler instance."""
    global scheduler
    if scheduler is None:
        scheduler = AsyncIOScheduler(timezone=TRACKER_ZONE)
    return scheduler


def schedule_awake_reminders(sched: AsyncIOScheduler, bot: Bot, tracker: TrackerContext) -> None:
    sched.add_job(
        remind_awake_users,
        trigger=IntervalTrigger(seconds=tracker.settings.reminder_poll_seconds),
        id="awake_reminders",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        kwargs={"bot": bot, "tracker": tracker},
    )
    logger.info("Scheduled awake reminders every %ss", tracker.settings.reminder_poll_seconds)


def start_scheduler(bot: Bot, tracker: TrackerContext) -> AsyncIOScheduler:
    """Start the scheduler with the awake reminder poll. Must run inside the event loop."""
    sched = get_scheduler()
    schedule_awake_reminders(sched, bot, tracker)
    if not sched.running:
        sched.start()
        logger.info("Scheduler started successfully")
    return sched


def stop_scheduler():
    """Stop the scheduler."""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")
