"""
Background scheduler for automatic goal evaluation.
Once a day at GOALTRACKER_EVALUATION_TIME, snapshots daily billable hours
and evaluates every user's expired goals.
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from goaltracker.constants import EVALUATION_TIME
from goaltracker.dependencies import open_store
from goaltracker.services.goal_service import GoalService

logger = logging.getLogger("goaltracker.scheduler")

scheduler = AsyncIOScheduler()


def parse_evaluation_time(time_str: str | None) -> tuple[int, int]:
    """
    Parse "HH:MM" (or "HHMM") into (hour, minute).
    Falls back to 23:55 when the value is missing or malformed.
    """
    digits = (time_str or "").replace(":", "")
    if len(digits) != 4 or not digits.isdigit():
        logger.warning(f"Invalid evaluation time {time_str!r}, using 23:55")
        return 23, 55

    hour, minute = int(digits[:2]), int(digits[2:])
    if hour > 23 or minute > 59:
        logger.warning(f"Invalid evaluation time {time_str!r}, using 23:55")
        return 23, 55
    return hour, minute


async def run_auto_evaluation():
    """Job: snapshot daily billable hours, then evaluate expired goals of every user"""
    try:
        with open_store() as store:
            service = GoalService(store)
            rollover = service.daily_rollover()
            result = service.evaluate_all()
        logger.info(
            f"Auto-evaluation finished: {len(rollover.snapshots)} snapshots, "
            f"{result.total} goals, {result.met} met, {len(result.users_processed)} users"
        )
    except Exception as e:
        logger.error(f"Scheduler Error (Auto-Evaluation): {e}")


def start_scheduler():
    """Start the background scheduler"""
    if not scheduler.running:
        hour, minute = parse_evaluation_time(EVALUATION_TIME)
        scheduler.add_job(
            run_auto_evaluation,
            CronTrigger(hour=hour, minute=minute),
            id='auto_evaluation',
            replace_existing=True
        )

        scheduler.start()
        logger.info(f"Goal evaluation scheduled daily at {hour:02d}:{minute:02d}")


def stop_scheduler():
    """Stop the background scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
