import datetime
import logging

from celery import shared_task

from .clock import SystemClock
from .guard import week_start_for
from .notifications import send_missing_timesheet_reminders

logger = logging.getLogger(__name__)


@shared_task
def send_missing_timesheet_reminders_task(week_start=None):
    """
    Remind employees without a timesheet. Defaults to the current week.

    ``week_start`` is an ISO date string so the task stays JSON-serializable.
    """
    if week_start:
        week = week_start_for(datetime.date.fromisoformat(week_start))
    else:
        week = week_start_for(SystemClock().today())
    logger.info(f"Running timesheet reminder task for week {week}")
    return send_missing_timesheet_reminders(week)
