"""
Reminders for employees who have not started a timesheet for the week.
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from .models import ReminderLog, Timesheet

logger = logging.getLogger(__name__)

User = get_user_model()


class Notifier:
    """Delivers a missing-timesheet reminder to one employee."""

    def remind_missing_timesheet(self, employee, week_start):
        raise NotImplementedError


class EmailNotifier(Notifier):

    def remind_missing_timesheet(self, employee, week_start):
        if not employee.email:
            raise ValueError(f"Employee {employee.pk} has no email address")
        name = employee.get_full_name() or employee.username
        send_mail(
            subject=f"Timesheet reminder: week of {week_start:%B %d, %Y}",
            message=(
                f"Hi {name},\n\n"
                f"We have not received your timesheet for the week starting "
                f"{week_start:%A, %B %d, %Y}. Please submit it as soon as possible.\n"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[employee.email],
            fail_silently=False,
        )


def find_employees_missing_timesheet(week_start):
    """Active hourly employees with no timesheet for ``week_start``."""
    has_timesheet = Timesheet.objects.filter(week_start=week_start).values('employee_id')
    return (
        User.objects.filter(
            is_active=True,
            status='ACTIVE',
            employee_type='HOURLY',
            role='EMPLOYEE',
            is_superuser=False,
        )
        .exclude(pk__in=has_timesheet)
        .order_by('last_name', 'first_name', 'username')
    )


def send_missing_timesheet_reminders(week_start, notifier=None):
    """
    Remind every employee missing a timesheet for ``week_start``.

    Delivery failures are logged and recorded, never raised. Returns a
    ``{'sent': n, 'failed': n}`` summary.
    """
    notifier = notifier or EmailNotifier()
    summary = {'sent': 0, 'failed': 0}

    for employee in find_employees_missing_timesheet(week_start):
        try:
            notifier.remind_missing_timesheet(employee, week_start)
        except Exception as e:
            logger.error(
                f"Failed to send timesheet reminder to {employee.username} for week {week_start}: {e}",
                exc_info=True,
            )
            ReminderLog.objects.create(employee=employee, week_start=week_start, status='FAILED', error=str(e))
            summary['failed'] += 1
        else:
            ReminderLog.objects.create(employee=employee, week_start=week_start, status='SENT')
            summary['sent'] += 1

    logger.info(f"Timesheet reminders for week {week_start}: {summary['sent']} sent, {summary['failed']} failed")
    return summary
