import logging
from io import StringIO

import pytest
from django.core.management import call_command

from timesheets.models import ReminderLog
from timesheets.notifications import (
    Notifier, find_employees_missing_timesheet, send_missing_timesheet_reminders,
)
from timesheets.tasks import send_missing_timesheet_reminders_task

pytestmark = pytest.mark.django_db


class BrokenNotifier(Notifier):
    def remind_missing_timesheet(self, employee, week_start):
        raise ConnectionError("SMTP server refused connection")


@pytest.fixture
def inactive_employee(django_user_model):
    return django_user_model.objects.create_user(
        username='gone', email='gone@example.com', is_active=False, status='INACTIVE',
    )


def test_only_active_hourly_employees_without_timesheet_are_missing(
    draft, employee, other_employee, salaried_employee, admin_user, inactive_employee, week,
):
    missing = list(find_employees_missing_timesheet(week))
    assert missing == [other_employee]


def test_reminders_are_emailed_and_logged(employee, week, mailoutbox):
    summary = send_missing_timesheet_reminders(week)

    assert summary == {'sent': 1, 'failed': 0}
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ['jdoe@example.com']
    assert 'March 11, 2024' in mailoutbox[0].subject
    assert ReminderLog.objects.get(employee=employee).status == 'SENT'


def test_delivery_failures_are_recorded_not_raised(employee, week, caplog):
    with caplog.at_level(logging.ERROR, logger='timesheets.notifications'):
        summary = send_missing_timesheet_reminders(week, notifier=BrokenNotifier())

    assert summary == {'sent': 0, 'failed': 1}
    log = ReminderLog.objects.get(employee=employee)
    assert log.status == 'FAILED'
    assert 'refused' in log.error
    assert 'Failed to send timesheet reminder' in caplog.text


def test_employee_without_email_is_recorded_as_failed(django_user_model, week, mailoutbox):
    django_user_model.objects.create_user(username='noemail')
    summary = send_missing_timesheet_reminders(week)
    assert summary == {'sent': 0, 'failed': 1}
    assert mailoutbox == []


def test_celery_task_normalizes_week(employee, mailoutbox):
    summary = send_missing_timesheet_reminders_task('2024-03-14')
    assert summary == {'sent': 1, 'failed': 0}
    assert ReminderLog.objects.get(employee=employee).week_start.isoformat() == '2024-03-11'


def test_management_command_dry_run_sends_nothing(employee, mailoutbox):
    out = StringIO()
    call_command('send_timesheet_reminders', '--week', '2024-03-13', '--dry-run', stdout=out)
    assert 'jdoe' in out.getvalue()
    assert mailoutbox == []
    assert not ReminderLog.objects.exists()


def test_management_command_sends_reminders(employee, mailoutbox):
    out = StringIO()
    call_command('send_timesheet_reminders', '--week', '2024-03-13', stdout=out)
    assert '1 sent' in out.getvalue()
    assert len(mailoutbox) == 1
