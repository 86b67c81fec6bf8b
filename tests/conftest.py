import datetime

import pytest
from rest_framework.test import APIClient

from accounts.identity import UserIdentityProvider
from audit.utils import DatabaseAuditRecorder
from timesheets.clock import FixedClock
from timesheets.guard import SubmissionGuard
from timesheets.hours import DayEntry
from timesheets.lifecycle import TimesheetLifecycle
from timesheets.repository import DjangoTimesheetRepository

WEEK = datetime.date(2024, 3, 11)  # a Monday
WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday')


def workday(day, time_in='08:00', time_out='16:30', meal=('12:00', '12:30'), **extra):
    """A worked day; the defaults give exactly eight paid hours."""
    meal_start, meal_end = meal if meal else (None, None)
    return DayEntry(
        day=day,
        worked=True,
        time_in=time_in,
        time_out=time_out,
        meal_start=meal_start,
        meal_end=meal_end,
        **extra,
    )


@pytest.fixture
def make_workday():
    return workday


@pytest.fixture
def full_week():
    return [workday(day) for day in WEEKDAYS]


@pytest.fixture
def employee(django_user_model):
    return django_user_model.objects.create_user(
        username='jdoe', email='jdoe@example.com', password='secret-pass-123',
        first_name='Jane', last_name='Doe',
    )


@pytest.fixture
def other_employee(django_user_model):
    return django_user_model.objects.create_user(
        username='rroe', email='rroe@example.com', password='secret-pass-123',
        first_name='Rick', last_name='Roe',
    )


@pytest.fixture
def salaried_employee(django_user_model):
    return django_user_model.objects.create_user(
        username='ssmith', email='ssmith@example.com', password='secret-pass-123',
        employee_type='SALARIED', weekly_salary=1500,
    )


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username='boss', email='boss@example.com', password='secret-pass-123',
        first_name='Ada', last_name='Admin', role='ADMIN',
    )


@pytest.fixture
def actor_for():
    return UserIdentityProvider().actor_for


@pytest.fixture
def clock():
    return FixedClock(datetime.datetime(2024, 3, 15, 17, 0, tzinfo=datetime.timezone.utc))


@pytest.fixture
def lifecycle(clock):
    return TimesheetLifecycle(DjangoTimesheetRepository(), DatabaseAuditRecorder(), clock)


@pytest.fixture
def guard(clock):
    return SubmissionGuard(
        DjangoTimesheetRepository(), DatabaseAuditRecorder(), UserIdentityProvider(), clock
    )


@pytest.fixture
def draft(guard, employee, actor_for, full_week):
    from timesheets.models import Timesheet

    timesheet_id = guard.submit_new(employee.pk, WEEK, actor_for(employee), entries=full_week)
    return Timesheet.objects.get(pk=timesheet_id)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def week():
    return WEEK
