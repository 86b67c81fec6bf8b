import datetime

import pytest
from django.db import OperationalError

from accounts.identity import UserIdentityProvider
from audit.models import AuditLog
from audit.utils import DatabaseAuditRecorder
from timesheets.exceptions import ActorNotPermitted, DuplicateTimesheet, StorageUnavailable
from timesheets.guard import SubmissionGuard, week_start_for
from timesheets.hours import compute_day
from timesheets.models import Timesheet, TimesheetDay
from timesheets.repository import DjangoTimesheetRepository

pytestmark = pytest.mark.django_db


class RacingRepository(DjangoTimesheetRepository):
    """Misses the existing row on the first lookup, as a concurrent request would."""

    def __init__(self):
        self.lookups = 0

    def find_timesheet(self, employee_id, week_start):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return super().find_timesheet(employee_id, week_start)


def test_week_start_for_returns_monday():
    assert week_start_for(datetime.date(2024, 3, 13)) == datetime.date(2024, 3, 11)
    assert week_start_for(datetime.date(2024, 3, 11)) == datetime.date(2024, 3, 11)
    assert week_start_for(datetime.date(2024, 3, 17)) == datetime.date(2024, 3, 11)


def test_creates_draft_for_the_monday_of_the_week(guard, employee, actor_for):
    timesheet_id = guard.submit_new(employee.pk, datetime.date(2024, 3, 13), actor_for(employee))
    timesheet = Timesheet.objects.get(pk=timesheet_id)
    assert timesheet.week_start == datetime.date(2024, 3, 11)
    assert timesheet.status == Timesheet.STATUS_DRAFT
    assert timesheet.compensation_class == 'hourly'
    assert AuditLog.objects.filter(object_id=timesheet_id, action='CREATE').count() == 1


def test_second_timesheet_for_same_week_is_refused(guard, employee, actor_for, week):
    first_id = guard.submit_new(employee.pk, week, actor_for(employee))
    with pytest.raises(DuplicateTimesheet) as excinfo:
        guard.submit_new(employee.pk, week + datetime.timedelta(days=2), actor_for(employee))
    assert excinfo.value.timesheet_id == first_id
    assert Timesheet.objects.filter(employee=employee).count() == 1


def test_constraint_settles_a_creation_race(guard, employee, actor_for, week, clock):
    first_id = guard.submit_new(employee.pk, week, actor_for(employee))

    racing = SubmissionGuard(RacingRepository(), DatabaseAuditRecorder(), UserIdentityProvider(), clock)
    with pytest.raises(DuplicateTimesheet) as excinfo:
        racing.submit_new(employee.pk, week, actor_for(employee))

    assert excinfo.value.timesheet_id == first_id
    assert Timesheet.objects.filter(employee=employee).count() == 1
    assert AuditLog.objects.filter(action='CREATE').count() == 1


def test_employee_cannot_create_for_someone_else(guard, employee, other_employee, actor_for, week):
    with pytest.raises(ActorNotPermitted):
        guard.submit_new(other_employee.pk, week, actor_for(employee))
    assert not Timesheet.objects.exists()


def test_admin_creates_salaried_timesheet_on_behalf(guard, salaried_employee, admin_user, actor_for, week, full_week):
    timesheet_id = guard.submit_new(salaried_employee.pk, week, actor_for(admin_user), entries=full_week)
    timesheet = Timesheet.objects.get(pk=timesheet_id)
    assert timesheet.employee == salaried_employee
    assert timesheet.compensation_class == 'salaried'
    assert timesheet.last_updated_by == admin_user
    entry = AuditLog.objects.get(object_id=timesheet_id, action='CREATE')
    assert entry.user == admin_user


def test_day_upsert_is_idempotent(draft, make_workday):
    repository = DjangoTimesheetRepository()
    entry = make_workday('monday', '07:00', '17:30')
    hours = compute_day(entry)

    repository.upsert_day(draft, entry, hours)
    repository.upsert_day(draft, entry, hours)

    days = TimesheetDay.objects.filter(timesheet=draft, day_name='monday')
    assert days.count() == 1
    assert str(days.get().overtime_hours) == '2.00'
    assert TimesheetDay.objects.filter(timesheet=draft).count() == 7


class UnreachableIdentityProvider(UserIdentityProvider):
    def compensation_class(self, employee_id):
        raise OperationalError("could not connect to server")


def test_identity_lookup_failure_is_storage_unavailable(employee, actor_for, week, clock):
    guard = SubmissionGuard(
        DjangoTimesheetRepository(), DatabaseAuditRecorder(), UnreachableIdentityProvider(), clock
    )
    with pytest.raises(StorageUnavailable):
        guard.submit_new(employee.pk, week, actor_for(employee))
    assert not Timesheet.objects.exists()
