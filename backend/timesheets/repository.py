"""
Persistence for timesheets.

The workflow talks to ``TimesheetRepository``; ``DjangoTimesheetRepository``
is the ORM-backed implementation used everywhere outside tests that want to
swap storage out.
"""
import datetime
import logging
from contextlib import contextmanager

from django.db import IntegrityError, InterfaceError, OperationalError, transaction

from .exceptions import DuplicateTimesheet, StorageUnavailable
from .models import Timesheet, TimesheetDay, TimesheetExpense
from .rules import DAY_NAMES

logger = logging.getLogger(__name__)


class TimesheetRepository:
    """Storage operations the timesheet workflow relies on."""

    def atomic(self):
        """Context manager wrapping one transaction."""
        raise NotImplementedError

    def lock(self, timesheet_id):
        raise NotImplementedError

    def find_timesheet(self, employee_id, week_start):
        raise NotImplementedError

    def create_timesheet(self, employee_id, week_start, compensation_class, created_by_id=None):
        raise NotImplementedError

    def day_entries(self, timesheet):
        raise NotImplementedError

    def upsert_day(self, timesheet, entry, day_hours):
        raise NotImplementedError

    def update_totals(self, timesheet, totals):
        raise NotImplementedError

    def update_status(self, timesheet, **fields):
        raise NotImplementedError

    def replace_expenses(self, timesheet, expenses):
        raise NotImplementedError

    def prior_week_tail(self, employee_id, week_start):
        raise NotImplementedError

    def delete(self, timesheet):
        raise NotImplementedError


class DjangoTimesheetRepository(TimesheetRepository):

    @contextmanager
    def atomic(self):
        """
        One database transaction. Connection-level failures surface as
        ``StorageUnavailable``.
        """
        try:
            with transaction.atomic():
                yield
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Timesheet storage unavailable: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def lock(self, timesheet_id):
        """Fetch a timesheet locked for update. Must run inside ``atomic()``."""
        return Timesheet.objects.select_for_update().get(pk=timesheet_id)

    def find_timesheet(self, employee_id, week_start):
        return Timesheet.objects.filter(employee_id=employee_id, week_start=week_start).first()

    def create_timesheet(self, employee_id, week_start, compensation_class, created_by_id=None):
        """
        Insert a new draft timesheet.

        The unique constraint on (employee, week_start) settles concurrent
        creations: the loser gets ``DuplicateTimesheet`` with the winner's id.
        """
        try:
            with transaction.atomic():
                return Timesheet.objects.create(
                    employee_id=employee_id,
                    week_start=week_start,
                    compensation_class=compensation_class,
                    status=Timesheet.STATUS_DRAFT,
                    last_updated_by_id=created_by_id,
                )
        except IntegrityError:
            existing = self.find_timesheet(employee_id, week_start)
            if existing is None:
                raise
            logger.warning(
                f"Concurrent timesheet creation for employee {employee_id} week {week_start}; "
                f"keeping #{existing.pk}"
            )
            raise DuplicateTimesheet(existing.pk)

    def day_entries(self, timesheet):
        days = TimesheetDay.objects.filter(timesheet=timesheet).order_by('day_index')
        return [day.to_entry() for day in days]

    def upsert_day(self, timesheet, entry, day_hours):
        day, _ = TimesheetDay.objects.update_or_create(
            timesheet=timesheet,
            day_name=entry.day,
            defaults={
                'day_index': DAY_NAMES.index(entry.day),
                'worked': bool(entry.worked),
                'time_in': entry.time_in,
                'time_out': entry.time_out,
                'meal_start': entry.meal_start,
                'meal_end': entry.meal_end,
                'am_break_start': entry.am_break_start,
                'am_break_end': entry.am_break_end,
                'pm_break_start': entry.pm_break_start,
                'pm_break_end': entry.pm_break_end,
                'out_of_town_minutes': entry.out_of_town_minutes or 0,
                'leave_type': entry.leave_type,
                'leave_hours': entry.leave_hours if entry.leave_hours != '' else None,
                'reason': entry.reason or '',
                'total_hours': day_hours.total_hours,
                'regular_hours': day_hours.regular_hours,
                'overtime_hours': day_hours.overtime_hours,
                'double_time_hours': day_hours.double_time_hours,
                'travel_hours': day_hours.travel_hours,
                'is_seventh_consecutive_day': day_hours.seventh_consecutive_day,
                'break_deductions': [b.to_dict() for b in day_hours.breaks],
                'compliance_flags': list(day_hours.flags),
            },
        )
        return day

    def update_totals(self, timesheet, totals):
        self.update_status(timesheet, **totals.hour_fields())

    def update_status(self, timesheet, **fields):
        for name, value in fields.items():
            setattr(timesheet, name, value)
        timesheet.save(update_fields=list(fields) + ['updated_at'])
        return timesheet

    def replace_expenses(self, timesheet, expenses):
        TimesheetExpense.objects.filter(timesheet=timesheet).delete()
        TimesheetExpense.objects.bulk_create([
            TimesheetExpense(timesheet=timesheet, description=e['description'], amount=e['amount'])
            for e in expenses
        ])

    def prior_week_tail(self, employee_id, week_start):
        """
        Day entries of the employee's previous week. An empty list when there
        is no timesheet for that week.
        """
        previous = self.find_timesheet(employee_id, week_start - datetime.timedelta(days=7))
        if previous is None:
            return []
        return self.day_entries(previous)

    def delete(self, timesheet):
        timesheet.delete()
