"""
Creation of new timesheets: one per employee per week.
"""
import datetime
import logging

from .clock import SystemClock
from .exceptions import ActorNotPermitted, DuplicateTimesheet
from .lifecycle import recompute
from .rules import DEFAULT_RULES

logger = logging.getLogger(__name__)


def week_start_for(day):
    """The Monday on or before ``day``."""
    if isinstance(day, datetime.datetime):
        day = day.date()
    return day - datetime.timedelta(days=day.weekday())


class SubmissionGuard:
    """
    Creates draft timesheets, refusing a second one for the same week.

    The early lookup only produces a friendlier error; the unique constraint
    on (employee, week_start) is what actually decides races.
    """

    def __init__(self, repository, audit, identity, clock=None, rules=DEFAULT_RULES):
        self.repository = repository
        self.audit = audit
        self.identity = identity
        self.clock = clock or SystemClock()
        self.rules = rules

    def submit_new(self, employee_id, week_start, actor, entries=None, expenses=None):
        """
        Create a draft timesheet and return its id.

        Admins may create timesheets for any employee, salaried ones included.
        Raises ``DuplicateTimesheet`` carrying the existing id when the week
        already has one.
        """
        if actor.id != employee_id and not actor.is_admin:
            raise ActorNotPermitted("Only admins can create timesheets for other employees")

        week_start = week_start_for(week_start)

        with self.repository.atomic():
            compensation_class = self.identity.compensation_class(employee_id)
            existing = self.repository.find_timesheet(employee_id, week_start)
            if existing is not None:
                logger.info(
                    f"Timesheet for employee {employee_id} week {week_start} already exists (#{existing.pk})"
                )
                raise DuplicateTimesheet(existing.pk)

            timesheet = self.repository.create_timesheet(
                employee_id, week_start, compensation_class, created_by_id=actor.id
            )
            if expenses:
                self.repository.replace_expenses(timesheet, expenses)
            totals = recompute(self.repository, timesheet, entries or [], self.rules)

            on_behalf = '' if actor.id == employee_id else f" by admin {actor.id}"
            self.audit.record(
                actor,
                'CREATE',
                timesheet,
                f"Created {compensation_class} timesheet for week of {week_start}{on_behalf} "
                f"({totals.total_hours} hours)",
                field_name='status',
                new_value=timesheet.status,
                timestamp=self.clock.now(),
            )

        logger.info(f"Created timesheet #{timesheet.pk} for employee {employee_id} week {week_start}")
        return timesheet.pk
