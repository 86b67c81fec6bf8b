"""Wiring of the timesheet workflow to its Django-backed collaborators."""
from accounts.identity import UserIdentityProvider
from audit.utils import DatabaseAuditRecorder

from .clock import SystemClock
from .guard import SubmissionGuard
from .lifecycle import TimesheetLifecycle
from .repository import DjangoTimesheetRepository
from .rules import load_wage_rules


def get_lifecycle(clock=None):
    return TimesheetLifecycle(
        repository=DjangoTimesheetRepository(),
        audit=DatabaseAuditRecorder(),
        clock=clock or SystemClock(),
        rules=load_wage_rules(),
    )


def get_submission_guard(clock=None):
    return SubmissionGuard(
        repository=DjangoTimesheetRepository(),
        audit=DatabaseAuditRecorder(),
        identity=UserIdentityProvider(),
        clock=clock or SystemClock(),
        rules=load_wage_rules(),
    )
