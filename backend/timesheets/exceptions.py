"""
Errors raised by the timesheet workflow.

Views translate these into HTTP responses; nothing in the workflow itself
knows about status codes.
"""


class TimesheetError(Exception):
    """Base class for timesheet workflow errors."""


class InvalidTimeEntry(TimesheetError):
    """A day entry is internally inconsistent."""

    def __init__(self, message, day=None):
        super().__init__(message)
        self.day = day


class IncompleteTimesheet(TimesheetError):
    """A timesheet cannot be submitted yet."""

    def __init__(self, message, missing_days=()):
        super().__init__(message)
        self.missing_days = tuple(missing_days)


class InvalidTransition(TimesheetError):
    """The requested action is not allowed from the current status."""


class ActorNotPermitted(InvalidTransition):
    """The actor may not perform the requested action."""


class DuplicateTimesheet(TimesheetError):
    """A timesheet already exists for the employee and week."""

    def __init__(self, timesheet_id):
        super().__init__(f"Timesheet already exists for this week (id {timesheet_id})")
        self.timesheet_id = timesheet_id


class StorageUnavailable(TimesheetError):
    """The database could not be reached. Safe to retry."""
