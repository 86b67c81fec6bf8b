import pytest
from django.db import OperationalError

from timesheets.exceptions import (
    ActorNotPermitted, DuplicateTimesheet, IncompleteTimesheet, InvalidTimeEntry,
    InvalidTransition, StorageUnavailable, TimesheetError,
)
from timesheets.repository import DjangoTimesheetRepository
from timesheets.views import timesheet_error_response


@pytest.mark.django_db
def test_connection_errors_surface_as_storage_unavailable():
    with pytest.raises(StorageUnavailable):
        with DjangoTimesheetRepository().atomic():
            raise OperationalError("server closed the connection unexpectedly")


def test_actor_errors_are_transition_errors():
    assert issubclass(ActorNotPermitted, InvalidTransition)
    assert issubclass(InvalidTransition, TimesheetError)


@pytest.mark.parametrize('error, status_code', [
    (InvalidTimeEntry('bad', day='monday'), 400),
    (IncompleteTimesheet('missing', missing_days=['friday']), 400),
    (ActorNotPermitted('no'), 403),
    (InvalidTransition('no'), 409),
    (DuplicateTimesheet(7), 409),
    (StorageUnavailable('down'), 503),
])
def test_error_status_codes(error, status_code):
    assert timesheet_error_response(error).status_code == status_code


def test_duplicate_response_carries_existing_id():
    response = timesheet_error_response(DuplicateTimesheet(42))
    assert response.data['timesheet_id'] == 42
