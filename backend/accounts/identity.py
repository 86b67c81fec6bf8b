"""
Resolution of request users into the actors the timesheet workflow reasons about.

The workflow never authenticates anybody; it receives an ``Actor`` built here
from whatever the transport layer already authenticated.
"""
from dataclasses import dataclass

from django.contrib.auth import get_user_model

User = get_user_model()


@dataclass(frozen=True)
class Actor:
    """Who is performing a workflow action."""

    id: int
    is_admin: bool
    compensation_class: str = 'hourly'
    name: str = ''

    def owns(self, timesheet):
        return timesheet.employee_id == self.id


class IdentityProvider:
    """Abstract identity lookup."""

    def actor_for(self, user):
        raise NotImplementedError

    def compensation_class(self, employee_id):
        raise NotImplementedError


class UserIdentityProvider(IdentityProvider):
    """Identity lookup backed by the ``accounts.User`` table."""

    def actor_for(self, user):
        return Actor(
            id=user.pk,
            is_admin=user.is_admin(),
            compensation_class=user.compensation_class,
            name=user.get_full_name() or user.username,
        )

    def compensation_class(self, employee_id):
        """Raises ``User.DoesNotExist`` for unknown employees."""
        return User.objects.get(pk=employee_id).compensation_class
