"""
Utility functions for audit logging.
"""
import logging

from django.contrib.contenttypes.models import ContentType
from django.utils import timezone

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_action(user, action, obj, field_name=None, old_value=None, new_value=None, detail=None, timestamp=None):
    """
    Create an audit log entry.

    Errors propagate: callers write audit entries inside the same transaction
    as the change they describe, so a failed write must undo the change too.

    Args:
        user: User (or anything with an ``id``) performing the action
        action: Action type (CREATE, UPDATE, DELETE, SUBMIT, APPROVE, REJECT, etc.)
        obj: The object being acted upon
        field_name: Name of the field being changed (optional)
        old_value: Old value (optional)
        new_value: New value (optional)
        detail: Human-readable description of the action (optional)
        timestamp: When the action happened; defaults to now
    """
    content_type = ContentType.objects.get_for_model(obj)
    entry = AuditLog.objects.create(
        user_id=getattr(user, 'id', None),
        action=action,
        content_type=content_type,
        object_id=obj.pk,
        field_name=field_name,
        old_value=str(old_value) if old_value is not None else None,
        new_value=str(new_value) if new_value is not None else None,
        detail=detail,
        timestamp=timestamp or timezone.now(),
    )
    logger.info(f"Audit {action} on {content_type.model} #{obj.pk} by user {entry.user_id}")
    return entry


class AuditRecorder:
    """Append-only sink for workflow audit entries."""

    def record(self, actor, action, obj, detail, field_name=None, old_value=None, new_value=None, timestamp=None):
        raise NotImplementedError


class DatabaseAuditRecorder(AuditRecorder):
    """Writes audit entries to ``AuditLog`` through ``log_action``."""

    def record(self, actor, action, obj, detail, field_name=None, old_value=None, new_value=None, timestamp=None):
        return log_action(
            user=actor,
            action=action,
            obj=obj,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
            detail=detail,
            timestamp=timestamp,
        )
