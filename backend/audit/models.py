from django.db import models
from django.contrib.contenttypes.models import ContentType
from django.contrib.contenttypes.fields import GenericForeignKey
from accounts.models import User


class AuditLog(models.Model):
    """
    Append-only audit log for state-changing actions.
    """
    ACTION_CHOICES = [
        ('CREATE', 'Create'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
        ('SUBMIT', 'Submit'),
        ('CERTIFY', 'Certify'),
        ('APPROVE', 'Approve'),
        ('REJECT', 'Reject'),
        ('CORRECT', 'Correct'),
        ('ACTIVATE', 'Activate'),
        ('DEACTIVATE', 'Deactivate'),
    ]

    # Generic foreign key to any model
    content_type = models.ForeignKey(ContentType, on_delete=models.PROTECT)
    object_id = models.PositiveIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    # Who and when
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    timestamp = models.DateTimeField()

    # What changed
    field_name = models.CharField(max_length=100, null=True, blank=True)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)

    # Context
    detail = models.TextField(null=True, blank=True)

    class Meta:
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='audit_audit_content_idx'),
            models.Index(fields=['user', 'timestamp'], name='audit_audit_user_ts_idx'),
            models.Index(fields=['action', 'timestamp'], name='audit_audit_action_ts_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.action} - {self.content_type} #{self.object_id} - {self.timestamp}"

    @property
    def entity_type(self):
        return self.content_type.model

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Audit log entries are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Audit log entries are append-only")
