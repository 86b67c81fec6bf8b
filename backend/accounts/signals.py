"""
Signals to automatically set role for superusers.
"""
from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model

User = get_user_model()


@receiver(pre_save, sender=User)
def set_superuser_role_pre_save(sender, instance, **kwargs):
    """
    Automatically set ADMIN role for superusers before saving.
    Superusers approve timesheets, they never submit them as hourly staff.
    """
    if instance.is_superuser and instance.role != 'ADMIN':
        instance.role = 'ADMIN'
