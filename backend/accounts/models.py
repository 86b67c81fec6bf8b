from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model carrying the timesheet role and compensation class.
    """

    ROLE_CHOICES = [
        ('EMPLOYEE', 'Employee'),
        ('ADMIN', 'Admin'),
    ]

    EMPLOYEE_TYPE_CHOICES = [
        ('HOURLY', 'Hourly'),
        ('SALARIED', 'Salaried'),
    ]

    # Employee fields
    employee_number = models.CharField(max_length=50, unique=True, null=True, blank=True)
    phone_number = models.CharField(max_length=20, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')],
        default='ACTIVE'
    )

    # Role and compensation
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='EMPLOYEE')
    employee_type = models.CharField(max_length=20, choices=EMPLOYEE_TYPE_CHOICES, default='HOURLY')
    weekly_salary = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text="Weekly salary for salaried employees"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.get_role_display()})"

    def is_admin(self):
        """Check if user is admin."""
        return self.role == 'ADMIN' or self.is_superuser

    @property
    def compensation_class(self):
        """Compensation class as used by the hours engine ('hourly' or 'salaried')."""
        return self.employee_type.lower()
