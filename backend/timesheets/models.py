from django.db import models
from accounts.models import User
from .hours import DayEntry
from .rules import DAY_NAMES


class Timesheet(models.Model):
    """
    One employee's week of work. Exactly one per employee and week.
    """
    STATUS_DRAFT = 'draft'
    STATUS_SUBMITTED = 'submitted'
    STATUS_CERTIFIED = 'certified'
    STATUS_ADMIN_APPROVED = 'admin_approved'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_SUBMITTED, 'Submitted'),
        (STATUS_CERTIFIED, 'Certified'),
        (STATUS_ADMIN_APPROVED, 'Admin Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    COMPENSATION_CHOICES = [
        ('hourly', 'Hourly'),
        ('salaried', 'Salaried'),
    ]

    employee = models.ForeignKey(User, on_delete=models.CASCADE, related_name='timesheets')
    week_start = models.DateField(help_text="Monday of the week")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    compensation_class = models.CharField(max_length=20, choices=COMPENSATION_CHOICES, default='hourly')

    # Employee attestation
    certified = models.BooleanField(default=False)
    submitted_at = models.DateTimeField(null=True, blank=True)

    # Approval chain
    admin_approved = models.BooleanField(default=False)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_timesheets',
    )
    admin_notes = models.TextField(blank=True, default='')
    rejection_reason = models.TextField(null=True, blank=True)
    last_updated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_timesheets',
    )

    # Weekly totals, recomputed on every mutation
    regular_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    overtime_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    double_time_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    travel_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    sick_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    holiday_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    vacation_hours = models.DecimalField(max_digits=6, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Timesheet'
        verbose_name_plural = 'Timesheets'
        ordering = ['-week_start', 'employee']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'week_start'], name='unique_timesheet_per_employee_week'),
        ]
        indexes = [
            models.Index(fields=['week_start', 'status'], name='timesheets_week_status_idx'),
        ]

    def __str__(self):
        return f"{self.employee} - week of {self.week_start} ({self.get_status_display()})"

    @property
    def total_hours(self):
        return self.regular_hours + self.overtime_hours + self.double_time_hours


class TimesheetDay(models.Model):
    """
    A single day of a timesheet: the raw entry plus its derived breakdown.
    """
    DAY_CHOICES = [(name, name.capitalize()) for name in DAY_NAMES]

    LEAVE_CHOICES = [
        ('none', 'None'),
        ('sick', 'Sick'),
        ('holiday', 'Holiday'),
        ('vacation', 'Vacation'),
    ]

    timesheet = models.ForeignKey(Timesheet, on_delete=models.CASCADE, related_name='days')
    day_name = models.CharField(max_length=10, choices=DAY_CHOICES)
    day_index = models.PositiveSmallIntegerField(default=0)

    # Raw entry
    worked = models.BooleanField(default=False)
    time_in = models.TimeField(null=True, blank=True)
    time_out = models.TimeField(null=True, blank=True)
    meal_start = models.TimeField(null=True, blank=True)
    meal_end = models.TimeField(null=True, blank=True)
    am_break_start = models.TimeField(null=True, blank=True)
    am_break_end = models.TimeField(null=True, blank=True)
    pm_break_start = models.TimeField(null=True, blank=True)
    pm_break_end = models.TimeField(null=True, blank=True)
    out_of_town_minutes = models.PositiveIntegerField(default=0)
    leave_type = models.CharField(max_length=10, choices=LEAVE_CHOICES, default='none')
    leave_hours = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    reason = models.TextField(blank=True, default='')

    # Derived breakdown
    total_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    regular_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    overtime_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    double_time_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    travel_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    is_seventh_consecutive_day = models.BooleanField(default=False)
    break_deductions = models.JSONField(default=list, blank=True)
    compliance_flags = models.JSONField(default=list, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Timesheet Day'
        verbose_name_plural = 'Timesheet Days'
        ordering = ['timesheet', 'day_index']
        constraints = [
            models.UniqueConstraint(fields=['timesheet', 'day_name'], name='unique_day_per_timesheet'),
        ]

    def __str__(self):
        return f"{self.timesheet_id} - {self.day_name}"

    def to_entry(self):
        return DayEntry(
            day=self.day_name,
            worked=self.worked,
            time_in=self.time_in,
            time_out=self.time_out,
            meal_start=self.meal_start,
            meal_end=self.meal_end,
            am_break_start=self.am_break_start,
            am_break_end=self.am_break_end,
            pm_break_start=self.pm_break_start,
            pm_break_end=self.pm_break_end,
            out_of_town_minutes=self.out_of_town_minutes,
            leave_type=self.leave_type,
            leave_hours=self.leave_hours,
            reason=self.reason,
        )


class TimesheetExpense(models.Model):
    timesheet = models.ForeignKey(Timesheet, on_delete=models.CASCADE, related_name='expenses')
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        verbose_name = 'Timesheet Expense'
        verbose_name_plural = 'Timesheet Expenses'
        ordering = ['id']

    def __str__(self):
        return f"{self.description}: {self.amount}"


class ReminderLog(models.Model):
    """
    One attempt to remind an employee about a missing timesheet.
    """
    STATUS_CHOICES = [
        ('SENT', 'Sent'),
        ('FAILED', 'Failed'),
    ]

    employee = models.ForeignKey(User, on_delete=models.CASCADE, related_name='timesheet_reminders')
    week_start = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    error = models.TextField(null=True, blank=True)
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Reminder Log'
        verbose_name_plural = 'Reminder Logs'
        ordering = ['-sent_at']

    def __str__(self):
        return f"{self.employee} - {self.week_start} ({self.status})"
