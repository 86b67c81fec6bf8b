from django.contrib import admin
from .models import Timesheet, TimesheetDay, TimesheetExpense, ReminderLog


class TimesheetDayInline(admin.TabularInline):
    model = TimesheetDay
    extra = 0
    fields = [
        'day_name', 'worked', 'time_in', 'time_out', 'meal_start', 'meal_end',
        'leave_type', 'leave_hours', 'regular_hours', 'overtime_hours',
        'double_time_hours', 'is_seventh_consecutive_day',
    ]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class TimesheetExpenseInline(admin.TabularInline):
    model = TimesheetExpense
    extra = 0


@admin.register(Timesheet)
class TimesheetAdmin(admin.ModelAdmin):
    list_display = [
        'employee', 'week_start', 'status', 'compensation_class',
        'regular_hours', 'overtime_hours', 'double_time_hours', 'submitted_at',
    ]
    list_filter = ['status', 'compensation_class', 'week_start']
    search_fields = ['employee__username', 'employee__first_name', 'employee__last_name']
    date_hierarchy = 'week_start'
    readonly_fields = [
        'status', 'submitted_at', 'approved_at', 'approved_by', 'admin_approved',
        'regular_hours', 'overtime_hours', 'double_time_hours', 'travel_hours',
        'sick_hours', 'holiday_hours', 'vacation_hours', 'created_at', 'updated_at',
    ]
    inlines = [TimesheetDayInline, TimesheetExpenseInline]


@admin.register(ReminderLog)
class ReminderLogAdmin(admin.ModelAdmin):
    list_display = ['employee', 'week_start', 'status', 'sent_at']
    list_filter = ['status', 'week_start']
    search_fields = ['employee__username', 'employee__email']
    date_hierarchy = 'sent_at'
    readonly_fields = ['sent_at']
