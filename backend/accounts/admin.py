from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'get_full_name', 'role', 'employee_type', 'status']
    list_filter = ['role', 'employee_type', 'status', 'is_active', 'is_staff']
    search_fields = ['username', 'email', 'first_name', 'last_name', 'employee_number']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Employee Information', {
            'fields': ('employee_number', 'phone_number', 'status')
        }),
        ('Role & Compensation', {
            'fields': ('role', 'employee_type', 'weekly_salary')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Employee Information', {
            'fields': ('employee_number', 'phone_number', 'status')
        }),
        ('Role & Compensation', {
            'fields': ('role', 'employee_type', 'weekly_salary')
        }),
    )
