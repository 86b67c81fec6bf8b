import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Timesheet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('week_start', models.DateField(help_text='Monday of the week')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('submitted', 'Submitted'), ('certified', 'Certified'), ('admin_approved', 'Admin Approved'), ('rejected', 'Rejected')], default='draft', max_length=20)),
                ('compensation_class', models.CharField(choices=[('hourly', 'Hourly'), ('salaried', 'Salaried')], default='hourly', max_length=20)),
                ('certified', models.BooleanField(default=False)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('admin_approved', models.BooleanField(default=False)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('admin_notes', models.TextField(blank=True, default='')),
                ('rejection_reason', models.TextField(blank=True, null=True)),
                ('regular_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('overtime_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('double_time_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('travel_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('sick_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('holiday_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('vacation_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_timesheets', to=settings.AUTH_USER_MODEL)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='timesheets', to=settings.AUTH_USER_MODEL)),
                ('last_updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_timesheets', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Timesheet',
                'verbose_name_plural': 'Timesheets',
                'ordering': ['-week_start', 'employee'],
                'indexes': [models.Index(fields=['week_start', 'status'], name='timesheets_week_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('employee', 'week_start'), name='unique_timesheet_per_employee_week')],
            },
        ),
        migrations.CreateModel(
            name='TimesheetDay',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('day_name', models.CharField(choices=[('monday', 'Monday'), ('tuesday', 'Tuesday'), ('wednesday', 'Wednesday'), ('thursday', 'Thursday'), ('friday', 'Friday'), ('saturday', 'Saturday'), ('sunday', 'Sunday')], max_length=10)),
                ('day_index', models.PositiveSmallIntegerField(default=0)),
                ('worked', models.BooleanField(default=False)),
                ('time_in', models.TimeField(blank=True, null=True)),
                ('time_out', models.TimeField(blank=True, null=True)),
                ('meal_start', models.TimeField(blank=True, null=True)),
                ('meal_end', models.TimeField(blank=True, null=True)),
                ('am_break_start', models.TimeField(blank=True, null=True)),
                ('am_break_end', models.TimeField(blank=True, null=True)),
                ('pm_break_start', models.TimeField(blank=True, null=True)),
                ('pm_break_end', models.TimeField(blank=True, null=True)),
                ('out_of_town_minutes', models.PositiveIntegerField(default=0)),
                ('leave_type', models.CharField(choices=[('none', 'None'), ('sick', 'Sick'), ('holiday', 'Holiday'), ('vacation', 'Vacation')], default='none', max_length=10)),
                ('leave_hours', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True)),
                ('reason', models.TextField(blank=True, default='')),
                ('total_hours', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('regular_hours', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('overtime_hours', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('double_time_hours', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('travel_hours', models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ('is_seventh_consecutive_day', models.BooleanField(default=False)),
                ('break_deductions', models.JSONField(blank=True, default=list)),
                ('compliance_flags', models.JSONField(blank=True, default=list)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('timesheet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='days', to='timesheets.timesheet')),
            ],
            options={
                'verbose_name': 'Timesheet Day',
                'verbose_name_plural': 'Timesheet Days',
                'ordering': ['timesheet', 'day_index'],
                'constraints': [models.UniqueConstraint(fields=('timesheet', 'day_name'), name='unique_day_per_timesheet')],
            },
        ),
        migrations.CreateModel(
            name='TimesheetExpense',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('timesheet', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='timesheets.timesheet')),
            ],
            options={
                'verbose_name': 'Timesheet Expense',
                'verbose_name_plural': 'Timesheet Expenses',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ReminderLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('week_start', models.DateField()),
                ('status', models.CharField(choices=[('SENT', 'Sent'), ('FAILED', 'Failed')], max_length=10)),
                ('error', models.TextField(blank=True, null=True)),
                ('sent_at', models.DateTimeField(auto_now_add=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='timesheet_reminders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Reminder Log',
                'verbose_name_plural': 'Reminder Logs',
                'ordering': ['-sent_at'],
            },
        ),
    ]
