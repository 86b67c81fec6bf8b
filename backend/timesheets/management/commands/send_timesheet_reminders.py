"""
Management command to remind employees who have no timesheet for a week.
"""
import datetime

from django.core.management.base import BaseCommand, CommandError

from timesheets.clock import SystemClock
from timesheets.guard import week_start_for
from timesheets.notifications import (
    find_employees_missing_timesheet, send_missing_timesheet_reminders,
)


class Command(BaseCommand):
    help = 'Email employees who have not created a timesheet for the week'

    def add_arguments(self, parser):
        parser.add_argument(
            '--week',
            type=str,
            help='Any date in the target week (YYYY-MM-DD). Defaults to the current week.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the employees that would be reminded without sending anything',
        )

    def handle(self, *args, **options):
        if options['week']:
            try:
                day = datetime.date.fromisoformat(options['week'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['week']}")
        else:
            day = SystemClock().today()
        week_start = week_start_for(day)

        if options['dry_run']:
            employees = find_employees_missing_timesheet(week_start)
            if not employees.exists():
                self.stdout.write(self.style.SUCCESS(f'No missing timesheets for week of {week_start}.'))
                return
            self.stdout.write(f'Employees missing a timesheet for week of {week_start}:')
            for idx, employee in enumerate(employees, 1):
                self.stdout.write(f"{idx}. {employee.username:<20} | {employee.email or 'N/A'}")
            return

        summary = send_missing_timesheet_reminders(week_start)
        self.stdout.write(
            self.style.SUCCESS(f"Reminders for week of {week_start}: {summary['sent']} sent")
        )
        if summary['failed']:
            self.stdout.write(self.style.WARNING(f"{summary['failed']} reminder(s) failed"))
