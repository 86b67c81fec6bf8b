"""
Celery application for timesheet_project.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'timesheet_project.settings')

app = Celery('timesheet_project')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
