"""
URL configuration for timesheet_project project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/audit/', include('audit.urls')),
    path('api/timesheets/', include('timesheets.urls')),
]
