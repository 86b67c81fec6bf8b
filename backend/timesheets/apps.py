from django.apps import AppConfig


class TimesheetsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'timesheets'

    def ready(self):
        from .rules import load_wage_rules

        # Fail at startup, not on the first request, when the rules are wrong.
        load_wage_rules()
