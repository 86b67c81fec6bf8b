import pytest
from django.core.exceptions import ImproperlyConfigured

from timesheets.rules import DEFAULT_RULES, WageRules, load_wage_rules


def test_defaults_are_daily_overtime_rules():
    assert DEFAULT_RULES.regular_day_minutes == 480
    assert DEFAULT_RULES.double_time_after_minutes == 720
    assert DEFAULT_RULES.paid_rest_break_minutes == 10
    assert DEFAULT_RULES.required_days == ('monday', 'tuesday', 'wednesday', 'thursday', 'friday')


def test_project_settings_load_cleanly():
    rules = load_wage_rules()
    assert rules.regular_day_minutes == 480
    assert rules.required_days == DEFAULT_RULES.required_days


def test_settings_override_individual_rules(settings):
    settings.TIMESHEET_RULES = {'REGULAR_DAY_MINUTES': 420, 'REQUIRED_DAYS': ['Monday', ' tuesday ']}
    rules = load_wage_rules()
    assert rules.regular_day_minutes == 420
    assert rules.double_time_after_minutes == 720
    assert rules.required_days == ('monday', 'tuesday')


def test_unknown_rule_key_is_rejected(settings):
    settings.TIMESHEET_RULES = {'WEEKLY_OVERTIME_AFTER': 2400}
    with pytest.raises(ImproperlyConfigured):
        load_wage_rules()


def test_inconsistent_thresholds_are_rejected(settings):
    settings.TIMESHEET_RULES = {'REGULAR_DAY_MINUTES': 600, 'DOUBLE_TIME_AFTER_MINUTES': 540}
    with pytest.raises(ImproperlyConfigured):
        load_wage_rules()


def test_negative_values_are_rejected():
    with pytest.raises(ValueError):
        WageRules(paid_rest_break_minutes=-1).validate()
