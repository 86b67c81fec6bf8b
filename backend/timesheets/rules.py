"""
Wage rules for the hours calculation.

The defaults are California daily overtime. Deployments override them with
``settings.TIMESHEET_RULES``; the rules are validated once at startup.
"""
from dataclasses import dataclass, fields, replace

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DAY_NAMES = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


@dataclass(frozen=True)
class WageRules:
    regular_day_minutes: int = 480
    double_time_after_minutes: int = 720
    seventh_day_overtime_minutes: int = 480
    paid_rest_break_minutes: int = 10
    leave_day_minutes: int = 480
    consecutive_days_for_premium: int = 7
    meal_break_required_after_minutes: int = 300
    long_shift_minutes: int = 600
    long_shift_min_meal_minutes: int = 30
    first_rest_break_after_minutes: int = 210
    second_rest_break_after_minutes: int = 360
    required_days: tuple = DAY_NAMES[:5]

    def validate(self):
        """Raise ``ValueError`` describing the first inconsistent value."""
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name == 'required_days':
                unknown = [day for day in value if day not in DAY_NAMES]
                if unknown:
                    raise ValueError(f"Unknown required days: {', '.join(unknown)}")
            elif not isinstance(value, int) or value < 0:
                raise ValueError(f"{field.name} must be a non-negative integer, got {value!r}")
        if self.double_time_after_minutes < self.regular_day_minutes:
            raise ValueError("double_time_after_minutes must not be less than regular_day_minutes")
        if not 1 <= self.consecutive_days_for_premium <= 7:
            raise ValueError("consecutive_days_for_premium must be between 1 and 7")
        return self


DEFAULT_RULES = WageRules()


def load_wage_rules():
    """
    Build ``WageRules`` from ``settings.TIMESHEET_RULES``.

    Keys are the upper-case field names. Missing keys keep their defaults.
    Raises ``ImproperlyConfigured`` for unknown keys or invalid values.
    """
    configured = getattr(settings, 'TIMESHEET_RULES', None) or {}
    known = {field.name for field in fields(WageRules)}
    overrides = {}
    for key, value in configured.items():
        name = key.lower()
        if name not in known:
            raise ImproperlyConfigured(f"Unknown TIMESHEET_RULES key: {key}")
        if name == 'required_days':
            value = tuple(str(day).strip().lower() for day in value if str(day).strip())
        overrides[name] = value

    try:
        return replace(DEFAULT_RULES, **overrides).validate()
    except ValueError as e:
        raise ImproperlyConfigured(f"Invalid TIMESHEET_RULES: {e}")
