"""
Weekly aggregation of day breakdowns, including the seventh consecutive
working day premium.
"""
import logging
from dataclasses import dataclass

from .exceptions import InvalidTimeEntry
from .hours import DayEntry, compute_day, minutes_to_hours
from .rules import DAY_NAMES, DEFAULT_RULES

logger = logging.getLogger(__name__)

COMPENSATION_CLASSES = ('hourly', 'salaried')


@dataclass(frozen=True)
class WeekTotals:
    days: tuple
    regular_minutes: int = 0
    overtime_minutes: int = 0
    double_time_minutes: int = 0
    travel_minutes: int = 0
    sick_minutes: int = 0
    holiday_minutes: int = 0
    vacation_minutes: int = 0
    compensation_class: str = 'hourly'
    prior_week_known: bool = True

    @property
    def informational_only(self):
        """Salaried totals are reported but not used for overtime pay."""
        return self.compensation_class == 'salaried'

    @property
    def regular_hours(self):
        return minutes_to_hours(self.regular_minutes)

    @property
    def overtime_hours(self):
        return minutes_to_hours(self.overtime_minutes)

    @property
    def double_time_hours(self):
        return minutes_to_hours(self.double_time_minutes)

    @property
    def travel_hours(self):
        return minutes_to_hours(self.travel_minutes)

    @property
    def sick_hours(self):
        return minutes_to_hours(self.sick_minutes)

    @property
    def holiday_hours(self):
        return minutes_to_hours(self.holiday_minutes)

    @property
    def vacation_hours(self):
        return minutes_to_hours(self.vacation_minutes)

    @property
    def total_hours(self):
        return minutes_to_hours(
            self.regular_minutes + self.overtime_minutes + self.double_time_minutes
        )

    def day(self, name):
        for day in self.days:
            if day.day == name:
                return day
        raise KeyError(name)

    def hour_fields(self):
        """Totals keyed by the ``Timesheet`` model field names."""
        return {
            'regular_hours': self.regular_hours,
            'overtime_hours': self.overtime_hours,
            'double_time_hours': self.double_time_hours,
            'travel_hours': self.travel_hours,
            'sick_hours': self.sick_hours,
            'holiday_hours': self.holiday_hours,
            'vacation_hours': self.vacation_hours,
        }

    def to_dict(self):
        data = self.hour_fields()
        data.update({
            'total_hours': self.total_hours,
            'compensation_class': self.compensation_class,
            'informational_only': self.informational_only,
            'prior_week_known': self.prior_week_known,
            'days': [day.to_dict() for day in self.days],
        })
        return data


def normalize_week(entries):
    """
    Return exactly seven ``DayEntry`` objects in Monday..Sunday order.

    Missing days become "did not work" days. Unknown or repeated day labels
    raise ``InvalidTimeEntry``.
    """
    by_day = {}
    for entry in entries or ():
        if entry.day not in DAY_NAMES:
            raise InvalidTimeEntry(f"Unknown day: {entry.day!r}", day=entry.day)
        if entry.day in by_day:
            raise InvalidTimeEntry(f"Day {entry.day} appears more than once", day=entry.day)
        by_day[entry.day] = entry
    return tuple(by_day.get(name) or DayEntry(day=name) for name in DAY_NAMES)


def trailing_streak(entries):
    """Number of consecutive worked days at the end of a week."""
    streak = 0
    for entry in reversed(normalize_week(entries)):
        if not entry.counts_as_worked:
            break
        streak += 1
    return streak


def compute_week(entries, prior_week_tail=None, compensation_class='hourly', rules=DEFAULT_RULES):
    """
    Fold a week of day entries into ``WeekTotals``.

    ``prior_week_tail`` is the previous week's day entries (any subset) and
    seeds the consecutive-day streak. When it is ``None`` the streak starts at
    zero; that is logged but is not an error.
    """
    if compensation_class not in COMPENSATION_CLASSES:
        raise ValueError(f"Unknown compensation class: {compensation_class!r}")

    week = normalize_week(entries)

    if prior_week_tail is None:
        logger.info("Prior week unavailable; consecutive-day streak starts at zero")
        streak = 0
    else:
        streak = trailing_streak(prior_week_tail)

    days = []
    for entry in week:
        if entry.counts_as_worked:
            streak += 1
        else:
            streak = 0
        seventh = entry.counts_as_worked and streak >= rules.consecutive_days_for_premium
        days.append(compute_day(entry, seventh_consecutive_day=seventh, rules=rules))

    leave = {'sick': 0, 'holiday': 0, 'vacation': 0}
    for day in days:
        if day.leave_type in leave:
            leave[day.leave_type] += day.leave_minutes

    return WeekTotals(
        days=tuple(days),
        regular_minutes=sum(d.regular_minutes for d in days),
        overtime_minutes=sum(d.overtime_minutes for d in days),
        double_time_minutes=sum(d.double_time_minutes for d in days),
        travel_minutes=sum(d.travel_minutes for d in days),
        sick_minutes=leave['sick'],
        holiday_minutes=leave['holiday'],
        vacation_minutes=leave['vacation'],
        compensation_class=compensation_class,
        prior_week_known=prior_week_tail is not None,
    )
