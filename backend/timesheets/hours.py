"""
Daily hours calculation.

Turns one raw day entry into regular, overtime and double-time minutes under
daily overtime rules:

* first 8 hours of a day are regular, the next 4 are overtime (1.5x) and
  everything past 12 is double time (2x);
* on the seventh consecutive working day the first 8 hours are overtime and
  the rest double time;
* the meal break is always unpaid, rest breaks are paid up to 10 minutes.

Everything is computed in whole minutes. Hours only appear at the edges via
``minutes_to_hours``. This module does no I/O.
"""
import datetime
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from .exceptions import InvalidTimeEntry
from .rules import DAY_NAMES, DEFAULT_RULES

LEAVE_TYPES = ('none', 'sick', 'holiday', 'vacation')

BREAK_KINDS = ('meal', 'am', 'pm')

# Compliance flags. These never block a calculation.
MEAL_BREAK_ZERO_DURATION = 'MEAL_BREAK_ZERO_DURATION'
MEAL_BREAK_MISSING = 'MEAL_BREAK_MISSING'
MEAL_BREAK_SHORT = 'MEAL_BREAK_SHORT'
REST_BREAK_MISSING = 'REST_BREAK_MISSING'

HUNDREDTH = Decimal('0.01')


def minutes_to_hours(minutes):
    """Minutes as hours, rounded half-up to two decimals."""
    return (Decimal(minutes) / Decimal(60)).quantize(HUNDREDTH, rounding=ROUND_HALF_UP)


def hours_to_minutes(hours):
    """Hours (Decimal, int, float or numeric string) as whole minutes."""
    return int((Decimal(str(hours)) * 60).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def clock_minutes(value, day=None):
    """
    Minutes since midnight for a ``datetime.time`` or ``'HH:MM'`` string.

    ``None`` and empty strings mean "not given" and return ``None``.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime.time):
        return value.hour * 60 + value.minute
    try:
        hours, minutes = str(value).split(':')[:2]
        hours, minutes = int(hours), int(minutes)
    except ValueError:
        raise InvalidTimeEntry(f"Invalid time value: {value!r}", day=day)
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise InvalidTimeEntry(f"Invalid time value: {value!r}", day=day)
    return hours * 60 + minutes


@dataclass(frozen=True)
class DayEntry:
    """Raw data for one day as the employee entered it."""

    day: str
    worked: bool = False
    time_in: object = None
    time_out: object = None
    meal_start: object = None
    meal_end: object = None
    am_break_start: object = None
    am_break_end: object = None
    pm_break_start: object = None
    pm_break_end: object = None
    out_of_town_minutes: int = 0
    leave_type: str = 'none'
    leave_hours: object = None
    reason: str = ''

    @property
    def has_clock_times(self):
        return self.time_in not in (None, '') and self.time_out not in (None, '')

    @property
    def counts_as_worked(self):
        return bool(self.worked) and self.has_clock_times

    def break_times(self, kind):
        if kind == 'meal':
            return self.meal_start, self.meal_end
        if kind == 'am':
            return self.am_break_start, self.am_break_end
        return self.pm_break_start, self.pm_break_end


@dataclass(frozen=True)
class BreakDeduction:
    kind: str
    start_minute: int
    end_minute: int
    deducted_minutes: int

    @property
    def duration_minutes(self):
        return self.end_minute - self.start_minute

    def to_dict(self):
        return {
            'kind': self.kind,
            'duration_minutes': self.duration_minutes,
            'deducted_minutes': self.deducted_minutes,
        }


@dataclass(frozen=True)
class DayHours:
    """Categorized hours for one day. Derived, never edited by hand."""

    day: str
    gross_minutes: int = 0
    worked_minutes: int = 0
    regular_minutes: int = 0
    overtime_minutes: int = 0
    double_time_minutes: int = 0
    travel_minutes: int = 0
    leave_type: str = 'none'
    leave_minutes: int = 0
    seventh_consecutive_day: bool = False
    breaks: tuple = ()
    flags: tuple = field(default=())

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
    def leave_hours(self):
        return minutes_to_hours(self.leave_minutes)

    @property
    def total_hours(self):
        return minutes_to_hours(self.worked_minutes)

    def to_dict(self):
        return {
            'day': self.day,
            'total_hours': self.total_hours,
            'regular_hours': self.regular_hours,
            'overtime_hours': self.overtime_hours,
            'double_time_hours': self.double_time_hours,
            'travel_hours': self.travel_hours,
            'leave_type': self.leave_type,
            'leave_hours': self.leave_hours,
            'is_seventh_consecutive_day': self.seventh_consecutive_day,
            'break_deductions': [b.to_dict() for b in self.breaks],
            'compliance_flags': list(self.flags),
        }


def _leave_minutes(entry, rules):
    if entry.leave_type == 'none':
        return 0
    if entry.leave_hours in (None, ''):
        # Only a day off defaults to a full leave day.
        return 0 if entry.worked else rules.leave_day_minutes
    try:
        minutes = hours_to_minutes(entry.leave_hours)
    except ArithmeticError:
        raise InvalidTimeEntry(f"Invalid leave hours: {entry.leave_hours!r}", day=entry.day)
    if minutes < 0:
        raise InvalidTimeEntry("Leave hours cannot be negative", day=entry.day)
    return minutes


def _pair(entry, start, end, label):
    start_minute = clock_minutes(start, entry.day)
    end_minute = clock_minutes(end, entry.day)
    if (start_minute is None) != (end_minute is None):
        raise InvalidTimeEntry(f"{label} needs both a start and an end time", day=entry.day)
    return start_minute, end_minute


def _collect_breaks(entry, time_in, time_out):
    collected = []
    for kind in BREAK_KINDS:
        start, end = _pair(entry, *entry.break_times(kind), label=f"{kind} break")
        if start is None:
            continue
        if end < start:
            raise InvalidTimeEntry(f"{kind} break ends before it starts", day=entry.day)
        if start < time_in or end > time_out:
            raise InvalidTimeEntry(f"{kind} break lies outside the work interval", day=entry.day)
        collected.append((kind, start, end))

    ordered = sorted(collected, key=lambda b: (b[1], b[2]))
    for previous, current in zip(ordered, ordered[1:]):
        if current[1] < previous[2]:
            raise InvalidTimeEntry(
                f"{previous[0]} break overlaps {current[0]} break", day=entry.day
            )
    return collected


def _compliance_flags(gross, breaks, rules):
    by_kind = {b.kind: b for b in breaks}
    flags = []
    meal = by_kind.get('meal')
    if meal is not None and meal.duration_minutes == 0:
        flags.append(MEAL_BREAK_ZERO_DURATION)
    if gross > rules.meal_break_required_after_minutes and meal is None:
        flags.append(MEAL_BREAK_MISSING)
    if (gross > rules.long_shift_minutes and meal is not None
            and meal.duration_minutes < rules.long_shift_min_meal_minutes):
        flags.append(MEAL_BREAK_SHORT)
    if ((gross >= rules.first_rest_break_after_minutes and 'am' not in by_kind)
            or (gross >= rules.second_rest_break_after_minutes and 'pm' not in by_kind)):
        flags.append(REST_BREAK_MISSING)
    return tuple(flags)


def split_minutes(worked, seventh_consecutive_day=False, rules=DEFAULT_RULES):
    """Split net worked minutes into (regular, overtime, double_time)."""
    if seventh_consecutive_day:
        overtime = min(worked, rules.seventh_day_overtime_minutes)
        return 0, overtime, worked - overtime
    regular = min(worked, rules.regular_day_minutes)
    overtime = min(worked, rules.double_time_after_minutes) - regular
    return regular, overtime, worked - regular - overtime


def compute_day(entry, *, seventh_consecutive_day=False, rules=DEFAULT_RULES):
    """
    Compute the hour breakdown for a single ``DayEntry``.

    Raises ``InvalidTimeEntry`` when the entry is inconsistent: a clock-out
    before clock-in, half of a time pair, a break that ends before it starts,
    lies outside the shift or overlaps another break. A worked day without
    clock times is an incomplete draft and yields zero hours.
    """
    if entry.day not in DAY_NAMES:
        raise InvalidTimeEntry(f"Unknown day: {entry.day!r}", day=entry.day)
    if entry.leave_type not in LEAVE_TYPES:
        raise InvalidTimeEntry(f"Unknown leave type: {entry.leave_type!r}", day=entry.day)

    leave_minutes = _leave_minutes(entry, rules)
    base = DayHours(day=entry.day, leave_type=entry.leave_type, leave_minutes=leave_minutes)

    if not entry.worked:
        return base

    time_in, time_out = _pair(entry, entry.time_in, entry.time_out, label="Clock time")
    if time_in is None:
        return base
    if time_out < time_in:
        raise InvalidTimeEntry("Time out is before time in", day=entry.day)

    travel = entry.out_of_town_minutes or 0
    if travel < 0:
        raise InvalidTimeEntry("Out-of-town time cannot be negative", day=entry.day)

    breaks = []
    for kind, start, end in _collect_breaks(entry, time_in, time_out):
        duration = end - start
        if kind == 'meal' or duration > rules.paid_rest_break_minutes:
            deducted = duration
        else:
            deducted = 0
        breaks.append(BreakDeduction(kind, start, end, deducted))

    gross = time_out - time_in
    worked = gross - sum(b.deducted_minutes for b in breaks)
    regular, overtime, double_time = split_minutes(worked, seventh_consecutive_day, rules)

    return DayHours(
        day=entry.day,
        gross_minutes=gross,
        worked_minutes=worked,
        regular_minutes=regular,
        overtime_minutes=overtime,
        double_time_minutes=double_time,
        travel_minutes=travel,
        leave_type=entry.leave_type,
        leave_minutes=leave_minutes,
        seventh_consecutive_day=seventh_consecutive_day,
        breaks=tuple(breaks),
        flags=_compliance_flags(gross, breaks, rules),
    )
