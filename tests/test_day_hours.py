from decimal import Decimal

import pytest

from timesheets.exceptions import InvalidTimeEntry
from timesheets.hours import (
    MEAL_BREAK_MISSING, MEAL_BREAK_SHORT, MEAL_BREAK_ZERO_DURATION, REST_BREAK_MISSING,
    DayEntry, compute_day, minutes_to_hours,
)


def test_eight_hour_day_is_all_regular(make_workday):
    hours = compute_day(make_workday('monday'))
    assert hours.regular_minutes == 480
    assert hours.overtime_minutes == 0
    assert hours.double_time_minutes == 0
    assert hours.regular_hours == Decimal('8.00')


def test_ten_hour_day_splits_regular_and_overtime(make_workday):
    hours = compute_day(make_workday('tuesday', '07:00', '17:30'))
    assert (hours.regular_minutes, hours.overtime_minutes, hours.double_time_minutes) == (480, 120, 0)
    assert hours.overtime_hours == Decimal('2.00')


def test_thirteen_hour_day_reaches_double_time(make_workday):
    hours = compute_day(make_workday('wednesday', '06:00', '19:30'))
    assert hours.regular_hours == Decimal('8.00')
    assert hours.overtime_hours == Decimal('4.00')
    assert hours.double_time_hours == Decimal('1.00')


def test_seventh_consecutive_day_has_no_regular_hours(make_workday):
    hours = compute_day(make_workday('sunday', '07:00', '16:30'), seventh_consecutive_day=True)
    assert hours.regular_minutes == 0
    assert hours.overtime_hours == Decimal('8.00')
    assert hours.double_time_hours == Decimal('1.00')
    assert hours.seventh_consecutive_day


def test_meal_break_is_always_deducted(make_workday):
    hours = compute_day(make_workday('monday', '08:00', '16:05', meal=('12:00', '12:05')))
    assert hours.worked_minutes == 480


def test_short_rest_break_is_paid(make_workday):
    entry = make_workday('monday', '08:00', '16:40', am_break_start='10:00', am_break_end='10:10')
    hours = compute_day(entry)
    assert hours.worked_minutes == 490
    am = [b for b in hours.breaks if b.kind == 'am'][0]
    assert am.deducted_minutes == 0


def test_rest_break_over_ten_minutes_is_deducted_in_full(make_workday):
    entry = make_workday('monday', '08:00', '16:40', am_break_start='10:00', am_break_end='10:11')
    assert compute_day(entry).worked_minutes == 479


def test_zero_length_meal_break_is_flagged(make_workday):
    hours = compute_day(make_workday('monday', '08:00', '16:00', meal=('12:00', '12:00')))
    assert hours.worked_minutes == 480
    assert MEAL_BREAK_ZERO_DURATION in hours.flags


def test_missing_breaks_are_flagged_not_rejected(make_workday):
    hours = compute_day(make_workday('monday', '08:00', '14:00', meal=None))
    assert hours.worked_minutes == 360
    assert MEAL_BREAK_MISSING in hours.flags
    assert REST_BREAK_MISSING in hours.flags


def test_short_meal_on_long_shift_is_flagged(make_workday):
    hours = compute_day(make_workday('monday', '06:00', '17:00', meal=('12:00', '12:20')))
    assert MEAL_BREAK_SHORT in hours.flags


def test_travel_is_reported_outside_the_ladder(make_workday):
    hours = compute_day(make_workday('monday', out_of_town_minutes=90))
    assert hours.travel_hours == Decimal('1.50')
    assert hours.regular_minutes == 480
    assert hours.overtime_minutes == 0


def test_day_off_records_default_leave():
    hours = compute_day(DayEntry(day='monday', leave_type='sick'))
    assert hours.leave_minutes == 480
    assert hours.regular_minutes == 0


def test_day_off_with_explicit_leave_hours():
    hours = compute_day(DayEntry(day='tuesday', leave_type='vacation', leave_hours=Decimal('4')))
    assert hours.leave_hours == Decimal('4.00')


def test_worked_day_without_clock_times_is_zero():
    hours = compute_day(DayEntry(day='monday', worked=True))
    assert hours.worked_minutes == 0
    assert hours.regular_minutes == 0


def test_time_out_before_time_in_is_invalid(make_workday):
    with pytest.raises(InvalidTimeEntry):
        compute_day(make_workday('monday', '17:00', '08:00', meal=None))


def test_half_a_time_pair_is_invalid():
    with pytest.raises(InvalidTimeEntry):
        compute_day(DayEntry(day='monday', worked=True, time_in='08:00'))


def test_half_a_break_pair_is_invalid(make_workday):
    with pytest.raises(InvalidTimeEntry):
        compute_day(make_workday('monday', pm_break_start='14:00'))


def test_break_outside_shift_is_invalid(make_workday):
    with pytest.raises(InvalidTimeEntry):
        compute_day(make_workday('monday', am_break_start='07:00', am_break_end='07:15'))


def test_break_ending_before_start_is_invalid(make_workday):
    with pytest.raises(InvalidTimeEntry):
        compute_day(make_workday('monday', meal=('12:30', '12:00')))


def test_overlapping_breaks_are_invalid(make_workday):
    with pytest.raises(InvalidTimeEntry):
        compute_day(make_workday('monday', pm_break_start='12:20', pm_break_end='12:35'))


def test_unknown_day_is_invalid():
    with pytest.raises(InvalidTimeEntry):
        compute_day(DayEntry(day='funday'))


def test_minutes_to_hours_rounds_to_two_places():
    assert minutes_to_hours(500) == Decimal('8.33')
    assert minutes_to_hours(50) == Decimal('0.83')
