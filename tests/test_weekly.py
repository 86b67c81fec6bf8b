import logging
from decimal import Decimal

import pytest

from timesheets.exceptions import InvalidTimeEntry
from timesheets.hours import DayEntry
from timesheets.rules import DAY_NAMES
from timesheets.weekly import compute_week, normalize_week, trailing_streak


def test_standard_week_totals(full_week):
    totals = compute_week(full_week, prior_week_tail=[])
    assert totals.regular_hours == Decimal('40.00')
    assert totals.overtime_hours == Decimal('0.00')
    assert totals.double_time_hours == Decimal('0.00')
    assert not any(day.seventh_consecutive_day for day in totals.days)


def test_seventh_straight_day_in_one_week(make_workday):
    entries = [make_workday(day) for day in DAY_NAMES]
    totals = compute_week(entries, prior_week_tail=[])
    assert totals.day('sunday').seventh_consecutive_day
    assert not totals.day('saturday').seventh_consecutive_day
    assert totals.regular_hours == Decimal('48.00')
    assert totals.overtime_hours == Decimal('8.00')


def test_streak_continues_from_prior_week(make_workday, full_week):
    prior = [make_workday('saturday'), make_workday('sunday')]
    totals = compute_week(full_week, prior_week_tail=prior)
    assert totals.day('friday').seventh_consecutive_day
    assert not totals.day('thursday').seventh_consecutive_day
    assert totals.day('friday').overtime_hours == Decimal('8.00')
    assert totals.regular_hours == Decimal('32.00')


def test_day_off_resets_streak(make_workday):
    entries = [make_workday(day) for day in DAY_NAMES if day != 'thursday']
    prior = [make_workday(day) for day in DAY_NAMES]
    totals = compute_week(entries, prior_week_tail=prior)
    # Seven prior days plus Monday..Wednesday, then a break.
    assert totals.day('monday').seventh_consecutive_day
    assert totals.day('wednesday').seventh_consecutive_day
    assert not any(totals.day(day).seventh_consecutive_day for day in ('friday', 'saturday', 'sunday'))


def test_missing_prior_week_degrades_to_zero_streak(make_workday, caplog):
    entries = [make_workday('monday')]
    with caplog.at_level(logging.INFO, logger='timesheets.weekly'):
        totals = compute_week(entries)
    assert not totals.prior_week_known
    assert not totals.day('monday').seventh_consecutive_day
    assert 'streak starts at zero' in caplog.text

    full_prior_week = [make_workday(day) for day in DAY_NAMES]
    assert compute_week(entries, full_prior_week).day('monday').seventh_consecutive_day


def test_leave_hours_are_summed_by_type(make_workday):
    entries = [
        DayEntry(day='monday', leave_type='sick'),
        DayEntry(day='tuesday', leave_type='vacation', leave_hours=Decimal('4')),
        DayEntry(day='wednesday', leave_type='holiday'),
        make_workday('thursday', out_of_town_minutes=30),
    ]
    totals = compute_week(entries, prior_week_tail=[])
    assert totals.sick_hours == Decimal('8.00')
    assert totals.vacation_hours == Decimal('4.00')
    assert totals.holiday_hours == Decimal('8.00')
    assert totals.travel_hours == Decimal('0.50')
    assert totals.regular_hours == Decimal('8.00')


def test_salaried_totals_are_informational(full_week):
    totals = compute_week(full_week, prior_week_tail=[], compensation_class='salaried')
    assert totals.compensation_class == 'salaried'
    assert totals.informational_only
    assert totals.regular_hours == Decimal('40.00')


def test_unknown_compensation_class_is_rejected(full_week):
    with pytest.raises(ValueError):
        compute_week(full_week, prior_week_tail=[], compensation_class='contractor')


def test_same_input_gives_same_totals(full_week, make_workday):
    prior = [make_workday('sunday')]
    assert compute_week(full_week, prior) == compute_week(list(full_week), list(prior))


def test_normalize_fills_missing_days_in_order(make_workday):
    week = normalize_week([make_workday('friday'), make_workday('monday')])
    assert [entry.day for entry in week] == list(DAY_NAMES)
    assert week[0].worked and week[4].worked
    assert not week[1].worked


def test_normalize_rejects_duplicate_days(make_workday):
    with pytest.raises(InvalidTimeEntry):
        normalize_week([make_workday('monday'), make_workday('monday')])


def test_trailing_streak_counts_from_sunday(make_workday):
    assert trailing_streak([make_workday('friday'), make_workday('saturday'), make_workday('sunday')]) == 3
    assert trailing_streak([make_workday('friday'), make_workday('saturday')]) == 0
    assert trailing_streak([]) == 0


def test_week_totals_serialize_for_preview(full_week):
    data = compute_week(full_week, prior_week_tail=[]).to_dict()
    assert data['total_hours'] == Decimal('40.00')
    assert len(data['days']) == 7
    assert data['days'][0]['day'] == 'monday'
