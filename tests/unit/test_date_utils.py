"""Unit tests for calendar date helpers"""

import pytest
from datetime import date
from gig_ledger.domain.exceptions import InvalidDateError
from gig_ledger.utils.date_utils import (
    add_months,
    days_in_month,
    generate_date_range,
    is_same_day,
    is_same_month,
    is_same_week,
    iso_week_number,
    parse_local_date,
    start_of_week,
    to_iso_date,
)


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(2024, 4) == 30
    assert days_in_month(2024, 12) == 31


def test_parse_local_date_round_trips():
    for text in ["2024-01-01", "2024-02-29", "1999-12-31"]:
        assert to_iso_date(parse_local_date(text)) == text


def test_parse_local_date_drops_time_component():
    """A UTC timestamp late in the day must not move to another calendar day"""
    assert parse_local_date("2024-03-10T23:30:00.000Z") == date(2024, 3, 10)
    assert parse_local_date("2024-03-10T00:00:00-03:00") == date(2024, 3, 10)


@pytest.mark.parametrize("value", ["", "10/03/2024", "2024-3-10", "2024-02-30", "2024-13-01", "garbage"])
def test_parse_local_date_rejects_malformed(value):
    with pytest.raises(InvalidDateError):
        parse_local_date(value)


def test_to_iso_date_pads_fields():
    assert to_iso_date(date(2024, 3, 5)) == "2024-03-05"


def test_is_same_day():
    assert is_same_day(date(2024, 3, 10), date(2024, 3, 10))
    assert not is_same_day(date(2024, 3, 10), date(2024, 4, 10))


def test_start_of_week_is_monday():
    assert start_of_week(date(2024, 3, 13)) == date(2024, 3, 11)  # Wednesday
    assert start_of_week(date(2024, 3, 11)) == date(2024, 3, 11)  # Monday


def test_start_of_week_maps_sunday_to_previous_monday():
    assert start_of_week(date(2024, 3, 17)) == date(2024, 3, 11)


def test_is_same_week_and_month():
    assert is_same_week(date(2024, 3, 11), date(2024, 3, 17))
    assert not is_same_week(date(2024, 3, 17), date(2024, 3, 18))
    assert is_same_month(date(2024, 3, 1), date(2024, 3, 31))
    assert not is_same_month(date(2024, 3, 1), date(2023, 3, 1))


def test_iso_week_number():
    assert iso_week_number(date(2024, 1, 1)) == 1
    assert iso_week_number(date(2024, 12, 30)) == 1  # belongs to 2025-W01


def test_add_months_clamps_to_month_length():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
    assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)


def test_add_months_with_anchor_day():
    assert add_months(date(2024, 2, 29), 1, anchor_day=31) == date(2024, 3, 31)


def test_generate_date_range_inclusive():
    days = generate_date_range(date(2024, 2, 27), date(2024, 3, 1))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert generate_date_range(date(2024, 3, 2), date(2024, 3, 1)) == []
