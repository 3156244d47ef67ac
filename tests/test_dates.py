from datetime import date, datetime, timedelta, timezone

import pytest

from personnel_directory.core.dates import (
    calculate_age,
    days_until_birthday,
    format_date,
    is_birthday,
    normalize_date,
    parse_date,
    time_to_retirement,
    years_of_service,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("15/06/1988", "1988-06-15"),
        ("1/6/1966", "1966-06-01"),
        (" 31/12/2037 ", "2037-12-31"),
        ("1988-06-15", "1988-06-15"),
        ("1988-06-15T10:30:00", "1988-06-15"),
        ("1988-06-15T00:00:00Z", "1988-06-15"),
        ("1988-06-15T18:45:10.123z", "1988-06-15"),
        (date(1970, 1, 2), "1970-01-02"),
        (datetime(1970, 1, 2, 23, 59), "1970-01-02"),
    ],
)
def test_normalize_accepts_known_formats(value, expected):
    assert normalize_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "31/04/2020", "30/02/2021", "13/13/2020", "01/01/1899", "01/01/2101", "yesterday", 12345],
)
def test_normalize_rejects_bad_input(value):
    assert normalize_date(value) is None


@pytest.mark.parametrize("year", [1900, 1999, 2000, 2023, 2024, 2100])
def test_every_calendar_day_round_trips(year):
    day = date(year, 1, 1)
    while day.year == year:
        assert normalize_date(day.strftime("%d/%m/%Y")) == day.isoformat()
        assert normalize_date(f"{day.day}/{day.month}/{day.year}") == day.isoformat()
        day += timedelta(days=1)


@pytest.mark.parametrize(
    "value",
    ["31/02/2000", "30/02/2024", "29/02/1900", "29/02/2023", "29/02/2100", "31/04/2024", "31/12/1899", "01/01/2101"],
)
def test_impossible_and_out_of_range_dates(value):
    assert normalize_date(value) is None


@pytest.mark.parametrize(
    "value,expected",
    [("29/02/2000", "2000-02-29"), ("29/02/2024", "2024-02-29"), ("01/01/1900", "1900-01-01"), ("31/12/2100", "2100-12-31")],
)
def test_boundary_dates_parse(value, expected):
    assert normalize_date(value) == expected


def test_normalize_is_idempotent():
    once = normalize_date("15/06/1988")
    assert normalize_date(once) == once


def test_aware_datetime_keeps_its_own_calendar_day():
    late_evening = datetime(2026, 6, 14, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert parse_date(late_evening) == date(2026, 6, 14)


def test_format_date():
    assert format_date("15/06/1988") == "15 Jun 1988"
    assert format_date(None) == ""
    assert format_date("garbage", fallback="-") == "-"


def test_calculate_age_before_and_on_birthday():
    assert calculate_age("16/06/1988", date(2026, 6, 15)) == 37
    assert calculate_age("15/06/1988", date(2026, 6, 15)) == 38
    assert calculate_age(None, date(2026, 6, 15)) == 0


def test_time_to_retirement_states():
    today = date(2026, 6, 15)
    assert time_to_retirement(None, today) == ("N/A", -1)
    assert time_to_retirement("not a date", today) == ("N/A", -1)
    assert time_to_retirement("15/06/2026", today) == ("Retired", -1)
    assert time_to_retirement("01/01/2020", today) == ("Retired", -1)


def test_time_to_retirement_countdown_text():
    today = date(2026, 6, 15)
    # 10 days away: days shown because there are no whole years
    assert time_to_retirement(today + timedelta(days=10), today) == ("10d", 10)
    # 400 days = 1y 1m 5d; days are dropped once years appear
    assert time_to_retirement(today + timedelta(days=400), today) == ("1y 1m", 400)
    assert time_to_retirement(today + timedelta(days=365), today) == ("1y", 365)


def test_years_of_service():
    assert years_of_service("14/06/2016", date(2026, 6, 15)) == 10
    assert years_of_service("16/06/2016", date(2026, 6, 15)) == 9
    assert years_of_service(None, date(2026, 6, 15)) is None


def test_birthday_helpers():
    assert is_birthday("15/06/1988", date(2026, 6, 15))
    assert not is_birthday("15/06/1988", date(2026, 6, 16))
    assert days_until_birthday("15/06/1988", date(2026, 6, 15)) == 0
    assert days_until_birthday("14/06/1988", date(2026, 6, 15)) == 364


def test_leap_day_birthday_in_common_year():
    assert is_birthday("29/02/1992", date(2027, 2, 28))
    assert is_birthday("29/02/1992", date(2028, 2, 29))
    assert not is_birthday("29/02/1992", date(2028, 2, 28))
