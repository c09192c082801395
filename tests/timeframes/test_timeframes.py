from datetime import date, datetime, timezone, timedelta
from src.timeframes import (
    in_window,
    local_date,
    month_bounds,
    period_windows,
    start_of_week,
    week_bounds,
)


def test_start_of_week_sunday_goes_back_six_days():
    assert start_of_week(date(2026, 10, 18)) == date(2026, 10, 12)


def test_start_of_week_wednesday_goes_back_two_days():
    assert start_of_week(date(2026, 10, 14)) == date(2026, 10, 12)


def test_start_of_week_monday_is_itself():
    assert start_of_week(date(2026, 10, 19)) == date(2026, 10, 19)


def test_week_bounds_span_seven_days():
    start, end = week_bounds(date(2026, 10, 14))
    assert end - start == timedelta(days=7)


def test_month_bounds_leap_february():
    assert month_bounds(date(2028, 2, 29)) == (date(2028, 2, 1), date(2028, 3, 1))


def test_half_open_membership():
    bounds = (date(2026, 10, 12), date(2026, 10, 19))
    assert in_window(date(2026, 10, 12), bounds)
    assert not in_window(date(2026, 10, 19), bounds)


def test_local_date_converts_aware_reference():
    dt = datetime(2026, 2, 13, 23, 0, tzinfo=timezone.utc)
    assert local_date(dt, timezone(timedelta(hours=5))) == date(2026, 2, 14)
    assert local_date(datetime(2026, 2, 13, 23, 0)) == date(2026, 2, 13)


def test_period_windows_keys():
    w = period_windows(datetime(2026, 10, 14, 10, 0))
    assert w["daily"] == (date(2026, 10, 14), date(2026, 10, 15))
    assert w["weekly"] == (date(2026, 10, 12), date(2026, 10, 19))
    assert w["monthly"] == (date(2026, 10, 1), date(2026, 11, 1))
