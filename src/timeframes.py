from __future__ import annotations
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Optional, Tuple


def local_date(ref: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of `ref` in the journal's local calendar.
    Aware datetimes are converted to `tz` (process local zone when None);
    naive datetimes are taken as already local.
    """
    if isinstance(ref, datetime):
        if ref.tzinfo is not None:
            ref = ref.astimezone(tz) if tz is not None else ref.astimezone()
        return ref.date()
    return ref


def start_of_day(d: date) -> date:
    return d


def start_of_week(d: date) -> date:
    """Monday of the ISO week containing `d` (a Sunday maps to six days earlier)."""
    return d - timedelta(days=d.isoweekday() - 1)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def start_of_next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def day_bounds(d: date) -> Tuple[date, date]:
    start = start_of_day(d)
    return start, start + timedelta(days=1)


def week_bounds(d: date) -> Tuple[date, date]:
    start = start_of_week(d)
    return start, start + timedelta(days=7)


def month_bounds(d: date) -> Tuple[date, date]:
    return start_of_month(d), start_of_next_month(d)


def period_windows(ref: datetime, tz: Optional[tzinfo] = None) -> Dict[str, Tuple[date, date]]:
    """Half-open [start, end) windows for daily, weekly and monthly around `ref`."""
    today = local_date(ref, tz)
    return {
        "daily": day_bounds(today),
        "weekly": week_bounds(today),
        "monthly": month_bounds(today),
    }


def in_window(d: date, bounds: Tuple[date, date]) -> bool:
    start, end = bounds
    return start <= d < end
