from datetime import date, datetime, tzinfo
from typing import Any, Optional


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        if value is None or value == "":
            return default
        return int(float(value))
    except Exception:
        return default


def parse_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return default
        result = float(value)
    except Exception:
        return default
    # NaN never compares equal to itself
    if result != result:
        return default
    return result


def parse_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Normalise a date-ish value to a calendar date (time of day dropped).
    Aware datetimes are shifted into `tz` (process local time when None) first.
    Returns None for missing or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if len(s) == 10:
            try:
                return date.fromisoformat(s)
            except ValueError:
                return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz) if tz is not None else dt.astimezone()
    return dt.date()
