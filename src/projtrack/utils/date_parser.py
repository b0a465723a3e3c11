"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "last monday",
      "next week", "this month", "3 days ago", "in 2 weeks"

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    words = date_str.split()
    if len(words) == 2 and words[0] in ("last", "this", "next"):
        result = _named_period(words[0], words[1], today)
        if result is not None:
            return result

    offset = _counted_offset(words)
    if offset is not None:
        return today + offset

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _named_period(which: str, period: str, today: date) -> Optional[date]:
    """Resolve "last/this/next" + week, month, year or a weekday name."""
    step = {"last": -1, "this": 0, "next": 1}[which]

    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return monday + timedelta(weeks=step)
    if period == "month":
        return today.replace(day=1) + relativedelta(months=step)
    if period == "year":
        return today.replace(month=1, day=1) + relativedelta(years=step)
    if period in WEEKDAYS:
        target = WEEKDAYS.index(period)
        if which == "last":
            days_ago = (today.weekday() - target) % 7 or 7
            return today - timedelta(days=days_ago)
        if which == "next":
            days_ahead = (target - today.weekday()) % 7 or 7
            return today + timedelta(days=days_ahead)
        return today + timedelta(days=target - today.weekday())
    return None


def _counted_offset(words: list[str]) -> Optional[relativedelta]:
    """Resolve "N units ago" and "in N units"."""
    if len(words) == 3 and words[2] == "ago":
        count, unit, sign = words[0], words[1], -1
    elif len(words) == 3 and words[0] == "in":
        count, unit, sign = words[1], words[2], 1
    else:
        return None

    if not count.isdigit():
        return None
    unit = unit.rstrip("s")
    if unit not in ("day", "week", "month", "year"):
        return None
    return relativedelta(**{f"{unit}s": sign * int(count)})
