"""Calendar helpers shared by projection, reports and schedules"""

import calendar
from datetime import date, datetime, timedelta
from typing import List

from finance_tracker.domain.exceptions import MalformedDateError


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)"""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def clamp_day(year: int, month: int, day: int) -> date:
    """Date for `day` in the month, pulled back to the last day when the month is shorter"""
    return date(year, month, min(day, days_in_month(year, month)))


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Shift a (year, month) pair by a number of months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, ignoring day of month"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def parse_date(value: object) -> date:
    """
    Coerce a record date to `date`.

    Accepts `date`, `datetime` and ISO-8601 strings (date or datetime, with an
    optional trailing "Z").

    Raises:
        MalformedDateError: When the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as e:
            raise MalformedDateError(f"Unparseable date: {value!r}") from e
    raise MalformedDateError(f"Unsupported date value: {value!r}")
