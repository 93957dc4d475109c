from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse a strict YYYY-MM-DD string into a date."""
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise ValidationError(f"Invalid {field_name} (use YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (use YYYY-MM-DD)")


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def previous_day(value: date) -> date:
    return value - timedelta(days=1)


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Invalid month")
    first = date(int(year), int(month), 1)
    last = date(int(year), int(month), days_in_month(int(month), int(year)))
    return first, last


def months_in_range(start: date, end: date) -> list[tuple[int, int]]:
    """(month, year) pairs touched by an inclusive date range."""
    out: list[tuple[int, int]] = []
    y, m = start.year, start.month
    while (y, m) <= (end.year, end.month):
        out.append((m, y))
        m += 1
        if m > 12:
            m = 1
            y += 1
    return out


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
