"""
Calendar Date Module

Ledger dates are 8-character YYYYMMDD strings. The format is fixed-width and
zero-padded, so plain string comparison orders them chronologically; these
helpers convert between that form and datetime.date and walk months and days.
"""

from datetime import date, timedelta
from typing import Iterator, Tuple
import calendar
import re

_DATE_PATTERN = re.compile(r'\d{8}')


def format_date(value: date) -> str:
    """Render a date as YYYYMMDD"""
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def parse_date(value: str) -> date:
    """
    Parse a YYYYMMDD string into a date

    Raises:
        ValueError: If the text is not a real calendar day
    """
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Date must be in YYYYMMDD format: {value!r}")
    return date(int(value[0:4]), int(value[4:6]), int(value[6:8]))


def is_valid_date(value: str) -> bool:
    """Check whether text is a valid YYYYMMDD calendar day"""
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def year_month(value: str) -> Tuple[int, int]:
    """Year and month of a YYYYMMDD string"""
    return int(value[0:4]), int(value[4:6])


def days_in_month(year: int, month: int) -> int:
    """Gregorian month length, leap years included"""
    return calendar.monthrange(year, month)[1]


def month_start(year: int, month: int) -> str:
    """First day of the month as YYYYMMDD"""
    return format_date(date(year, month, 1))


def month_end(year: int, month: int) -> str:
    """Last day of the month as YYYYMMDD"""
    return format_date(date(year, month, days_in_month(year, month)))


def next_month(year: int, month: int) -> Tuple[int, int]:
    """The calendar month after (year, month)"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def iter_days(year: int, month: int) -> Iterator[str]:
    """Yield every day of the month as YYYYMMDD, first to last"""
    current = date(year, month, 1)
    for _ in range(days_in_month(year, month)):
        yield format_date(current)
        current += timedelta(days=1)


def iter_months(start: Tuple[int, int], stop: Tuple[int, int]) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) from start up to but excluding stop"""
    current = start
    while current < stop:
        yield current
        current = next_month(*current)
