"""
Calendar date handling for sale records.

The canonical in-memory date is a `datetime.date` (a year/month/day value).
Text only exists at the edges: the persisted file and the interactive
prompt. Two textual conventions are supported and one of them is configured
as the authoritative on-disk form.
"""
from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Tuple

from sales_ledger.errors import DateFormatError, DateOutOfRangeError, InvalidCalendarDateError


class DateFormat(str, Enum):
    """Textual date conventions."""

    ISO = "iso"  # YYYY-MM-DD
    DMY = "dmy"  # DD/MM/YYYY

    @property
    def pattern(self) -> str:
        return "YYYY-MM-DD" if self is DateFormat.ISO else "DD/MM/YYYY"


_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DMY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Gregorian rule: every 4th year, except centuries not divisible by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidCalendarDateError(f"Month {month} is not between 1 and 12")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def check_year_range(year: int, min_year: int, max_year: int) -> None:
    if not min_year <= year <= max_year:
        raise DateOutOfRangeError(
            f"Year {year} is outside the accepted range {min_year}-{max_year}"
        )


def make_date(year: int, month: int, day: int, min_year: int = 1900, max_year: int = 2100) -> date:
    """
    Build a validated date from its parts.

    Raises
    ------
    InvalidCalendarDateError
        The month or day does not exist (including Feb 29 of a non-leap year).
    DateOutOfRangeError
        The year is outside ``[min_year, max_year]``.
    """
    check_year_range(year, min_year, max_year)
    if not 1 <= day <= days_in_month(year, month):
        raise InvalidCalendarDateError(f"{year:04d}-{month:02d}-{day:02d} is not a calendar date")
    return date(year, month, day)


def _split(text: str, fmt: DateFormat) -> Tuple[int, int, int]:
    if fmt is DateFormat.ISO:
        match = _ISO_RE.match(text)
        if match:
            year, month, day = match.groups()
            return int(year), int(month), int(day)
    else:
        match = _DMY_RE.match(text)
        if match:
            day, month, year = match.groups()
            return int(year), int(month), int(day)
    raise DateFormatError(f"'{text}' does not match {fmt.pattern}")


def parse_date(
    text: str,
    fmt: DateFormat = DateFormat.ISO,
    min_year: int = 1900,
    max_year: int = 2100,
) -> date:
    """Parse `text` written in `fmt` into a validated date."""
    year, month, day = _split(text.strip(), fmt)
    return make_date(year, month, day, min_year=min_year, max_year=max_year)


def format_date(value: date, fmt: DateFormat = DateFormat.ISO) -> str:
    if fmt is DateFormat.ISO:
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


__all__ = [
    "DateFormat",
    "is_leap_year",
    "days_in_month",
    "check_year_range",
    "make_date",
    "parse_date",
    "format_date",
]
