"""Period keys.

A period is a calendar month identified by a 'YYYY-MM' string. The same
string tags Budget.month and is the prefix of an ISO transaction date in
that month.
"""

import calendar
import re
from datetime import date
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

PERIOD_SEPARATOR = "-"

# ASCII digits only, no trailing newline
_PERIOD_RE = re.compile(r"([0-9]{4})-([0-9]{2})")


def format_period(year: int, month: int) -> str:
    """Build the period key for a year and month.

    Args:
        year: Four digit year (1-9999).
        month: Month number (1-12).

    Returns:
        Period key such as '2025-03'.

    Raises:
        ValueError: If year or month is out of range.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValueError(f"Year must be between 1 and 9999, got {year}")
    return f"{year:04d}{PERIOD_SEPARATOR}{month:02d}"


def parse_period(period: str) -> Tuple[int, int]:
    """Split a period key into (year, month).

    Raises:
        ValueError: If the key is not a valid 'YYYY-MM' string.
    """
    match = _PERIOD_RE.fullmatch(period or "")
    if not match:
        raise ValueError(f"Invalid period '{period}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    # Round-trip through format_period for the range checks
    format_period(year, month)
    return year, month


def previous_period(period: str) -> str:
    """Return the period immediately before the given one.

    January wraps to December of the previous year.

    Raises:
        ValueError: If the key is malformed, or is 0001-01 which has no predecessor.
    """
    year, month = parse_period(period)
    if (year, month) == (1, 1):
        raise ValueError(f"Period '{period}' has no previous period")
    first_of_previous = date(year, month, 1) - relativedelta(months=1)
    return format_period(first_of_previous.year, first_of_previous.month)


def period_of(day: date) -> str:
    """Return the period a date belongs to."""
    return format_period(day.year, day.month)


def current_period(today: Optional[date] = None) -> str:
    """Return the period containing today (or the given date)."""
    return period_of(today or date.today())


def period_bounds(period: str) -> Tuple[date, date]:
    """Return the first and last day of a period."""
    year, month = parse_period(period)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
