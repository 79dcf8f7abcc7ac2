"""
Café-local calendar helpers.

Every "today" in the app (order dates, alert sweeps, expiry checks) is the
calendar date in the café's timezone, not the server's. Months are addressed
with a zero-based ``month_index`` (0 = January).
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

import pytz

from leafy.core.config import get_settings


def local_now(cafe_timezone: Optional[str] = None) -> datetime:
    """
    Current timezone-aware datetime in the café's timezone.

    Args:
        cafe_timezone: IANA timezone string. Defaults to CAFE_TIMEZONE setting.
    """
    tz = pytz.timezone(cafe_timezone or get_settings().CAFE_TIMEZONE)
    return datetime.now(pytz.UTC).astimezone(tz)


def local_today(cafe_timezone: Optional[str] = None) -> date:
    """Current calendar date in the café's timezone."""
    return local_now(cafe_timezone).date()


def month_bounds(year: int, month_index: int) -> tuple[date, date]:
    """
    First and last calendar day of a month.

    Examples:
        >>> month_bounds(2024, 1)
        (date(2024, 2, 1), date(2024, 2, 29))
    """
    if not 0 <= month_index <= 11:
        raise ValueError(f"month_index must be between 0 and 11, got {month_index}")
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_month_days(year: int, month_index: int) -> Iterator[date]:
    """Yield every day of the month in ascending order."""
    start, end = month_bounds(year, month_index)
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_label(year: int, month_index: int) -> str:
    """'YYYY-MM' label for a month."""
    start, _ = month_bounds(year, month_index)
    return start.strftime("%Y-%m")
