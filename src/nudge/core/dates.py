"""Calendar arithmetic - day boundaries and date addition, no I/O.

All functions work on the host's default calendar. Naive datetimes are
treated as local time; aware datetimes keep their tzinfo.
"""

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta


def start_of_day(dt: datetime) -> datetime:
    """Midnight at the start of dt's calendar day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def add_days(dt: datetime, n: int) -> datetime:
    return dt + timedelta(days=n)


def add_weeks(dt: datetime, n: int) -> datetime:
    return dt + timedelta(weeks=n)


def add_months(dt: datetime, n: int) -> datetime:
    """Add calendar months, clamping to month end (Jan 31 + 1 = Feb 28)."""
    return dt + relativedelta(months=n)


def add_years(dt: datetime, n: int) -> datetime:
    """Add calendar years, clamping Feb 29 to Feb 28 in non-leap years."""
    return dt + relativedelta(years=n)


def is_weekend(dt: datetime | date) -> bool:
    """Saturday or Sunday."""
    return dt.weekday() >= 5


def days_between(a: datetime, b: datetime) -> int:
    """
    Signed whole calendar days from a to b (b - a).

    Compares calendar dates rather than elapsed time, so 23:59 -> 00:01 the
    next day is one day.
    """
    return (b.date() - a.date()).days


def same_day(a: datetime, b: datetime) -> bool:
    return a.date() == b.date()
