"""Recurrence rules - next occurrence for each repeat kind."""

from datetime import datetime
from enum import Enum

from . import dates


class Recurrence(str, Enum):
    """How often a task repeats. Member order is the display/sort order."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUALLY = "semiannually"
    YEARLY = "yearly"
    WEEKDAYS_ONLY = "weekdaysOnly"
    WEEKENDS_ONLY = "weekendsOnly"

    @property
    def ordinal(self) -> int:
        return list(Recurrence).index(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    def next_date(self, from_date: datetime) -> datetime | None:
        return next_date(self, from_date)


_LABELS = {
    Recurrence.NONE: "None",
    Recurrence.DAILY: "Daily",
    Recurrence.WEEKLY: "Weekly",
    Recurrence.BIWEEKLY: "Every 2 Weeks",
    Recurrence.MONTHLY: "Monthly",
    Recurrence.QUARTERLY: "Quarterly",
    Recurrence.SEMIANNUALLY: "Every 6 Months",
    Recurrence.YEARLY: "Yearly",
    Recurrence.WEEKDAYS_ONLY: "Weekdays",
    Recurrence.WEEKENDS_ONLY: "Weekends",
}


def next_date(kind: Recurrence, from_date: datetime) -> datetime | None:
    """
    Next occurrence after from_date, or None for non-repeating tasks.

    Pure function - no I/O. Always strictly later than from_date.
    """
    match kind:
        case Recurrence.NONE:
            return None
        case Recurrence.DAILY:
            return dates.add_days(from_date, 1)
        case Recurrence.WEEKLY:
            return dates.add_weeks(from_date, 1)
        case Recurrence.BIWEEKLY:
            return dates.add_weeks(from_date, 2)
        case Recurrence.MONTHLY:
            return dates.add_months(from_date, 1)
        case Recurrence.QUARTERLY:
            return dates.add_months(from_date, 3)
        case Recurrence.SEMIANNUALLY:
            return dates.add_months(from_date, 6)
        case Recurrence.YEARLY:
            return dates.add_years(from_date, 1)
        case Recurrence.WEEKDAYS_ONLY:
            result = dates.add_days(from_date, 1)
            while dates.is_weekend(result):
                result = dates.add_days(result, 1)
            return result
        case Recurrence.WEEKENDS_ONLY:
            result = dates.add_days(from_date, 1)
            while not dates.is_weekend(result):
                result = dates.add_days(result, 1)
            return result
    return None
