"""Legacy value mapping applied where records enter from storage.

Older data stored priority as a four-level integer (0 none, 1 low,
2 medium, 3 high) and recurrence as an integer raw value. These functions
map any stored value onto the current enums and never raise.
"""

from typing import Any

from .recurrence import Recurrence
from .tasks import HABITS_CATEGORY, Priority, TaskKind

_LEGACY_PRIORITY = {0: Priority.NORMAL, 1: Priority.NORMAL, 2: Priority.NORMAL, 3: Priority.URGENT}

_LEGACY_RECURRENCE = {
    0: Recurrence.NONE,
    1: Recurrence.DAILY,
    2: Recurrence.WEEKLY,
    3: Recurrence.BIWEEKLY,
    4: Recurrence.MONTHLY,
    5: Recurrence.YEARLY,
}


def _as_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    return None


def migrate_priority(raw: Any) -> Priority:
    """Map a stored priority (current or legacy) to Priority. Unknown -> normal."""
    if isinstance(raw, Priority):
        return raw
    number = _as_int(raw)
    if number is not None:
        return _LEGACY_PRIORITY.get(number, Priority.NORMAL)
    if isinstance(raw, str):
        try:
            return Priority(raw.strip().lower())
        except ValueError:
            pass
    return Priority.NORMAL


def migrate_recurrence(raw: Any) -> Recurrence:
    """Map a stored recurrence (current or legacy) to Recurrence. Unknown -> none."""
    if isinstance(raw, Recurrence):
        return raw
    number = _as_int(raw)
    if number is not None:
        return _LEGACY_RECURRENCE.get(number, Recurrence.NONE)
    if isinstance(raw, str):
        try:
            return Recurrence(raw.strip())
        except ValueError:
            pass
    return Recurrence.NONE


def migrate_kind(raw: Any, category_name: str | None = None) -> TaskKind:
    """Explicit kind if stored, otherwise inferred from the Habits category."""
    if isinstance(raw, TaskKind):
        return raw
    if isinstance(raw, str):
        try:
            return TaskKind(raw.strip().lower())
        except ValueError:
            pass
    if category_name == HABITS_CATEGORY:
        return TaskKind.HABIT
    return TaskKind.STANDARD
