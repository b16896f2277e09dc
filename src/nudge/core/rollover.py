"""Next-occurrence creation for recurring tasks - no I/O dependencies."""

from datetime import datetime

from . import dates
from .recurrence import next_date
from .tasks import Task


def rollover(task: Task, now: datetime | None = None) -> Task | None:
    """
    Build the next occurrence of a recurring task as a new Task.

    The next date is computed from max(due_date, start of today), so an
    overdue task rolls forward from today instead of from its stale due
    date. The original task is left untouched.

    Returns None if the task does not repeat or has no due date.
    """
    if not task.is_recurring or task.due_date is None:
        return None

    now = now or datetime.now()
    anchor = max(task.due_date, dates.start_of_day(now))
    due = next_date(task.recurrence, anchor)
    if due is None:
        return None

    return Task(
        title=task.title,
        notes=task.notes,
        due_date=due,
        priority=task.priority,
        recurrence=task.recurrence,
        category=task.category,
        kind=task.kind,
        ai_context=task.ai_context,
    )


def recover_missing_occurrences(tasks: list[Task], now: datetime | None = None) -> list[Task]:
    """
    Recreate next occurrences that were never generated.

    A (title, recurrence) pair with completed history but no open task gets
    one new occurrence, rolled forward from its latest completed record
    until it is no longer in the past. Running it again on the result
    produces nothing.
    """
    now = now or datetime.now()

    active = {(t.title, t.recurrence) for t in tasks if not t.is_completed}

    latest: dict[tuple, Task] = {}
    for t in tasks:
        if not (t.is_completed and t.is_recurring and t.due_date is not None):
            continue
        key = (t.title, t.recurrence)
        if key in active:
            continue
        current = latest.get(key)
        if current is None or t.due_date > current.due_date:
            latest[key] = t

    recovered = []
    for key, source in latest.items():
        occurrence = rollover(source, now)
        while occurrence is not None and occurrence.due_date < now:
            occurrence = rollover(occurrence, now)
        if occurrence is None:
            continue
        recovered.append(occurrence)
        active.add(key)

    return recovered
