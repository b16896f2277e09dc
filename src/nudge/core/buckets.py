"""Task grouping for views and notifications - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .tasks import Category, Priority, Task


@dataclass
class AttentionSummary:
    """What a badge or morning notification needs to know."""

    needs_attention_count: int
    top_item_titles: list[str]


@dataclass
class Buckets:
    """All list views computed from one snapshot."""

    needs_attention: list[Task]
    habits: list[Task]
    scheduled: list[Task]
    recurring: list[Task]
    completed: list[Task]
    by_category: list[tuple[Category | None, list[Task]]]


@dataclass
class TodayView:
    """Disjoint partition of open tasks for the Today screen."""

    habits: list[Task] = field(default_factory=list)
    needs_attention: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)
    by_category: list[tuple[Category, list[Task]]] = field(default_factory=list)


def _is_active_standard(task: Task) -> bool:
    return not task.is_completed and not task.is_habit


def _attention_sort_key(task: Task, now: datetime) -> tuple[bool, bool, int]:
    # False sorts first, so negate the flags we want on top
    return (not task.is_overdue(now), not task.is_due_today(now), -task.priority.rank)


def needs_attention(
    tasks: list[Task],
    now: datetime | None = None,
    urgent_needs_attention: bool = True,
) -> list[Task]:
    """
    Open non-habit tasks that are overdue, due today, or urgent.

    Sorted overdue first, then due today, then by priority.
    """
    now = now or datetime.now()

    def qualifies(t: Task) -> bool:
        if t.is_overdue(now) or t.is_due_today(now):
            return True
        return urgent_needs_attention and t.priority is Priority.URGENT

    selected = [t for t in tasks if _is_active_standard(t) and qualifies(t)]
    return sorted(selected, key=lambda t: _attention_sort_key(t, now))


def habits(tasks: list[Task]) -> list[Task]:
    return sorted((t for t in tasks if t.is_habit and not t.is_completed), key=lambda t: t.title)


def scheduled(tasks: list[Task]) -> list[Task]:
    """Open non-habit tasks with a due date, soonest first."""
    return sorted(
        (t for t in tasks if _is_active_standard(t) and t.due_date is not None),
        key=lambda t: t.due_date,
    )


def recurring(tasks: list[Task]) -> list[Task]:
    """Open recurring tasks, most frequent kind first, then by due date."""
    selected = [t for t in tasks if t.is_recurring and not t.is_completed]
    return sorted(
        selected,
        key=lambda t: (t.recurrence.ordinal, t.due_date is None, t.due_date or datetime.min),
    )


def completed(tasks: list[Task]) -> list[Task]:
    """Completed tasks, most recently completed first."""
    done = [t for t in tasks if t.is_completed]
    return sorted(
        done,
        key=lambda t: (t.completed_at is not None, t.completed_at or datetime.min),
        reverse=True,
    )


def by_category(
    tasks: list[Task],
    categories: list[Category] | None = None,
) -> list[tuple[Category | None, list[Task]]]:
    """
    Open non-habit tasks grouped by category.

    Groups follow category sort order; categories that only appear on tasks
    come after the known ones, and the uncategorized group (None) is last.
    Empty groups are omitted.
    """
    order = {c.id: (0, c.sort_order, i) for i, c in enumerate(categories or [])}
    groups: dict[str, tuple[Category, list[Task]]] = {}
    uncategorized: list[Task] = []

    for t in tasks:
        if not _is_active_standard(t):
            continue
        if t.category is None:
            uncategorized.append(t)
            continue
        groups.setdefault(t.category.id, (t.category, []))[1].append(t)

    result: list[tuple[Category | None, list[Task]]] = sorted(
        groups.values(),
        key=lambda g: order.get(g[0].id, (1, g[0].sort_order, 0)),
    )
    if uncategorized:
        result.append((None, uncategorized))
    return result


def classify(
    tasks: list[Task],
    categories: list[Category] | None = None,
    now: datetime | None = None,
    urgent_needs_attention: bool = True,
) -> Buckets:
    """Compute every list view for one snapshot."""
    now = now or datetime.now()
    return Buckets(
        needs_attention=needs_attention(tasks, now, urgent_needs_attention),
        habits=habits(tasks),
        scheduled=scheduled(tasks),
        recurring=recurring(tasks),
        completed=completed(tasks),
        by_category=by_category(tasks, categories),
    )


def attention_summary(
    tasks: list[Task],
    now: datetime | None = None,
    limit: int = 3,
    urgent_needs_attention: bool = True,
) -> AttentionSummary:
    """Count and leading titles of the needs-attention bucket."""
    items = needs_attention(tasks, now, urgent_needs_attention)
    return AttentionSummary(
        needs_attention_count=len(items),
        top_item_titles=[t.title for t in items[: max(limit, 0)]],
    )


def today_view(
    tasks: list[Task],
    categories: list[Category] | None = None,
    now: datetime | None = None,
    urgent_needs_attention: bool = True,
    upcoming_days: int = 2,
) -> TodayView:
    """
    Split open tasks into habits, needs-attention, upcoming and per-category.

    Each open task lands in at most one list. Uncategorized tasks with no
    pressing due date are left out, as the Today screen does.
    """
    now = now or datetime.now()
    view = TodayView()
    attention = {id(t) for t in needs_attention(tasks, now, urgent_needs_attention)}
    grouped: dict[str, tuple[Category, list[Task]]] = {}

    for t in tasks:
        if t.is_completed:
            continue
        if t.is_habit:
            view.habits.append(t)
        elif id(t) in attention:
            view.needs_attention.append(t)
        elif (days := t.days_until_due(now)) is not None and 1 <= days <= upcoming_days:
            view.upcoming.append(t)
        elif t.category is not None:
            grouped.setdefault(t.category.id, (t.category, []))[1].append(t)

    view.habits.sort(key=lambda t: t.title)
    view.needs_attention.sort(key=lambda t: _attention_sort_key(t, now))
    view.upcoming.sort(key=lambda t: t.due_date)

    order = {c.id: c.sort_order for c in categories or []}
    for category, items in sorted(
        grouped.values(), key=lambda g: order.get(g[0].id, g[0].sort_order)
    ):
        items.sort(key=lambda t: -t.priority.rank)
        view.by_category.append((category, items))
    return view
