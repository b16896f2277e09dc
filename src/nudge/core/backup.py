"""Plain-record serialization of tasks for backup and export."""

from datetime import datetime
from typing import Any

from .migration import migrate_kind, migrate_priority, migrate_recurrence
from .tasks import Category, Task


def format_instant(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_instant(value: Any) -> datetime | None:
    """
    Read an ISO-8601 string or epoch seconds (older backups). Bad input -> None.

    Offsets such as "Z" or "+02:00" are converted to naive local time, the
    only form core date logic compares.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed
    return None


def to_record(task: Task) -> dict[str, Any]:
    """Serialize a task to a JSON-friendly dict; optional fields are omitted when unset."""
    record: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "notes": task.notes,
        "priority": task.priority.value,
        "isCompleted": task.is_completed,
        "createdAt": format_instant(task.created_at),
        "recurrence": task.recurrence.value,
        "kind": task.kind.value,
        "habitCompletionDates": [format_instant(d) for d in task.habit_completion_dates],
    }
    if task.due_date is not None:
        record["dueDate"] = format_instant(task.due_date)
    if task.completed_at is not None:
        record["completedAt"] = format_instant(task.completed_at)
    if task.category is not None:
        record["category"] = task.category.name
    if task.ai_context is not None:
        record["aiContext"] = task.ai_context
    return record


def from_record(record: dict[str, Any], categories: list[Category] | None = None) -> Task:
    """
    Rebuild a task from a record.

    The category is looked up by name; unknown names leave the task
    uncategorized. Legacy priority/recurrence values are migrated.
    """
    by_name = {c.name: c for c in categories or []}
    category_name = record.get("category") or record.get("categoryName")
    category = by_name.get(category_name) if category_name else None

    task = Task(
        title=str(record.get("title", "")),
        notes=str(record.get("notes", "") or ""),
        due_date=parse_instant(record.get("dueDate")),
        priority=migrate_priority(record.get("priority")),
        is_completed=bool(record.get("isCompleted", False)),
        recurrence=migrate_recurrence(record.get("recurrence")),
        category=category,
        kind=migrate_kind(record.get("kind"), category_name),
        completed_at=parse_instant(record.get("completedAt")),
        ai_context=record.get("aiContext", record.get("aiEnhancedDescription")),
        habit_completion_dates=[
            d for d in (parse_instant(v) for v in record.get("habitCompletionDates", [])) if d
        ],
    )
    if record.get("id"):
        task.id = str(record["id"])
    created = parse_instant(record.get("createdAt"))
    if created is not None:
        task.created_at = created
    return task


def category_to_record(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "colorName": category.color_name,
        "isDefault": category.is_default,
        "sortOrder": category.sort_order,
    }


def category_from_record(record: dict[str, Any]) -> Category:
    category = Category(
        name=str(record.get("name", "")),
        icon=record.get("icon", "tray.fill"),
        color_name=record.get("colorName", "gray"),
        is_default=bool(record.get("isDefault", False)),
        sort_order=int(record.get("sortOrder", 0) or 0),
    )
    if record.get("id"):
        category.id = str(record["id"])
    return category
