"""Conversion between native reminder records and tasks - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime

from .tasks import Category, Priority, Task


@dataclass
class ImportedReminder:
    """A reminder as read from the OS reminders store."""

    title: str
    notes: str = ""
    due_date: datetime | None = None
    is_completed: bool = False
    priority: Priority = Priority.NORMAL
    list_name: str = ""


def native_priority_to_priority(native: int | None) -> Priority:
    """Native levels run 1 (highest) to 9 (lowest); 0 means none."""
    if native is not None and 1 <= native <= 4:
        return Priority.URGENT
    return Priority.NORMAL


def priority_to_native(priority: Priority) -> int:
    return 1 if priority is Priority.URGENT else 0


def match_list_to_category(list_name: str, categories: list[Category]) -> Category | None:
    """Find a category whose name contains the list name or vice versa."""
    wanted = list_name.strip().lower()
    if not wanted:
        return None
    for category in categories:
        name = category.name.lower()
        if wanted in name or name in wanted:
            return category
    return None


def convert_imported(
    records: list[ImportedReminder],
    categories: list[Category],
    strip_due_dates: bool = False,
    assignments: dict[int, str] | None = None,
) -> list[Task]:
    """
    Turn imported reminders into tasks.

    `assignments` maps record index to a category name chosen elsewhere
    (e.g. by the annotation service); records without one fall back to
    list-name matching.
    """
    by_name = {c.name: c for c in categories}
    assignments = assignments or {}
    tasks = []
    for index, record in enumerate(records):
        category = by_name.get(assignments.get(index, ""))
        if category is None:
            category = match_list_to_category(record.list_name, categories)
        task = Task(
            title=record.title or "Untitled",
            notes=record.notes,
            due_date=None if strip_due_dates else record.due_date,
            priority=record.priority,
            category=category,
        )
        if record.is_completed:
            task.complete()
        tasks.append(task)
    return tasks


def export_notes(task: Task) -> str:
    """Notes for the outbound native copy, with category and context appended."""
    notes = task.notes
    if task.category is not None:
        notes += f"\n\n[Category: {task.category.name}]"
    if task.ai_context:
        notes += f"\n\n[AI Context: {task.ai_context}]"
    return notes
