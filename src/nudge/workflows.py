"""Shared workflow layer between the CLI and the scheduler.

Each function takes its collaborators explicitly: load from the store, run
core logic, persist the result.
"""

import logging
from datetime import date, datetime
from pathlib import Path

import requests

from .adapters.anthropic_api import AnnotationError
from .adapters.backup_files import BackupStore
from .config import Config
from .core.annotation import apply_annotation
from .core.backup import from_record
from .core.buckets import attention_summary
from .core.importing import convert_imported
from .core.notification import Notification, build_notification
from .core.rollover import recover_missing_occurrences, rollover
from .core.tasks import Category, Task, TaskKind
from .ports import AnnotationService, Notifier, RemindersSource, TaskStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "notes", "due_date", "priority", "recurrence", "category")


def ensure_default_categories(store: TaskStore) -> list[Category]:
    """Create the default categories on first launch. Returns the current list."""
    categories = store.load_categories()
    if categories:
        return categories
    categories = Category.defaults()
    for category in categories:
        store.save(category)
    logger.info(f"Created {len(categories)} default categories")
    return categories


def find_task(tasks: list[Task], id_prefix: str) -> Task | None:
    """Find a task by id or unique id prefix."""
    matches = [t for t in tasks if t.id.startswith(id_prefix)]
    if len(matches) == 1:
        return matches[0]
    return next((t for t in matches if t.id == id_prefix), None)


def complete_task(store: TaskStore, task: Task, now: datetime | None = None) -> Task | None:
    """
    Complete a task and materialize its next occurrence.

    The completed task stays in the store as history. Returns the new
    occurrence, if any.
    """
    now = now or datetime.now()
    occurrence = rollover(task, now)
    task.complete(now)
    if occurrence is None:
        store.save(task)
        return None

    # Occurrence and completed task share one write
    store.save_all([occurrence, task])
    logger.info(f"Next occurrence of {task.title!r} due {occurrence.due_date:%Y-%m-%d}")
    return occurrence


def uncomplete_task(store: TaskStore, task: Task) -> None:
    task.uncomplete()
    store.save(task)


def check_in_habit(store: TaskStore, task: Task, now: datetime | None = None) -> None:
    """Record today's check-in. Raises ValueError for non-habit tasks."""
    if not task.is_habit:
        raise ValueError(f"'{task.title}' is not a habit")
    task.check_in_habit_today(now)
    store.save(task)


def clear_habit(store: TaskStore, task: Task, now: datetime | None = None) -> None:
    if not task.is_habit:
        raise ValueError(f"'{task.title}' is not a habit")
    task.clear_habit_today(now)
    store.save(task)


def snooze_task(store: TaskStore, task: Task, now: datetime | None = None) -> None:
    """Move an open task to tomorrow morning."""
    if task.is_habit or task.is_completed:
        raise ValueError(f"'{task.title}' cannot be snoozed")
    task.snooze(now)
    store.save(task)


def edit_task(store: TaskStore, task: Task, **changes) -> None:
    """
    Update a task's editable fields and persist it.

    Accepts any of EDITABLE_FIELDS as keywords; a None due_date or category
    clears it. Moving a task into the Habits category makes it a habit.
    """
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValueError(f"Cannot edit {', '.join(unknown)}")
    if "title" in changes and not (changes["title"] or "").strip():
        raise ValueError("Title cannot be empty")

    for name, value in changes.items():
        setattr(task, name, value)
    if task.category is not None and task.category.is_habits:
        task.kind = TaskKind.HABIT
    store.save(task)


def purge_completed(store: TaskStore) -> int:
    """Delete every completed task. Returns how many were removed."""
    done = [t for t in store.load_tasks() if t.is_completed]
    for task in done:
        store.delete(task)
    if done:
        logger.info(f"Deleted {len(done)} completed task(s)")
    return len(done)


def recover_recurring(store: TaskStore, now: datetime | None = None) -> list[Task]:
    """Recreate missing next occurrences of completed recurring tasks."""
    recovered = recover_missing_occurrences(store.load_tasks(), now)
    if recovered:
        store.save_all(recovered)
        logger.info(f"Recovered {len(recovered)} recurring task(s)")
    return recovered


def enhance_task(store: TaskStore, service: AnnotationService, task: Task) -> bool:
    """
    Ask the annotation service to improve a task.

    Best effort: on any service failure the task is left exactly as it was
    and False is returned.
    """
    categories = store.load_categories()
    names = [c.name for c in categories]
    try:
        annotation = service.enhance(task.title, task.notes, names)
    except (AnnotationError, requests.RequestException) as e:
        logger.warning(f"Enhancement failed for {task.title!r}: {e}")
        return False

    apply_annotation(task, annotation, categories)
    store.save(task)
    return True


def import_reminders(
    store: TaskStore,
    source: RemindersSource,
    strip_due_dates: bool = False,
    service: AnnotationService | None = None,
) -> list[Task]:
    """
    Import native reminders as tasks.

    With a service, each reminder's category is suggested by the model;
    failures fall back to matching the native list name.
    """
    records = source.fetch_all()
    categories = ensure_default_categories(store)
    names = [c.name for c in categories]

    assignments: dict[int, str] = {}
    if service is not None:
        for index, record in enumerate(records):
            try:
                suggestion = service.suggest_category(record.title, record.notes, record.list_name, names)
            except (AnnotationError, requests.RequestException) as e:
                logger.warning(f"Category suggestion failed for {record.title!r}: {e}")
                continue
            if suggestion:
                assignments[index] = suggestion

    tasks = convert_imported(records, categories, strip_due_dates, assignments)
    store.save_all(tasks)
    logger.info(f"Imported {len(tasks)} reminders")
    return tasks


def export_reminders(store: TaskStore, source: RemindersSource) -> int:
    """Write all tasks out as native reminders."""
    return source.write_all(store.load_tasks())


def get_backups(config: Config) -> BackupStore:
    """Resolve the backup directory from config."""
    return BackupStore(config.backup_path, config.backup_retention_days)


def daily_backup(store: TaskStore, backups: BackupStore, today: date | None = None) -> Path | None:
    return backups.perform_daily_backup(store.load_tasks(), today)


def restore_backup(store: TaskStore, backups: BackupStore, day: date) -> int:
    """
    Put every task from a day's backup back into the store.

    Tasks are matched by id: ones present in the backup are restored to
    their backed-up state, tasks created since are kept. Categories are
    resolved by name against the current set. Returns the number restored.
    """
    records = backups.read(day)
    if records is None:
        raise ValueError(f"No backup for {day.isoformat()}")

    categories = ensure_default_categories(store)
    tasks = [from_record(r, categories) for r in records]
    store.save_all(tasks)
    logger.info(f"Restored {len(tasks)} task(s) from backup {day.isoformat()}")
    return len(tasks)


def compose_attention_notification(
    store: TaskStore, config: Config, now: datetime | None = None
) -> Notification:
    summary = attention_summary(
        store.load_tasks(),
        now,
        limit=config.attention_preview_count,
        urgent_needs_attention=config.urgent_needs_attention,
    )
    return build_notification(summary)


async def send_attention_notification(
    store: TaskStore,
    notifier: Notifier,
    config: Config,
    now: datetime | None = None,
) -> Notification:
    """Build the morning summary from the store and deliver it."""
    notification = compose_attention_notification(store, config, now)
    await notifier.send(notification)
    logger.info(f"Sent notification: {notification.title}")
    return notification
