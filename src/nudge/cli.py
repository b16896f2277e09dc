"""Nudge CLI - gentle reminders and habits."""

import asyncio
import json
import sys
from datetime import datetime

import click

from .adapters.anthropic_api import AnthropicAnnotationService
from .adapters.json_store import JsonTaskStore, StoreError
from .adapters.reminders_file import JsonRemindersFile
from .adapters.telegram_notifier import TelegramNotifier
from .config import Config, load_config
from .core.backup import to_record
from .core.buckets import classify, today_view
from .core.recurrence import Recurrence
from .core.tasks import Category, Priority, Task, TaskKind
from .workflows import (
    check_in_habit,
    clear_habit,
    complete_task,
    compose_attention_notification,
    daily_backup,
    edit_task,
    enhance_task,
    ensure_default_categories,
    export_reminders,
    find_task,
    get_backups,
    import_reminders,
    purge_completed,
    recover_recurring,
    restore_backup,
    send_attention_notification,
    snooze_task,
    uncomplete_task,
)

VIEWS = ["today", "attention", "habits", "scheduled", "recurring", "completed", "categories"]
DUE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_store(config: Config) -> JsonTaskStore:
    return JsonTaskStore(config.data_path)


def _load_tasks(store: JsonTaskStore) -> list[Task]:
    try:
        return store.load_tasks()
    except StoreError as e:
        _fail(str(e))


def _resolve(store: JsonTaskStore, id_prefix: str) -> Task:
    task = find_task(_load_tasks(store), id_prefix)
    if task is None:
        _fail(f"No single task matches '{id_prefix}'")
    return task


def _resolve_category(categories: list[Category], name: str) -> Category:
    category = next((c for c in categories if c.name.lower() == name.lower()), None)
    if category is None:
        _fail(f"Unknown category '{name}'")
    return category


def format_task_line(task: Task, now: datetime, distant_days: int = 3) -> str:
    """One-line rendering: id, state marker, title, due text, recurrence."""
    if task.is_habit:
        marker = "x" if task.is_completed_today(now) else " "
    else:
        marker = "x" if task.is_completed else " "
    flags = "!" if task.priority is Priority.URGENT else " "

    details = []
    due_text = task.days_until_due_text(now)
    if due_text and not task.is_completed:
        details.append(f"overdue, {due_text}" if task.is_overdue(now) else due_text)
    if task.is_recurring:
        details.append(task.recurrence.label)
    suffix = f" ({', '.join(details)})" if details else ""

    line = f"{task.id[:8]} [{marker}]{flags}{task.title}{suffix}"
    if task.is_distant_recurring(now, distant_days):
        line = click.style(line, dim=True)
    return line


def _section(title: str, tasks: list[Task], now: datetime, config: Config) -> None:
    click.echo(f"### {title} ({len(tasks)})")
    for task in tasks:
        click.echo(f"  {format_task_line(task, now, config.distant_recurring_days)}")
    click.echo()


@click.group()
@click.version_option(package_name="nudge")
def main():
    """Nudge - gentle reminders and habits."""
    pass


@main.command("list")
@click.option("--view", type=click.Choice(VIEWS), default="today", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(view: str, as_json: bool):
    """Show tasks grouped into a view."""
    config = load_config()
    store = _open_store(config)
    tasks = _load_tasks(store)
    categories = store.load_categories()
    now = datetime.now()

    if view == "today":
        today = today_view(tasks, categories, now, config.urgent_needs_attention)
        sections = [
            ("Needs Attention", today.needs_attention),
            ("Habits", today.habits),
            ("Upcoming", today.upcoming),
        ] + [(c.name, items) for c, items in today.by_category]
    elif view == "categories":
        buckets = classify(tasks, categories, now, config.urgent_needs_attention)
        sections = [(c.name if c else "Uncategorized", items) for c, items in buckets.by_category]
    else:
        buckets = classify(tasks, categories, now, config.urgent_needs_attention)
        attr = "needs_attention" if view == "attention" else view
        sections = [(view.capitalize(), getattr(buckets, attr))]

    if as_json:
        click.echo(
            json.dumps({name: [to_record(t) for t in items] for name, items in sections}, indent=2)
        )
        return

    if not any(items for _, items in sections):
        click.echo("Nothing here.")
        return
    for name, items in sections:
        if items:
            _section(name, items, now, config)


@main.command()
@click.argument("title")
@click.option("--notes", default="", help="Free-text notes")
@click.option("--due", type=click.DateTime(formats=DUE_FORMATS), help="Due date (YYYY-MM-DD[THH:MM])")
@click.option("--priority", type=click.Choice([p.value for p in Priority]), default="normal")
@click.option("--recurrence", type=click.Choice([r.value for r in Recurrence]), default="none")
@click.option("--category", "category_name", help="Category name")
@click.option("--habit", is_flag=True, help="Track as a daily habit")
def add(title, notes, due, priority, recurrence, category_name, habit):
    """Add a task."""
    config = load_config()
    store = _open_store(config)
    categories = ensure_default_categories(store)

    category = _resolve_category(categories, category_name) if category_name else None

    task = Task(
        title=title,
        notes=notes,
        due_date=due,
        priority=Priority(priority),
        recurrence=Recurrence(recurrence),
        category=category,
        kind=TaskKind.HABIT if habit or (category and category.is_habits) else TaskKind.STANDARD,
    )
    store.save(task)
    click.echo(f"Added {task.id[:8]} {task.title}")


@main.command()
@click.argument("task_id")
def complete(task_id: str):
    """Complete a task (creates the next occurrence if it repeats). Habits are checked in."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    if task.is_habit:
        check_in_habit(store, task)
        click.echo(f"Checked in: {task.title} ({task.completion_count_last_n_days(7)}/7 this week)")
        return
    occurrence = complete_task(store, task)
    click.echo(f"Completed: {task.title}")
    if occurrence is not None:
        click.echo(f"Next: {occurrence.due_date:%a %Y-%m-%d}")


@main.command()
@click.argument("task_id")
def uncomplete(task_id: str):
    """Reopen a completed task."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    uncomplete_task(store, task)
    click.echo(f"Reopened: {task.title}")


@main.command()
@click.argument("task_id")
def delete(task_id: str):
    """Delete a task."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    store.delete(task)
    click.echo(f"Deleted: {task.title}")


@main.command()
@click.argument("task_id")
def checkin(task_id: str):
    """Check in a habit for today."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    try:
        check_in_habit(store, task)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Checked in: {task.title} ({task.completion_count_last_n_days(7)}/7 this week)")


@main.command()
@click.argument("task_id")
def uncheck(task_id: str):
    """Clear today's habit check-in."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    try:
        clear_habit(store, task)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Cleared: {task.title}")


@main.command()
@click.argument("task_id")
def snooze(task_id: str):
    """Move a task to tomorrow at 09:00."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)
    try:
        snooze_task(store, task)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Snoozed: {task.title} until {task.due_date:%a %Y-%m-%d %H:%M}")


@main.command()
@click.argument("task_id")
@click.option("--title", help="New title")
@click.option("--notes", help="New notes")
@click.option("--due", type=click.DateTime(formats=DUE_FORMATS), help="New due date")
@click.option("--clear-due", is_flag=True, help="Remove the due date")
@click.option("--priority", type=click.Choice([p.value for p in Priority]))
@click.option("--recurrence", type=click.Choice([r.value for r in Recurrence]))
@click.option("--category", "category_name", help="Move to this category")
@click.option("--no-category", is_flag=True, help="Make the task uncategorized")
def edit(task_id, title, notes, due, clear_due, priority, recurrence, category_name, no_category):
    """Change a task's fields."""
    store = _open_store(load_config())
    task = _resolve(store, task_id)

    changes = {}
    if title is not None:
        changes["title"] = title
    if notes is not None:
        changes["notes"] = notes
    if clear_due:
        changes["due_date"] = None
    elif due is not None:
        changes["due_date"] = due
    if priority:
        changes["priority"] = Priority(priority)
    if recurrence:
        changes["recurrence"] = Recurrence(recurrence)
    if no_category:
        changes["category"] = None
    elif category_name:
        changes["category"] = _resolve_category(ensure_default_categories(store), category_name)

    if not changes:
        _fail("Nothing to change")
    try:
        edit_task(store, task, **changes)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Updated: {task.title}")


@main.command("purge-completed")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def purge_completed_cmd(yes: bool):
    """Delete every completed task."""
    if not yes and not click.confirm("Delete all completed tasks?"):
        click.echo("Cancelled.")
        return
    count = purge_completed(_open_store(load_config()))
    click.echo(f"Deleted {count} completed task(s)")


@main.command()
@click.option("--days", default=14, show_default=True, help="Days of history to show")
def habits(days: int):
    """Show habits with their recent check-in history."""
    store = _open_store(load_config())
    now = datetime.now()
    items = classify(_load_tasks(store), now=now).habits
    if not items:
        click.echo("No habits yet.")
        return
    width = max(len(t.title) for t in items)
    for task in items:
        grid = "".join("■" if done else "·" for _, done in task.habit_history(days, now))
        count = task.completion_count_last_n_days(7, now)
        click.echo(f"{task.id[:8]} {task.title:<{width}}  {grid}  {count}/7")


@main.command()
def recover():
    """Recreate missing next occurrences of completed recurring tasks."""
    store = _open_store(load_config())
    recovered = recover_recurring(store)
    if not recovered:
        click.echo("No recurring tasks needed recovery")
        return
    click.echo(f"Recovered {len(recovered)} recurring task{'' if len(recovered) == 1 else 's'}")
    for task in recovered:
        click.echo(f"  {task.title} (due {task.due_date:%Y-%m-%d})")


@main.command()
@click.argument("task_id")
def enhance(task_id: str):
    """Improve a task's title, notes and category with the LLM."""
    config = load_config()
    store = _open_store(config)
    task = _resolve(store, task_id)
    service = AnthropicAnnotationService.from_config(config)
    if not enhance_task(store, service, task):
        _fail("Enhancement failed; task left unchanged")
    click.echo(f"{task.title}")
    if task.category:
        click.echo(f"  Category: {task.category.name}")
    if task.ai_context:
        click.echo(f"  Context: {task.ai_context}")


@main.command()
@click.option("--list", "list_only", is_flag=True, help="List existing backups")
@click.option("--restore", type=click.DateTime(formats=["%Y-%m-%d"]), help="Restore tasks from the backup of this day")
def backup(list_only: bool, restore: datetime | None):
    """Write today's backup (keeps a rolling window)."""
    config = load_config()
    backups = get_backups(config)
    if list_only:
        for item in backups.list_backups():
            click.echo(f"{item.date.isoformat()}  {item.size:>8} bytes  {item.path}")
        return
    if restore is not None:
        day = restore.date()
        try:
            count = restore_backup(_open_store(config), backups, day)
        except (ValueError, StoreError) as e:
            _fail(str(e))
        click.echo(f"Restored {count} task(s) from {day.isoformat()}")
        return
    path = daily_backup(_open_store(config), backups)
    click.echo(f"Backup saved: {path}" if path else "Already backed up today.")


@main.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--strip-due-dates", is_flag=True, help="Import without due dates")
@click.option("--ai", "use_ai", is_flag=True, help="Let the LLM pick categories")
def import_cmd(path: str, strip_due_dates: bool, use_ai: bool):
    """Import reminders from a native reminders export file."""
    config = load_config()
    store = _open_store(config)
    service = AnthropicAnnotationService.from_config(config) if use_ai else None
    try:
        tasks = import_reminders(store, JsonRemindersFile(path), strip_due_dates, service)
    except (ValueError, StoreError) as e:
        _fail(str(e))
    click.echo(f"Successfully imported {len(tasks)} reminders")


@main.command("export")
@click.argument("path", type=click.Path(dir_okay=False))
def export_cmd(path: str):
    """Write all tasks to a native reminders exchange file."""
    store = _open_store(load_config())
    count = export_reminders(store, JsonRemindersFile(path))
    click.echo(f"Exported {count} reminders to {path}")


@main.group(invoke_without_command=True)
@click.pass_context
def categories(ctx):
    """List or manage categories."""
    if ctx.invoked_subcommand is None:
        store = _open_store(load_config())
        tasks = _load_tasks(store)
        for category in ensure_default_categories(store):
            open_count = sum(
                1 for t in tasks if t.category and t.category.id == category.id and not t.is_completed
            )
            click.echo(f"{category.name:<12} {open_count:>3} open")


@categories.command("add")
@click.argument("name")
@click.option("--icon", default="tray.fill")
@click.option("--color", "color_name", default="gray")
def category_add(name: str, icon: str, color_name: str):
    """Add a category."""
    store = _open_store(load_config())
    existing = ensure_default_categories(store)
    if any(c.name.lower() == name.lower() for c in existing):
        _fail(f"Category '{name}' already exists")
    sort_order = max((c.sort_order for c in existing), default=-1) + 1
    store.save(Category(name=name, icon=icon, color_name=color_name, sort_order=sort_order))
    click.echo(f"Added category {name}")


@categories.command("delete")
@click.argument("name")
def category_delete(name: str):
    """Delete a category; its tasks become uncategorized."""
    store = _open_store(load_config())
    category = next((c for c in store.load_categories() if c.name.lower() == name.lower()), None)
    if category is None:
        _fail(f"Unknown category '{name}'")
    store.delete(category)
    click.echo(f"Deleted category {category.name}")


@main.command()
@click.option("--dry-run", is_flag=True, help="Print instead of sending")
def notify(dry_run: bool):
    """Send the morning needs-attention notification now."""
    config = load_config()
    store = _open_store(config)
    if dry_run:
        notification = compose_attention_notification(store, config)
        click.echo(notification.title)
        if notification.body:
            click.echo(notification.body)
        return
    try:
        notifier = TelegramNotifier.from_config(config)
    except ValueError as e:
        _fail(str(e))
    notification = asyncio.run(send_attention_notification(store, notifier, config))
    click.echo(f"Sent: {notification.title}")


@main.command()
def serve():
    """Run the scheduler (morning notification and daily backup)."""
    from .scheduler import run_scheduler

    run_scheduler()


if __name__ == "__main__":
    main()
