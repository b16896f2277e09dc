"""Native reminders exchange file adapter.

Reads and writes the JSON list produced by a reminders export (one object
per reminder with title, notes, dueDate, isCompleted, priority, list).
"""

import json
import logging
from pathlib import Path

from nudge.core.backup import format_instant, parse_instant
from nudge.core.importing import (
    ImportedReminder,
    export_notes,
    native_priority_to_priority,
    priority_to_native,
)
from nudge.core.tasks import Task

logger = logging.getLogger(__name__)

EXPORT_LIST_NAME = "Gentle Nudge"


class JsonRemindersFile:
    """
    Reminders exchange file.

    Implements RemindersSource protocol. Reminders in our own export list
    are skipped on import so a round trip does not duplicate tasks.
    """

    def __init__(self, path: Path | str, list_name: str = EXPORT_LIST_NAME):
        self.path = Path(path).expanduser()
        self.list_name = list_name

    def fetch_all(self) -> list[ImportedReminder]:
        """Fetch every reminder outside our own list."""
        if not self.path.exists():
            raise FileNotFoundError(f"Reminders file not found: {self.path}")

        data = json.loads(self.path.read_text())
        reminders = []
        for item in data:
            list_name = item.get("list", "") or ""
            if list_name == self.list_name:
                continue
            native = item.get("priority")
            reminders.append(
                ImportedReminder(
                    title=item.get("title") or "Untitled",
                    notes=item.get("notes") or "",
                    due_date=parse_instant(item.get("dueDate")),
                    is_completed=bool(item.get("isCompleted", False)),
                    priority=native_priority_to_priority(native if isinstance(native, int) else None),
                    list_name=list_name,
                )
            )
        logger.info(f"Read {len(reminders)} reminders from {self.path}")
        return reminders

    def write_all(self, tasks: list[Task]) -> int:
        """Write tasks into our own list, replacing what was there before."""
        existing = []
        if self.path.exists():
            existing = [
                item for item in json.loads(self.path.read_text())
                if item.get("list") != self.list_name
            ]

        exported = [
            {
                "title": t.title,
                "notes": export_notes(t),
                "dueDate": format_instant(t.due_date),
                "isCompleted": t.is_completed,
                "priority": priority_to_native(t.priority),
                "list": self.list_name,
            }
            for t in tasks
        ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(existing + exported, indent=2))
        return len(exported)
