"""Native reminders import/export interface."""

from typing import Protocol

from nudge.core.importing import ImportedReminder
from nudge.core.tasks import Task


class RemindersSource(Protocol):
    """Interface for the OS reminders store."""

    def fetch_all(self) -> list[ImportedReminder]:
        """Fetch every reminder from every list."""
        ...

    def write_all(self, tasks: list[Task]) -> int:
        """Write tasks out as native reminders. Returns the number written."""
        ...
