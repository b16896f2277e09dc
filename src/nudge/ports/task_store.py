"""Task storage interface."""

from typing import Protocol

from nudge.core.tasks import Category, Task


class TaskStore(Protocol):
    """Interface for persisting tasks and categories in any backend."""

    def load_tasks(self) -> list[Task]:
        """Load all tasks, with category references resolved."""
        ...

    def load_categories(self) -> list[Category]:
        """Load all categories."""
        ...

    def save(self, item: Task | Category) -> None:
        """Insert or update a task or category."""
        ...

    def save_all(self, items: list[Task | Category]) -> None:
        """Insert or update several items in one write."""
        ...

    def delete(self, item: Task | Category) -> None:
        """Delete a task or category. Tasks in a deleted category become uncategorized."""
        ...
