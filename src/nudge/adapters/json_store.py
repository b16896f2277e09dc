"""File-based task storage adapter."""

import json
import logging
from pathlib import Path
from typing import Any

from nudge.core.backup import (
    category_from_record,
    category_to_record,
    from_record,
    to_record,
)
from nudge.core.tasks import Category, Task

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the store cannot be read or written."""

    pass


class JsonTaskStore:
    """
    Single-file JSON storage.

    Implements TaskStore protocol. Tasks reference categories by id; a
    reference to a missing category loads as uncategorized.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {"categories": [], "tasks": []}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Unexpected content in {self.path}")
        data.setdefault("categories", [])
        data.setdefault("tasks", [])
        return data

    def _write(self, data: dict[str, list[dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2))
            tmp.replace(self.path)
        except OSError as e:
            raise StoreError(f"Could not write {self.path}: {e}") from e

    def load_categories(self) -> list[Category]:
        """Load all categories in sort order."""
        categories = [category_from_record(r) for r in self._read()["categories"]]
        return sorted(categories, key=lambda c: c.sort_order)

    def load_tasks(self) -> list[Task]:
        """Load all tasks with their categories attached."""
        data = self._read()
        categories = [category_from_record(r) for r in data["categories"]]
        by_id = {c.id: c for c in categories}

        tasks = []
        for record in data["tasks"]:
            # Resolve by id; names are not guaranteed unique
            category = by_id.get(record.get("categoryId") or "")
            if category is None:
                tasks.append(from_record({**record, "category": None}))
            else:
                tasks.append(from_record({**record, "category": category.name}, [category]))
        return tasks

    def save(self, item: Task | Category) -> None:
        data = self._read()
        if isinstance(item, Category):
            key, record = "categories", category_to_record(item)
        else:
            key, record = "tasks", self._task_record(item)

        for i, existing in enumerate(data[key]):
            if existing.get("id") == item.id:
                data[key][i] = record
                break
        else:
            data[key].append(record)
        self._write(data)

    def save_all(self, items: list[Task | Category]) -> None:
        """Save several items with one write."""
        data = self._read()
        for item in items:
            if isinstance(item, Category):
                key, record = "categories", category_to_record(item)
            else:
                key, record = "tasks", self._task_record(item)
            ids = [r.get("id") for r in data[key]]
            if item.id in ids:
                data[key][ids.index(item.id)] = record
            else:
                data[key].append(record)
        self._write(data)

    def delete(self, item: Task | Category) -> None:
        data = self._read()
        if isinstance(item, Category):
            data["categories"] = [r for r in data["categories"] if r.get("id") != item.id]
            for record in data["tasks"]:
                if record.get("categoryId") == item.id:
                    record["categoryId"] = None
            logger.info(f"Deleted category {item.name!r}")
        else:
            data["tasks"] = [r for r in data["tasks"] if r.get("id") != item.id]
        self._write(data)

    @staticmethod
    def _task_record(task: Task) -> dict[str, Any]:
        record = to_record(task)
        record.pop("category", None)
        record["categoryId"] = task.category.id if task.category else None
        return record
