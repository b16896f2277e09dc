"""Daily JSON backup files."""

import json
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from nudge.core.backup import to_record
from nudge.core.tasks import Task

logger = logging.getLogger(__name__)

PREFIX = "backup-"


@dataclass
class BackupFile:
    date: date
    path: Path
    size: int


class BackupStore:
    """
    One backup file per day, pruned after a retention window.

    Files are named backup-YYYY-MM-DD.json and hold a list of task records.
    """

    def __init__(self, backup_dir: Path | str, retention_days: int = 7):
        self.backup_dir = Path(backup_dir).expanduser()
        self.retention_days = retention_days

    def _path_for_date(self, target_date: date) -> Path:
        return self.backup_dir / f"{PREFIX}{target_date.isoformat()}.json"

    def _date_from_path(self, path: Path) -> date | None:
        if path.suffix != ".json" or not path.stem.startswith(PREFIX):
            return None
        try:
            return date.fromisoformat(path.stem[len(PREFIX) :])
        except ValueError:
            return None

    def perform_daily_backup(self, tasks: list[Task], today: date | None = None) -> Path | None:
        """
        Write today's backup unless one exists, then prune old files.

        Returns the path written, or None if today was already backed up.
        """
        today = today or date.today()
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        path = self._path_for_date(today)

        written = None
        if not path.exists():
            path.write_text(json.dumps([to_record(t) for t in tasks], indent=2))
            logger.info(f"Backup saved: {path.name}")
            written = path

        self.clean_old_backups(today)
        return written

    def clean_old_backups(self, today: date | None = None) -> list[Path]:
        """Delete backups older than the retention window."""
        today = today or date.today()
        cutoff = today - timedelta(days=self.retention_days)
        removed = []
        if not self.backup_dir.exists():
            return removed
        for path in self.backup_dir.glob(f"{PREFIX}*.json"):
            file_date = self._date_from_path(path)
            if file_date is not None and file_date < cutoff:
                path.unlink()
                logger.info(f"Deleted old backup: {path.name}")
                removed.append(path)
        return removed

    def list_backups(self) -> list[BackupFile]:
        """All backups, newest first."""
        if not self.backup_dir.exists():
            return []
        backups = []
        for path in self.backup_dir.glob(f"{PREFIX}*.json"):
            file_date = self._date_from_path(path)
            if file_date is not None:
                backups.append(BackupFile(date=file_date, path=path, size=path.stat().st_size))
        return sorted(backups, key=lambda b: b.date, reverse=True)

    def read(self, target_date: date) -> list[dict] | None:
        """Raw records from a day's backup, or None if there is none."""
        path = self._path_for_date(target_date)
        if not path.exists():
            return None
        return json.loads(path.read_text())
