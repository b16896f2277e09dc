"""Tests for daily backup files."""

import json
from datetime import date

import pytest

from nudge.adapters.backup_files import BackupStore
from nudge.core.tasks import Task


@pytest.fixture
def backups(tmp_path):
    return BackupStore(tmp_path / "backups", retention_days=7)


def _touch(backups, day):
    backups.backup_dir.mkdir(parents=True, exist_ok=True)
    path = backups.backup_dir / f"backup-{day.isoformat()}.json"
    path.write_text("[]")
    return path


class TestPerformDailyBackup:
    def test_writes_once_per_day(self, backups):
        today = date(2024, 1, 10)
        path = backups.perform_daily_backup([Task(title="A")], today)

        assert path.name == "backup-2024-01-10.json"
        assert json.loads(path.read_text())[0]["title"] == "A"
        assert backups.perform_daily_backup([Task(title="B")], today) is None
        assert json.loads(path.read_text())[0]["title"] == "A"

    def test_prunes_on_every_run(self, backups):
        old = _touch(backups, date(2024, 1, 1))
        _touch(backups, date(2024, 1, 10))
        backups.perform_daily_backup([], date(2024, 1, 10))
        assert not old.exists()


class TestCleanOldBackups:
    def test_retention_window(self, backups):
        today = date(2024, 1, 10)
        edge = _touch(backups, date(2024, 1, 3))
        stale = _touch(backups, date(2024, 1, 2))

        removed = backups.clean_old_backups(today)

        assert removed == [stale]
        assert edge.exists()

    def test_ignores_foreign_files(self, backups):
        backups.backup_dir.mkdir(parents=True)
        foreign = backups.backup_dir / "backup-notes.json"
        foreign.write_text("{}")
        backups.clean_old_backups(date(2024, 1, 10))
        assert foreign.exists()

    def test_missing_dir(self, backups):
        assert backups.clean_old_backups(date(2024, 1, 10)) == []


class TestListAndRead:
    def test_newest_first(self, backups):
        _touch(backups, date(2024, 1, 8))
        _touch(backups, date(2024, 1, 10))
        _touch(backups, date(2024, 1, 9))
        assert [b.date for b in backups.list_backups()] == [
            date(2024, 1, 10),
            date(2024, 1, 9),
            date(2024, 1, 8),
        ]

    def test_read(self, backups):
        backups.perform_daily_backup([Task(title="A")], date(2024, 1, 10))
        assert backups.read(date(2024, 1, 10))[0]["title"] == "A"
        assert backups.read(date(2024, 1, 9)) is None
