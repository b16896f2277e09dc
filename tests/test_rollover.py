"""Tests for next-occurrence creation and recovery."""

from datetime import datetime, timedelta

import pytest

from nudge.core.dates import add_days, start_of_day
from nudge.core.recurrence import Recurrence
from nudge.core.rollover import recover_missing_occurrences, rollover
from nudge.core.tasks import Category, Priority, Task


@pytest.fixture
def now():
    return datetime(2024, 1, 10, 14, 0)


def _completed(title, due, recurrence=Recurrence.DAILY, completed_at=None):
    task = Task(title=title, due_date=due, recurrence=recurrence)
    task.complete(completed_at or due)
    return task


class TestRollover:
    def test_due_today_rolls_to_tomorrow(self, now):
        task = Task(title="Water plants", due_date=datetime(2024, 1, 10, 9, 0), recurrence=Recurrence.DAILY)
        task.complete(now)
        nxt = rollover(task, now)
        assert nxt.due_date.date() == datetime(2024, 1, 11).date()

    def test_overdue_anchors_on_today(self):
        now = datetime(2024, 1, 10, 9, 0)
        task = Task(title="Water plants", due_date=datetime(2024, 1, 5, 9, 0), recurrence=Recurrence.DAILY)
        nxt = rollover(task, now)
        assert nxt.due_date == add_days(start_of_day(now), 1)
        assert nxt.due_date != datetime(2024, 1, 6, 9, 0)

    def test_three_days_overdue(self, now):
        task = Task(title="Test", due_date=now - timedelta(days=3), recurrence=Recurrence.DAILY)
        assert rollover(task, now).due_date == start_of_day(now) + timedelta(days=1)

    def test_weekly_overdue_anchors_on_today(self):
        now = datetime(2024, 3, 25, 10, 0)  # Monday
        task = Task(title="Bins", due_date=datetime(2024, 3, 15, 9, 0), recurrence=Recurrence.WEEKLY)
        assert rollover(task, now).due_date == datetime(2024, 4, 1)

    def test_future_due_anchors_on_due_date(self, now):
        task = Task(title="Test", due_date=datetime(2024, 1, 20, 9, 0), recurrence=Recurrence.DAILY)
        assert rollover(task, now).due_date == datetime(2024, 1, 21, 9, 0)

    def test_non_recurring(self, now):
        assert rollover(Task(title="Test", due_date=now), now) is None

    def test_no_due_date(self, now):
        assert rollover(Task(title="Test", recurrence=Recurrence.DAILY), now) is None

    def test_copies_fields_into_new_task(self, now):
        category = Category(name="House")
        task = Task(
            title="Clean gutters",
            notes="ladder in garage https://example.com/howto",
            due_date=now,
            priority=Priority.URGENT,
            recurrence=Recurrence.QUARTERLY,
            category=category,
            ai_context="Autumn leaves block the downpipes.",
        )
        task.complete(now)
        nxt = rollover(task, now)

        assert nxt.id != task.id
        assert nxt.title == task.title
        assert nxt.notes == task.notes
        assert nxt.priority is Priority.URGENT
        assert nxt.recurrence is Recurrence.QUARTERLY
        assert nxt.category is category
        assert nxt.ai_context == task.ai_context
        assert nxt.is_completed is False
        assert nxt.completed_at is None

    def test_original_untouched(self, now):
        due = now - timedelta(days=2)
        task = Task(title="Test", due_date=due, recurrence=Recurrence.WEEKLY)
        rollover(task, now)
        assert task.due_date == due

    @pytest.mark.parametrize("kind", [k for k in Recurrence if k is not Recurrence.NONE])
    @pytest.mark.parametrize("offset_hours", [-24 * 40, -25, -1, 0, 1, 9, 24 * 3])
    def test_never_due_in_the_past(self, now, kind, offset_hours):
        task = Task(title="Test", due_date=now + timedelta(hours=offset_hours), recurrence=kind)
        assert rollover(task, now).due_date > now


class TestRecoverMissingOccurrences:
    def test_recreates_missing_occurrence(self, now):
        tasks = [_completed("Water plants", now - timedelta(days=4))]
        recovered = recover_missing_occurrences(tasks, now)
        assert len(recovered) == 1
        assert recovered[0].title == "Water plants"
        assert recovered[0].due_date > now
        assert recovered[0].is_completed is False

    def test_idempotent(self, now):
        tasks = [_completed("Water plants", now - timedelta(days=4))]
        recovered = recover_missing_occurrences(tasks, now)
        assert recover_missing_occurrences(tasks + recovered, now) == []

    def test_active_counterpart_means_nothing_to_do(self, now):
        tasks = [
            _completed("Water plants", now - timedelta(days=1)),
            Task(title="Water plants", due_date=now + timedelta(days=1), recurrence=Recurrence.DAILY),
        ]
        assert recover_missing_occurrences(tasks, now) == []

    def test_same_title_different_recurrence_is_separate(self, now):
        tasks = [
            _completed("Review", now - timedelta(days=1), Recurrence.WEEKLY),
            Task(title="Review", due_date=now + timedelta(days=1), recurrence=Recurrence.MONTHLY),
        ]
        recovered = recover_missing_occurrences(tasks, now)
        assert [t.recurrence for t in recovered] == [Recurrence.WEEKLY]

    def test_history_yields_single_occurrence(self, now):
        tasks = [
            _completed("Water plants", now - timedelta(days=3)),
            _completed("Water plants", now - timedelta(days=2)),
            _completed("Water plants", now - timedelta(days=1)),
        ]
        assert len(recover_missing_occurrences(tasks, now)) == 1

    def test_rolls_from_latest_record(self, now):
        tasks = [
            _completed("Pay rent", datetime(2023, 11, 1), Recurrence.MONTHLY),
            _completed("Pay rent", datetime(2024, 3, 1), Recurrence.MONTHLY),
        ]
        recovered = recover_missing_occurrences(tasks, now)
        assert recovered[0].due_date == datetime(2024, 4, 1)

    def test_ignores_one_off_and_undated(self, now):
        one_off = Task(title="Call mum", due_date=now - timedelta(days=1))
        one_off.complete(now)
        undated = Task(title="Stretch", recurrence=Recurrence.DAILY)
        undated.complete(now)
        assert recover_missing_occurrences([one_off, undated], now) == []

    def test_empty(self, now):
        assert recover_missing_occurrences([], now) == []
