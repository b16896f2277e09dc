"""Tests for view grouping."""

from datetime import datetime

import pytest

from nudge.core.buckets import (
    attention_summary,
    by_category,
    classify,
    completed,
    habits,
    needs_attention,
    recurring,
    scheduled,
    today_view,
)
from nudge.core.recurrence import Recurrence
from nudge.core.tasks import HABITS_CATEGORY, Category, Priority, Task


NOW = datetime(2024, 1, 10, 14, 0)  # Wednesday


@pytest.fixture
def habits_category():
    return Category(name=HABITS_CATEGORY, sort_order=0)


@pytest.fixture
def house():
    return Category(name="House", sort_order=1)


@pytest.fixture
def sample(habits_category):
    """A mixed snapshot keyed by role."""
    done = Task(title="Done", due_date=datetime(2024, 1, 2))
    done.complete(datetime(2024, 1, 9))
    return {
        "overdue": Task(title="Overdue", due_date=datetime(2024, 1, 8, 9, 0)),
        "today_urgent": Task(title="Today urgent", due_date=datetime(2024, 1, 10, 9, 0), priority=Priority.URGENT),
        "today": Task(title="Today", due_date=datetime(2024, 1, 10, 18, 0)),
        "urgent_later": Task(title="Urgent later", due_date=datetime(2024, 1, 20), priority=Priority.URGENT),
        "later": Task(title="Later", due_date=datetime(2024, 1, 12)),
        "undated": Task(title="Undated"),
        "habit": Task(title="Meditate", due_date=datetime(2024, 1, 5), category=habits_category),
        "done": done,
    }


class TestNeedsAttention:
    def test_selection_and_order(self, sample):
        result = needs_attention(list(sample.values()), NOW)
        assert [t.title for t in result] == ["Overdue", "Today urgent", "Today", "Urgent later"]

    def test_urgent_alone_can_be_turned_off(self, sample):
        result = needs_attention(list(sample.values()), NOW, urgent_needs_attention=False)
        assert [t.title for t in result] == ["Overdue", "Today urgent", "Today"]

    def test_habit_never_needs_attention(self, sample):
        assert sample["habit"] not in needs_attention(list(sample.values()), NOW)

    def test_empty(self):
        assert needs_attention([], NOW) == []


class TestSimpleViews:
    def test_habits_sorted_by_title(self, habits_category):
        b = Task(title="Run", category=habits_category)
        a = Task(title="Journal", category=habits_category)
        other = Task(title="Shop")
        assert habits([b, other, a]) == [a, b]

    def test_scheduled(self, sample):
        result = scheduled(list(sample.values()))
        assert [t.title for t in result] == ["Overdue", "Today urgent", "Today", "Later", "Urgent later"]

    def test_recurring_by_kind_then_due(self):
        weekly = Task(title="Bins", due_date=datetime(2024, 1, 11), recurrence=Recurrence.WEEKLY)
        daily_late = Task(title="Plants late", due_date=datetime(2024, 1, 15), recurrence=Recurrence.DAILY)
        daily_undated = Task(title="Plants undated", recurrence=Recurrence.DAILY)
        daily_soon = Task(title="Plants soon", due_date=datetime(2024, 1, 12), recurrence=Recurrence.DAILY)
        one_off = Task(title="Call", due_date=datetime(2024, 1, 11))

        result = recurring([weekly, daily_late, daily_undated, one_off, daily_soon])
        assert result == [daily_soon, daily_late, daily_undated, weekly]

    def test_completed_newest_first(self):
        older = Task(title="Older", is_completed=True, completed_at=datetime(2024, 1, 9))
        newer = Task(title="Newer", is_completed=True, completed_at=datetime(2024, 1, 10))
        unknown = Task(title="Unknown", is_completed=True)
        assert completed([older, unknown, newer]) == [newer, older, unknown]


class TestByCategory:
    def test_groups_follow_sort_order(self, house):
        finance = Category(name="Finance", sort_order=0)
        empty = Category(name="Empty", sort_order=2)
        outside = Category(name="Elsewhere", sort_order=-5)

        in_house = Task(title="Fix tap", category=house)
        in_finance = Task(title="Taxes", category=finance)
        in_outside = Task(title="Wander", category=outside)
        loose = Task(title="Loose")

        groups = by_category([loose, in_house, in_outside, in_finance], [house, finance, empty])

        assert [c.name if c else None for c, _ in groups] == ["Finance", "House", "Elsewhere", None]
        assert groups[-1][1] == [loose]

    def test_skips_habits_and_completed(self, habits_category, house):
        done = Task(title="Done", category=house, is_completed=True)
        habit = Task(title="Meditate", category=habits_category)
        assert by_category([done, habit], [habits_category, house]) == []


class TestClassify:
    def test_all_views_from_one_snapshot(self, sample, house):
        result = classify(list(sample.values()), [house], NOW)
        assert len(result.needs_attention) == 4
        assert result.habits == [sample["habit"]]
        assert result.completed == [sample["done"]]
        assert result.by_category[0][0] is None


class TestAttentionSummary:
    def test_count_and_titles(self, sample):
        summary = attention_summary(list(sample.values()), NOW)
        assert summary.needs_attention_count == 4
        assert summary.top_item_titles == ["Overdue", "Today urgent", "Today"]

    def test_zero_limit(self, sample):
        summary = attention_summary(list(sample.values()), NOW, limit=0)
        assert summary.needs_attention_count == 4
        assert summary.top_item_titles == []

    def test_nothing_pressing(self):
        summary = attention_summary([Task(title="Someday")], NOW)
        assert summary.needs_attention_count == 0
        assert summary.top_item_titles == []


class TestTodayView:
    @pytest.fixture
    def snapshot(self, habits_category, house):
        return {
            "habit": Task(title="Meditate", category=habits_category),
            "overdue": Task(title="Overdue", due_date=datetime(2024, 1, 9)),
            "tomorrow": Task(title="Tomorrow", due_date=datetime(2024, 1, 11, 8, 0)),
            "in_two": Task(title="In two", due_date=datetime(2024, 1, 12)),
            "in_three": Task(title="In three", due_date=datetime(2024, 1, 13), category=house),
            "house_urgent": Task(title="Leak", category=house, priority=Priority.URGENT),
            "loose": Task(title="Loose"),
        }

    def test_partition(self, snapshot, habits_category, house):
        view = today_view(list(snapshot.values()), [habits_category, house], NOW)

        assert view.habits == [snapshot["habit"]]
        assert view.needs_attention == [snapshot["overdue"], snapshot["house_urgent"]]
        assert view.upcoming == [snapshot["tomorrow"], snapshot["in_two"]]
        assert view.by_category == [(house, [snapshot["in_three"]])]

    def test_disjoint(self, snapshot, habits_category, house):
        view = today_view(list(snapshot.values()), [habits_category, house], NOW)
        placed = view.habits + view.needs_attention + view.upcoming
        placed += [t for _, items in view.by_category for t in items]
        assert len({t.id for t in placed}) == len(placed)
        assert snapshot["loose"] not in placed

    def test_category_groups_sorted_by_priority(self, snapshot, habits_category, house):
        view = today_view(list(snapshot.values()), [habits_category, house], NOW, urgent_needs_attention=False)
        assert view.by_category == [(house, [snapshot["house_urgent"], snapshot["in_three"]])]

    def test_completed_excluded(self, house):
        done = Task(title="Done", due_date=NOW, category=house)
        done.complete(NOW)
        view = today_view([done], [house], NOW)
        assert (view.habits, view.needs_attention, view.upcoming, view.by_category) == ([], [], [], [])
