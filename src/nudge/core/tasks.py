"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from . import dates
from .recurrence import Recurrence

HABITS_CATEGORY = "Habits"
SNOOZE_HOUR = 9


class Priority(str, Enum):
    """Task priority. Legacy levels are mapped in core.migration."""

    NORMAL = "normal"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        """Sort weight - higher is more important."""
        return 1 if self is Priority.URGENT else 0


class TaskKind(str, Enum):
    STANDARD = "standard"
    HABIT = "habit"


@dataclass
class Category:
    """A user-visible list that tasks are filed under."""

    name: str
    icon: str = "tray.fill"
    color_name: str = "gray"
    is_default: bool = False
    sort_order: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_habits(self) -> bool:
        return self.name == HABITS_CATEGORY

    @classmethod
    def defaults(cls) -> list["Category"]:
        """The category set created on first launch."""
        seed = [
            (HABITS_CATEGORY, "heart.circle.fill", "red"),
            ("House", "house.fill", "orange"),
            ("Photos", "photo.fill", "purple"),
            ("Finance", "dollarsign.circle.fill", "green"),
            ("To Read", "book.fill", "blue"),
            ("Startup", "lightbulb.fill", "yellow"),
            ("Explore", "safari.fill", "teal"),
            ("GenAI", "sparkles", "indigo"),
            ("Misc", "tray.fill", "mint"),
        ]
        return [
            cls(name=name, icon=icon, color_name=color, is_default=True, sort_order=i)
            for i, (name, icon, color) in enumerate(seed)
        ]


@dataclass
class Task:
    """
    A reminder, optionally scheduled, repeating, or tracked as a habit.

    Every derived predicate accepts an explicit `now` so results are
    deterministic; it defaults to the wall clock.
    """

    title: str
    notes: str = ""
    due_date: datetime | None = None
    priority: Priority = Priority.NORMAL
    is_completed: bool = False
    recurrence: Recurrence = Recurrence.NONE
    category: Category | None = None
    kind: TaskKind = TaskKind.STANDARD
    completed_at: datetime | None = None
    ai_context: str | None = None
    habit_completion_dates: list[datetime] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_habit(self) -> bool:
        # Name-based match kept for data that predates TaskKind
        if self.kind is TaskKind.HABIT:
            return True
        return self.category is not None and self.category.is_habits

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not Recurrence.NONE

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Due before today and still open. Habits are never overdue."""
        if self.is_habit:
            return False
        if self.due_date is None or self.is_completed:
            return False
        now = now or datetime.now()
        return self.due_date < dates.start_of_day(now)

    def is_due_today(self, now: datetime | None = None) -> bool:
        if self.due_date is None:
            return False
        return dates.same_day(self.due_date, now or datetime.now())

    def is_due_tomorrow(self, now: datetime | None = None) -> bool:
        if self.due_date is None:
            return False
        return dates.same_day(self.due_date, dates.add_days(now or datetime.now(), 1))

    def days_until_due(self, now: datetime | None = None) -> int | None:
        """Calendar days until due (0 = today, negative if past)."""
        if self.due_date is None:
            return None
        now = now or datetime.now()
        return dates.days_between(dates.start_of_day(now), dates.start_of_day(self.due_date))

    def is_distant_recurring(self, now: datetime | None = None, threshold_days: int = 3) -> bool:
        """Recurring and due more than threshold_days out."""
        if not self.is_recurring:
            return False
        days = self.days_until_due(now)
        return days is not None and days > threshold_days

    def is_completed_today(self, now: datetime | None = None) -> bool:
        """Habit check-in state; resets on its own at the next day boundary."""
        if self.completed_at is None:
            return False
        return dates.same_day(self.completed_at, now or datetime.now())

    def days_until_due_text(self, now: datetime | None = None) -> str | None:
        days = self.days_until_due(now)
        if days is None:
            return None
        if days == 0:
            return "Today"
        if days == 1:
            return "Tomorrow"
        if days == -1:
            return "Yesterday"
        if days > 1:
            return f"in {days} days"
        return f"{-days} days ago"

    # Mutations

    def complete(self, now: datetime | None = None) -> None:
        self.is_completed = True
        self.completed_at = now or datetime.now()

    def uncomplete(self) -> None:
        self.is_completed = False
        self.completed_at = None

    def snooze(self, now: datetime | None = None, hour: int = SNOOZE_HOUR) -> None:
        """Push the due date to tomorrow at `hour` o'clock."""
        tomorrow = dates.add_days(dates.start_of_day(now or datetime.now()), 1)
        self.due_date = tomorrow.replace(hour=hour)

    def check_in_habit_today(self, now: datetime | None = None) -> None:
        """Mark the habit done today. Repeated calls on one day log it once."""
        now = now or datetime.now()
        self.completed_at = now
        if not self.was_completed_on(now):
            self.habit_completion_dates.append(dates.start_of_day(now))

    def clear_habit_today(self, now: datetime | None = None) -> None:
        now = now or datetime.now()
        self.completed_at = None
        self.habit_completion_dates = [
            d for d in self.habit_completion_dates if not dates.same_day(d, now)
        ]

    def was_completed_on(self, day: datetime | date) -> bool:
        target = day.date() if isinstance(day, datetime) else day
        return any(d.date() == target for d in self.habit_completion_dates)

    def completion_count_last_n_days(self, n: int, now: datetime | None = None) -> int:
        """Check-ins within the last n days, today included."""
        if n <= 0:
            return 0
        now = now or datetime.now()
        cutoff = dates.add_days(dates.start_of_day(now), -(n - 1))
        return sum(1 for d in self.habit_completion_dates if dates.start_of_day(d) >= cutoff)

    def habit_history(self, days: int, now: datetime | None = None) -> list[tuple[date, bool]]:
        """Per-day check-in grid for the last `days` days, oldest first."""
        now = now or datetime.now()
        today = dates.start_of_day(now)
        grid = []
        for offset in range(days - 1, -1, -1):
            day = dates.add_days(today, -offset).date()
            grid.append((day, self.was_completed_on(day)))
        return grid
