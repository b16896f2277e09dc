"""Functional core - pure business logic with no I/O."""

from .recurrence import Recurrence, next_date
from .tasks import HABITS_CATEGORY, Category, Priority, Task, TaskKind
from .rollover import rollover, recover_missing_occurrences
from .buckets import (
    AttentionSummary,
    Buckets,
    TodayView,
    attention_summary,
    classify,
    needs_attention,
    today_view,
)
from .notification import Notification, build_notification
from .annotation import Annotation

__all__ = [
    # Recurrence
    "Recurrence",
    "next_date",
    # Tasks
    "HABITS_CATEGORY",
    "Category",
    "Priority",
    "Task",
    "TaskKind",
    # Rollover
    "rollover",
    "recover_missing_occurrences",
    # Buckets
    "AttentionSummary",
    "Buckets",
    "TodayView",
    "attention_summary",
    "classify",
    "needs_attention",
    "today_view",
    # Notification
    "Notification",
    "build_notification",
    # Annotation
    "Annotation",
]
