"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .annotation_service import AnnotationService
from .reminders_source import RemindersSource
from .notifier import Notifier

__all__ = [
    "TaskStore",
    "AnnotationService",
    "RemindersSource",
    "Notifier",
]
