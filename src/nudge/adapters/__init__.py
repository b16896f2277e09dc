"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore, StoreError
from .backup_files import BackupStore
from .anthropic_api import AnthropicAnnotationService, AnnotationError
from .reminders_file import JsonRemindersFile
from .telegram_notifier import TelegramNotifier

__all__ = [
    "JsonTaskStore",
    "StoreError",
    "BackupStore",
    "AnthropicAnnotationService",
    "AnnotationError",
    "JsonRemindersFile",
    "TelegramNotifier",
]
