"""Nudge - gentle reminders, recurring tasks and habits."""
