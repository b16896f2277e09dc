"""Annotation (LLM enhancement) service interface."""

from typing import Protocol

from nudge.core.annotation import Annotation


class AnnotationService(Protocol):
    """Interface for best-effort task enrichment."""

    def enhance(self, title: str, notes: str, categories: list[str]) -> Annotation:
        """Suggest a better title, notes, category and context for a task."""
        ...

    def suggest_category(
        self, title: str, notes: str, list_name: str, categories: list[str]
    ) -> str | None:
        """Pick one of the given category names, or None."""
        ...
