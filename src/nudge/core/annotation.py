"""LLM enhancement prompts and response parsing - no I/O dependencies."""

import re
from dataclasses import dataclass

from .tasks import Category, Task

_URL_PATTERN = re.compile(r"https?://\S+")


@dataclass
class Annotation:
    """Suggested changes for a task. None means "leave as is"."""

    title: str | None = None
    notes: str | None = None
    category: str | None = None
    context: str | None = None


def extract_urls(text: str) -> list[str]:
    return _URL_PATTERN.findall(text)


def build_enhance_prompt(title: str, notes: str, categories: list[str]) -> str:
    return f"""You are helping enhance a reminder. Given this reminder:

Title: {title}
Notes: {notes or "(no notes)"}

Available categories: {", ".join(categories)}

Please enhance this reminder by:
1. Improving the title if needed (make it clearer/more actionable, but keep it concise)
2. Adding helpful notes - IMPORTANT: If the notes contain any URLs, you MUST preserve them exactly. Add context around the URL but never remove or modify URLs.
3. Selecting the best category from the list
4. Providing a brief context (1-2 sentences of helpful background, e.g. what a URL/video is about)

Respond in this EXACT format with no extra text:
TITLE: [improved title or original if already good]
NOTES: [enhanced notes - MUST include any original URLs]
CATEGORY: [exact category name from the list]
CONTEXT: [brief helpful context]"""


def build_category_prompt(title: str, notes: str, list_name: str, categories: list[str]) -> str:
    return f"""You are helping categorize a reminder. Given this reminder:

Title: {title}
Notes: {notes or "(no notes)"}
Original list: {list_name or "(none)"}

Available categories: {", ".join(categories)}

Which category best fits this reminder? Respond with ONLY the exact category name from the list above, nothing else. If none fit well, respond with the most relevant one."""


def match_category(suggestion: str, categories: list[str]) -> str | None:
    """Resolve a free-text suggestion to a known category name."""
    wanted = suggestion.strip().strip(".\"'").lower()
    if not wanted:
        return None
    for name in categories:
        if name.lower() == wanted:
            return name
    for name in categories:
        if name.lower() in wanted:
            return name
    return None


def parse_enhancement(response: str, title: str, notes: str, categories: list[str]) -> Annotation:
    """
    Parse a TITLE/NOTES/CATEGORY/CONTEXT response.

    URLs present in the original notes are always kept, even if the model
    dropped them.
    """
    annotation = Annotation()
    original_urls = extract_urls(notes)

    for line in response.splitlines():
        stripped = line.strip()
        upper = stripped.upper()
        if upper.startswith("TITLE:"):
            value = stripped[6:].strip()
            annotation.title = value or title
        elif upper.startswith("NOTES:"):
            value = stripped[6:].strip()
            if value and value.lower() != "(no notes)":
                for url in original_urls:
                    if url not in value:
                        value = f"{value}\n{url}"
                annotation.notes = value
        elif upper.startswith("CATEGORY:"):
            annotation.category = match_category(stripped[9:], categories)
        elif upper.startswith("CONTEXT:"):
            value = stripped[8:].strip()
            annotation.context = value or None

    return annotation


def apply_annotation(task: Task, annotation: Annotation, categories: list[Category]) -> None:
    """Write an annotation onto a task. Fields the annotation leaves unset are kept."""
    category = task.category
    if annotation.category:
        category = next((c for c in categories if c.name == annotation.category), category)

    task.title = annotation.title or task.title
    if annotation.notes is not None:
        task.notes = annotation.notes
    task.category = category
    if annotation.context is not None:
        task.ai_context = annotation.context
