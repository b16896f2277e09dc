"""Anthropic Messages API adapter - HTTP client for task enhancement."""

import logging

import requests

from nudge.config import Config
from nudge.core.annotation import (
    Annotation,
    build_category_prompt,
    build_enhance_prompt,
    match_category,
    parse_enhancement,
)

logger = logging.getLogger(__name__)

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class AnnotationError(Exception):
    """Raised when the enhancement call fails."""

    pass


class AnthropicAnnotationService:
    """
    Anthropic API adapter.

    Implements AnnotationService protocol. No business logic - just I/O;
    prompts and parsing live in core.annotation.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Config) -> "AnthropicAnnotationService":
        return cls(api_key=config.anthropic_api_key, model=config.anthropic_model)

    def _request(self, prompt: str, max_tokens: int = 500) -> str:
        """Send a single-turn prompt and return the text of the reply."""
        if not self.api_key:
            raise AnnotationError("No Anthropic API key. Set ANTHROPIC_API_KEY in nudge.conf.")

        try:
            resp = self._session.post(
                API_URL,
                headers={
                    "Content-Type": "application/json",
                    "x-api-key": self.api_key,
                    "anthropic-version": API_VERSION,
                },
                json={
                    "model": self.model,
                    "max_tokens": max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AnnotationError(f"Network error: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Anthropic API error {resp.status_code}: {resp.text}")
            raise AnnotationError(f"API error: {resp.text}")

        try:
            blocks = resp.json().get("content", [])
        except ValueError as e:
            raise AnnotationError("Invalid response from Anthropic API") from e

        text = next((b.get("text") for b in blocks if b.get("type") == "text"), None)
        if not text:
            raise AnnotationError("Invalid response from Anthropic API")
        return text.strip()

    def enhance(self, title: str, notes: str, categories: list[str]) -> Annotation:
        """Suggest a better title, notes, category and context for a task."""
        response = self._request(build_enhance_prompt(title, notes, categories))
        return parse_enhancement(response, title, notes, categories)

    def suggest_category(
        self, title: str, notes: str, list_name: str, categories: list[str]
    ) -> str | None:
        """Pick one of the given category names, or None."""
        response = self._request(build_category_prompt(title, notes, list_name, categories), max_tokens=50)
        return match_category(response, categories)
