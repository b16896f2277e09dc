"""Tests for enhancement prompts and parsing."""

import pytest

from nudge.core.annotation import (
    Annotation,
    apply_annotation,
    build_category_prompt,
    build_enhance_prompt,
    extract_urls,
    match_category,
    parse_enhancement,
)
from nudge.core.tasks import Category, Task

CATEGORIES = ["Habits", "House", "To Read", "GenAI", "Misc"]


class TestPrompts:
    def test_enhance_prompt_lists_categories(self):
        prompt = build_enhance_prompt("watch talk", "", CATEGORIES)
        assert "Title: watch talk" in prompt
        assert "Notes: (no notes)" in prompt
        assert "Habits, House, To Read, GenAI, Misc" in prompt
        assert "CONTEXT:" in prompt

    def test_category_prompt_includes_list(self):
        prompt = build_category_prompt("Buy bulbs", "", "Groceries", CATEGORIES)
        assert "Original list: Groceries" in prompt


class TestMatchCategory:
    @pytest.mark.parametrize(
        "suggestion, expected",
        [
            ("House", "House"),
            ("house", "House"),
            (" To Read. ", "To Read"),
            ('"GenAI"', "GenAI"),
            ("Category: Misc", "Misc"),
            ("Garden", None),
            ("", None),
        ],
    )
    def test_matching(self, suggestion, expected):
        assert match_category(suggestion, CATEGORIES) == expected


class TestParseEnhancement:
    def test_full_response(self):
        response = (
            "TITLE: Watch the keynote\n"
            "NOTES: Keynote recording https://example.com/v\n"
            "CATEGORY: GenAI\n"
            "CONTEXT: Annual developer keynote."
        )
        annotation = parse_enhancement(response, "keynote", "https://example.com/v", CATEGORIES)
        assert annotation == Annotation(
            title="Watch the keynote",
            notes="Keynote recording https://example.com/v",
            category="GenAI",
            context="Annual developer keynote.",
        )

    def test_dropped_urls_are_restored(self):
        response = "TITLE: Read article\nNOTES: A long read about caching"
        annotation = parse_enhancement(
            response, "article", "see https://a.example/x and https://b.example/y", CATEGORIES
        )
        assert annotation.notes == "A long read about caching\nhttps://a.example/x\nhttps://b.example/y"

    def test_empty_values_keep_original(self):
        response = "TITLE:\nNOTES: (no notes)\nCATEGORY: Nowhere\nCONTEXT:"
        annotation = parse_enhancement(response, "Original", "", CATEGORIES)
        assert annotation.title == "Original"
        assert annotation.notes is None
        assert annotation.category is None
        assert annotation.context is None

    def test_garbage_response(self):
        assert parse_enhancement("I cannot help with that.", "t", "", CATEGORIES) == Annotation()


class TestApplyAnnotation:
    def test_updates_fields(self):
        house = Category(name="House")
        task = Task(title="fix tap", notes="old")
        apply_annotation(task, Annotation("Fix kitchen tap", "Washer is worn", "House", "Cheap fix."), [house])

        assert task.title == "Fix kitchen tap"
        assert task.notes == "Washer is worn"
        assert task.category is house
        assert task.ai_context == "Cheap fix."

    def test_empty_annotation_changes_nothing(self):
        house = Category(name="House")
        task = Task(title="fix tap", notes="old", category=house, ai_context="kept")
        apply_annotation(task, Annotation(), [house])

        assert (task.title, task.notes, task.category, task.ai_context) == ("fix tap", "old", house, "kept")


def test_extract_urls():
    assert extract_urls("a https://x.example/1 b http://y.example c") == [
        "https://x.example/1",
        "http://y.example",
    ]
