"""
Tests for suggestion cleanup.

Run with:
    pytest tests/test_suggestions.py -v
"""

import pytest

from aic.llm import CompletionResult, EmptyResponseError
from aic.suggestions import clean_suggestions, is_list_marker, split_choice, strip_list_marker


# ---------------------------------------------------------------------------
# List markers
# ---------------------------------------------------------------------------

class TestStripListMarker:
    """strip_list_marker() on numbering and bullets models like to add."""

    @pytest.mark.parametrize("line, expected", [
        ("1. feat: add parser", "feat: add parser"),
        ("2) fix: handle empty diff", "fix: handle empty diff"),
        ("(3) docs: update readme", "docs: update readme"),
        ("4: chore: bump deps", "chore: bump deps"),
        ("5- refactor: split module", "refactor: split module"),
        ("10. test: cover selector", "test: cover selector"),
        ("[1] feat: add flag", "feat: add flag"),
        ("- feat: bullet", "feat: bullet"),
        ("* fix: star bullet", "fix: star bullet"),
        ("+ chore: plus bullet", "chore: plus bullet"),
        ("  1. feat: indented", "feat: indented"),
        ("- 1. feat: bullet then number", "feat: bullet then number"),
        ("1. - 2) feat: three markers", "feat: three markers"),
    ])
    def test_strips(self, line, expected):
        assert strip_list_marker(line) == expected

    @pytest.mark.parametrize("line", [
        "feat: add parser",
        "fix(api): handle 404",
        "12345. not a marker",
        "chore: bump to 2.0",
    ])
    def test_leaves_non_markers(self, line):
        assert strip_list_marker(line) == line

    @pytest.mark.parametrize("line", ["1.", "-", "* ", "2)"])
    def test_marker_only_line_is_kept(self, line):
        assert strip_list_marker(line) == line

    @pytest.mark.parametrize("line", [
        "1. 2. feat: double numbered",
        "- - fix: double bullet",
        "3) feat: x",
        "feat: y",
    ])
    def test_idempotent(self, line):
        once = strip_list_marker(line)
        assert strip_list_marker(once) == once

    @pytest.mark.parametrize("token, expected", [
        ("1.", True),
        ("(2)", True),
        ("3:", True),
        ("4-", True),
        ("a.", False),
        ("12345.", False),
        ("", False),
    ])
    def test_is_list_marker(self, token, expected):
        assert is_list_marker(token) is expected


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------

class TestCleanSuggestions:
    """clean_suggestions() end-to-end."""

    def test_splits_multi_line_choices(self):
        result = CompletionResult(choices=["1. feat: a\n2. fix: b\n\n3. docs: c"], raw="")
        assert clean_suggestions(result, limit=5) == ["feat: a", "fix: b", "docs: c"]

    def test_trims_and_drops_blank(self):
        result = CompletionResult(choices=["  feat: a  ", "", "   ", "fix: b"], raw="")
        assert clean_suggestions(result, limit=5) == ["feat: a", "fix: b"]

    def test_truncates_to_limit(self):
        result = CompletionResult(choices=[f"feat: change {i}" for i in range(8)], raw="")
        assert len(clean_suggestions(result, limit=3)) == 3

    def test_zero_choices(self):
        with pytest.raises(EmptyResponseError, match="no choices returned"):
            clean_suggestions(CompletionResult(choices=[], raw="{}"), limit=5)

    def test_nothing_survives(self):
        with pytest.raises(EmptyResponseError, match="^empty suggestions$"):
            clean_suggestions(CompletionResult(choices=["", "  "], raw="{raw}"), limit=5)

    def test_debug_appends_raw(self):
        with pytest.raises(EmptyResponseError) as exc:
            clean_suggestions(CompletionResult(choices=[""], raw='{"choices": []}'), limit=5, debug=True)
        assert "Raw Response:" in str(exc.value)
        assert '{"choices": []}' in str(exc.value)

    def test_custom_empty_message(self):
        with pytest.raises(EmptyResponseError, match="after combining"):
            clean_suggestions(CompletionResult(choices=[" "], raw=""), limit=5,
                              empty_message="empty suggestions after combining")

    def test_split_choice_blank(self):
        assert split_choice("  \n ") == []
