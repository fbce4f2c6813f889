"""Tests for branch naming helpers"""
import re

import pytest

from worktree_wizard.utils.slug import create_branch_name, extract_issue_number, slugify

SLUG_PATTERN = re.compile(r"^[a-z0-9-]*$")


class TestSlugify:
    """Test slug generation."""

    def test_basic_title(self):
        assert slugify("Add Feature") == "add-feature"

    def test_collapses_punctuation_runs(self):
        assert slugify("Fix   bug!!! -- now") == "fix-bug-now"

    def test_strips_leading_and_trailing_hyphens(self):
        assert slugify("  --Hello World--  ") == "hello-world"

    def test_empty_input(self):
        assert slugify("") == ""

    def test_all_punctuation(self):
        assert slugify("!!!???...") == ""

    def test_diacritics_are_dropped_not_transliterated(self):
        assert slugify("Café crème") == "caf-cr-me"

    def test_truncates_to_fifty_characters(self):
        slug = slugify("a" * 80)
        assert slug == "a" * 50

    def test_truncation_does_not_leave_trailing_hyphen(self):
        slug = slugify("a" * 49 + " bcd")
        assert len(slug) <= 50
        assert not slug.endswith("-")

    @pytest.mark.parametrize("text", [
        "Hello, World!",
        "  multiple   spaces  ",
        "UPPER_snake_Case",
        "émoji 🎉 party",
        "x" * 200,
        "-" * 10,
        "a-" * 40,
        "Ünïcödé and ASCII 123",
    ])
    def test_slug_invariants(self, text):
        slug = slugify(text)
        assert SLUG_PATTERN.match(slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug
        assert len(slug) <= 50


class TestBranchNames:
    """Test branch name composition and parsing."""

    def test_create_branch_name(self):
        assert create_branch_name(7, "Fix Bug #123!") == "issue-7-fix-bug-123"

    def test_create_branch_name_empty_title(self):
        assert create_branch_name(123, "") == "issue-123-"

    def test_create_branch_name_issue_zero(self):
        assert create_branch_name(0, "Start") == "issue-0-start"

    def test_extract_issue_number(self):
        assert extract_issue_number("issue-42-add-feature") == 42

    def test_extract_issue_number_without_slug(self):
        assert extract_issue_number("issue-42") == 42

    @pytest.mark.parametrize("branch", [
        "feature-42",
        "ISSUE-42-x",
        "prefix-issue-42",
        "issue-",
        "issue-abc",
        "main",
        "",
    ])
    def test_extract_issue_number_no_match(self, branch):
        assert extract_issue_number(branch) is None

    @pytest.mark.parametrize("number,title", [
        (0, ""),
        (1, "Simple"),
        (42, "issue-99 nested number"),
        (123456, "!!!"),
        (7, "Fix Bug #123!"),
    ])
    def test_extract_inverts_create(self, number, title):
        assert extract_issue_number(create_branch_name(number, title)) == number
