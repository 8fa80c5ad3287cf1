"""Unit tests for required pattern validation."""

import pytest

from commentguard.analyzers.pattern_validator import PatternValidator, matches
from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy
from commentguard.models.syntax import NodeKind
from commentguard.models.violation import ViolationKind
from commentguard.services.policy_loader import NON_ASCII_PATTERN


class TestMatches:
    """Tests for the pattern predicate."""

    def test_no_pattern_always_matches(self):
        """Test that any text is accepted without a pattern."""
        assert matches("anything", None)
        assert matches("", "")

    def test_search_semantics(self):
        """Test that the pattern may match anywhere in the trimmed text."""
        assert matches("  see JIRA-42 for details", r"[A-Z]+-\d+")
        assert not matches("see the ticket", r"[A-Z]+-\d+")

    def test_anchored_on_trimmed_text(self):
        """Test that anchors apply to the trimmed comment body."""
        assert matches("   NOTE: slow path", r"^NOTE:")

    def test_non_ascii_pattern(self):
        """Test the locale pattern for Japanese comments."""
        assert matches("再試行する", NON_ASCII_PATTERN)
        assert not matches("retry the call", NON_ASCII_PATTERN)


class TestPatternValidator:
    """Tests for TagMismatch violations."""

    @pytest.fixture
    def loop_source(self, parse):
        return parse("""
            // visit every pending job
            for (const job of jobs) {
              run(job);
            }
        """)

    def test_matching_comment(self, loop_source):
        """Test that a matching comment yields no violation."""
        index = SourceIndex(loop_source)
        node = next(index.iter_kinds([NodeKind.FOR_LOOP]))
        validator = PatternValidator(index, Policy(required_text_pattern=r"pending"))
        assert validator.validate(loop_source.comments[0], node, "for") is None

    def test_mismatching_comment(self, loop_source):
        """Test that a mismatching comment yields a TagMismatch at the construct."""
        index = SourceIndex(loop_source)
        node = next(index.iter_kinds([NodeKind.FOR_LOOP]))
        validator = PatternValidator(index, Policy(required_text_pattern=NON_ASCII_PATTERN))

        violation = validator.validate(loop_source.comments[0], node, "for")

        assert violation.kind == ViolationKind.TAG_MISMATCH
        assert violation.anchor_span == node.span
        assert violation.data["kw"] == "for"
        assert violation.data["text"] == "visit every pending job"
        assert violation.data["pattern"] == NON_ASCII_PATTERN
        assert violation.data["preview"] == "for (const job of jobs) {"
