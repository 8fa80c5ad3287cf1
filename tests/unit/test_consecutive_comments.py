"""Unit tests for consecutive comment repetition."""

from commentguard.analyzers.consecutive_comments import ConsecutiveCommentChecker
from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy
from commentguard.models.violation import ViolationKind


def _check(parse, code, policy=None):
    return ConsecutiveCommentChecker(SourceIndex(parse(code)), policy or Policy()).check()


def test_repeated_lines_flagged(parse):
    """Test that the second of two near-identical lines is reported."""
    violations = _check(parse, """
        // refresh the cached user list
        // refresh the cached user list.
        const users = load();
    """)
    assert len(violations) == 1
    violation = violations[0]
    assert violation.kind == ViolationKind.SIMILAR_CONSECUTIVE_COMMENTS
    assert violation.anchor_span.start.line == 2
    assert violation.data["second"] == "refresh the cached user list."


def test_distinct_lines_pass(parse):
    """Test that lines saying different things are accepted."""
    assert _check(parse, """
        // refresh the cached user list
        // the list expires after ten minutes
        const users = load();
    """) == []


def test_gap_between_lines(parse):
    """Test that comments separated by a blank line are not consecutive."""
    assert _check(parse, """
        // refresh the cached user list

        // refresh the cached user list
        const users = load();
    """) == []


def test_trailing_comments_are_not_standalone(parse):
    """Test that comments after code on the same line are ignored."""
    assert _check(parse, """
        load(); // refresh the cached user list
        // refresh the cached user list
    """) == []


def test_block_comments_are_ignored(parse):
    """Test that only line comments are compared."""
    assert _check(parse, """
        /* refresh the cached user list */
        // refresh the cached user list
    """) == []


def test_short_lines_are_not_compared(parse):
    """Test that lines below the comparison floor are skipped."""
    assert _check(parse, """
        // step one
        // step one
    """) == []
