"""Unit tests for sibling comment similarity checks."""

from commentguard.models.policy import Policy
from commentguard.models.syntax import NodeKind
from commentguard.models.violation import Section, ViolationKind


def _check(file_run, code, policy=None, kind=NodeKind.CONDITIONAL):
    run = file_run(code, policy)
    node = next(run.index.iter_kinds([kind]))
    preceding = run.coverage.evaluate(node).preceding
    return node, run.similarity.check_similarity(node, preceding.text if preceding else None)


class TestConditionalSimilarity:
    """Tests for if/then/else comment repetition."""

    def test_then_repeats_if_comment(self, file_run):
        """Test that a then comment repeating the if comment is flagged."""
        node, violations = _check(file_run, """
            // refresh the session token
            if (expired) {
              // Refresh the session token.
              refresh();
            }
        """)
        assert len(violations) == 1
        violation = violations[0]
        assert violation.kind == ViolationKind.SIMILAR_SIBLING_COMMENTS
        assert violation.section == Section.IF_THEN
        assert violation.message_key == "similar_if_then"
        assert violation.anchor_span.start.line == 2
        assert violation.data["similarity"] == 1.0

    def test_distinct_then_comment(self, file_run):
        """Test that a then comment describing the branch is accepted."""
        _, violations = _check(file_run, """
            // refresh the session token
            if (expired) {
              // ask the auth server for a new pair
              refresh();
            }
        """)
        assert violations == []

    def test_else_repeats_then(self, file_run):
        """Test that an else comment equal to the then comment is flagged at the else block."""
        node, violations = _check(file_run, """
            // the request failed earlier
            if (failed) {
              // handle the retry path
              retry();
            } else {
              // Handle the retry path!
              done();
            }
        """)
        assert [v.section for v in violations] == [Section.IF_ELSE]
        assert violations[0].anchor_span.start.line == 5

    def test_distinguishing_word_drops_below_threshold(self, file_run):
        """Test that one added word moves the pair below the threshold."""
        _, violations = _check(file_run, """
            // the request failed earlier
            if (failed) {
              // handle the retry path
              retry();
            } else {
              // handle the retry path quietly
              done();
            }
        """)
        assert violations == []

    def test_pair_below_floor_is_skipped(self, file_run):
        """Test that a 9 character text is never compared."""
        _, violations = _check(file_run, """
            // the request failed earlier
            if (failed) {
              // abcdefghi
              retry();
            } else {
              // abcdefghi
              done();
            }
        """)
        assert violations == []

    def test_pair_at_floor_is_compared(self, file_run):
        """Test that a 10 character text is compared."""
        _, violations = _check(file_run, """
            // the request failed earlier
            if (failed) {
              // abcdefghij
              retry();
            } else {
              // abcdefghij
              done();
            }
        """)
        assert [v.section for v in violations] == [Section.IF_ELSE]

    def test_else_if_alternate_is_not_compared(self, file_run):
        """Test that an else-if alternate is left to its own link."""
        _, violations = _check(file_run, """
            // pick the output format
            if (json) {
              // write the output as json
              writeJson();
            } else if (yaml) {
              // write the output as json
              writeYaml();
            }
        """)
        assert violations == []

    def test_threshold_is_inclusive(self, file_run):
        """Test that a similarity equal to the threshold is flagged."""
        # 20 vs 16 characters: similarity exactly 0.8
        _, violations = _check(file_run, """
            // the request failed earlier
            if (failed) {
              // aaaaaaaaaaaaaaaabbbb
              retry();
            } else {
              // aaaaaaaaaaaaaaaa
              done();
            }
        """, Policy(similarity_threshold=0.8))
        assert len(violations) == 1
        assert violations[0].data["similarity"] == 0.8


class TestTrySimilarity:
    """Tests for try/catch/finally comment repetition."""

    CODE = """
        // load the user settings
        try {
          load();
        } catch (e) {
          // load the user settings
          fallback();
        } finally {
          // release the settings file handle
          close();
        }
    """

    def test_ignored_by_default(self, file_run):
        """Test that catch and finally are not compared while ignored."""
        _, violations = _check(file_run, self.CODE, kind=NodeKind.TRY_BLOCK)
        assert violations == []

    def test_catch_repeats_try(self, file_run):
        """Test that a catch comment repeating the try comment is flagged."""
        policy = Policy(ignore_catch_finally=False)
        _, violations = _check(file_run, self.CODE, policy, kind=NodeKind.TRY_BLOCK)
        assert [v.section for v in violations] == [Section.TRY_CATCH]
        assert violations[0].message_key == "similar_try_catch"
        assert violations[0].anchor_span.start.line == 4

    def test_finally_repeats_try(self, file_run):
        """Test that a finally comment repeating the try comment is flagged."""
        policy = Policy(ignore_catch_finally=False)
        _, violations = _check(file_run, """
            // release the settings file handle
            try {
              load();
            } finally {
              // Release the settings file handle.
              close();
            }
        """, policy, kind=NodeKind.TRY_BLOCK)
        assert [v.rule_key for v in violations] == ["similar-sibling-comments[try-finally]"]
        assert violations[0].message_key == "similar_try_finally"
        assert violations[0].anchor_span.start.line == 4


class TestWithoutKeywordComment:
    """Tests for constructs lacking the comment above the keyword."""

    def test_if_branches_not_compared(self, file_run):
        """Test that then and else are not compared without an if comment."""
        _, violations = _check(file_run, """
            if (failed) {
              // handle the retry path here
              retry();
            } else {
              // handle the retry path here
              done();
            }
        """, Policy(require_section_comments=True))
        assert violations == []

    def test_try_clauses_not_compared(self, file_run):
        """Test that catch and finally are not compared without a try comment."""
        _, violations = _check(file_run, """
            try {
              load();
            } catch (e) {
              // release the settings file handle
              fallback();
            } finally {
              // release the settings file handle
              close();
            }
        """, Policy(ignore_catch_finally=False), kind=NodeKind.TRY_BLOCK)
        assert violations == []
