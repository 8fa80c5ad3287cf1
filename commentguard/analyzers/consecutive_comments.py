"""Detection of consecutive line comments that repeat each other."""

from typing import List

from commentguard.analyzers.comment_classifier import is_directive
from commentguard.analyzers.similarity import is_comparable, normalize_whitespace, similarity
from commentguard.analyzers.source_index import SourceIndex, pos_key
from commentguard.models.policy import Policy
from commentguard.models.syntax import CommentKind, CommentToken
from commentguard.models.violation import Violation, ViolationKind


class ConsecutiveCommentChecker:
    """Reports the second of two adjacent ``//`` lines saying the same thing."""

    def __init__(self, index: SourceIndex, policy: Policy):
        self.index = index
        self.policy = policy

    def check(self) -> List[Violation]:
        violations: List[Violation] = []
        candidates = [c for c in self.index.comments if self._is_standalone_line_comment(c)]

        for first, second in zip(candidates, candidates[1:]):
            if second.span.start.line != first.span.end.line + 1:
                continue

            first_norm = normalize_whitespace(first.text)
            second_norm = normalize_whitespace(second.text)
            if not is_comparable(first_norm) or not is_comparable(second_norm):
                continue

            value = similarity(first.text, second.text)
            if value >= self.policy.similarity_threshold:
                violations.append(Violation(
                    kind=ViolationKind.SIMILAR_CONSECUTIVE_COMMENTS,
                    message_key="consecutive_similar",
                    anchor_span=second.span,
                    data={
                        "similarity": round(value, 3),
                        "threshold": self.policy.similarity_threshold,
                        "first": first.text.strip(),
                        "second": second.text.strip(),
                        "preview": self.index.line_preview(second.span.start.line),
                    },
                ))
        return violations

    def _is_standalone_line_comment(self, comment: CommentToken) -> bool:
        if comment.kind != CommentKind.LINE or is_directive(comment):
            return False
        before = self.index.token_before(pos_key(comment.span.start))
        return before is None or before.span.end.line < comment.span.start.line
