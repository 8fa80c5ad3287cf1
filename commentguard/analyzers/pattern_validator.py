"""Pattern/locale validation of accepted comments."""

from typing import Optional

from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy, compile_pattern
from commentguard.models.syntax import CommentToken, SyntaxNode
from commentguard.models.violation import Violation, ViolationKind


def matches(text: str, pattern: Optional[str]) -> bool:
    """Return True if ``text`` (trimmed) contains a match of ``pattern``; no pattern always matches."""
    if not pattern:
        return True
    return compile_pattern(pattern).search((text or "").strip()) is not None


class PatternValidator:
    """Checks that accepted comments are written in the required form."""

    def __init__(self, index: SourceIndex, policy: Policy):
        self.index = index
        self.policy = policy

    def validate(
        self,
        comment: CommentToken,
        anchor: SyntaxNode,
        keyword: str,
    ) -> Optional[Violation]:
        """
        Validate a comment accepted for ``anchor``.

        Args:
            comment: Comment found for the construct
            anchor: Node the comment was resolved for
            keyword: Keyword or section name for the message

        Returns:
            TagMismatch violation, or None if the comment matches
        """
        pattern = self.policy.required_text_pattern
        if matches(comment.text, pattern):
            return None
        return Violation(
            kind=ViolationKind.TAG_MISMATCH,
            message_key="tag_mismatch",
            anchor_span=anchor.span,
            data={
                "kw": keyword,
                "text": comment.text.strip(),
                "pattern": pattern,
                "preview": self.index.line_preview(anchor.start.line),
            },
        )
