"""
Similarity Checker.

Flags branch comments that merely repeat the comment of a sibling position
(``if`` vs. then/else, ``try`` vs. catch/finally). Texts are compared after
strict normalization and pairs shorter than the comparison floor are skipped.
"""

import logging
from typing import List, Optional

from commentguard.analyzers.position_resolver import PositionResolver
from commentguard.analyzers.similarity import is_comparable, normalize_strict, score
from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy
from commentguard.models.syntax import CommentToken, NodeKind, SyntaxNode
from commentguard.models.violation import Section, Violation, ViolationKind

logger = logging.getLogger(__name__)


class SimilarityChecker:
    """Detects role duplication between sibling comments."""

    def __init__(self, index: SourceIndex, resolver: PositionResolver, policy: Policy):
        self.index = index
        self.resolver = resolver
        self.policy = policy

    def check_similarity(self, node: SyntaxNode, preceding_text: Optional[str]) -> List[Violation]:
        """
        Compare the keyword comment of ``node`` with its branch comments.

        Args:
            node: Conditional or try statement
            preceding_text: Text of the comment found above the keyword

        Returns:
            List of SimilarSiblingComments violations
        """
        if not preceding_text:
            return []
        if node.kind == NodeKind.CONDITIONAL:
            return self._check_conditional(node, preceding_text)
        if node.kind == NodeKind.TRY_BLOCK:
            return self._check_try(node, preceding_text)
        return []

    def _check_conditional(self, node: SyntaxNode, preceding_text: Optional[str]) -> List[Violation]:
        violations: List[Violation] = []

        consequent = self.index.node(node.consequent_id)
        then_comment = self.resolver.resolve_branch_comment(consequent)
        if consequent is not None:
            violations.extend(self._compare(preceding_text, then_comment, consequent, Section.IF_THEN))

        alternate = self.index.node(node.alternate_id)
        if alternate is None or alternate.kind == NodeKind.CONDITIONAL:
            return violations

        else_comment = self.resolver.resolve_branch_comment(alternate)
        violations.extend(self._compare(preceding_text, else_comment, alternate, Section.IF_ELSE))
        if then_comment is not None:
            violations.extend(self._compare(then_comment.text, else_comment, alternate, Section.IF_ELSE))
        return violations

    def _check_try(self, node: SyntaxNode, preceding_text: Optional[str]) -> List[Violation]:
        if self.policy.ignore_catch_finally:
            return []

        violations: List[Violation] = []
        handler = self.index.node(node.handler_id)
        if handler is not None:
            body = self.index.node(handler.body_id)
            if body is not None:
                comment = self.resolver.find_block_head_comment(body)
                violations.extend(self._compare(preceding_text, comment, body, Section.TRY_CATCH))

        finalizer = self.index.node(node.finalizer_id)
        if finalizer is not None:
            body = self.index.node(finalizer.body_id)
            if body is not None:
                comment = self.resolver.find_block_head_comment(body)
                violations.extend(self._compare(preceding_text, comment, body, Section.TRY_FINALLY))
        return violations

    def _compare(
        self,
        first_text: Optional[str],
        second: Optional[CommentToken],
        anchor: SyntaxNode,
        section: Section,
    ) -> List[Violation]:
        if not first_text or second is None:
            return []

        first_norm = normalize_strict(first_text)
        second_norm = normalize_strict(second.text)
        if not is_comparable(first_norm) or not is_comparable(second_norm):
            return []

        result = score(first_norm, second_norm)
        threshold = self.policy.similarity_threshold
        if result.similarity < threshold:
            return []

        logger.debug(
            f"Similar {section.value} comments at line {anchor.start.line}: "
            f"similarity={result.similarity:.3f} threshold={threshold}"
        )
        return [Violation(
            kind=ViolationKind.SIMILAR_SIBLING_COMMENTS,
            section=section,
            message_key=f"similar_{section.value.replace('-', '_')}",
            anchor_span=anchor.span,
            data={
                "ratio": round(result.ratio, 3),
                "similarity": round(result.similarity, 3),
                "threshold": threshold,
                "distance": result.distance,
                "max_len": result.max_len,
                "first": first_text.strip(),
                "second": second.text.strip(),
            },
        )]
