"""
Coverage Checker.

Decides, per control-flow construct, whether the required explanatory
comments are present and emits violations for the missing ones:

- conditional: keyword comment per chain plan, then/else branch comments
- for / while / do: keyword comment
- switch: keyword comment, plus a comment above every case of multi-case switches
- try: keyword comment, plus catch/finally block-head comments when enabled
- ternary: comment above or after the expression or its statement

Every accepted comment is also passed through the pattern validator.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from commentguard.analyzers.branch_classifier import BranchClassifier
from commentguard.analyzers.comment_classifier import has_keep_tag, is_doc_block
from commentguard.analyzers.pattern_validator import PatternValidator, matches
from commentguard.analyzers.position_resolver import PositionResolver
from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy, SectionLocation
from commentguard.models.syntax import CommentToken, NodeKind, SyntaxNode
from commentguard.models.violation import Section, Violation, ViolationKind

logger = logging.getLogger(__name__)


class CoverageOutcome(BaseModel):
    """Violations of one construct plus the keyword comment that was found."""

    violations: List[Violation] = []
    preceding: Optional[CommentToken] = None


class CoverageChecker:
    """Checks comment presence for the targeted constructs of one file."""

    def __init__(
        self,
        index: SourceIndex,
        resolver: PositionResolver,
        classifier: BranchClassifier,
        validator: PatternValidator,
        policy: Policy,
    ):
        self.index = index
        self.resolver = resolver
        self.classifier = classifier
        self.validator = validator
        self.policy = policy
        self._handlers: Dict[NodeKind, Callable[[SyntaxNode], CoverageOutcome]] = {
            NodeKind.CONDITIONAL: self._check_conditional,
            NodeKind.FOR_LOOP: self._check_loop,
            NodeKind.WHILE_LOOP: self._check_loop,
            NodeKind.DO_WHILE_LOOP: self._check_loop,
            NodeKind.SWITCH: self._check_switch,
            NodeKind.TRY_BLOCK: self._check_try,
            NodeKind.TERNARY: self._check_ternary,
        }

    def check(self, node: SyntaxNode) -> List[Violation]:
        return self.evaluate(node).violations

    def evaluate(self, node: SyntaxNode) -> CoverageOutcome:
        handler = self._handlers.get(node.kind)
        if handler is None:
            return CoverageOutcome()
        return handler(node)

    # Shared helpers

    def _preview(self, node: SyntaxNode) -> str:
        return self.index.line_preview(node.start.line)

    def _missing(self, node: SyntaxNode, keyword: str, message_key: str) -> Violation:
        return Violation(
            kind=ViolationKind.MISSING_COMMENT,
            message_key=message_key,
            anchor_span=node.span,
            data={"kw": keyword, "preview": self._preview(node)},
        )

    def _validated(self, comment: CommentToken, anchor: SyntaxNode, keyword: str) -> List[Violation]:
        mismatch = self.validator.validate(comment, anchor, keyword)
        return [mismatch] if mismatch is not None else []

    def _require_preceding(
        self,
        node: SyntaxNode,
        keyword: str,
        message_key: str,
        fallback_branch: Optional[SyntaxNode] = None,
    ) -> Tuple[Optional[CommentToken], List[Violation]]:
        """
        Require a keyword comment above ``node``.

        Returns:
            Tuple of (comment usable for sibling comparison, violations)
        """
        comment = self.resolver.find_preceding_comment(
            node, self.policy.allow_blank_line_before_keyword
        )

        if comment is None and self.policy.allow_prep_statements:
            comment = self.resolver.find_prep_statement_comment(node)

        if comment is None and self.policy.allow_section_as_previous and fallback_branch is not None:
            section = self.resolver.resolve_branch_comment(fallback_branch)
            if section is not None and matches(section.text, self.policy.required_text_pattern):
                logger.debug(f"Accepted branch comment in place of '{keyword}' comment at line {node.start.line}")
                return None, []

        if comment is None:
            return None, [self._missing(node, keyword, message_key)]
        return comment, self._validated(comment, node, keyword)

    def _check_branch(self, branch: SyntaxNode, section: Section) -> List[Violation]:
        lookup = self.resolver.find_section_comment(branch, self.policy.section_comment_locations)
        if not lookup.applicable:
            return []
        if lookup.comment is None:
            shape = "block_head" if branch.kind == NodeKind.BLOCK else "trailing"
            return [Violation(
                kind=ViolationKind.MISSING_SECTION_COMMENT,
                section=section,
                message_key=f"need_{section.value}_{shape}",
                anchor_span=branch.span,
                data={"kw": section.value, "preview": self._preview(branch)},
            )]
        return self._validated(lookup.comment, branch, section.value)

    def _removable(self, comment: Optional[CommentToken], keyword: str, message_key: str) -> List[Violation]:
        if comment is None or is_doc_block(comment) or has_keep_tag(comment):
            return []
        return [Violation(
            kind=ViolationKind.REMOVABLE_COMMENT,
            message_key=message_key,
            anchor_span=comment.span,
            data={"kw": keyword, "text": comment.text.strip()},
        )]

    # Per-kind checks

    def _check_conditional(self, node: SyntaxNode) -> CoverageOutcome:
        plan = self.classifier.plan(node)
        consequent = self.index.node(node.consequent_id)
        violations: List[Violation] = []
        preceding = None

        if plan.needs_preceding_comment:
            message_key = "need_before_if" if plan.is_inner_branch else "missing_comment"
            preceding, found = self._require_preceding(node, "if", message_key, consequent)
            violations.extend(found)
        elif self.policy.report_removable:
            extra = self.resolver.find_preceding_comment(node, self.policy.allow_blank_line_before_keyword)
            violations.extend(self._removable(extra, "if", "removable_before_keyword"))

        if plan.check_then and consequent is not None:
            violations.extend(self._check_branch(consequent, Section.THEN))

        alternate = self.index.node(node.alternate_id)
        if plan.check_else and alternate is not None:
            violations.extend(self._check_branch(alternate, Section.ELSE))

        return CoverageOutcome(violations=violations, preceding=preceding)

    def _check_loop(self, node: SyntaxNode) -> CoverageOutcome:
        body = self.index.node(node.body_id)
        preceding, violations = self._require_preceding(node, node.kind.keyword, "missing_comment", body)
        return CoverageOutcome(violations=violations, preceding=preceding)

    def _check_switch(self, node: SyntaxNode) -> CoverageOutcome:
        preceding, violations = self._require_preceding(node, "switch", "need_before_switch")

        cases = self.index.nodes(node.case_ids)
        if self.policy.require_case_comments and len(cases) > 1:
            for case in cases:
                comment = self.resolver.find_preceding_comment(case, allow_blank=False)
                if comment is None:
                    violations.append(Violation(
                        kind=ViolationKind.MISSING_SECTION_COMMENT,
                        section=Section.CASE_HEAD,
                        message_key="need_case_head",
                        anchor_span=case.span,
                        data={"kw": "case", "preview": self._preview(case)},
                    ))
                else:
                    violations.extend(self._validated(comment, case, "case"))

        return CoverageOutcome(violations=violations, preceding=preceding)

    def _check_try(self, node: SyntaxNode) -> CoverageOutcome:
        body = self.index.node(node.body_id)
        preceding, violations = self._require_preceding(node, "try", "missing_comment", body)

        if (
            self.policy.ignore_catch_finally
            or not self.policy.require_section_comments
            or SectionLocation.BLOCK_HEAD not in self.policy.section_comment_locations
        ):
            return CoverageOutcome(violations=violations, preceding=preceding)

        handler = self.index.node(node.handler_id)
        if handler is not None:
            catch_body = self.index.node(handler.body_id)
            violations.extend(self._check_clause_body(catch_body, handler, Section.CATCH))

        finalizer = self.index.node(node.finalizer_id)
        if finalizer is not None:
            finally_body = self.index.node(finalizer.body_id)
            if finally_body is not None:
                violations.extend(self._check_clause_body(finally_body, finally_body, Section.FINALLY))

        return CoverageOutcome(violations=violations, preceding=preceding)

    def _check_clause_body(
        self,
        body: Optional[SyntaxNode],
        anchor: SyntaxNode,
        section: Section,
    ) -> List[Violation]:
        if body is None:
            return []
        comment = self.resolver.find_block_head_comment(body)
        if comment is None:
            return [Violation(
                kind=ViolationKind.MISSING_SECTION_COMMENT,
                section=section,
                message_key=f"need_{section.value}_block_head",
                anchor_span=anchor.span,
                data={"kw": section.value, "preview": self._preview(anchor)},
            )]
        return self._validated(comment, body, section.value)

    def _check_ternary(self, node: SyntaxNode) -> CoverageOutcome:
        allow_blank = self.policy.allow_blank_line_before_keyword
        statement = self.index.enclosing_statement(node)

        own_above = self.resolver.find_preceding_comment(node, allow_blank=False)
        own_after = self.resolver.find_trailing_comment(node)
        above, after = own_above, own_after
        if statement is not None:
            above = above or self.resolver.find_preceding_comment(statement, allow_blank)
            after = after or self.resolver.find_trailing_comment(statement)

        # The ternary's own comments win over those of its statement
        comment = own_above or own_after or above or after
        if comment is None:
            return CoverageOutcome(violations=[self._missing(node, "ternary", "need_ternary_comment")])

        removable: List[Violation] = []
        if self.policy.report_removable and above is not None and after is not None and after is not above:
            # The comment above is kept, the trailing one is redundant
            comment = above
            removable = self._removable(after, "ternary", "removable_trailing")

        violations = self._validated(comment, node, "ternary") + removable
        return CoverageOutcome(violations=violations, preceding=comment)
