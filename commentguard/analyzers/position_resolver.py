"""
Position Resolver.

Locates the explanatory comment of a construct in one of the canonical
positions:

- before the keyword: on the line(s) directly above the construct
- block head: right after the opening brace of a block (same or next line)
- trailing: on the last line of a single, non-block statement

Every lookup returns ``None`` when nothing qualifies; callers report the
absence, lookups never raise for it.
"""

import re
from typing import AbstractSet, List, NamedTuple, Optional

from commentguard.analyzers.comment_classifier import is_directive, is_directive_text, is_meaningful
from commentguard.analyzers.source_index import SourceIndex, pos_key
from commentguard.models.policy import SectionLocation
from commentguard.models.syntax import CommentToken, NodeKind, SyntaxNode

ALL_SECTION_LOCATIONS = frozenset(SectionLocation)

PREP_LOOKBACK_LINES = 10

_LINE_COMMENT_RE = re.compile(r"^//(.*)$")
_DECLARATION_RE = re.compile(r"^(?:const|let|var)\s+")
_ASSIGNMENT_RE = re.compile(r"^[A-Za-z_$][\w.$\[\]]*\s*=(?!=)\s*.+;?$")


class SectionLookup(NamedTuple):
    """Outcome of a branch comment lookup."""

    applicable: bool
    comment: Optional[CommentToken]


class PositionResolver:
    """Finds qualifying comments around syntax nodes of one file."""

    def __init__(self, index: SourceIndex):
        self.index = index

    def find_preceding_comment(
        self,
        node: SyntaxNode,
        allow_blank: bool = False,
    ) -> Optional[CommentToken]:
        """
        Find the explanatory comment directly above ``node``.

        Directive comments are skipped. A run of directive comments sitting
        directly above the node does not break adjacency, so a comment above
        an ``eslint-disable-next-line`` line still belongs to the node.

        Args:
            node: Construct whose keyword the comment must precede
            allow_blank: Tolerate blank lines (but no code) in between

        Returns:
            The last meaningful comment before the node, or None if it is
            missing or not adjacent
        """
        anchor_line = node.start.line
        for comment in reversed(self.index.comments_before(node)):
            if is_directive(comment):
                if comment.span.end.line >= anchor_line - 1:
                    anchor_line = min(anchor_line, comment.span.start.line)
                continue
            if self._is_adjacent(comment, node, anchor_line, allow_blank):
                return comment
            return None
        return None

    def _is_adjacent(
        self,
        comment: CommentToken,
        node: SyntaxNode,
        anchor_line: int,
        allow_blank: bool,
    ) -> bool:
        comment_end_line = comment.span.end.line
        if not allow_blank:
            return comment_end_line == anchor_line - 1

        if comment_end_line >= node.start.line:
            return False
        # Blank lines are fine, code is not
        between = self.index.tokens_between(pos_key(comment.span.end), pos_key(node.start))
        return not any(
            t.span.start.line > comment_end_line and t.span.end.line < node.start.line
            for t in between
        )

    def last_meaningful_comment(self, node: SyntaxNode) -> Optional[CommentToken]:
        """Last non-directive comment before ``node`` regardless of distance."""
        for comment in reversed(self.index.comments_before(node)):
            if is_meaningful(comment):
                return comment
        return None

    def find_block_head_comment(self, block: SyntaxNode) -> Optional[CommentToken]:
        """
        Find the comment heading a brace-delimited block.

        Accepts the first non-directive comment after ``{`` when it starts on
        the brace line or the line after it and ends before the first
        statement. A comment directly before ``{`` on the brace line is also
        accepted.
        """
        brace = self.index.first_token(block)
        if brace is None:
            return None
        brace_line = brace.span.start.line

        statements = self.index.nodes(block.statement_ids)
        limit = pos_key(statements[0].start) if statements else pos_key(block.end)

        for comment in self.index.comments_between(pos_key(brace.span.end), limit):
            if is_directive(comment):
                continue
            if comment.span.start.line in (brace_line, brace_line + 1):
                return comment
            break

        before = self.index.token_before(pos_key(brace.span.start), include_comments=True)
        if (
            isinstance(before, CommentToken)
            and not is_directive(before)
            and before.span.end.line == brace_line
        ):
            return before
        return None

    def find_trailing_comment(self, statement: SyntaxNode) -> Optional[CommentToken]:
        """Find a comment on the last line of a single statement."""
        end_line = statement.end.line
        for comment in self.index.comments_after(statement):
            if comment.span.start.line != end_line:
                break
            if is_directive(comment):
                continue
            return comment

        before = self.index.token_before(pos_key(statement.start), include_comments=True)
        if (
            isinstance(before, CommentToken)
            and not is_directive(before)
            and before.span.end.line == end_line
        ):
            return before
        return None

    def find_section_comment(
        self,
        branch: SyntaxNode,
        locations: AbstractSet[SectionLocation],
    ) -> SectionLookup:
        """
        Find the comment of a branch in the enabled positions.

        Blocks are looked up at the block head, single statements at their
        trailing position; both may also carry a comment directly above.
        ``applicable`` is False when no enabled position fits the branch.
        """
        if branch.kind == NodeKind.BLOCK:
            candidates = [SectionLocation.BLOCK_HEAD, SectionLocation.BEFORE_KEYWORD]
        else:
            candidates = [SectionLocation.TRAILING, SectionLocation.BEFORE_KEYWORD]

        enabled = [loc for loc in candidates if loc in locations]
        for location in enabled:
            comment = self._find_at(branch, location)
            if comment is not None:
                return SectionLookup(True, comment)
        return SectionLookup(bool(enabled), None)

    def _find_at(self, branch: SyntaxNode, location: SectionLocation) -> Optional[CommentToken]:
        if location == SectionLocation.BLOCK_HEAD:
            return self.find_block_head_comment(branch)
        if location == SectionLocation.TRAILING:
            return self.find_trailing_comment(branch)
        return self.find_preceding_comment(branch, allow_blank=False)

    def resolve_branch_comment(self, branch: Optional[SyntaxNode]) -> Optional[CommentToken]:
        """Comment of a branch in any position, used for sibling comparison."""
        if branch is None:
            return None
        return self.find_section_comment(branch, ALL_SECTION_LOCATIONS).comment

    def find_prep_statement_comment(self, node: SyntaxNode) -> Optional[CommentToken]:
        """
        Find a comment separated from ``node`` only by preparatory lines.

        Preparatory lines are ``const``/``let``/``var`` declarations and
        simple assignments. Blank lines are not preparatory.
        """
        comment = self.last_meaningful_comment(node)
        if comment is None:
            comment = self._nearest_line_comment_above(node)
        if comment is None:
            return None

        for line in range(comment.span.end.line + 1, node.start.line):
            text = self.index.line_text(line).strip()
            if not text:
                return None
            if not (_DECLARATION_RE.match(text) or _ASSIGNMENT_RE.match(text)):
                return None
        return comment

    def _nearest_line_comment_above(self, node: SyntaxNode) -> Optional[CommentToken]:
        node_line = node.start.line
        for line in range(node_line - 1, max(1, node_line - PREP_LOOKBACK_LINES) - 1, -1):
            match = _LINE_COMMENT_RE.match(self.index.line_text(line).strip())
            if match is None or is_directive_text(match.group(1)):
                continue
            located = self._meaningful_comments(self.index.comments_on_line(line))
            if located:
                return located[0]
        return None

    @staticmethod
    def _meaningful_comments(comments: List[CommentToken]) -> List[CommentToken]:
        return [c for c in comments if is_meaningful(c)]
