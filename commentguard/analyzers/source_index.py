"""
Positional queries over a parsed source file.

``SourceIndex`` answers the questions the resolvers ask about a file:
which comments sit before/after a node, which code tokens lie between two
positions, which token is adjacent to a position. Lookups use bisection over
the ordered comment and token sequences. Comments without a location are
dropped up front and are therefore never returned as candidates.
"""

from bisect import bisect_left, bisect_right
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from commentguard.models.syntax import (
    CodeToken,
    CommentToken,
    NodeKind,
    SourceFile,
    SourcePosition,
    SyntaxNode,
)

Pos = Tuple[int, int]
Token = Union[CodeToken, CommentToken]

PREVIEW_MAX_LENGTH = 120

_STATEMENT_KINDS = frozenset({
    NodeKind.STATEMENT,
    NodeKind.CONDITIONAL,
    NodeKind.FOR_LOOP,
    NodeKind.WHILE_LOOP,
    NodeKind.DO_WHILE_LOOP,
    NodeKind.SWITCH,
    NodeKind.TRY_BLOCK,
    NodeKind.MEMBER,
})

_SCOPE_KINDS = frozenset({
    NodeKind.BLOCK,
    NodeKind.PROGRAM,
    NodeKind.SWITCH_CASE,
    NodeKind.MEMBER_LIST,
})


def pos_key(position: SourcePosition) -> Pos:
    return (position.line, position.column)


def preview_text(line: str) -> str:
    """Trim a source line and shorten it for display."""
    text = line.strip()
    if len(text) > PREVIEW_MAX_LENGTH:
        return text[:PREVIEW_MAX_LENGTH - 3] + "..."
    return text


class SourceIndex:
    """Read-only lookup structure built once per analyzed file."""

    def __init__(self, source: SourceFile):
        self.source = source
        self._nodes = source.nodes
        self._comments: List[CommentToken] = [c for c in source.comments if c.span is not None]
        self._comment_starts: List[Pos] = [pos_key(c.span.start) for c in self._comments]
        self._comment_ends: List[Pos] = [pos_key(c.span.end) for c in self._comments]
        self._tokens: List[CodeToken] = list(source.tokens)
        self._token_starts: List[Pos] = [pos_key(t.span.start) for t in self._tokens]
        self._token_ends: List[Pos] = [pos_key(t.span.end) for t in self._tokens]

    # Node arena

    @property
    def comments(self) -> List[CommentToken]:
        return self._comments

    def node(self, node_id: Optional[int]) -> Optional[SyntaxNode]:
        if node_id is None or node_id < 0 or node_id >= len(self._nodes):
            return None
        return self._nodes[node_id]

    def parent(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        return self.node(node.parent_id)

    def nodes(self, node_ids: Iterable[int]) -> List[SyntaxNode]:
        return [n for n in (self.node(i) for i in node_ids) if n is not None]

    def iter_kinds(self, kinds: Iterable[NodeKind]) -> Iterator[SyntaxNode]:
        """Yield nodes of the given kinds in document order."""
        wanted = frozenset(kinds)
        for node in self._nodes:
            if node.kind in wanted:
                yield node

    def enclosing_statement(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        """Nearest statement or member ancestor, stopping at the enclosing block or member list."""
        current = self.parent(node)
        while current is not None:
            if current.kind in _STATEMENT_KINDS:
                return current
            if current.kind in _SCOPE_KINDS:
                return None
            current = self.parent(current)
        return None

    # Comment queries

    def comments_between(self, start: Pos, end: Pos) -> List[CommentToken]:
        """Comments lying entirely within [start, end]."""
        result = []
        i = bisect_left(self._comment_starts, start)
        while i < len(self._comments) and self._comment_starts[i] < end:
            if self._comment_ends[i] <= end:
                result.append(self._comments[i])
            i += 1
        return result

    def comments_before(self, node: SyntaxNode) -> List[CommentToken]:
        """Comments between the previous code token and the start of ``node``."""
        start = pos_key(node.start)
        i = bisect_left(self._token_starts, start)
        lower = self._token_ends[i - 1] if i > 0 else (0, 0)
        return self.comments_between(lower, start)

    def comments_after(self, node: SyntaxNode) -> List[CommentToken]:
        """Comments between the end of ``node`` and the next code token."""
        end = pos_key(node.end)
        j = bisect_left(self._token_starts, end)
        if j < len(self._tokens):
            upper = self._token_starts[j]
        else:
            upper = (float("inf"), float("inf"))
        return self.comments_between(end, upper)

    def comments_on_line(self, line: int) -> List[CommentToken]:
        i = bisect_left(self._comment_starts, (line, 0))
        result = []
        while i < len(self._comments) and self._comment_starts[i][0] == line:
            result.append(self._comments[i])
            i += 1
        return result

    # Token queries

    def tokens_between(self, start: Pos, end: Pos) -> List[CodeToken]:
        """Code tokens (comments excluded) lying entirely within [start, end]."""
        result = []
        i = bisect_left(self._token_starts, start)
        while i < len(self._tokens) and self._token_starts[i] < end:
            if self._token_ends[i] <= end:
                result.append(self._tokens[i])
            i += 1
        return result

    def first_token(self, node: SyntaxNode) -> Optional[CodeToken]:
        i = bisect_left(self._token_starts, pos_key(node.start))
        if i < len(self._tokens) and self._token_starts[i] <= pos_key(node.end):
            return self._tokens[i]
        return None

    def token_before(self, position: Pos, include_comments: bool = False) -> Optional[Token]:
        """Last token ending at or before ``position``."""
        candidates: List[Tuple[Pos, Token]] = []
        i = bisect_right(self._token_ends, position) - 1
        if i >= 0:
            candidates.append((self._token_ends[i], self._tokens[i]))
        if include_comments:
            k = bisect_right(self._comment_ends, position) - 1
            if k >= 0:
                candidates.append((self._comment_ends[k], self._comments[k]))
        if not candidates:
            return None
        return max(candidates, key=lambda item: item[0])[1]

    # Lines

    def line_text(self, line: Optional[int]) -> str:
        if line is None or line < 1 or line > len(self.source.lines):
            return ""
        return self.source.lines[line - 1]

    def line_preview(self, line: Optional[int]) -> str:
        return preview_text(self.line_text(line))
