"""
Syntax data models consumed by the comment coverage engine.

A host language plugin converts its parse tree into a flat arena of
``SyntaxNode`` objects (indexed by ``node_id``), an ordered sequence of
``CommentToken`` objects and an ordered sequence of non-comment ``CodeToken``
objects. Everything here is read-only once built.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """Kind of a syntax node as seen by the engine."""

    # Control-flow constructs that carry comment requirements
    CONDITIONAL = "conditional"
    FOR_LOOP = "for"
    WHILE_LOOP = "while"
    DO_WHILE_LOOP = "do"
    SWITCH = "switch"
    TRY_BLOCK = "try"
    TERNARY = "ternary"

    # Structural kinds
    BLOCK = "block"
    SWITCH_CASE = "case"
    CATCH_CLAUSE = "catch"
    FINALLY_CLAUSE = "finally"
    STATEMENT = "statement"
    MEMBER = "member"
    MEMBER_LIST = "members"
    PROGRAM = "program"
    OTHER = "other"

    @property
    def keyword(self) -> str:
        """Keyword used in messages for this kind."""
        if self is NodeKind.CONDITIONAL:
            return "if"
        return self.value

    @property
    def is_target(self) -> bool:
        return self in TARGET_KINDS


TARGET_KINDS = frozenset({
    NodeKind.CONDITIONAL,
    NodeKind.FOR_LOOP,
    NodeKind.WHILE_LOOP,
    NodeKind.DO_WHILE_LOOP,
    NodeKind.SWITCH,
    NodeKind.TRY_BLOCK,
    NodeKind.TERNARY,
})


class SourcePosition(BaseModel):
    """Position in a source file (1-indexed line, 0-indexed column)."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.line, self.column)


class SourceSpan(BaseModel):
    """Start/end range of a node, comment or token."""

    model_config = ConfigDict(frozen=True)

    start: SourcePosition
    end: SourcePosition

    @classmethod
    def from_points(cls, start_line: int, start_column: int, end_line: int, end_column: int) -> "SourceSpan":
        return cls(
            start=SourcePosition(line=start_line, column=start_column),
            end=SourcePosition(line=end_line, column=end_column),
        )


class SyntaxNode(BaseModel):
    """
    Node of the parsed tree.

    Branch children and the parent are referenced by id into the owning
    ``SourceFile.nodes`` arena, never by object.
    """

    model_config = ConfigDict(frozen=True)

    node_id: int = Field(..., description="Index of the node in the arena")
    kind: NodeKind = Field(..., description="Engine-level node kind")
    node_type: str = Field(..., description="Host parser node type, e.g. 'if_statement'")
    span: SourceSpan = Field(..., description="Source range of the node")
    parent_id: Optional[int] = Field(None, description="Logical parent node id")
    consequent_id: Optional[int] = Field(None, description="Then branch (conditional, ternary)")
    alternate_id: Optional[int] = Field(None, description="Else branch (conditional, ternary)")
    body_id: Optional[int] = Field(None, description="Body of loops, try, catch and finally")
    handler_id: Optional[int] = Field(None, description="Catch clause of a try")
    finalizer_id: Optional[int] = Field(None, description="Finally clause of a try")
    case_ids: List[int] = Field(default_factory=list, description="Case/default labels of a switch")
    statement_ids: List[int] = Field(default_factory=list, description="Statements of a block")

    @property
    def start(self) -> SourcePosition:
        return self.span.start

    @property
    def end(self) -> SourcePosition:
        return self.span.end


class CommentKind(str, Enum):
    """Comment syntax."""

    LINE = "line"
    BLOCK = "block"


class CommentToken(BaseModel):
    """Comment with its body text (delimiters stripped) and location."""

    model_config = ConfigDict(frozen=True)

    text: str
    kind: CommentKind
    span: Optional[SourceSpan] = None

    @property
    def looks_like_doc_block(self) -> bool:
        return self.kind == CommentKind.BLOCK and self.text.startswith("*")


class CodeToken(BaseModel):
    """Non-comment leaf token."""

    model_config = ConfigDict(frozen=True)

    token_type: str
    span: SourceSpan


class SourceFile(BaseModel):
    """Parsed representation of one file handed to the engine."""

    file_path: str
    language: str
    lines: List[str] = Field(default_factory=list, description="Source lines without line terminators")
    nodes: List[SyntaxNode] = Field(default_factory=list, description="Node arena in document pre-order")
    comments: List[CommentToken] = Field(default_factory=list, description="Comments ordered by position")
    tokens: List[CodeToken] = Field(default_factory=list, description="Code tokens ordered by position")
