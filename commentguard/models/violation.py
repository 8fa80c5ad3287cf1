"""Violation data models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from commentguard.models.syntax import SourceSpan


class ViolationKind(str, Enum):
    """Kind of comment coverage violation."""

    MISSING_COMMENT = "missing-comment"
    TAG_MISMATCH = "tag-mismatch"
    MISSING_SECTION_COMMENT = "missing-section-comment"
    SIMILAR_SIBLING_COMMENTS = "similar-sibling-comments"
    MULTI_ISSUE_HINT = "multi-issue-hint"
    REMOVABLE_COMMENT = "removable-comment"
    SIMILAR_CONSECUTIVE_COMMENTS = "similar-consecutive-comments"


class Section(str, Enum):
    """Sub-kind of section and similarity violations."""

    THEN = "then"
    ELSE = "else"
    CATCH = "catch"
    FINALLY = "finally"
    CASE_HEAD = "case-head"
    IF_THEN = "if-then"
    IF_ELSE = "if-else"
    TRY_CATCH = "try-catch"
    TRY_FINALLY = "try-finally"


class Violation(BaseModel):
    """A single unmet comment requirement."""

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind = Field(..., description="Violation kind")
    section: Optional[Section] = Field(None, description="Branch or sibling pair the violation refers to")
    message_key: str = Field(..., description="Key into the message catalog")
    anchor_span: Optional[SourceSpan] = Field(None, description="Node or comment the violation is reported at")
    data: Dict[str, Any] = Field(default_factory=dict, description="Values for message interpolation")

    @property
    def rule_key(self) -> str:
        """Kind including its bracketed section, e.g. 'missing-section-comment[then]'."""
        if self.section is None:
            return self.kind.value
        return f"{self.kind.value}[{self.section.value}]"

    @property
    def line(self) -> Optional[int]:
        if self.anchor_span is None:
            return None
        return self.anchor_span.start.line
