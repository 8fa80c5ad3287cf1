"""Comment coverage policy model."""

import re
from enum import Enum
from functools import lru_cache
from typing import Literal, Optional, Pattern, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commentguard.models.syntax import TARGET_KINDS, NodeKind


class SectionLocation(str, Enum):
    """Positions where a branch (section) comment may be placed."""

    BEFORE_KEYWORD = "before-keyword"
    BLOCK_HEAD = "block-head"
    TRAILING = "trailing"


class ChainHeadMode(str, Enum):
    """How the head of an ``else if`` chain is treated."""

    NON_DANGLING = "non-dangling"
    DANGLING = "dangling"


FULL_ONLY = "fullOnly"


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


class Policy(BaseModel):
    """Options governing which comments are required and how they are judged."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    targets: Set[NodeKind] = Field(
        default_factory=lambda: set(TARGET_KINDS),
        description="Node kinds that require a comment",
    )
    allow_blank_line_before_keyword: bool = Field(
        False, description="Tolerate blank lines between a comment and its keyword"
    )
    ignore_else_if_chained_branch: bool = Field(
        True, description="Exempt inner 'else if' links from the preceding-keyword comment"
    )
    ignore_catch_finally: bool = Field(
        True, description="Only require the 'try' keyword comment for try statements"
    )
    treat_chain_head_as: ChainHeadMode = Field(
        ChainHeadMode.NON_DANGLING, description="Treatment of the first 'if' of an else-if chain"
    )
    required_text_pattern: Optional[str] = Field(
        None, description="Regular expression every accepted comment must match"
    )
    similarity_threshold: float = Field(
        0.75, ge=0.25, le=1.0, description="Similarity at or above which sibling comments are duplicates"
    )
    require_section_comments: Union[bool, Literal["fullOnly"]] = Field(
        False, description="Require branch comments: always, never, or only for if/else pairs"
    )
    section_comment_locations: Set[SectionLocation] = Field(
        default_factory=lambda: set(SectionLocation),
        description="Positions accepted for branch comments",
    )
    require_case_comments: bool = Field(
        True, description="Require a comment above each case label of multi-case switches"
    )
    allow_section_as_previous: bool = Field(
        False, description="Accept a then/body comment in place of the keyword comment"
    )
    allow_prep_statements: bool = Field(
        False, description="Allow declarations/assignments between the comment and its keyword"
    )
    report_removable: bool = Field(
        False, description="Report comments placed where none is required"
    )
    check_consecutive_comments: bool = Field(
        False, description="Flag consecutive line comments that repeat each other"
    )

    @field_validator("required_text_pattern")
    @classmethod
    def _validate_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                compile_pattern(value)
            except re.error as e:
                raise ValueError(f"Invalid required_text_pattern '{value}': {e}")
        return value

    @property
    def text_regex(self) -> Optional[Pattern[str]]:
        """Compiled required pattern, or None when any text is accepted."""
        if not self.required_text_pattern:
            return None
        return compile_pattern(self.required_text_pattern)

    def targets_kind(self, kind: NodeKind) -> bool:
        return kind in self.targets
