"""Data models for the comment coverage engine."""

from .policy import FULL_ONLY, ChainHeadMode, Policy, SectionLocation
from .report import Diagnostic, FileReport, Severity
from .syntax import (
    TARGET_KINDS,
    CodeToken,
    CommentKind,
    CommentToken,
    NodeKind,
    SourceFile,
    SourcePosition,
    SourceSpan,
    SyntaxNode,
)
from .violation import Section, Violation, ViolationKind

__all__ = [
    # Syntax models
    "NodeKind",
    "TARGET_KINDS",
    "SourcePosition",
    "SourceSpan",
    "SyntaxNode",
    "CommentKind",
    "CommentToken",
    "CodeToken",
    "SourceFile",
    # Policy models
    "Policy",
    "SectionLocation",
    "ChainHeadMode",
    "FULL_ONLY",
    # Violation models
    "ViolationKind",
    "Section",
    "Violation",
    # Report models
    "Severity",
    "Diagnostic",
    "FileReport",
]
