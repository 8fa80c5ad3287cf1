"""
Comment classification predicates.

Directive comments instruct a tool (lint suppression, coverage ignore,
type-checker suppression) and never count as explanatory comments.
All predicates are pure functions of the comment text.
"""

import re
from typing import Optional

from commentguard.models.syntax import CommentKind, CommentToken

_DIRECTIVE_RE = re.compile(
    r"^(?:"
    r"eslint(?:[-\s]|$)"
    r"|istanbul\b"
    r"|c8\s+ignore\b"
    r"|v8\s+ignore\b"
    r"|@?ts-(?:check|nocheck|ignore|expect-error)\b"
    r"|prettier-ignore\b"
    r")",
    re.IGNORECASE,
)

_KEEP_TAG_RE = re.compile(r"\b(?:nofix|lint-keep|keep)\b", re.IGNORECASE)


def is_directive_text(text: Optional[str]) -> bool:
    """Return True if the comment text is a tool directive."""
    if not text:
        return False
    return bool(_DIRECTIVE_RE.match(text.strip()))


def is_directive(comment: CommentToken) -> bool:
    return is_directive_text(comment.text)


def is_doc_block(comment: CommentToken) -> bool:
    """Return True for ``/** ... */`` style comments."""
    return comment.kind == CommentKind.BLOCK and comment.text.startswith("*")


def has_keep_tag(comment: CommentToken) -> bool:
    """Return True if the comment asks to be kept (keep / nofix / lint-keep)."""
    return bool(_KEEP_TAG_RE.search(comment.text))


def is_meaningful(comment: CommentToken) -> bool:
    """A located, non-directive comment."""
    return comment.span is not None and not is_directive(comment)
