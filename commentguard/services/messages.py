"""
Message catalog for comment coverage diagnostics.

Templates are plain ``str.format`` strings keyed by message key. Missing
placeholders render as empty text, unknown keys fall back to the key itself.
"""

import string
from typing import Any, Dict, Mapping, Optional

from commentguard.models.report import Diagnostic, Severity
from commentguard.models.violation import Violation, ViolationKind

MESSAGES: Dict[str, str] = {
    "missing_comment": "Add a comment directly above '{kw}' explaining its intent. ({preview})",
    "need_before_if": "Add a comment directly above this 'if' explaining the condition. ({preview})",
    "need_before_switch": "Add a comment directly above 'switch' explaining what is dispatched. ({preview})",
    "need_ternary_comment": "Explain this conditional expression with a comment above or after it. ({preview})",
    "need_then_block_head": "Add a comment at the head of the then block explaining this branch. ({preview})",
    "need_then_trailing": "Add a trailing comment to the then statement explaining this branch. ({preview})",
    "need_else_block_head": "Add a comment at the head of the else block explaining this branch. ({preview})",
    "need_else_trailing": "Add a trailing comment to the else statement explaining this branch. ({preview})",
    "need_catch_block_head": "Add a comment at the head of the catch block explaining the handling. ({preview})",
    "need_finally_block_head": "Add a comment at the head of the finally block explaining the cleanup. ({preview})",
    "need_case_head": "Add a comment directly above this case label. ({preview})",
    "tag_mismatch": "Comment for '{kw}' does not match the required pattern {pattern}: \"{text}\"",
    "similar_if_then": (
        "The then-branch comment repeats the 'if' comment (similarity {similarity} >= {threshold}). "
        "Describe what the branch does."
    ),
    "similar_if_else": (
        "The else-branch comment repeats a sibling comment (similarity {similarity} >= {threshold}). "
        "Describe what the branch does."
    ),
    "similar_try_catch": (
        "The catch comment repeats the 'try' comment (similarity {similarity} >= {threshold}). "
        "Describe the failure handling."
    ),
    "similar_try_finally": (
        "The finally comment repeats the 'try' comment (similarity {similarity} >= {threshold}). "
        "Describe the cleanup."
    ),
    "consecutive_similar": "Consecutive comments are nearly identical; merge them or make them distinct.",
    "removable_before_keyword": "This comment above '{kw}' is not required and can be removed: \"{text}\"",
    "removable_trailing": "This trailing comment duplicates the comment above and can be removed: \"{text}\"",
    "multi_issue_hint_line": "Line {line} has several comment issues; fix them together.",
}

_SEVERITIES: Dict[ViolationKind, Severity] = {
    ViolationKind.MULTI_ISSUE_HINT: Severity.INFO,
    ViolationKind.REMOVABLE_COMMENT: Severity.INFO,
    ViolationKind.SIMILAR_CONSECUTIVE_COMMENTS: Severity.WARNING,
}


class _Defaults(dict):
    def __missing__(self, key: str) -> str:
        return ""


_formatter = string.Formatter()


def render_message(message_key: str, data: Mapping[str, Any], catalog: Optional[Mapping[str, str]] = None) -> str:
    """Render a message template with violation data."""
    template = (catalog or MESSAGES).get(message_key)
    if template is None:
        return message_key
    return _formatter.vformat(template, (), _Defaults(data))


def severity_for(violation: Violation) -> Severity:
    return _SEVERITIES.get(violation.kind, Severity.ERROR)


def to_diagnostic(
    violation: Violation,
    file_path: str,
    preview: str = "",
    catalog: Optional[Mapping[str, str]] = None,
) -> Diagnostic:
    """Convert a violation into a user-facing diagnostic."""
    span = violation.anchor_span
    return Diagnostic(
        file_path=file_path,
        line=span.start.line if span else None,
        column=span.start.column if span else None,
        end_line=span.end.line if span else None,
        end_column=span.end.column if span else None,
        severity=severity_for(violation),
        rule_key=violation.rule_key,
        message_key=violation.message_key,
        message=render_message(violation.message_key, violation.data, catalog),
        preview=preview,
        data=dict(violation.data),
    )
