"""
Report Deduplicator.

Wraps a report sink for the duration of one file's analysis so that:

- a (kind, location) pair reaches the sink at most once
- the first time a line collects a second distinct kind, a single
  multi-issue hint is emitted for that line
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Set, Tuple

from commentguard.models.syntax import SourceSpan
from commentguard.models.violation import Violation, ViolationKind

logger = logging.getLogger(__name__)

MISSING_COORDINATE = -1


class ReportSink(Protocol):
    """Receiver of emitted violations."""

    def report(self, violation: Violation) -> None:
        ...


class CollectingSink:
    """Sink that keeps violations in emission order."""

    def __init__(self):
        self.violations: List[Violation] = []

    def report(self, violation: Violation) -> None:
        self.violations.append(violation)


HostReport = Callable[[Optional[SourceSpan], str, str, Mapping[str, Any]], None]


class HostReportSink:
    """
    Sink forwarding each violation to a host callback.

    The callback receives ``(location, violation_kind, message_key, data)``
    where ``violation_kind`` is the rule key, e.g. ``missing-section-comment[then]``.
    """

    def __init__(self, report: HostReport):
        self._report = report

    def report(self, violation: Violation) -> None:
        self._report(violation.anchor_span, violation.rule_key, violation.message_key, dict(violation.data))


def location_key(span: Optional[SourceSpan]) -> str:
    """Stable key ``"sl:sc-el:ec"``; unknown coordinates become -1."""
    if span is None:
        sl = sc = el = ec = MISSING_COORDINATE
    else:
        sl, sc = span.start.line, span.start.column
        el, ec = span.end.line, span.end.column
    return f"{sl}:{sc}-{el}:{ec}"


class ReportDeduplicator:
    """Per-file deduplicating wrapper around a report sink."""

    def __init__(self, sink: ReportSink):
        """
        Initialize the deduplicator.

        Args:
            sink: Underlying receiver of violations
        """
        self._sink = sink
        self._seen: Set[Tuple[str, str]] = set()
        self._kinds_by_line: Dict[int, Set[str]] = {}
        self._hinted_lines: Set[int] = set()

    def report(self, violation: Violation) -> bool:
        """
        Forward a violation unless it was already reported.

        Args:
            violation: Violation to report

        Returns:
            True if the violation reached the sink, False if it was dropped
        """
        key = (violation.rule_key, location_key(violation.anchor_span))
        if key in self._seen:
            logger.debug(f"Dropping duplicate {key[0]} at {key[1]}")
            return False
        self._seen.add(key)
        self._sink.report(violation)

        line = violation.line
        if line is not None and violation.kind != ViolationKind.MULTI_ISSUE_HINT:
            self._track_line(line, violation)
        return True

    def report_all(self, violations: List[Violation]) -> int:
        return sum(1 for v in violations if self.report(v))

    def _track_line(self, line: int, violation: Violation) -> None:
        kinds = self._kinds_by_line.setdefault(line, set())
        kinds.add(violation.rule_key)
        if len(kinds) < 2 or line in self._hinted_lines:
            return

        self._hinted_lines.add(line)
        self._sink.report(Violation(
            kind=ViolationKind.MULTI_ISSUE_HINT,
            message_key="multi_issue_hint_line",
            anchor_span=violation.anchor_span,
            data={"line": line, "kinds": sorted(kinds)},
        ))
