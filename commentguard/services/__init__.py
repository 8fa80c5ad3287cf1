"""Comment coverage services package."""

from commentguard.services.comment_analyzer import (
    CommentCoverageAnalyzer,
    CommentCoverageEngine,
    FileRun,
)
from commentguard.services.messages import MESSAGES, render_message, to_diagnostic
from commentguard.services.policy_loader import build_policy, load_policy
from commentguard.services.report_deduplicator import (
    CollectingSink,
    HostReportSink,
    ReportDeduplicator,
    ReportSink,
    location_key,
)

__all__ = [
    'CommentCoverageAnalyzer',
    'CommentCoverageEngine',
    'FileRun',
    'MESSAGES',
    'render_message',
    'to_diagnostic',
    'build_policy',
    'load_policy',
    'CollectingSink',
    'HostReportSink',
    'ReportDeduplicator',
    'ReportSink',
    'location_key',
]
