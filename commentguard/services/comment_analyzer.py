"""
Comment coverage analysis service.

``CommentCoverageEngine`` runs the synchronous per-file pipeline: every
targeted construct is visited once in document order, checked for comment
coverage, compared against its sibling comments, and the resulting
violations are passed through a per-file ``ReportDeduplicator``.

``CommentCoverageAnalyzer`` is the host-facing service: it selects a language
plugin for a file, parses it and turns the engine output into a
``FileReport``.
"""

import time
from typing import Callable, Dict, List, Optional

from commentguard.analyzers.branch_classifier import BranchClassifier
from commentguard.analyzers.consecutive_comments import ConsecutiveCommentChecker
from commentguard.analyzers.coverage_checker import CoverageChecker
from commentguard.analyzers.pattern_validator import PatternValidator
from commentguard.analyzers.position_resolver import PositionResolver
from commentguard.analyzers.similarity_checker import SimilarityChecker
from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import Policy
from commentguard.models.report import Diagnostic, FileReport
from commentguard.models.syntax import NodeKind, SourceFile, SyntaxNode
from commentguard.models.violation import Violation
from commentguard.services.messages import to_diagnostic
from commentguard.services.policy_loader import build_policy
from commentguard.services.report_deduplicator import CollectingSink, ReportDeduplicator, ReportSink
from commentguard.utils.logging import (
    get_logger,
    log_error_with_context,
    log_file_analysis,
    log_phase_transition,
)
from plugins.manager import PluginManager

logger = get_logger(__name__)


class FileRun:
    """
    State of one file's analysis.

    Owns the source index, the checkers and the deduplicator; nothing here is
    shared between files.
    """

    def __init__(self, source: SourceFile, policy: Policy, sink: ReportSink):
        self.source = source
        self.policy = policy
        self.index = SourceIndex(source)
        self.resolver = PositionResolver(self.index)
        self.classifier = BranchClassifier(self.index, policy)
        self.validator = PatternValidator(self.index, policy)
        self.coverage = CoverageChecker(
            self.index, self.resolver, self.classifier, self.validator, policy
        )
        self.similarity = SimilarityChecker(self.index, self.resolver, policy)
        self.deduplicator = ReportDeduplicator(sink)
        self._visitors: Dict[NodeKind, Callable[[SyntaxNode], None]] = {
            NodeKind.CONDITIONAL: self.visit_conditional,
            NodeKind.FOR_LOOP: self.visit_construct,
            NodeKind.WHILE_LOOP: self.visit_construct,
            NodeKind.DO_WHILE_LOOP: self.visit_construct,
            NodeKind.SWITCH: self.visit_construct,
            NodeKind.TRY_BLOCK: self.visit_construct,
            NodeKind.TERNARY: self.visit_construct,
        }

    def run(self) -> None:
        targets = [kind for kind in self._visitors if self.policy.targets_kind(kind)]
        for node in self.index.iter_kinds(targets):
            self._visitors[node.kind](node)

        if self.policy.check_consecutive_comments:
            self.deduplicator.report_all(ConsecutiveCommentChecker(self.index, self.policy).check())

    def visit_conditional(self, node: SyntaxNode) -> None:
        # Inner links are checked from the head of their chain
        if self.classifier.is_inner_chained_branch(node):
            return
        for link in self.classifier.chain(node):
            self.visit_construct(link)

    def visit_construct(self, node: SyntaxNode) -> None:
        outcome = self.coverage.evaluate(node)
        self.deduplicator.report_all(outcome.violations)

        # Sibling comments are only compared once the keyword comment exists
        if outcome.preceding is None:
            return
        if node.kind in (NodeKind.CONDITIONAL, NodeKind.TRY_BLOCK):
            self.deduplicator.report_all(self.similarity.check_similarity(node, outcome.preceding.text))


class CommentCoverageEngine:
    """Runs the comment coverage checks over parsed source files."""

    def __init__(self, policy: Optional[Policy] = None):
        self.policy = policy if policy is not None else Policy()

    def run(self, source: SourceFile) -> List[Violation]:
        """
        Check one file.

        Args:
            source: Parsed file from a language plugin

        Returns:
            Deduplicated violations in emission order
        """
        sink = CollectingSink()
        self.report(source, sink)
        logger.debug(f"Collected {len(sink.violations)} violations for {source.file_path}")
        return sink.violations

    def report(self, source: SourceFile, sink: ReportSink) -> None:
        """Check one file, sending deduplicated violations to ``sink``."""
        FileRun(source, self.policy, sink).run()

    def analyze(self, source: SourceFile) -> List[Diagnostic]:
        """Check one file and render the violations as diagnostics."""
        index = SourceIndex(source)
        return [
            to_diagnostic(v, source.file_path, preview=index.line_preview(v.line))
            for v in self.run(source)
        ]


class CommentCoverageAnalyzer:
    """
    Comment coverage analyzer for source files.

    Uses language plugins to parse files, then runs the comment coverage
    engine over the result.
    """

    def __init__(self, plugin_manager: PluginManager, policy: Optional[Policy] = None):
        """
        Initialize the analyzer.

        Args:
            plugin_manager: PluginManager instance for language-specific parsing
            policy: Policy to enforce (built from settings if not provided)
        """
        self.plugin_manager = plugin_manager
        self.policy = policy if policy is not None else build_policy()
        self.engine = CommentCoverageEngine(self.policy)

    async def analyze_file(self, file_path: str, content: str) -> FileReport:
        """
        Analyze a single file.

        Args:
            file_path: Path of the file (selects the plugin)
            content: File content

        Returns:
            FileReport with the diagnostics; empty if no plugin handles the
            file or it cannot be parsed
        """
        plugin = self.plugin_manager.get_plugin_for_file(file_path)
        if not plugin:
            logger.warning(f"No plugin found for {file_path}, skipping")
            return FileReport(file_path=file_path)

        log_phase_transition(logger, file_path, "parse", "started")
        try:
            source = await plugin.parse_file(file_path, content)
        except Exception as e:
            log_error_with_context(
                logger,
                f"Failed to parse {file_path}: {e}",
                e,
                file_path=file_path,
                language=plugin.language_name,
            )
            return FileReport(file_path=file_path, language=plugin.language_name)
        log_phase_transition(logger, file_path, "parse", "completed")

        return self.analyze_source(source)

    def analyze_source(self, source: SourceFile) -> FileReport:
        """Run the engine over an already parsed file."""
        log_phase_transition(logger, source.file_path, "check", "started")
        started = time.perf_counter()

        diagnostics = self.engine.analyze(source)

        duration_ms = (time.perf_counter() - started) * 1000
        log_phase_transition(logger, source.file_path, "check", "completed")
        log_file_analysis(logger, source.file_path, source.language, len(diagnostics), duration_ms)

        return FileReport(
            file_path=source.file_path,
            language=source.language,
            diagnostics=diagnostics,
        )
