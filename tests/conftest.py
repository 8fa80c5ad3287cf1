"""Shared fixtures for the commentguard test suite."""

from textwrap import dedent
from typing import Callable, List, Optional

import pytest

from commentguard.models.policy import Policy
from commentguard.models.syntax import SourceFile
from commentguard.models.violation import Violation
from commentguard.services.comment_analyzer import CommentCoverageEngine, FileRun
from commentguard.services.report_deduplicator import CollectingSink
from plugins.typescript import TypeScriptPlugin


@pytest.fixture(scope="session")
def ts_plugin() -> TypeScriptPlugin:
    """TypeScript plugin shared by all tests (parsers are cached per grammar)."""
    return TypeScriptPlugin()


@pytest.fixture
def parse(ts_plugin) -> Callable[..., SourceFile]:
    """Parse a dedented TypeScript snippet into a SourceFile."""
    def _parse(code: str, file_path: str = "sample.ts") -> SourceFile:
        return ts_plugin.parse_source(file_path, dedent(code).lstrip("\n"))
    return _parse


@pytest.fixture
def file_run(parse) -> Callable[..., FileRun]:
    """Build the wired per-file components for a snippet."""
    def _file_run(code: str, policy: Optional[Policy] = None) -> FileRun:
        return FileRun(parse(code), policy or Policy(), CollectingSink())
    return _file_run


@pytest.fixture
def run_engine(parse) -> Callable[..., List[Violation]]:
    """Run the full engine over a snippet and return its violations."""
    def _run(code: str, policy: Optional[Policy] = None) -> List[Violation]:
        return CommentCoverageEngine(policy or Policy()).run(parse(code))
    return _run

