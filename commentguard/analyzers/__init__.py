"""Comment coverage analyzers package."""

from commentguard.analyzers.branch_classifier import BranchClassifier, ConditionalPlan, IfClassification
from commentguard.analyzers.comment_classifier import has_keep_tag, is_directive, is_doc_block
from commentguard.analyzers.consecutive_comments import ConsecutiveCommentChecker
from commentguard.analyzers.coverage_checker import CoverageChecker, CoverageOutcome
from commentguard.analyzers.pattern_validator import PatternValidator, matches
from commentguard.analyzers.position_resolver import PositionResolver, SectionLookup
from commentguard.analyzers.similarity import levenshtein_distance, normalize_strict, similarity
from commentguard.analyzers.similarity_checker import SimilarityChecker
from commentguard.analyzers.source_index import SourceIndex

__all__ = [
    "BranchClassifier",
    "ConditionalPlan",
    "IfClassification",
    "is_directive",
    "is_doc_block",
    "has_keep_tag",
    "ConsecutiveCommentChecker",
    "CoverageChecker",
    "CoverageOutcome",
    "PatternValidator",
    "matches",
    "PositionResolver",
    "SectionLookup",
    "levenshtein_distance",
    "normalize_strict",
    "similarity",
    "SimilarityChecker",
    "SourceIndex",
]
