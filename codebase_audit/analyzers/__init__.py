"""
Analysis stages for codebase_audit.
"""

from codebase_audit.analyzers.blocks import extract_blocks
from codebase_audit.analyzers.complexity import ComplexityAnalyzer, classify_lines
from codebase_audit.analyzers.exact import find_exact_block_duplicates, find_exact_file_duplicates
from codebase_audit.analyzers.normalizer import content_hash, normalize_content
from codebase_audit.analyzers.report import (
    MetricsAggregator,
    duplicate_recommendations,
    large_file_reason,
    metrics_recommendations,
    summarize_duplicates,
)
from codebase_audit.analyzers.similarity import SimilarityDetector, jaccard
from codebase_audit.analyzers.tokenizer import tokenize

__all__ = [
    "ComplexityAnalyzer",
    "MetricsAggregator",
    "SimilarityDetector",
    "classify_lines",
    "content_hash",
    "duplicate_recommendations",
    "extract_blocks",
    "find_exact_block_duplicates",
    "find_exact_file_duplicates",
    "jaccard",
    "large_file_reason",
    "metrics_recommendations",
    "normalize_content",
    "summarize_duplicates",
    "tokenize",
]
