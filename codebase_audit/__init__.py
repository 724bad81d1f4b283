"""
Codebase Audit - Duplicate code detection and code metrics for source trees.

Finds exact and near-duplicate files and code blocks, and measures size,
comment density, structure and complexity per file and per language.
"""

__version__ = "1.0.0"

from codebase_audit.config import AnalysisConfig, DEFAULT_CONFIG
from codebase_audit.scanner import DuplicateScanner, MetricsScanner, analyze_metrics, find_duplicates

__all__ = [
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    "DuplicateScanner",
    "MetricsScanner",
    "analyze_metrics",
    "find_duplicates",
    "__version__",
]
