"""
Report aggregation for codebase_audit.

Turns the per-file results of a run into the summary counters, per-language
statistics and recommendation lists of the two reports. Nothing here reads
the file system; recommendations are a pure function of the aggregated data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from codebase_audit.languages import Language
from codebase_audit.models import DuplicateKind, LanguageStats
from codebase_audit.utils import percentage

if TYPE_CHECKING:
    from typing import Any, Sequence

    from codebase_audit.config import AnalysisConfig
    from codebase_audit.models import DuplicateGroup, FileMetrics, FileRecord


# =============================================================================
# Duplicates
# =============================================================================


def summarize_duplicates(
    total_files: int,
    records: Sequence[FileRecord],
    groups: Sequence[DuplicateGroup],
) -> dict[str, Any]:
    """
    Build the duplicate report summary.

    The percentage is taken over the lines of analyzed files only and can
    exceed 100 when locations overlap between groups.

    Args:
        total_files: Files discovered by the walk.
        records: Files actually analyzed.
        groups: Exact and similar groups, in report order.

    Returns:
        Summary dictionary.
    """
    duplicate_lines = sum(group.duplicate_lines for group in groups)
    total_lines = sum(record.lines for record in records)
    affected = {member.path for group in groups for member in group.members}

    return {
        "totalFiles": total_files,
        "analyzedFiles": len(records),
        "duplicateBlocks": len(groups),
        "duplicateLines": duplicate_lines,
        "duplicatePercentage": percentage(duplicate_lines, total_lines),
        "affectedFiles": len(affected),
    }


def duplicate_recommendations(
    exact: Sequence[DuplicateGroup],
    similar: Sequence[DuplicateGroup],
    summary: dict[str, Any],
) -> list[str]:
    """Recommendations for a duplicate report: exact, similar, rate, general."""
    recommendations = []

    exact_files = sum(1 for group in exact if group.kind is DuplicateKind.EXACT_FILE)
    exact_blocks = len(exact) - exact_files
    if exact_files:
        recommendations.append(
            f"{exact_files} exact duplicate files found - consider removing or consolidating"
        )
    if exact_blocks:
        recommendations.append(
            f"{exact_blocks} exact duplicate code blocks found - extract into shared functions"
        )

    similar_files = sum(1 for group in similar if group.kind is DuplicateKind.SIMILAR_FILE)
    similar_blocks = len(similar) - similar_files
    if similar_files:
        recommendations.append(
            f"{similar_files} similar files found - review for potential consolidation"
        )
    if similar_blocks:
        recommendations.append(
            f"{similar_blocks} similar code blocks found - consider refactoring into shared utilities"
        )

    rate = summary["duplicatePercentage"]
    if rate > 20:
        recommendations.append(f"High duplication rate ({rate}%) - significant refactoring opportunity")
    elif rate > 10:
        recommendations.append(f"Moderate duplication rate ({rate}%) - consider refactoring")
    elif rate > 0:
        recommendations.append(f"Low duplication rate ({rate}%) - good code reuse practices")
    else:
        recommendations.append("No significant code duplication detected - excellent code organization")

    if exact or similar:
        recommendations.extend([
            "Consider extracting common code into shared modules or libraries",
            "Implement code review processes to catch duplication early",
            "Use automated tools to monitor code duplication in CI/CD pipeline",
        ])

    recommendations.append("Regular duplicate code analysis helps maintain code quality")
    recommendations.append("Aim for DRY (Don't Repeat Yourself) principles in code design")
    return recommendations


# =============================================================================
# Metrics
# =============================================================================


def is_large(metrics: FileMetrics, config: AnalysisConfig) -> bool:
    return metrics.lines > config.large_file_lines or metrics.size_kb > config.large_file_size_kb


def is_very_large(metrics: FileMetrics, config: AnalysisConfig) -> bool:
    return metrics.lines > config.very_large_file_lines or metrics.size_kb > config.very_large_file_size_kb


def large_file_reason(metrics: FileMetrics, config: AnalysisConfig) -> str:
    """
    Explain why a file is flagged as large.

    Line and size reasons are reported independently, each at the highest
    band the file reaches.
    """
    reasons = []

    if metrics.lines > config.very_large_file_lines:
        reasons.append(f"Very large file ({metrics.lines} lines > {config.very_large_file_lines})")
    elif metrics.lines > config.large_file_lines:
        reasons.append(f"Large file ({metrics.lines} lines > {config.large_file_lines})")

    if metrics.size_kb > config.very_large_file_size_kb:
        reasons.append(f"Very large size ({metrics.size_kb}KB > {config.very_large_file_size_kb}KB)")
    elif metrics.size_kb > config.large_file_size_kb:
        reasons.append(f"Large size ({metrics.size_kb}KB > {config.large_file_size_kb}KB)")

    return ", ".join(reasons)


class MetricsAggregator:
    """
    Accumulates per-file metrics into the metrics report sections.

    Files must be added in discovery order; the per-language running
    averages depend on it only through floating point rounding.
    """

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.files: list[FileMetrics] = []
        self.languages: dict[str, LanguageStats] = {}
        self.large_files: list[dict[str, Any]] = []
        self.summary: dict[str, Any] = {
            "totalFiles": 0,
            "totalLines": 0,
            "totalCodeLines": 0,
            "totalCommentLines": 0,
            "totalBlankLines": 0,
            "totalSizeBytes": 0,
            "largeFiles": 0,
            "veryLargeFiles": 0,
        }

    def add(self, metrics: FileMetrics) -> None:
        """Fold one file into every section."""
        self.files.append(metrics)

        summary = self.summary
        summary["totalFiles"] += 1
        summary["totalLines"] += metrics.lines
        summary["totalCodeLines"] += metrics.code_lines
        summary["totalCommentLines"] += metrics.comment_lines
        summary["totalBlankLines"] += metrics.blank_lines
        summary["totalSizeBytes"] += metrics.size_bytes

        self.languages.setdefault(metrics.language.value, LanguageStats()).add(metrics)

        if is_large(metrics, self.config):
            summary["largeFiles"] += 1
            self.large_files.append({
                "path": metrics.relative_path,
                "lines": metrics.lines,
                "sizeKB": metrics.size_kb,
                "language": metrics.language.value,
                "reason": large_file_reason(metrics, self.config),
            })
        if is_very_large(metrics, self.config):
            summary["veryLargeFiles"] += 1

    def complexity(self) -> dict[str, Any]:
        """
        Build the complexity section.

        The average is total complexity over total functions, not over
        files, and 0 when no functions were found.
        """
        total_complexity = 0
        total_functions = 0
        high: list[dict[str, Any]] = []

        for metrics in self.files:
            total_complexity += metrics.complexity
            total_functions += metrics.functions
            if metrics.complexity > self.config.high_complexity:
                high.append({
                    "path": metrics.relative_path,
                    "complexity": metrics.complexity,
                    "functions": metrics.functions,
                    "language": metrics.language.value,
                    "severity": "very-high" if metrics.complexity > self.config.very_high_complexity else "high",
                })

        average = round(total_complexity / total_functions, 2) if total_functions else 0
        return {
            "averageComplexity": average,
            "highComplexityFiles": high,
            "totalFunctions": total_functions,
        }

    def languages_dict(self) -> dict[str, Any]:
        return {name: stats.to_dict() for name, stats in self.languages.items()}

    def files_count(self, *languages: Language) -> int:
        return sum(self.languages[lang.value].files for lang in languages if lang.value in self.languages)


CODE_LANGUAGES = (Language.JAVASCRIPT, Language.TYPESCRIPT, Language.PYTHON, Language.JAVA)
CONFIG_LANGUAGES = (Language.JSON, Language.YAML, Language.CONFIG)


def metrics_recommendations(
    aggregator: MetricsAggregator,
    complexity: dict[str, Any],
) -> list[str]:
    """
    Recommendations for a metrics report.

    Args:
        aggregator: Aggregated per-file metrics.
        complexity: Complexity section built by the aggregator.

    Returns:
        Recommendation strings in a fixed category order.
    """
    config = aggregator.config
    summary = aggregator.summary
    recommendations = []

    if summary["veryLargeFiles"]:
        recommendations.append(
            f"{summary['veryLargeFiles']} very large files found - "
            "consider breaking them down into smaller, focused modules"
        )
    if summary["largeFiles"]:
        recommendations.append(f"{summary['largeFiles']} large files found - review for refactoring opportunities")

    high = complexity["highComplexityFiles"]
    if high:
        very_high = sum(1 for entry in high if entry["severity"] == "very-high")
        if very_high:
            recommendations.append(
                f"{very_high} files with very high complexity (>{config.very_high_complexity}) - "
                "immediate refactoring needed"
            )
        recommendations.append(
            f"{len(high)} files with high complexity (>{config.high_complexity}) - consider simplification"
        )
    else:
        recommendations.append("Excellent complexity metrics - all files below complexity threshold")

    if len(aggregator.languages) > 8:
        recommendations.append(
            f"{len(aggregator.languages)} different languages detected - consider standardization for maintainability"
        )

    web = [
        aggregator.languages[lang.value].average_complexity
        for lang in (Language.JAVASCRIPT, Language.TYPESCRIPT)
        if lang.value in aggregator.languages
    ]
    if web:
        web_complexity = sum(web) / len(web)
        if web_complexity > 5:
            recommendations.append(
                f"JavaScript/TypeScript average complexity is {web_complexity:.1f} - "
                "consider using more functional programming patterns"
            )

    total_lines = summary["totalLines"]
    comment_ratio = summary["totalCommentLines"] / total_lines if total_lines else 0
    comment_percent = round(comment_ratio * 100)
    if comment_ratio < 0.05:
        recommendations.append(
            f"Very low comment ratio ({comment_percent}%) - add JSDoc/docstrings for better maintainability"
        )
    elif comment_ratio < 0.15:
        recommendations.append(f"Low comment ratio ({comment_percent}%) - consider adding more documentation")
    else:
        recommendations.append(f"Good documentation ratio ({comment_percent}%)")

    density = complexity["totalFunctions"] / total_lines * 1000 if total_lines else 0
    if density < 5:
        recommendations.append(
            f"Low function density ({density:.1f} functions per 1000 lines) - consider breaking down large functions"
        )

    code_files = aggregator.files_count(*CODE_LANGUAGES)
    config_files = aggregator.files_count(*CONFIG_LANGUAGES)
    if config_files > code_files:
        recommendations.append(
            f"More configuration files ({config_files}) than code files ({code_files}) - "
            "review if all configs are necessary"
        )

    if summary["totalFiles"]:
        average_kb = summary["totalSizeBytes"] / summary["totalFiles"] / 1024
        if average_kb > 50:
            recommendations.append(f"Average file size is {average_kb:.1f}KB - consider optimizing large files")

    if aggregator.files_count(Language.SHELL):
        recommendations.append("Shell scripts detected - ensure proper input validation and security practices")

    recommendations.append("Regular code metrics monitoring helps maintain code quality")
    recommendations.append("Consider setting up automated code quality gates in CI/CD")
    recommendations.append("Track metrics over time to identify trends and improvements")
    recommendations.append("Implement unit tests for high-complexity functions")
    recommendations.append("Consider code reviews for files with complexity > 15")
    return recommendations
