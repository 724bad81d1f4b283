"""
Main scanner orchestrator for codebase_audit.

Coordinates the walker, the per-file analyzers and the report aggregation to
produce the duplicate and metrics reports. Reports are plain dictionaries; a
run never raises, failures come back as ``{"success": False, ...}``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING

from codebase_audit.analyzers import (
    ComplexityAnalyzer,
    MetricsAggregator,
    SimilarityDetector,
    content_hash,
    duplicate_recommendations,
    extract_blocks,
    find_exact_block_duplicates,
    find_exact_file_duplicates,
    metrics_recommendations,
    summarize_duplicates,
    tokenize,
)
from codebase_audit.config import AnalysisConfig
from codebase_audit.errors import AuditError, FileReadError, FileStatError
from codebase_audit.languages import DUPLICATE_LANGUAGES, METRICS_LANGUAGES
from codebase_audit.models import AnalysisSession, FileRecord
from codebase_audit.utils import (
    read_source,
    relative_path,
    resolve_workspace,
    split_lines,
    stat_file,
    walk_files,
)

if TYPE_CHECKING:
    import threading
    from pathlib import Path
    from typing import Any, Callable, Mapping, TypeVar

    T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseScanner:
    """Shared run loop: workspace checks, the per-file pool and failure handling."""

    def __init__(
        self,
        config: AnalysisConfig,
        cancel_event: threading.Event | None = None,
        log: logging.Logger | None = None,
    ):
        """
        Initialize the scanner.

        Args:
            config: Settings for this run.
            cancel_event: Set from another thread to stop pair comparisons.
            log: Logger to use instead of the module logger.
        """
        self.config = config
        self.cancel_event = cancel_event
        self.log = log or logger

    def run(self) -> dict[str, Any]:
        """
        Run the analysis.

        Returns:
            The report dictionary, or the failure shape on a fatal error.
        """
        try:
            root = resolve_workspace(self.config.workspace)
            session = AnalysisSession(config=self.config, root=root)
            if self.cancel_event is not None:
                session.cancel_event = self.cancel_event
            return self._run(session)
        except AuditError as e:
            self.log.error("%s", e)
            return self.failure(self.config.workspace, str(e))
        except Exception as e:
            self.log.exception("Analysis of %s failed", self.config.workspace)
            return self.failure(self.config.workspace, str(e))

    def _run(self, session: AnalysisSession) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def failure(workspace: Path | str, error: str) -> dict[str, Any]:
        raise NotImplementedError

    def _map_files(
        self,
        session: AnalysisSession,
        paths: list[Path],
        analyze: Callable[[Path], T | None],
    ) -> list[T]:
        """
        Analyze files on the worker pool.

        Files that can't be stat'ed or read are logged, recorded in
        `session.skipped` and dropped. Files for which `analyze` returns None
        are dropped too.

        Returns:
            Results in the order of `paths`.
        """
        results: dict[int, T] = {}

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(analyze, path): index for index, path in enumerate(paths)}
            for future in as_completed(futures):
                index = futures[future]
                try:
                    result = future.result()
                except (FileReadError, FileStatError) as e:
                    self.log.warning("Skipping file: %s", e)
                    session.skipped.append(relative_path(e.path, session.root))
                    continue
                if result is not None:
                    results[index] = result

        session.skipped.sort()
        return [results[index] for index in sorted(results)]


class DuplicateScanner(BaseScanner):
    """Find exact and near-duplicate files and code blocks."""

    def _run(self, session: AnalysisSession) -> dict[str, Any]:
        config = self.config
        root = session.root
        self.log.debug("Duplicate detection for %s with %s", root, config.duplicate_thresholds())

        paths = list(walk_files(
            root,
            accept=DUPLICATE_LANGUAGES.is_supported,
            max_file_size=config.max_file_size,
        ))
        session.total_files = len(paths)

        records = self._map_files(session, paths, lambda path: self._analyze_file(path, root))

        exact = find_exact_file_duplicates(records) + find_exact_block_duplicates(records)

        detector = SimilarityDetector(
            threshold=config.similarity_threshold,
            min_tokens=config.min_tokens,
            prune=config.prune_candidates,
            workers=config.max_workers,
            log=self.log,
        )
        similar = detector.find_similar_files(records, session)
        similar += detector.find_similar_blocks(records, session)

        summary = summarize_duplicates(session.total_files, records, exact + similar)
        self.log.info(
            "Analyzed %d of %d files (%d unreadable): %d exact and %d similar groups",
            len(records),
            session.total_files,
            len(session.skipped),
            len(exact),
            len(similar),
        )

        return {
            "success": True,
            "workspace": str(root),
            "truncated": session.truncated,
            "summary": summary,
            "exactDuplicates": [group.to_dict() for group in exact],
            "similarDuplicates": [group.to_dict() for group in similar],
            "fileAnalysis": [record.summary() for record in records],
            "recommendations": duplicate_recommendations(exact, similar, summary),
        }

    def _analyze_file(self, filepath: Path, root: Path) -> FileRecord | None:
        """
        Build the duplicate-detection record for one file.

        Returns:
            The record, or None for files shorter than the minimum block size.
        """
        stat = stat_file(filepath)
        content = read_source(filepath)
        lines = split_lines(content)
        if len(lines) < self.config.min_lines:
            self.log.debug("Skipping %s: %d lines", filepath, len(lines))
            return None

        language = DUPLICATE_LANGUAGES.classify(filepath)
        tokens = tokenize(content)
        return FileRecord(
            path=filepath,
            relative_path=relative_path(filepath, root),
            language=language,
            size_bytes=stat.st_size,
            lines=len(lines),
            content_hash=content_hash(content),
            blocks=tuple(extract_blocks(lines, DUPLICATE_LANGUAGES.profile(language), self.config.min_lines)),
            tokens=tuple(tokens),
            token_set=frozenset(tokens),
        )

    @staticmethod
    def failure(workspace: Path | str, error: str) -> dict[str, Any]:
        return {
            "success": False,
            "error": error,
            "workspace": str(workspace),
            "truncated": False,
            "summary": {},
            "exactDuplicates": [],
            "similarDuplicates": [],
            "fileAnalysis": [],
            "recommendations": [],
        }


class MetricsScanner(BaseScanner):
    """Measure size, comment density, structure and complexity of every file."""

    def __init__(
        self,
        config: AnalysisConfig,
        cancel_event: threading.Event | None = None,
        log: logging.Logger | None = None,
    ):
        super().__init__(config, cancel_event=cancel_event, log=log)
        self.analyzer = ComplexityAnalyzer(METRICS_LANGUAGES)

    def _run(self, session: AnalysisSession) -> dict[str, Any]:
        root = session.root
        self.log.debug("Code metrics for %s with %s", root, self.config.metrics_thresholds())

        paths = list(walk_files(root))
        session.total_files = len(paths)

        aggregator = MetricsAggregator(self.config)
        for metrics in self._map_files(session, paths, lambda path: self.analyzer.analyze_file(path, root)):
            aggregator.add(metrics)

        complexity = aggregator.complexity()
        self.log.info(
            "Measured %d files in %d languages (%d unreadable)",
            aggregator.summary["totalFiles"],
            len(aggregator.languages),
            len(session.skipped),
        )

        return {
            "success": True,
            "workspace": str(root),
            "summary": aggregator.summary,
            "languages": aggregator.languages_dict(),
            "largeFiles": aggregator.large_files,
            "fileMetrics": [metrics.summary() for metrics in aggregator.files],
            "complexity": complexity,
            "recommendations": metrics_recommendations(aggregator, complexity),
        }

    @staticmethod
    def failure(workspace: Path | str, error: str) -> dict[str, Any]:
        return {
            "success": False,
            "error": error,
            "workspace": str(workspace),
            "summary": {},
            "languages": {},
            "largeFiles": [],
            "fileMetrics": [],
            "complexity": {
                "averageComplexity": 0,
                "highComplexityFiles": [],
                "totalFunctions": 0,
            },
            "recommendations": [],
        }


def _run_scanner(
    scanner_class: type[BaseScanner],
    workspace: Path | str,
    thresholds: Mapping[str, Any] | None,
    cancel_event: threading.Event | None,
    log: logging.Logger | None,
    **options: Any,
) -> dict[str, Any]:
    try:
        config = AnalysisConfig.from_thresholds(workspace, thresholds, **options)
    except AuditError as e:
        (log or logger).error("%s", e)
        return scanner_class.failure(workspace, str(e))
    except Exception as e:
        (log or logger).exception("Invalid arguments for %s", workspace)
        return scanner_class.failure(workspace, str(e))
    return scanner_class(config, cancel_event=cancel_event, log=log).run()


def find_duplicates(
    workspace: Path | str,
    thresholds: Mapping[str, Any] | None = None,
    *,
    workers: int | None = None,
    timeout: float | None = None,
    prune_candidates: bool = True,
    cancel_event: threading.Event | None = None,
    log: logging.Logger | None = None,
) -> dict[str, Any]:
    """
    Find duplicate code in a workspace.

    Args:
        workspace: Directory to analyze.
        thresholds: camelCase overrides of the duplicate thresholds.
        workers: Worker pool size (default: CPU count).
        timeout: Seconds allowed for similarity comparisons.
        prune_candidates: Skip pairs that can't reach the threshold.
        cancel_event: Set from another thread to stop comparisons early.
        log: Logger to use instead of the module logger.

    Returns:
        The duplicate report; ``success`` is False on a fatal error.
    """
    return _run_scanner(
        DuplicateScanner,
        workspace,
        thresholds,
        cancel_event,
        log,
        workers=workers,
        timeout=timeout,
        prune_candidates=prune_candidates,
    )


def analyze_metrics(
    workspace: Path | str,
    thresholds: Mapping[str, Any] | None = None,
    *,
    workers: int | None = None,
    log: logging.Logger | None = None,
) -> dict[str, Any]:
    """
    Compute code metrics for a workspace.

    Args:
        workspace: Directory to analyze.
        thresholds: camelCase overrides of the metrics thresholds.
        workers: Worker pool size (default: CPU count).
        log: Logger to use instead of the module logger.

    Returns:
        The metrics report; ``success`` is False on a fatal error.
    """
    return _run_scanner(MetricsScanner, workspace, thresholds, None, log, workers=workers)
