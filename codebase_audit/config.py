"""
Configuration constants and loading utilities for codebase_audit.
"""

from __future__ import annotations

import copy
import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from codebase_audit.errors import InvalidThresholds

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


# Directory names never descended into. Any dot-directory is skipped as well.
DEFAULT_SKIP_DIRS = frozenset({
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    "dist",
    "build",
    "target",
    "bin",
    "obj",
    ".vscode",
    ".idea",
    "__pycache__",
    ".pytest_cache",
    "coverage",
    ".nyc_output",
    "vendor",
    "bower_components",
})


DEFAULT_DUPLICATE_THRESHOLDS: dict[str, Any] = {
    "minLines": 5,
    "similarityThreshold": 0.8,
    "minTokens": 10,
    "maxFileSize": 1024 * 1024,
}

DEFAULT_METRICS_THRESHOLDS: dict[str, Any] = {
    "largeFileLines": 500,
    "veryLargeFileLines": 1000,
    "largeFileSizeKB": 100,
    "veryLargeFileSizeKB": 500,
    "highComplexity": 10,
    "veryHighComplexity": 20,
}

DEFAULT_RUN_OPTIONS: dict[str, Any] = {
    "workers": None,
    "timeout": None,
    "pruneCandidates": True,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "duplicates": DEFAULT_DUPLICATE_THRESHOLDS,
    "metrics": DEFAULT_METRICS_THRESHOLDS,
    "run": DEFAULT_RUN_OPTIONS,
}


# camelCase threshold key -> (AnalysisConfig field, accepted types, minimum, maximum)
THRESHOLD_FIELDS: dict[str, tuple[str, tuple[type, ...], float, float | None]] = {
    "minLines": ("min_lines", (int,), 1, None),
    "similarityThreshold": ("similarity_threshold", (int, float), 0.0, 1.0),
    "minTokens": ("min_tokens", (int,), 0, None),
    "maxFileSize": ("max_file_size", (int,), 0, None),
    "largeFileLines": ("large_file_lines", (int,), 0, None),
    "veryLargeFileLines": ("very_large_file_lines", (int,), 0, None),
    "largeFileSizeKB": ("large_file_size_kb", (int, float), 0, None),
    "veryLargeFileSizeKB": ("very_large_file_size_kb", (int, float), 0, None),
    "highComplexity": ("high_complexity", (int, float), 0, None),
    "veryHighComplexity": ("very_high_complexity", (int, float), 0, None),
}


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Immutable settings for a single analysis run.

    Built once per call and passed to every stage; nothing in the engine
    mutates it.
    """

    workspace: Path
    min_lines: int = 5
    similarity_threshold: float = 0.8
    min_tokens: int = 10
    max_file_size: int = 1024 * 1024
    large_file_lines: int = 500
    very_large_file_lines: int = 1000
    large_file_size_kb: float = 100
    very_large_file_size_kb: float = 500
    high_complexity: float = 10
    very_high_complexity: float = 20
    workers: int | None = None
    timeout: float | None = None
    prune_candidates: bool = True

    @classmethod
    def from_thresholds(
        cls,
        workspace: Path | str,
        thresholds: Mapping[str, Any] | None = None,
        *,
        workers: int | None = None,
        timeout: float | None = None,
        prune_candidates: bool = True,
    ) -> "AnalysisConfig":
        """
        Build a config from camelCase threshold overrides.

        Args:
            workspace: Workspace root directory.
            thresholds: Any subset of the duplicate and metrics thresholds.
                Unknown keys are ignored with a warning.
            workers: Worker pool size (default: CPU count).
            timeout: Seconds allowed for pair comparisons (default: unlimited).
            prune_candidates: Skip pairs whose size ratio rules them out.

        Returns:
            A validated AnalysisConfig.

        Raises:
            InvalidThresholds: If thresholds is not a mapping, or a value has the
                wrong type or range.
        """
        if thresholds is not None and not isinstance(thresholds, Mapping):
            raise InvalidThresholds(f"thresholds must be a mapping, got {type(thresholds).__name__}")

        values: dict[str, Any] = {}
        for key, value in (thresholds or {}).items():
            rule = THRESHOLD_FIELDS.get(key)
            if rule is None:
                logger.warning("Ignoring unknown threshold %r", key)
                continue
            field_name, types, minimum, maximum = rule
            values[field_name] = _validate_threshold(key, value, types, minimum, maximum)

        if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
            raise InvalidThresholds(f"workers must be a positive integer, got {workers!r}")
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0
        ):
            raise InvalidThresholds(f"timeout must be a positive number, got {timeout!r}")

        config = cls(
            workspace=Path(workspace),
            workers=workers,
            timeout=timeout,
            prune_candidates=bool(prune_candidates),
            **values,
        )
        if config.very_large_file_lines < config.large_file_lines:
            logger.warning(
                "veryLargeFileLines (%s) is below largeFileLines (%s)",
                config.very_large_file_lines,
                config.large_file_lines,
            )
        return config

    @property
    def max_workers(self) -> int:
        """Resolved worker pool size."""
        return self.workers or os.cpu_count() or 1

    def duplicate_thresholds(self) -> dict[str, Any]:
        """Duplicate thresholds in call-contract (camelCase) form."""
        return self._thresholds(DEFAULT_DUPLICATE_THRESHOLDS)

    def metrics_thresholds(self) -> dict[str, Any]:
        """Metrics thresholds in call-contract (camelCase) form."""
        return self._thresholds(DEFAULT_METRICS_THRESHOLDS)

    def _thresholds(self, keys: Mapping[str, Any]) -> dict[str, Any]:
        return {key: getattr(self, THRESHOLD_FIELDS[key][0]) for key in keys}


def _validate_threshold(
    key: str,
    value: Any,
    types: tuple[type, ...],
    minimum: float,
    maximum: float | None,
) -> Any:
    """Check a single threshold value, returning it unchanged."""
    if isinstance(value, bool) or not isinstance(value, types):
        expected = " or ".join(t.__name__ for t in types)
        raise InvalidThresholds(f"{key} must be {expected}, got {value!r}")
    if not math.isfinite(value):
        raise InvalidThresholds(f"{key} must be a finite number, got {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"in [{minimum}, {maximum}]"
        raise InvalidThresholds(f"{key} must be {bounds}, got {value!r}")
    return value


def load_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from YAML file, merged with defaults.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration dictionary with user values merged over defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        InvalidThresholds: If the file is not a mapping of sections.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise InvalidThresholds(f"Config file {config_path} must contain a mapping")

    # Merge section by section with defaults
    config = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in user_config.items():
        if key not in config:
            logger.warning("Ignoring unknown config section %r in %s", key, config_path)
            continue
        if not isinstance(value, dict):
            raise InvalidThresholds(f"Config section {key!r} must be a mapping")
        config[key] = {**config[key], **value}

    return config


def flatten_thresholds(config: Mapping[str, Any]) -> dict[str, Any]:
    """Combine the duplicates and metrics sections into one threshold mapping."""
    return {**config.get("duplicates", {}), **config.get("metrics", {})}


def get_config_template() -> str:
    """Generate a documented YAML config template."""
    return '''# =============================================================================
# Codebase Audit Configuration
# =============================================================================
# Thresholds for duplicate detection and code metrics.
#
# Use with:
#   codebase-audit duplicates . --config this_file.yaml
#   codebase-audit metrics . --config this_file.yaml
#
# Values given with --threshold KEY=VALUE on the command line win over
# the values in this file.
#
# The directory skip-list and the language tables are fixed and cannot be
# configured here.
# =============================================================================

# =============================================================================
# DUPLICATE DETECTION
# =============================================================================
duplicates:
  # Minimum consecutive code lines for a block (also the minimum file length)
  minLines: 5

  # Jaccard similarity (0.0 - 1.0) at or above which two files or blocks
  # are reported as similar
  similarityThreshold: 0.8

  # Files and blocks with fewer tokens are not compared for similarity
  minTokens: 10

  # Files larger than this many bytes are skipped
  maxFileSize: 1048576

# =============================================================================
# CODE METRICS
# =============================================================================
metrics:
  # A file is "large" above either limit, "very large" above the higher one
  largeFileLines: 500
  veryLargeFileLines: 1000
  largeFileSizeKB: 100
  veryLargeFileSizeKB: 500

  # Approximate cyclomatic complexity per file
  highComplexity: 10
  veryHighComplexity: 20

# =============================================================================
# RUN CONTROLS
# =============================================================================
run:
  # Worker threads for per-file analysis and pair scans (default: CPU count)
  workers:

  # Seconds allowed for similarity comparisons; the report is marked
  # truncated when the limit is hit (default: unlimited)
  timeout:

  # Skip file/block pairs whose token-set sizes already rule them out
  pruneCandidates: true
'''
