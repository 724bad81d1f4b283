"""Tests for config module."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from codebase_audit.config import (
    DEFAULT_CONFIG,
    AnalysisConfig,
    flatten_thresholds,
    get_config_template,
    load_config,
)
from codebase_audit.errors import InvalidThresholds


def test_defaults():
    config = AnalysisConfig.from_thresholds("/ws")

    assert config.workspace == Path("/ws")
    assert config.min_lines == 5
    assert config.similarity_threshold == 0.8
    assert config.min_tokens == 10
    assert config.max_file_size == 1024 * 1024
    assert config.prune_candidates is True
    assert config.metrics_thresholds() == DEFAULT_CONFIG["metrics"]
    assert config.duplicate_thresholds() == DEFAULT_CONFIG["duplicates"]


def test_overrides_apply_to_any_subset():
    config = AnalysisConfig.from_thresholds("/ws", {"minLines": 8, "highComplexity": 15})

    assert config.min_lines == 8
    assert config.high_complexity == 15
    assert config.very_high_complexity == 20


def test_unknown_threshold_is_ignored_with_warning(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        config = AnalysisConfig.from_thresholds("/ws", {"minLine": 3})

    assert config.min_lines == 5
    assert "minLine" in caplog.text


@pytest.mark.parametrize(
    "thresholds",
    [
        {"similarityThreshold": 1.5},
        {"similarityThreshold": -0.1},
        {"minLines": "5"},
        {"minLines": 0},
        {"minLines": True},
        {"largeFileSizeKB": -1},
        {"similarityThreshold": float("nan")},
        {"largeFileSizeKB": float("inf")},
        {"highComplexity": float("nan")},
    ],
)
def test_invalid_thresholds_raise(thresholds):
    with pytest.raises(InvalidThresholds):
        AnalysisConfig.from_thresholds("/ws", thresholds)


@pytest.mark.parametrize("options", [{"workers": 0}, {"timeout": 0}, {"timeout": "soon"}, {"timeout": float("nan")}])
def test_invalid_run_options_raise(options):
    with pytest.raises(InvalidThresholds):
        AnalysisConfig.from_thresholds("/ws", **options)


@pytest.mark.parametrize("thresholds", [["minLines"], "minLines=8", 5])
def test_thresholds_must_be_a_mapping(thresholds):
    with pytest.raises(InvalidThresholds, match="must be a mapping"):
        AnalysisConfig.from_thresholds("/ws", thresholds)


def test_config_is_immutable():
    config = AnalysisConfig.from_thresholds("/ws")

    with pytest.raises(AttributeError):
        config.min_lines = 3  # type: ignore[misc]


def test_max_workers_defaults_to_positive():
    assert AnalysisConfig.from_thresholds("/ws").max_workers >= 1
    assert AnalysisConfig.from_thresholds("/ws", workers=3).max_workers == 3


def test_load_config_merges_sections(tmp_path: Path):
    path = tmp_path / "audit.yaml"
    path.write_text("duplicates:\n  minLines: 7\nrun:\n  workers: 2\n", encoding="utf-8")

    config = load_config(path)

    assert config["duplicates"]["minLines"] == 7
    assert config["duplicates"]["similarityThreshold"] == 0.8
    assert config["metrics"] == DEFAULT_CONFIG["metrics"]
    assert config["run"]["workers"] == 2
    # Defaults are never mutated by a load
    assert DEFAULT_CONFIG["duplicates"]["minLines"] == 5


def test_load_config_empty_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == DEFAULT_CONFIG


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(InvalidThresholds):
        load_config(path)


def test_load_config_warns_on_unknown_section(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    path = tmp_path / "extra.yaml"
    path.write_text("exclude:\n  - docs\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        config = load_config(path)

    assert "exclude" not in config
    assert "exclude" in caplog.text


def test_flatten_thresholds():
    flat = flatten_thresholds(DEFAULT_CONFIG)

    assert flat["minLines"] == 5
    assert flat["veryHighComplexity"] == 20
    assert "workers" not in flat


def test_config_template_matches_defaults():
    assert yaml.safe_load(get_config_template()) == DEFAULT_CONFIG
