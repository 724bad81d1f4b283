"""Tests for duplicate detection end to end."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

import pytest

from codebase_audit import find_duplicates
from codebase_audit.config import AnalysisConfig
from codebase_audit.scanner import DuplicateScanner
from conftest import code_lines


def test_identical_files_form_exact_file_group(duplicated_workspace: Path):
    """Two files with the same 20 code lines are one exact-file group."""
    report = find_duplicates(duplicated_workspace)

    assert report["success"] is True
    assert report["truncated"] is False

    file_groups = [g for g in report["exactDuplicates"] if g["type"] == "exact-file"]
    assert len(file_groups) == 1
    group = file_groups[0]
    assert group["similarity"] == 1.0
    assert group["duplicateLines"] == 20
    assert [m["path"] for m in group["members"]] == ["pkg/first.py", "pkg/second.py"]
    assert all(m["language"] == "python" for m in group["members"])


def test_identical_files_also_share_exact_block(duplicated_workspace: Path):
    report = find_duplicates(duplicated_workspace)

    block_groups = [g for g in report["exactDuplicates"] if g["type"] == "exact-block"]
    assert len(block_groups) == 1
    members = block_groups[0]["members"]
    assert [(m["startLine"], m["endLine"], m["lines"]) for m in members] == [(1, 20, 20), (1, 20, 20)]
    assert block_groups[0]["content"].startswith("value_0 = compute_0(alpha, beta_0)")

    # Exact pairs are never reported again as similar
    assert report["similarDuplicates"] == []


def test_summary_counts(duplicated_workspace: Path):
    summary = find_duplicates(duplicated_workspace)["summary"]

    assert summary == {
        "totalFiles": 3,
        "analyzedFiles": 3,
        "duplicateBlocks": 2,
        "duplicateLines": 40,
        "duplicatePercentage": 83.33,
        "affectedFiles": 2,
    }


def test_exact_match_ignores_comments_whitespace_and_case(make_workspace):
    body = code_lines(6)
    variant = "# header comment\n" + body.upper().replace(" = ", "   =   ")
    workspace = make_workspace({"a.py": body, "b.py": variant})

    report = find_duplicates(workspace)

    file_groups = [g for g in report["exactDuplicates"] if g["type"] == "exact-file"]
    assert len(file_groups) == 1
    # Duplicate lines come from the first member
    assert file_groups[0]["duplicateLines"] == 6


def test_similar_files_reported_at_threshold(similar_workspace: Path):
    """Token sets sharing 85 of 100 tokens are similar at 0.8."""
    report = find_duplicates(similar_workspace, {"similarityThreshold": 0.8})

    file_groups = [g for g in report["similarDuplicates"] if g["type"] == "similar-file"]
    assert len(file_groups) == 1
    group = file_groups[0]
    assert group["similarity"] == pytest.approx(0.85)
    assert group["duplicateLines"] == 92
    assert [m["path"] for m in group["members"]] == ["a.py", "b.py"]


def test_similar_files_not_reported_above_similarity(similar_workspace: Path):
    report = find_duplicates(similar_workspace, {"similarityThreshold": 0.9})

    assert report["similarDuplicates"] == []


def test_empty_workspace(tmp_path: Path):
    report = find_duplicates(tmp_path)

    assert report["success"] is True
    assert report["summary"]["analyzedFiles"] == 0
    assert report["summary"]["duplicatePercentage"] == 0
    assert report["exactDuplicates"] == []
    assert report["similarDuplicates"] == []
    assert report["fileAnalysis"] == []
    assert "No significant code duplication detected - excellent code organization" in report["recommendations"]


def test_comment_only_file_has_no_blocks(make_workspace):
    workspace = make_workspace({
        "notes.py": "# one\n# two\n\n# three\n# four\n# five\n",
        "code.py": code_lines(8),
    })

    report = find_duplicates(workspace)

    assert report["summary"]["totalFiles"] == 2
    assert report["summary"]["analyzedFiles"] == 2
    notes = next(f for f in report["fileAnalysis"] if f["relativePath"] == "notes.py")
    assert notes["blocks"] == 0
    assert notes["lines"] == 6
    assert all(
        m["path"] != "notes.py"
        for g in report["exactDuplicates"] + report["similarDuplicates"]
        if g["type"].endswith("block")
        for m in g["members"]
    )


def test_short_files_counted_but_not_analyzed(make_workspace):
    workspace = make_workspace({"tiny.py": "x = 1\n", "code.py": code_lines(8)})

    report = find_duplicates(workspace)

    assert report["summary"]["totalFiles"] == 2
    assert report["summary"]["analyzedFiles"] == 1


def test_unsupported_and_skipped_paths_are_ignored(make_workspace):
    body = code_lines(10)
    workspace = make_workspace({
        "src/app.py": body,
        "node_modules/lib/app.py": body,
        ".cache/app.py": body,
        "build/app.py": body,
        "README.md": body,
    })

    report = find_duplicates(workspace)

    assert report["summary"]["totalFiles"] == 1
    assert report["exactDuplicates"] == []


def test_files_over_max_size_are_not_walked(make_workspace):
    body = code_lines(10)
    workspace = make_workspace({"a.py": body, "b.py": body})

    report = find_duplicates(workspace, {"maxFileSize": 100})

    assert report["summary"]["totalFiles"] == 0


def test_undecodable_file_is_skipped(make_workspace, caplog: pytest.LogCaptureFixture):
    workspace = make_workspace({"good.py": code_lines(8)})
    (workspace / "bad.py").write_bytes(b"\xff\xfe\x00broken\n" * 10)

    with caplog.at_level(logging.INFO, logger="codebase_audit.scanner"):
        report = find_duplicates(workspace)

    assert report["success"] is True
    assert report["summary"]["totalFiles"] == 2
    assert report["summary"]["analyzedFiles"] == 1
    assert "Analyzed 1 of 2 files (1 unreadable)" in caplog.text


def test_block_duplicates_across_files(make_workspace):
    shared = code_lines(6, prefix="shared")
    workspace = make_workspace({
        "one.py": code_lines(3, prefix="head") + "\n" + shared,
        "two.py": shared + "\n" + code_lines(7, prefix="tail"),
    })

    report = find_duplicates(workspace)

    block_groups = [g for g in report["exactDuplicates"] if g["type"] == "exact-block"]
    assert len(block_groups) == 1
    spans = [(m["path"], m["startLine"], m["endLine"]) for m in block_groups[0]["members"]]
    assert spans == [("one.py", 5, 10), ("two.py", 1, 6)]


def test_similar_blocks_skip_same_file(make_workspace):
    block = code_lines(6, prefix="dup")
    near = block.replace("dup_5", "other_5")
    workspace = make_workspace({"only.py": block + "\n" + near})

    report = find_duplicates(workspace, {"similarityThreshold": 0.5})

    assert [g for g in report["similarDuplicates"] if g["type"] == "similar-block"] == []


def test_min_tokens_excludes_small_items(similar_workspace: Path):
    report = find_duplicates(similar_workspace, {"similarityThreshold": 0.8, "minTokens": 500})

    assert report["similarDuplicates"] == []


def test_pruning_does_not_change_results(make_workspace):
    files = {}
    for n in range(6):
        tokens = [f"tok{i}" for i in range(20 + n * 3)]
        files[f"f{n}.py"] = "".join(f"{t}\n" for t in tokens)
    workspace = make_workspace(files)

    pruned = find_duplicates(workspace, {"similarityThreshold": 0.7}, prune_candidates=True)
    full = find_duplicates(workspace, {"similarityThreshold": 0.7}, prune_candidates=False)

    assert pruned["similarDuplicates"] == full["similarDuplicates"]
    assert pruned["similarDuplicates"]


def test_worker_count_does_not_change_results(make_workspace):
    files = {f"m{n}.py": code_lines(12 + n, prefix="item") for n in range(5)}
    workspace = make_workspace(files)

    single = find_duplicates(workspace, {"similarityThreshold": 0.5}, workers=1)
    pooled = find_duplicates(workspace, {"similarityThreshold": 0.5}, workers=4)

    assert json.dumps(single, sort_keys=True) == json.dumps(pooled, sort_keys=True)


def test_repeated_runs_are_identical(duplicated_workspace: Path):
    first = find_duplicates(duplicated_workspace)
    second = find_duplicates(duplicated_workspace)

    assert json.dumps(first) == json.dumps(second)


def test_cancelled_run_is_truncated(similar_workspace: Path):
    cancel = threading.Event()
    cancel.set()

    report = find_duplicates(similar_workspace, cancel_event=cancel)

    assert report["success"] is True
    assert report["truncated"] is True
    assert report["similarDuplicates"] == []


def test_missing_workspace_returns_failure(tmp_path: Path):
    missing = tmp_path / "nope"

    report = find_duplicates(missing)

    assert report["success"] is False
    assert "does not exist" in report["error"]
    assert report["workspace"] == str(missing)
    assert report["exactDuplicates"] == []
    assert report["similarDuplicates"] == []
    assert report["recommendations"] == []


def test_invalid_thresholds_return_failure(tmp_path: Path):
    report = find_duplicates(tmp_path, {"similarityThreshold": 1.5})

    assert report["success"] is False
    assert "similarityThreshold" in report["error"]


def test_unexpected_error_becomes_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("codebase_audit.scanner.find_exact_file_duplicates", explode)

    report = DuplicateScanner(AnalysisConfig(workspace=tmp_path)).run()

    assert report["success"] is False
    assert report["error"] == "boom"


def test_recommendations_for_duplicated_workspace(duplicated_workspace: Path):
    recommendations = find_duplicates(duplicated_workspace)["recommendations"]

    assert recommendations[0] == "1 exact duplicate files found - consider removing or consolidating"
    assert recommendations[1] == "1 exact duplicate code blocks found - extract into shared functions"
    assert "High duplication rate (83.33%) - significant refactoring opportunity" in recommendations
    assert recommendations[-1] == "Aim for DRY (Don't Repeat Yourself) principles in code design"


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
def test_named_pipe_is_not_read(make_workspace):
    workspace = make_workspace({"a.py": code_lines(8)})
    os.mkfifo(workspace / "pipe.py")

    report = find_duplicates(workspace)

    assert report["success"] is True
    assert report["summary"]["totalFiles"] == 1
    assert [f["relativePath"] for f in report["fileAnalysis"]] == ["a.py"]


def test_workspace_of_wrong_type_returns_failure():
    report = find_duplicates(None)

    assert report["success"] is False
    assert report["error"]
    assert report["exactDuplicates"] == []


def test_thresholds_not_a_mapping_return_failure(tmp_path: Path):
    report = find_duplicates(tmp_path, ["minLines"])

    assert report["success"] is False
    assert "must be a mapping" in report["error"]


def test_nan_similarity_threshold_returns_failure(tmp_path: Path):
    report = find_duplicates(tmp_path, {"similarityThreshold": float("nan")})

    assert report["success"] is False
    assert "similarityThreshold" in report["error"]
