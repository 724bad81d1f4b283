"""Pytest configuration and fixtures for codebase_audit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Build a workspace directory from a mapping of relative paths to contents."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "workspace"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


def code_lines(count: int, prefix: str = "value") -> str:
    """Generate `count` distinct Python assignment lines ending with a newline."""
    return "".join(f"{prefix}_{i} = compute_{i}(alpha, beta_{i})\n" for i in range(count))


def token_lines(tokens: list[str]) -> str:
    """One token per line."""
    return "".join(f"{token}\n" for token in tokens)


@pytest.fixture
def duplicated_workspace(make_workspace: Callable[[dict[str, str]], Path]) -> Path:
    """Two identical 20-line Python files plus an unrelated one."""
    body = code_lines(20)
    return make_workspace({
        "pkg/first.py": body,
        "pkg/second.py": body,
        "other.js": "".join(f"const item{i} = build{i}(options);\n" for i in range(8)),
    })


@pytest.fixture
def similar_workspace(make_workspace: Callable[[dict[str, str]], Path]) -> Path:
    """Two files whose token sets share 85 of 100 distinct tokens."""
    shared = [f"shared{i:02d}" for i in range(85)]
    return make_workspace({
        "a.py": token_lines(shared + [f"alpha{i:02d}" for i in range(8)]),
        "b.py": token_lines(shared + [f"beta{i:02d}" for i in range(7)]),
    })
