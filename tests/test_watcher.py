"""Tests for the watch-mode event handler."""

from __future__ import annotations

from pathlib import Path

from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent

from codebase_audit.languages import DUPLICATE_LANGUAGES
from codebase_audit.watcher import AuditRerunHandler


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def make_handler(root: Path, calls: list[int], clock: FakeClock, **kwargs) -> AuditRerunHandler:
    return AuditRerunHandler(
        root,
        callback=lambda: calls.append(1),
        debounce_seconds=2.0,
        clock=clock,
        **kwargs,
    )


def test_change_triggers_callback(tmp_path: Path):
    calls: list[int] = []
    handler = make_handler(tmp_path, calls, FakeClock())

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "app.py")))

    assert calls == [1]


def test_changes_inside_debounce_window_are_batched(tmp_path: Path):
    calls: list[int] = []
    clock = FakeClock()
    handler = make_handler(tmp_path, calls, clock)

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "a.py")))
    clock.now += 0.5
    handler.on_any_event(FileModifiedEvent(str(tmp_path / "b.py")))
    handler.on_any_event(FileModifiedEvent(str(tmp_path / "c.py")))

    assert calls == [1]
    assert handler.pending is True

    handler.flush_pending()
    assert calls == [1]

    clock.now += 2.0
    handler.flush_pending()
    assert calls == [1, 1]
    assert handler.pending is False


def test_irrelevant_paths_are_ignored(tmp_path: Path):
    calls: list[int] = []
    handler = make_handler(tmp_path, calls, FakeClock(), accept=DUPLICATE_LANGUAGES.is_supported)

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "node_modules" / "lib.js")))
    handler.on_any_event(FileModifiedEvent(str(tmp_path / ".git" / "index.py")))
    handler.on_any_event(FileModifiedEvent(str(tmp_path / "notes.txt")))
    handler.on_any_event(DirModifiedEvent(str(tmp_path / "src")))

    assert calls == []


def test_move_into_relevant_path_triggers(tmp_path: Path):
    calls: list[int] = []
    handler = make_handler(tmp_path, calls, FakeClock(), accept=DUPLICATE_LANGUAGES.is_supported)

    handler.on_any_event(FileMovedEvent(str(tmp_path / "draft.txt"), str(tmp_path / "final.py")))

    assert calls == [1]


def test_callback_error_does_not_stop_watching(tmp_path: Path):
    clock = FakeClock()
    calls: list[int] = []

    def callback() -> None:
        calls.append(1)
        raise RuntimeError("template exploded")

    handler = AuditRerunHandler(tmp_path, callback=callback, debounce_seconds=2.0, clock=clock)

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "a.py")))
    clock.now += 5
    handler.on_any_event(FileModifiedEvent(str(tmp_path / "a.py")))

    assert calls == [1, 1]


def test_changes_during_a_run_are_queued(tmp_path: Path):
    clock = FakeClock()
    calls: list[int] = []

    def callback() -> None:
        calls.append(1)
        if len(calls) == 1:
            clock.now += 10
            handler.on_any_event(FileModifiedEvent(str(tmp_path / "b.py")))

    handler = AuditRerunHandler(tmp_path, callback=callback, debounce_seconds=2.0, clock=clock)

    handler.on_any_event(FileModifiedEvent(str(tmp_path / "a.py")))

    assert calls == [1]
    assert handler.pending is True

    handler.flush_pending()
    assert calls == [1, 1]
    assert handler.pending is False
