"""
File watcher for re-running an audit.

Watches the workspace and re-runs the analysis when a relevant file is
created, modified, moved or deleted.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from codebase_audit.config import DEFAULT_SKIP_DIRS
from codebase_audit.utils import should_skip_dir

if TYPE_CHECKING:
    from typing import Any, Callable, Collection

logger = logging.getLogger(__name__)


def _notify(message: str) -> None:
    print(f"[watch] {message}", file=sys.stderr, flush=True)


class AuditRerunHandler(FileSystemEventHandler):
    """Handler for file system events that triggers a new audit run."""

    def __init__(
        self,
        root: Path,
        callback: Callable[[], None],
        accept: Callable[[Path], bool] | None = None,
        skip_dirs: Collection[str] = DEFAULT_SKIP_DIRS,
        debounce_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the handler.

        Args:
            root: Watched workspace root.
            callback: Function to call when files change.
            accept: Predicate for files that matter (default: all).
            skip_dirs: Directory names whose contents are ignored.
            debounce_seconds: Minimum time between runs.
            clock: Time source.
        """
        super().__init__()
        self.root = root
        self.callback = callback
        self.accept = accept
        self.skip_dirs = skip_dirs
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self._last_trigger = float("-inf")
        self._lock = threading.Lock()
        self._running = False
        self.pending = False

    def is_relevant(self, path: Path) -> bool:
        """Check whether a changed path can affect the report."""
        try:
            parts = path.relative_to(self.root).parts
        except ValueError:
            return False
        if not parts:
            return False
        if any(should_skip_dir(part, self.skip_dirs) for part in parts[:-1]):
            return False
        return self.accept is None or self.accept(path)

    def on_any_event(self, event: Any) -> None:
        """Handle create/modify/move/delete events."""
        if event.is_directory or event.event_type not in ("created", "modified", "moved", "deleted"):
            return

        paths = [Path(event.src_path)]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(Path(dest))
        changed = next((path for path in paths if self.is_relevant(path)), None)
        if changed is None:
            return

        with self._lock:
            if self._running or self.clock() - self._last_trigger < self.debounce_seconds:
                self.pending = True
                return
            self._claim()
        self._trigger(str(changed))

    def flush_pending(self) -> None:
        """Run once for changes that arrived during the debounce window or a run."""
        with self._lock:
            if not self.pending or self._running:
                return
            if self.clock() - self._last_trigger < self.debounce_seconds:
                return
            self._claim()
        self._trigger("multiple files")

    def _claim(self) -> None:
        """Mark a run as started; the caller holds the lock."""
        self._last_trigger = self.clock()
        self._running = True
        self.pending = False

    def _trigger(self, changed: str) -> None:
        """Run the callback outside the lock so new events are only queued."""
        logger.info("File changed: %s", changed)
        _notify(f"File changed: {changed}")
        _notify("Re-running analysis...")

        try:
            self.callback()
            _notify("Done. Waiting for changes...")
        except Exception as e:
            logger.exception("Re-run failed")
            _notify(f"Error: {e}")
        finally:
            with self._lock:
                self._running = False


def watch_and_rerun(
    root: Path,
    callback: Callable[[], None],
    accept: Callable[[Path], bool] | None = None,
    debounce_seconds: float = 2.0,
) -> None:
    """
    Watch a workspace and re-run an audit on changes until interrupted.

    Args:
        root: Directory to watch.
        callback: Function that runs the audit and writes its output.
        accept: Predicate for files that matter (default: all).
        debounce_seconds: Minimum time between runs.
    """
    handler = AuditRerunHandler(root, callback, accept=accept, debounce_seconds=debounce_seconds)

    observer = Observer()
    observer.schedule(handler, str(root), recursive=True)
    observer.start()

    _notify(f"Watching {root} for changes...")
    _notify("Press Ctrl+C to stop")

    try:
        while True:
            time.sleep(1)
            handler.flush_pending()
    except KeyboardInterrupt:
        _notify("Stopping...")
        observer.stop()

    observer.join()
