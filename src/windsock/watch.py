"""
Watch mode.

FileWatcher polls the content globs for created, modified, and deleted
files (mtime based, no external dependencies). RebuildCoordinator runs
incremental rebuilds one at a time on a single worker thread; a change
that arrives while a rebuild is in flight supersedes it, so the stale
rebuild aborts before committing and its paths fold into the next one.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol

from .builder import BuildResult
from .scanner import ContentMatcher

logger = logging.getLogger(__name__)


class Rebuildable(Protocol):
    def rebuild(
        self,
        changed: Iterable[Path],
        write: bool = True,
        should_abort: Callable[[], bool] | None = None,
    ) -> BuildResult | None: ...


class FileWatcher:
    """
    Watches content files for changes using polling.

    Uses mtime-based change detection so it works the same everywhere.
    """

    def __init__(
        self,
        matcher: ContentMatcher,
        on_change: Callable[[set[Path]], None],
        poll_interval: float = 0.5,
    ):
        """
        Initialize the file watcher.

        Args:
            matcher: Content globs deciding which files are watched
            on_change: Called with the set of changed paths after each poll
            poll_interval: Seconds between polls
        """
        self.matcher = matcher
        self.on_change = on_change
        self.poll_interval = poll_interval

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._file_mtimes: dict[Path, float] = {}

    def start(self) -> None:
        """Record the current state and start polling."""
        self._file_mtimes = self._snapshot()
        self._thread = threading.Thread(target=self._watch_loop, name="windsock-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None

    def _snapshot(self) -> dict[Path, float]:
        mtimes: dict[Path, float] = {}
        for path in self.matcher.files():
            try:
                mtimes[path] = path.stat().st_mtime
            except OSError:
                # Deleted between listing and stat
                continue
        return mtimes

    def poll(self) -> set[Path]:
        """Compare against the last snapshot and return changed paths."""
        current = self._snapshot()
        changed = {p for p, mtime in current.items() if self._file_mtimes.get(p) != mtime}
        changed |= self._file_mtimes.keys() - current.keys()
        self._file_mtimes = current
        return changed

    def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                changed = self.poll()
                if changed:
                    logger.debug("Detected %d changed file(s)", len(changed))
                    self.on_change(changed)
            except Exception:
                logger.exception("File watcher error")
            self._stop_event.wait(self.poll_interval)


class RebuildCoordinator:
    """
    Serialises incremental rebuilds.

    Change events go on a queue consumed by one worker thread. Every submit
    bumps a generation counter; a running rebuild whose generation is stale
    aborts before committing.
    """

    def __init__(
        self,
        session: Rebuildable,
        on_result: Callable[[BuildResult], None] | None = None,
        write: bool = True,
    ):
        self.session = session
        self.on_result = on_result
        self.write = write
        self.completed = 0
        self.superseded = 0
        self.failed = 0

        self._queue: queue.Queue[set[Path] | None] = queue.Queue()
        self._lock = threading.Lock()
        self._generation = 0
        self._idle = threading.Event()
        self._idle.set()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="windsock-rebuild", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5) -> None:
        self._queue.put(None)
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    def submit(self, paths: Iterable[Path]) -> None:
        """Queue changed paths, superseding any rebuild in flight."""
        with self._lock:
            self._generation += 1
            self._idle.clear()
            self._queue.put(set(paths))

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every submitted change has been built."""
        return self._idle.wait(timeout)

    def _current_generation(self) -> int:
        with self._lock:
            return self._generation

    def _drain(self, pending: set[Path]) -> bool:
        """Fold queued events into ``pending``; return False on stop."""
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return True
            if item is None:
                return False
            pending |= item

    def _run(self) -> None:
        pending: set[Path] = set()
        while True:
            item = self._queue.get()
            if item is None:
                break
            pending |= item
            if not self._drain(pending):
                break

            generation = self._current_generation()
            try:
                result = self.session.rebuild(
                    pending,
                    write=self.write,
                    should_abort=lambda: self._current_generation() != generation,
                )
            except Exception:
                logger.exception("Rebuild failed")
                self.failed += 1
                pending = set()
                result = None
            else:
                if result is None:
                    # Superseded: keep the paths for the next batch
                    self.superseded += 1
                    continue
                pending = set()
                self.completed += 1

            if result is not None and self.on_result is not None:
                self.on_result(result)

            with self._lock:
                if self._queue.empty():
                    self._idle.set()
