# ABOUTME: Change-driven re-sync: a watchdog observer feeding a single-flight sync worker.
# ABOUTME: Passes never overlap; triggers arriving mid-pass collapse into one follow-up pass.

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from bookmirror.config import MirrorConfig
from bookmirror.core.reconciler import sync_library

logger = logging.getLogger(__name__)

WATCHED_SUFFIXES: frozenset[str] = frozenset({".epub", ".opf"})

# Reads and directory mtime bumps never change what gets mirrored
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})
_DIRECTORY_EVENT_TYPES = frozenset({"created", "deleted", "moved"})


class SyncWorker(threading.Thread):
    """Runs sync passes one at a time on its own thread.

    request() only raises a flag. The worker waits for the flag, lets
    a burst of events settle (unless the request was immediate), clears
    it and runs a pass. A request made while a pass is running raises
    the flag again, so any number of such requests result in exactly
    one more pass.
    """

    def __init__(self, run_pass: Callable[[], object], *, settle_seconds: float = 1.0) -> None:
        super().__init__(name="bookmirror-sync", daemon=True)
        self._run_pass = run_pass
        self._settle_seconds = settle_seconds
        self._pending = threading.Event()
        self._stopping = threading.Event()
        self._immediate = threading.Event()
        self._first_pass_done = threading.Event()
        self.passes = 0

    def request(self, *, immediate: bool = False) -> None:
        """Ask for a sync pass, optionally skipping the settle delay."""
        if immediate:
            self._immediate.set()
        self._pending.set()

    def wait_for_first_pass(self, timeout: float | None = None) -> bool:
        """Block until the first pass has finished, successfully or not."""
        return self._first_pass_done.wait(timeout)

    def stop(self) -> None:
        """Stop after the in-flight pass, if any. Pending requests are dropped."""
        self._stopping.set()
        self._pending.set()

    def run(self) -> None:
        while True:
            self._pending.wait()
            if self._stopping.is_set():
                break
            settle = 0 if self._immediate.is_set() else self._settle_seconds
            if settle > 0 and self._stopping.wait(settle):
                break
            self._immediate.clear()
            self._pending.clear()
            try:
                self._run_pass()
            except Exception:
                logger.exception("Sync pass failed")
            self.passes += 1
            self._first_pass_done.set()


def _is_relevant(event: FileSystemEvent) -> bool:
    """Whether a filesystem event can change the set of mirrored books."""
    if event.event_type in _IGNORED_EVENT_TYPES:
        return False
    if event.is_directory:
        return event.event_type in _DIRECTORY_EVENT_TYPES
    paths = [event.src_path, getattr(event, "dest_path", "")]
    return any(
        Path(str(path)).suffix.lower() in WATCHED_SUFFIXES for path in paths if path
    )


class SourceChangeHandler(FileSystemEventHandler):
    """Requests a sync pass for every relevant change in the source tree."""

    def __init__(self, on_change: Callable[[], None]) -> None:
        self._on_change = on_change

    def on_any_event(self, event: FileSystemEvent) -> None:
        if not _is_relevant(event):
            return
        logger.debug("Change detected: %s %s", event.event_type, event.src_path)
        self._on_change()


def watch_library(
    config: MirrorConfig,
    stop_event: threading.Event,
    *,
    settle_seconds: float = 1.0,
    observer_factory: Callable[[], object] = Observer,
) -> int:
    """Sync once, then re-sync whenever the source tree changes.

    The observer is running before the initial pass starts, so changes
    made during that pass trigger a follow-up pass. Every pass, the
    initial one included, runs on the sync worker, where a failure is
    logged and watching continues.

    Blocks until stop_event is set and the initial pass has finished.
    An in-flight pass is allowed to finish before returning.

    Args:
        config: The source and target roots.
        stop_event: Set by the caller (usually a signal handler) to stop.
        settle_seconds: Quiet time to wait after a change before syncing.
        observer_factory: Builds the watchdog observer.

    Returns:
        Number of sync passes run, including the initial one.
    """
    worker = SyncWorker(lambda: sync_library(config), settle_seconds=settle_seconds)
    observer = observer_factory()
    observer.schedule(SourceChangeHandler(worker.request), str(config.source_dir), recursive=True)

    observer.start()
    worker.start()
    logger.info("Watching %s for changes", config.source_dir)

    try:
        logger.info("Running initial sync")
        worker.request(immediate=True)
        worker.wait_for_first_pass()
        while not stop_event.wait(0.5):
            pass
    finally:
        logger.info("Stopping file watcher")
        observer.stop()
        observer.join()
        worker.stop()
        worker.join()

    return worker.passes
