"""Re-run conversions when catalog files are added or changed."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .catalog import resolve_patterns

_LOGGER = logging.getLogger(__name__)

_GLOB_CHARACTERS = frozenset("*?[")


class DebouncedRunner:
    """Run ``action`` once per burst of triggers, never concurrently.

    Each :meth:`trigger` restarts the debounce timer. When the timer fires
    while a previous run is still in progress, one follow-up run is queued
    and executed after the current run finishes; further triggers during
    that time collapse into the same follow-up.
    """

    def __init__(
        self,
        action: Callable[[], object],
        delay: float = 0.3,
        *,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer,
    ) -> None:
        self._action = action
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._running = False
        self._pending = False

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self._delay, self._fire)
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = False

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
            if self._running:
                self._pending = True
                return
            self._running = True

        while True:
            try:
                self._action()
            except Exception:
                _LOGGER.exception("Conversion triggered by a file change failed")

            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                self._pending = False


def static_root(pattern: str) -> Path:
    """Return the deepest directory of ``pattern`` that contains no glob syntax."""

    parts = Path(pattern).parts
    static: list[str] = []
    for part in parts[:-1]:
        if _GLOB_CHARACTERS.intersection(part):
            break
        static.append(part)
    return Path(*static) if static else Path(".")


class CatalogChangeHandler(FileSystemEventHandler):
    """Forward create, modify and move events for matching catalogs."""

    def __init__(self, patterns: Sequence[str], runner: DebouncedRunner) -> None:
        super().__init__()
        self.patterns = list(patterns)
        self.runner = runner

    def matches(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = path.decode("utf-8")
        candidate = Path(path).resolve()
        return any(match.resolve() == candidate for match in resolve_patterns(self.patterns))

    def _handle(self, event: FileSystemEvent, path: str | bytes) -> None:
        if event.is_directory or not self.matches(path):
            return
        _LOGGER.info("Detected change in %s", path)
        self.runner.trigger()

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._handle(event, getattr(event, "dest_path", event.src_path))


def watch(
    patterns: Iterable[str],
    action: Callable[[], object],
    *,
    debounce: float = 0.3,
    stop_event: threading.Event | None = None,
) -> None:
    """Watch catalog patterns and re-run ``action`` on changes until stopped.

    Blocks until ``stop_event`` is set or the process is interrupted.
    """

    patterns = list(patterns)
    runner = DebouncedRunner(action, debounce)
    handler = CatalogChangeHandler(patterns, runner)
    stop_event = stop_event or threading.Event()

    observer = Observer()
    watched: set[tuple[Path, bool]] = set()
    for pattern in patterns:
        root = static_root(pattern)
        # Globs in directory components need the subtree watched.
        recursive = root != Path(pattern).parent
        if (root, recursive) in watched:
            continue
        if not root.is_dir():
            _LOGGER.warning("Cannot watch %s: directory %s does not exist", pattern, root)
            continue
        watched.add((root, recursive))
        observer.schedule(handler, str(root), recursive=recursive)
        _LOGGER.info("Watching %s for changes", root)

    observer.start()
    try:
        while not stop_event.is_set():
            stop_event.wait(0.5)
    except KeyboardInterrupt:
        _LOGGER.info("Stopping watch")
    finally:
        runner.cancel()
        observer.stop()
        observer.join()


__all__ = ["CatalogChangeHandler", "DebouncedRunner", "static_root", "watch"]
