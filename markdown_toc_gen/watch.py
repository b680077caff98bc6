"""File watching that re-runs TOC generation on change, built on watchdog."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .filesystem import (
    GLOB_CHARACTERS,
    Fingerprint,
    collect_file_stat,
    expand_paths,
    file_fingerprint,
)

DEFAULT_STOP_CHECK_INTERVAL = 0.5


def watch_roots(patterns: Iterable[str]) -> list[tuple[Path, bool]]:
    """Return the directories to observe for a set of path arguments.

    Directories are observed recursively, a glob from its non-magic leading
    directory, and a plain file through its parent directory only.

    Returns:
        list[tuple[Path, bool]]: ``(directory, recursive)`` pairs, de-duplicated.

    Examples:
        watch_roots(["docs", "README.md", "guides/**/*.md"])
        # [(Path("docs"), True), (Path("."), False), (Path("guides"), True)]
    """
    roots: dict[Path, bool] = {}
    for pattern in patterns:
        path = Path(pattern).expanduser()
        if path.is_dir():
            root, recursive = path, True
        elif GLOB_CHARACTERS.intersection(pattern):
            parts = []
            for part in path.parts:
                if GLOB_CHARACTERS.intersection(part):
                    break
                parts.append(part)
            root, recursive = Path(*parts) if parts else Path("."), True
        else:
            root, recursive = path.parent, False

        if root.is_dir():
            roots[root] = roots.get(root, False) or recursive
    return list(roots.items())


class _MarkdownEventHandler(FileSystemEventHandler):
    def __init__(self, watcher: FileWatcher):
        super().__init__()
        self.watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.dispatch(Path(os.fsdecode(event.src_path)))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.dispatch(Path(os.fsdecode(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic saves (ours included) land as a rename onto the target.
        if not event.is_directory:
            self.watcher.dispatch(Path(os.fsdecode(event.dest_path)))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.forget(Path(os.fsdecode(event.src_path)))


class FileWatcher:
    """Watch path arguments for changed or newly added Markdown files.

    Events come from a watchdog observer. An event is only passed on when its
    file still matches the path arguments (so files created under a watched
    directory or matching a watched glob are picked up) and its stat
    fingerprint (inode, device, size, mtime) differs from the last one seen.
    Fingerprints are refreshed after each callback, so the callback's own
    writes do not trigger it again.

    Args:
        patterns: Files, directories or glob patterns, as given to the CLI.
        on_change: Called with each changed or added path, on the observer thread.
        interval: Seconds between checks for a stop request in `run`.

    Examples:
        watcher = FileWatcher(["docs"], lambda path: print(path))
        watcher.run()
    """

    def __init__(
        self,
        patterns: Iterable[str],
        on_change: Callable[[Path], None],
        interval: float = DEFAULT_STOP_CHECK_INTERVAL,
    ):
        self.patterns = list(patterns)
        self.on_change = on_change
        self.interval = interval
        self.handler = _MarkdownEventHandler(self)
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._snapshot: dict[Path, Fingerprint] = {}
        for path in expand_paths(self.patterns):
            self.refresh(path)

        self._observer = Observer()
        for root, recursive in watch_roots(self.patterns):
            self._observer.schedule(self.handler, str(root), recursive=recursive)

    def _tracked_path(self, path: Path) -> Path | None:
        resolved = path.resolve()
        for candidate in expand_paths(self.patterns):
            if candidate.resolve() == resolved:
                return candidate
        return None

    def refresh(self, path: Path) -> None:
        """Record the current state of `path`, so our own writes are not reported."""
        try:
            self._snapshot[path] = file_fingerprint(collect_file_stat(path))
        except IOError:
            self._snapshot.pop(path, None)

    def forget(self, path: Path) -> None:
        tracked = self._tracked_path(path)
        with self._lock:
            self._snapshot.pop(tracked or path, None)

    def dispatch(self, path: Path) -> None:
        """Pass a filesystem event for `path` on to `on_change` if it is a real change."""
        tracked = self._tracked_path(path)
        if tracked is None:
            return

        with self._lock:
            try:
                fingerprint = file_fingerprint(collect_file_stat(tracked))
            except IOError:
                return
            if self._snapshot.get(tracked) == fingerprint:
                return
            self._snapshot[tracked] = fingerprint
            self.on_change(tracked)
            self.refresh(tracked)

    @property
    def running(self) -> bool:
        return self._observer.is_alive()

    def start(self) -> None:
        self._observer.start()

    def stop(self) -> None:
        """Ask `run` to return. Safe to call from `on_change`."""
        self._stop.set()

    def join(self) -> None:
        self._observer.stop()
        self._observer.join()

    def run(self) -> None:
        """Observe until `stop` is called, dispatching each change to `on_change`."""
        self.start()
        try:
            while not self._stop.wait(self.interval):
                continue
        finally:
            self.join()
