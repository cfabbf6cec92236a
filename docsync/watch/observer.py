"""Watchdog adapter feeding filesystem events into the watch controller."""

from __future__ import annotations

from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..logging import get_logger
from .controller import WatchController

logger = get_logger("watch.observer")


class SourceEventHandler(FileSystemEventHandler):
    """Forwards file events (both ends of a move) to the controller."""

    def __init__(self, controller: WatchController) -> None:
        super().__init__()
        self.controller = controller

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        for attr in ("src_path", "dest_path"):
            path = getattr(event, attr, "")
            if isinstance(path, bytes):
                path = path.decode("utf-8", errors="replace")
            if path and self.controller.handle_change(path):
                return


class SourceWatcher:
    """Recursively watches the source root while the dev server runs."""

    def __init__(self, root: Path, controller: WatchController) -> None:
        self.root = root
        self.controller = controller
        self._observer: Observer | None = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            logger.warning("Watcher already running")
            return
        if not self.root.is_dir():
            # Nothing to watch yet; the initial run will report zero pages.
            logger.warning("Source root %s does not exist; file watching disabled", self.root)
            return
        observer = Observer()
        observer.schedule(SourceEventHandler(self.controller), str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Watching %s for changes", self.root)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching")


__all__ = ["SourceEventHandler", "SourceWatcher"]
