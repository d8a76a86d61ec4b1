"""
Directory watch subscription built on watchdog.

Events from the observer threads are only queued; the manager loop is the
single consumer.
"""

from __future__ import annotations

import logging
import queue
from typing import TYPE_CHECKING

from watchdog.events import (
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from hotcert.common.exceptions import WatchBackendError, WatchSubscriptionError
from hotcert.common.models import FileEvent

if TYPE_CHECKING:
    from pathlib import Path

    from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)


def _decode(path: bytes | str) -> str:
    if isinstance(path, bytes):
        return path.decode(errors="surrogateescape")
    return path


class QueueingEventHandler(FileSystemEventHandler):
    """Forwards watchdog events to a queue as FileEvents."""

    def __init__(self, events: queue.Queue, watched_dirs: set[str]):
        self.events = events
        self.watched_dirs = watched_dirs

    def on_any_event(self, event: FileSystemEvent) -> None:
        src = _decode(event.src_path)
        dest = _decode(getattr(event, "dest_path", "") or "")
        self.events.put(
            FileEvent(
                event_type=event.event_type,
                src_path=src,
                dest_path=dest,
                is_directory=event.is_directory,
            )
        )
        # The watch on a removed directory is gone for good
        if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED) and (
            src in self.watched_dirs
        ):
            self.events.put(
                WatchBackendError(f"watched directory {src} was removed")
            )


class DirectoryWatch:
    """A watchdog observer registered on a fixed set of directories."""

    def __init__(self, events: queue.Queue, observer: BaseObserver | None = None):
        self.events = events
        self._observer = observer
        self._watched: set[str] = set()
        self._handler = QueueingEventHandler(events, self._watched)
        self._reported_dead = False

    def open(self) -> None:
        """Create and start the observer."""
        try:
            if self._observer is None:
                self._observer = Observer()
            self._observer.daemon = True
            self._observer.start()
        except Exception as err:
            msg = f"can't create watcher: {err}"
            raise WatchSubscriptionError(msg) from err

    def add(self, directory: Path, side: str) -> None:
        """Register a non-recursive watch on ``directory``."""
        assert self._observer is not None
        if not directory.is_dir():
            msg = f"can't watch {side} file: directory {directory} does not exist"
            raise WatchSubscriptionError(msg, side=side)
        try:
            self._observer.schedule(self._handler, str(directory), recursive=False)
        except OSError as err:
            msg = f"can't watch {side} file: {directory}: {err}"
            raise WatchSubscriptionError(msg, side=side) from err
        self._watched.add(str(directory))
        logger.debug("Watching directory %s", directory)

    def check_alive(self) -> None:
        """Queue a backend error the first time the observer is found dead."""
        if self._observer is None or self._reported_dead:
            return
        if not self._observer.is_alive():
            self._reported_dead = True
            self.events.put(WatchBackendError("watch observer stopped unexpectedly"))

    def close(self, timeout: float | None = None) -> None:
        """Stop the observer and wait for its threads to exit."""
        if self._observer is None:
            return
        observer, self._observer = self._observer, None
        observer.stop()
        if observer.is_alive():
            observer.join(timeout)
        self._watched.clear()
