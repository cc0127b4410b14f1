"""Filesystem event source backed by watchdog observers."""

import os
import queue
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from nutrition_planner.services.watcher import (
    EventKind,
    EventSource,
    SourceItem,
    WatchEvent,
)

_EVENT_KINDS: dict[str, EventKind] = {
    "modified": EventKind.MODIFIED,
    "created": EventKind.CREATED,
    "deleted": EventKind.DELETED,
    "moved": EventKind.MOVED,
    "opened": EventKind.OPENED,
    "closed": EventKind.CLOSED,
    "closed_no_write": EventKind.CLOSED,
}


class QueueingEventHandler(FileSystemEventHandler):
    """Translate watchdog file events into queued watch events."""

    def __init__(self, events: "queue.Queue[SourceItem]") -> None:
        super().__init__()
        self.events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        kind = _EVENT_KINDS.get(event.event_type)
        if kind is None:
            return
        self.events.put(WatchEvent(kind=kind, path=os.fsdecode(event.src_path)))


@dataclass
class WatchdogEventSource(EventSource):
    """Non-recursive watchdog subscription on a fixed set of directories."""

    directories: Sequence[Path]
    observer: BaseObserver = field(default_factory=Observer)
    events: "queue.Queue[SourceItem]" = field(default_factory=queue.Queue)
    _closed: bool = field(default=False, init=False, repr=False)

    def start(self) -> None:
        """Schedule every directory and start the observer thread."""
        handler = QueueingEventHandler(self.events)
        for directory in self.directories:
            if not Path(directory).is_dir():
                raise FileNotFoundError(f"Watched directory not found: {directory}")
            self.observer.schedule(handler, str(directory), recursive=False)
        self.observer.start()

    def next_event(self, timeout: float | None = None) -> SourceItem:
        """Return the next queued item, raising queue.Empty on timeout."""
        return self.events.get(timeout=timeout)

    def close(self) -> None:
        """Stop the observer and signal end of stream."""
        if self._closed:
            return
        self._closed = True
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        self.events.put(None)
