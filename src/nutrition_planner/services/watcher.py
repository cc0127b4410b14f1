"""Background watcher that feeds data file changes into the change router."""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from nutrition_planner.services.routing import ChangeRouter

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Filesystem notification kinds delivered by an event source."""

    MODIFIED = "modified"
    CREATED = "created"
    DELETED = "deleted"
    MOVED = "moved"
    OPENED = "opened"
    CLOSED = "closed"


@dataclass(frozen=True)
class WatchEvent:
    """A single filesystem notification."""

    kind: EventKind
    path: str


SourceItem = WatchEvent | Exception | None


class EventSource(Protocol):
    """Subscription to filesystem notifications for a set of directories.

    `next_event` returns an event, an exception reported by the backend, or
    None once the source has been closed.
    """

    def start(self) -> None:
        """Subscribe to the configured directories."""

    def next_event(self, timeout: float | None = None) -> SourceItem:
        """Block until the next item is available."""

    def close(self) -> None:
        """Stop the subscription and close the event channel."""


class WatcherState(str, Enum):
    """Lifecycle of a directory watcher."""

    IDLE = "idle"
    WATCHING = "watching"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


@dataclass
class DirectoryWatcher:
    """Route modified data files one event at a time, in delivery order."""

    source: EventSource
    router: ChangeRouter
    extension: str = ".csv"
    state: WatcherState = WatcherState.IDLE
    _subscribed: bool = field(default=False, init=False, repr=False)
    _thread: threading.Thread | None = field(default=None, init=False, repr=False)

    def subscribe(self) -> None:
        """Start receiving notifications without processing them yet."""
        if self._subscribed:
            return
        self.source.start()
        self._subscribed = True

    def start(self) -> None:
        """Run the watch loop in a background thread."""
        if self._thread is not None:
            raise RuntimeError("Watcher already started")
        self.subscribe()
        self._thread = threading.Thread(
            target=self.run, name="directory-watcher", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Close the event source and wait for the loop to finish."""
        self.source.close()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Watcher thread did not stop within %s s", timeout)
        else:
            self.state = WatcherState.STOPPED

    def run(self) -> None:
        """Process notifications until the event source is closed."""
        self.subscribe()
        self.state = WatcherState.WATCHING
        logger.info("Watching for data file changes")
        while True:
            item = self.source.next_event()
            if item is None:
                break
            if isinstance(item, Exception):
                logger.error("File watcher error: %s", item)
                continue
            self._dispatch(item)
        self.state = WatcherState.STOPPED
        logger.info("File watcher stopped")

    def is_relevant(self, event: WatchEvent) -> bool:
        """Return True for content modifications of data files."""
        return event.kind is EventKind.MODIFIED and event.path.endswith(
            self.extension
        )

    def _dispatch(self, event: WatchEvent) -> None:
        if not self.is_relevant(event):
            return
        logger.info("Modified file: %s", event.path)
        self.state = WatcherState.DISPATCHING
        try:
            self.router.handle_file_change(event.path)
        except Exception:
            logger.exception("Unexpected error handling %s", event.path)
        finally:
            self.state = WatcherState.WATCHING
