"""Watchdog subscription that merges notifications and errors into one inbox."""

import os
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..utils.logging import get_logger

logger = get_logger(__name__)


class WatchSubscriptionError(Exception):
    """Raised when the watched folder cannot be (or can no longer be) watched."""


class FileEventKind(str, Enum):
    """Kinds of notifications the dispatcher distinguishes."""

    CREATED = "created"
    OTHER = "other"


@dataclass(frozen=True)
class FileEvent:
    """A single filesystem notification."""

    path: Path
    kind: FileEventKind


class Channel(str, Enum):
    """Logical input channels of the inbox."""

    EVENTS = "events"
    ERRORS = "errors"


# Placed on a channel to mark it closed
CLOSED = object()


def _decode(path: str | bytes) -> str:
    return os.fsdecode(path)


class EventForwarder(FileSystemEventHandler):
    """
    Converts watchdog events into FileEvents and forwards them to a subscription.

    Runs on the observer thread. Anything that goes wrong while converting an
    event is forwarded on the errors channel instead of killing the observer.
    """

    def __init__(self, subscription: "WatchSubscription"):
        super().__init__()
        self.subscription = subscription

    def dispatch(self, event: FileSystemEvent):
        try:
            super().dispatch(event)
        except Exception as e:
            self.subscription.publish_error(e)

    def on_any_event(self, event: FileSystemEvent):
        root = self.subscription.directory
        src_path = _decode(event.src_path)

        if event.event_type == EVENT_TYPE_DELETED and os.path.normpath(src_path) == str(root):
            self.subscription.publish_error(
                WatchSubscriptionError(f"Watched folder was removed: {root}")
            )
            return

        if event.event_type == EVENT_TYPE_CREATED:
            self.subscription.publish_event(FileEvent(Path(src_path), FileEventKind.CREATED))
            return

        # A rename that lands directly in the watched folder shows up as a new file
        if event.event_type == EVENT_TYPE_MOVED:
            dest_path = _decode(event.dest_path)
            if os.path.normpath(os.path.dirname(dest_path)) == str(root):
                self.subscription.publish_event(FileEvent(Path(dest_path), FileEventKind.CREATED))
                return

        self.subscription.publish_event(FileEvent(Path(src_path), FileEventKind.OTHER))


class WatchSubscription:
    """
    Watches exactly one folder and exposes its notifications as an inbox.

    Notifications and notification errors share one FIFO queue, tagged by
    channel, so the consumer services whichever arrives first. Closing the
    subscription stops the observer and closes the events channel.
    """

    def __init__(self, directory: Path):
        """
        Initialize the subscription.

        Args:
            directory: Folder to watch (not recursive)
        """
        self.directory = Path(os.path.normpath(os.path.abspath(directory)))
        self._inbox: queue.Queue = queue.Queue()
        self._observer: Observer | None = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        """Check if the observer is currently running."""
        return self._observer is not None

    def start(self):
        """
        Register interest in the folder and start delivering notifications.

        Raises:
            WatchSubscriptionError: If the folder is missing or cannot be watched.
        """
        with self._lock:
            if self._observer is not None:
                logger.warning("Subscription is already running")
                return

            if not self.directory.is_dir():
                raise WatchSubscriptionError(f"Cannot watch {self.directory}: not a directory")

            observer = Observer()
            try:
                observer.schedule(EventForwarder(self), str(self.directory), recursive=False)
                observer.start()
            except OSError as e:
                raise WatchSubscriptionError(f"Cannot watch {self.directory}: {e}") from e

            self._observer = observer

    def close(self):
        """Stop the observer and close the events channel."""
        with self._lock:
            observer, self._observer = self._observer, None

        if observer is not None:
            observer.stop()
            observer.join(timeout=5.0)

        self.close_channel(Channel.EVENTS)

    def publish_event(self, event: FileEvent):
        """Queue a notification on the events channel."""
        self._inbox.put((Channel.EVENTS, event))

    def publish_error(self, error: BaseException):
        """Queue a notification error on the errors channel."""
        self._inbox.put((Channel.ERRORS, error))

    def close_channel(self, channel: Channel):
        """Mark a channel closed; the consumer stops when it reaches the marker."""
        self._inbox.put((channel, CLOSED))

    def get(self, timeout: float | None = None) -> tuple[Channel, object]:
        """
        Wait for the next item from either channel.

        Returns:
            Tuple of (channel, item); item is CLOSED when the channel was closed

        Raises:
            queue.Empty: If timeout expires first
        """
        return self._inbox.get(timeout=timeout)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
