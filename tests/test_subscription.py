"""Tests for the watchdog subscription."""

import queue
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from filemailer.watcher import (
    CLOSED,
    Channel,
    EventForwarder,
    FileEvent,
    FileEventKind,
    WatchSubscription,
    WatchSubscriptionError,
)


def drain(subscription: WatchSubscription, timeout: float = 0.5) -> list[tuple]:
    items = []
    while True:
        try:
            items.append(subscription.get(timeout=timeout))
        except queue.Empty:
            return items


class TestEventForwarder:
    """Tests for converting watchdog events."""

    @pytest.fixture
    def subscription(self, watch_folder):
        """Subscription that is never started."""
        return WatchSubscription(watch_folder)

    @pytest.fixture
    def forwarder(self, subscription):
        """Create an EventForwarder."""
        return EventForwarder(subscription)

    def test_file_created(self, forwarder, subscription, watch_folder):
        """Test that file creation becomes a CREATED event."""
        forwarder.dispatch(FileCreatedEvent(str(watch_folder / "report.zip")))

        assert subscription.get(timeout=1) == (
            Channel.EVENTS,
            FileEvent(watch_folder / "report.zip", FileEventKind.CREATED),
        )

    def test_directory_created(self, forwarder, subscription, watch_folder):
        """Test that directory creation is forwarded; the dispatcher filters it."""
        forwarder.dispatch(DirCreatedEvent(str(watch_folder / "save")))

        channel, event = subscription.get(timeout=1)
        assert event.kind == FileEventKind.CREATED

    def test_modified_is_other(self, forwarder, subscription, watch_folder):
        """Test that other kinds are forwarded as OTHER."""
        forwarder.dispatch(FileModifiedEvent(str(watch_folder / "report.zip")))

        assert subscription.get(timeout=1)[1].kind == FileEventKind.OTHER

    def test_rename_within_folder_is_created(self, forwarder, subscription, watch_folder):
        """Test that a rename into the folder announces the new name."""
        forwarder.dispatch(
            FileMovedEvent(str(watch_folder / "report.zip.part"), str(watch_folder / "report.zip"))
        )

        assert subscription.get(timeout=1)[1] == FileEvent(
            watch_folder / "report.zip", FileEventKind.CREATED
        )

    def test_move_into_save_folder_is_other(self, forwarder, subscription, watch_folder):
        """Test that moving a sent file aside is not a new file."""
        forwarder.dispatch(
            FileMovedEvent(str(watch_folder / "report.zip"), str(watch_folder / "save" / "report.zip"))
        )

        assert subscription.get(timeout=1)[1].kind == FileEventKind.OTHER

    def test_root_removed_is_error(self, forwarder, subscription, watch_folder):
        """Test that losing the watched folder is reported on the errors channel."""
        forwarder.dispatch(DirDeletedEvent(str(watch_folder)))

        channel, error = subscription.get(timeout=1)
        assert channel == Channel.ERRORS
        assert isinstance(error, WatchSubscriptionError)

    def test_conversion_failure_is_error(self, subscription, watch_folder):
        """Test that handler exceptions go to the errors channel."""
        forwarder = EventForwarder(subscription)
        forwarder.on_any_event = MagicMock(side_effect=ValueError("bad event"))

        forwarder.dispatch(FileCreatedEvent(str(watch_folder / "report.zip")))

        channel, error = subscription.get(timeout=1)
        assert channel == Channel.ERRORS
        assert str(error) == "bad event"


class TestWatchSubscription:
    """Tests for WatchSubscription."""

    def test_inbox_is_fifo_across_channels(self, watch_folder):
        """Test that events and errors come out in the order they went in."""
        subscription = WatchSubscription(watch_folder)
        event = FileEvent(watch_folder / "a.zip", FileEventKind.CREATED)
        error = OSError("overflow")

        subscription.publish_error(error)
        subscription.publish_event(event)
        subscription.close_channel(Channel.EVENTS)

        assert drain(subscription, timeout=0.1) == [
            (Channel.ERRORS, error),
            (Channel.EVENTS, event),
            (Channel.EVENTS, CLOSED),
        ]

    def test_start_missing_folder(self, tmp_path):
        """Test that a missing folder cannot be watched."""
        with pytest.raises(WatchSubscriptionError):
            WatchSubscription(tmp_path / "missing").start()

    def test_start_on_file(self, tmp_path):
        """Test that a regular file cannot be watched."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(WatchSubscriptionError):
            WatchSubscription(target).start()

    def test_is_running(self, watch_folder):
        """Test is_running property."""
        subscription = WatchSubscription(watch_folder)

        assert not subscription.is_running
        subscription.start()
        assert subscription.is_running
        subscription.close()
        assert not subscription.is_running

    def test_close_closes_events_channel(self, watch_folder):
        """Test that close() ends the events channel."""
        subscription = WatchSubscription(watch_folder)
        subscription.start()
        subscription.close()

        items = drain(subscription, timeout=0.2)
        assert items[-1] == (Channel.EVENTS, CLOSED)

    def test_delivers_real_file_creation(self, watch_folder):
        """Test that a file written into the folder is announced."""
        with WatchSubscription(watch_folder) as subscription:
            (watch_folder / "report.zip").write_bytes(b"archive")
            time.sleep(0.5)

        events = [item for channel, item in drain(subscription, timeout=0.2) if item is not CLOSED]
        assert FileEvent(watch_folder / "report.zip", FileEventKind.CREATED) in events

    def test_not_recursive(self, watch_folder):
        """Test that files in sub-folders are not announced as created."""
        sub = watch_folder / "save"
        sub.mkdir()

        with WatchSubscription(watch_folder) as subscription:
            (sub / "report.zip").write_bytes(b"archive")
            time.sleep(0.5)

        created = [
            item.path
            for channel, item in drain(subscription, timeout=0.2)
            if item is not CLOSED and item.kind == FileEventKind.CREATED
        ]
        assert sub / "report.zip" not in created

    def test_directory_is_normalised(self, watch_folder):
        """Test that relative segments are removed from the watched path."""
        subscription = WatchSubscription(watch_folder / "sub" / "..")
        assert subscription.directory == Path(str(watch_folder))
