"""Watcher module for monitoring the outgoing folder."""

from .filters import extension_matches, file_extension, invalid_patterns
from .subscription import (
    CLOSED,
    Channel,
    EventForwarder,
    FileEvent,
    FileEventKind,
    WatchSubscription,
    WatchSubscriptionError,
)

__all__ = [
    "extension_matches",
    "file_extension",
    "invalid_patterns",
    "WatchSubscription",
    "WatchSubscriptionError",
    "EventForwarder",
    "FileEvent",
    "FileEventKind",
    "Channel",
    "CLOSED",
]
