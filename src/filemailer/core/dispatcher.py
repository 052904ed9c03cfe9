"""Dispatch loop: watch notifications -> filter -> transfer -> relocate."""

import threading
import time
from collections.abc import Callable
from enum import Enum

from ..config.models import FileMailerConfig
from ..mailer import TransferClient
from ..mover import Relocator
from ..utils.logging import get_logger
from ..watcher import (
    CLOSED,
    Channel,
    FileEvent,
    FileEventKind,
    WatchSubscription,
    extension_matches,
    file_extension,
    invalid_patterns,
)

logger = get_logger(__name__)


class DispatchOutcome(str, Enum):
    """Terminal outcome of handling one inbox item."""

    SENT = "sent"
    SKIPPED = "skipped"
    TRANSFER_FAILED = "transfer_failed"
    RELOCATE_FAILED = "relocate_failed"
    IGNORED = "ignored"
    WATCH_ERROR = "watch_error"


class Dispatcher:
    """
    Mails every new file with an allowed extension and moves it aside.

    Inbox items are handled one at a time, in the order the subscription
    delivers them. Per-file failures are logged and never stop the loop.
    A transfer that hangs holds up every later event; set
    ``smtp.timeout_seconds`` to bound it.
    """

    def __init__(
        self,
        config: FileMailerConfig,
        subscription: WatchSubscription | None = None,
        client: TransferClient | None = None,
        relocator: Relocator | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the dispatcher.

        Args:
            config: Loaded configuration
            subscription: Source of notifications (defaults to watching config.watch.folder)
            client: Transfer client (defaults to one built from config)
            relocator: Relocator for sent files
            sleep: Used for the settle delay before a file is read
        """
        self.config = config
        self.subscription = subscription or WatchSubscription(config.watch.folder)
        self.client = client or TransferClient(smtp=config.smtp, email=config.email)
        self.relocator = relocator or Relocator()
        self.sleep = sleep

        self._thread: threading.Thread | None = None

        for pattern in invalid_patterns(config.watch.filetypes):
            logger.warning(f"Extension pattern {pattern!r} is not a valid regular expression")

    @property
    def is_running(self) -> bool:
        """Check if the dispatch thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def handle_event(self, event: FileEvent) -> DispatchOutcome:
        """
        Run one notification through the pipeline.

        Args:
            event: Notification from the subscription

        Returns:
            DispatchOutcome describing what happened to the file
        """
        if event.kind != FileEventKind.CREATED:
            return DispatchOutcome.IGNORED

        path = event.path
        if not path.is_file():
            return DispatchOutcome.IGNORED

        if not extension_matches(self.config.watch.filetypes, file_extension(path.name)):
            logger.info(f"File: {path.name} has been ignored by extension")
            return DispatchOutcome.SKIPPED

        # Best effort only: a writer slower than this still races the read
        if self.config.watch.settle_seconds > 0:
            self.sleep(self.config.watch.settle_seconds)

        outcome = self.client.send(path)
        if not outcome.success:
            logger.error(f"File: {path.name} could not be sent: {outcome.error_message}")
            return DispatchOutcome.TRANSFER_FAILED

        logger.info(f"File: {path.name} has been sent to addressees")

        result = self.relocator.relocate(path, self.config.watch.save_path)
        if not result.success:
            logger.warning(f"File: {path.name} was sent but not moved: {result.error_message}")
            return DispatchOutcome.RELOCATE_FAILED

        return DispatchOutcome.SENT

    def handle_error(self, error: BaseException) -> DispatchOutcome:
        """Log a notification error; the loop keeps running."""
        logger.error(f"Watcher error: {error}")
        return DispatchOutcome.WATCH_ERROR

    def run(self):
        """Consume the subscription inbox until one of its channels is closed."""
        while True:
            channel, item = self.subscription.get()

            if item is CLOSED:
                logger.debug(f"{channel.value} channel closed, dispatch loop exiting")
                return

            if channel == Channel.ERRORS:
                self.handle_error(item)
                continue

            try:
                self.handle_event(item)
            except Exception:
                logger.exception(f"Unexpected error handling {item.path}")

    def start(self):
        """
        Start watching and dispatching in the background.

        Raises:
            WatchSubscriptionError: If the watched folder cannot be watched.
        """
        if self.is_running:
            logger.warning("Dispatcher is already running")
            return

        self.subscription.start()
        logger.info(f"Watching folder: {self.config.watch.folder}")
        logger.info(f"Addressees: {', '.join(self.config.email.addressees)}")

        self._thread = threading.Thread(target=self.run, name="filemailer-dispatch", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None):
        """
        Close the subscription and wait for the in-flight file to finish.

        Args:
            timeout: Maximum seconds to wait for the dispatch thread
        """
        if self._thread is None:
            return

        self.subscription.close()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Dispatch thread still busy, abandoning it")
        self._thread = None
        logger.info("Stopped watching")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False
