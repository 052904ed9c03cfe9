"""
FileMailer - forward new files from a watched folder by email.

Watches a folder, mails every new file whose extension is on the allow-list
to a fixed set of addressees, then moves it into a save folder so it is not
sent twice.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import ConfigurationError, FileMailerConfig
from .core import DispatchOutcome, Dispatcher
from .mailer import TransferClient, TransferOutcome
from .mover import Relocator, RelocateResult
from .utils.logging import get_logger
from .watcher import FileEvent, FileEventKind, WatchSubscription, extension_matches

__all__ = [
    "get_logger",
    "FileMailerConfig",
    "ConfigurationError",
    # Watcher
    "WatchSubscription",
    "FileEvent",
    "FileEventKind",
    "extension_matches",
    # Mailer
    "TransferClient",
    "TransferOutcome",
    # Mover
    "Relocator",
    "RelocateResult",
    # Core dispatcher
    "Dispatcher",
    "DispatchOutcome",
]
