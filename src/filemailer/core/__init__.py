"""Core dispatch pipeline."""

from .dispatcher import DispatchOutcome, Dispatcher

__all__ = [
    "Dispatcher",
    "DispatchOutcome",
]
