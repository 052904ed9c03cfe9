"""Mailer module for sending files as attachments."""

from .client import (
    AttachmentError,
    TransferClient,
    TransferError,
    TransferOutcome,
    TransmissionError,
)

__all__ = [
    "TransferClient",
    "TransferOutcome",
    "TransferError",
    "AttachmentError",
    "TransmissionError",
]
