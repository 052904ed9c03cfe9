"""Transfer client that mails a file as an attachment over SMTPS."""

import mimetypes
import smtplib
import ssl
from collections.abc import Callable
from dataclasses import dataclass
from email.message import EmailMessage
from pathlib import Path

from ..config.models import EmailSettings, SMTPSettings
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class TransferError(Exception):
    """Base class for failures while mailing a file."""


class AttachmentError(TransferError):
    """The file could not be read or attached."""


class TransmissionError(TransferError):
    """The mail server connection, login or submission failed."""


@dataclass
class TransferOutcome:
    """Result of a single transfer attempt."""

    path: Path
    success: bool
    error_message: str | None = None
    error: TransferError | None = None

    @property
    def filename(self) -> str:
        """Base name of the transferred file."""
        return self.path.name


class TransferClient:
    """
    Sends one file per call to the configured addressees.

    Every call makes exactly one connection attempt; there is no retry.
    The source file is never moved or deleted here.
    """

    def __init__(
        self,
        smtp: SMTPSettings,
        email: EmailSettings,
        smtp_factory: Callable[..., smtplib.SMTP] | None = None,
    ):
        """
        Initialize the transfer client.

        Args:
            smtp: Mail server settings
            email: Sender and addressees
            smtp_factory: Callable returning a connected SMTP client (defaults to SMTP_SSL)
        """
        self.smtp = smtp
        self.email = email
        self.smtp_factory = smtp_factory or smtplib.SMTP_SSL

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.smtp.verify_certificate:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def build_message(self, path: Path) -> EmailMessage:
        """
        Build the outgoing message with the file attached.

        Raises:
            AttachmentError: If the file cannot be read, or its name cannot
                be used as a subject, body or attachment name.
        """
        path = Path(path)
        base = path.name

        try:
            data = path.read_bytes()
        except OSError as e:
            raise AttachmentError(f"attach file {base}: {e}") from e

        mime_type, encoding = mimetypes.guess_type(base)
        if mime_type is None or encoding is not None:
            mime_type = DEFAULT_MIME_TYPE
        maintype, subtype = mime_type.split("/", 1)

        message = EmailMessage()
        message["From"] = self.email.sender
        message["To"] = ", ".join(self.email.addressees)
        try:
            message["Subject"] = base
            message.set_content(base)
            message.add_attachment(data, maintype=maintype, subtype=subtype, filename=base)
        except (ValueError, UnicodeError) as e:
            raise AttachmentError(f"attach file {base!r}: {e}") from e
        return message

    def transmit(self, message: EmailMessage):
        """
        Submit a message to the mail server over an implicit TLS connection.

        Raises:
            TransmissionError: If connecting, logging in or sending fails.
            AttachmentError: If the message cannot be encoded for sending.
        """
        kwargs = {"context": self._ssl_context()}
        if self.smtp.timeout_seconds is not None:
            kwargs["timeout"] = self.smtp.timeout_seconds

        try:
            with self.smtp_factory(self.smtp.host, self.smtp.port, **kwargs) as server:
                if self.smtp.username:
                    server.login(self.smtp.username, self.smtp.password.get_secret_value())
                server.send_message(
                    message,
                    from_addr=self.email.sender,
                    to_addrs=list(self.email.addressees),
                )
        except (smtplib.SMTPException, OSError) as e:
            raise TransmissionError(f"send file {message['Subject']}: {e}") from e
        except UnicodeError as e:
            raise AttachmentError(f"attach file {message['Subject']!r}: {e}") from e

    def send(self, path: Path) -> TransferOutcome:
        """
        Mail a file to the addressees.

        Args:
            path: File to attach

        Returns:
            TransferOutcome with operation status
        """
        path = Path(path)

        try:
            message = self.build_message(path)
            logger.debug(f"Connecting to {self.smtp.host}:{self.smtp.port} for {path.name}")
            self.transmit(message)
        except TransferError as e:
            return TransferOutcome(path=path, success=False, error_message=str(e), error=e)

        return TransferOutcome(path=path, success=True)
