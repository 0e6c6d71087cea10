"""SMTP mail transport.

One SMTPClient is created at startup and shared by every request. Each
send() opens its own connection, so concurrent sends share no socket state
and no lock is needed. verify() is the startup connectivity check.
"""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email

from auth_starter.config.environment import EnvironmentConfig
from auth_starter.config.models import EmailConfig
from auth_starter.logging import get_logger

from .models import SMTPDeliveryError

logger = get_logger(__name__, component="mail")

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib with TLS/SSL, auth and a verification check.

    Attributes:
        is_verified: True once verify() succeeded; reset by close()
        is_closed: True after close(); further sends are refused
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 30,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client.

        Args:
            host: SMTP server hostname
            port: SMTP server port (465 uses implicit TLS)
            username: Login user (auth skipped when omitted)
            password: Login password
            use_tls: Upgrade with STARTTLS on non-465 ports
            timeout: Socket timeout in seconds
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL
        self.is_verified = False
        self.is_closed = False

    @classmethod
    def from_config(cls, env_config: EnvironmentConfig, email_config: EmailConfig) -> "SMTPClient":
        return cls(
            host=env_config.mail_host,
            port=env_config.mail_port,
            username=env_config.mail_user,
            password=env_config.mail_password,
            use_tls=email_config.use_tls,
            timeout=email_config.timeout_seconds,
        )

    def verify(self) -> None:
        """Connect, authenticate and NOOP to prove the server is usable.

        Raises:
            SMTPDeliveryError: If the server is unreachable or rejects login
        """
        self.is_verified = False
        try:
            self._with_connection(lambda smtp: smtp.noop())
        except SMTPDeliveryError:
            logger.error(
                f"SMTP verification failed for {self.host}:{self.port}",
                extra={"event": "mail.verify.failed"},
            )
            raise

        self.is_verified = True
        self.is_closed = False
        logger.info(
            f"SMTP server {self.host}:{self.port} verified",
            extra={"event": "mail.verify.success"},
        )

    def send(self, message: EmailMessage) -> None:
        """Send a fully built message.

        Sends attempted before a successful verify() still go out but are
        logged as best-effort.

        Raises:
            SMTPDeliveryError: If the client is closed or delivery fails
        """
        if self.is_closed:
            raise SMTPDeliveryError("Mail transport is closed")

        if not self.is_verified:
            logger.warning(
                "Sending without a verified SMTP connection (best-effort)",
                extra={"event": "mail.send.unverified"},
            )

        self._with_connection(lambda smtp: smtp.send_message(message))
        logger.debug(f"Message sent to {message['To']}")

    def close(self) -> None:
        """Mark the transport closed. In-flight sends are not awaited."""
        self.is_closed = True
        self.is_verified = False
        logger.info("Mail transport closed", extra={"event": "mail.closed"})

    def _with_connection(self, action: Callable) -> None:
        smtp = None
        try:
            smtp = self._connect()
            self._prepare(smtp)
            action(smtp)
        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except Exception as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

    def _connect(self):
        if self.port == IMPLICIT_TLS_PORT:
            logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
            return self.smtp_ssl_factory(
                self.host,
                self.port,
                timeout=self.timeout,
                context=ssl.create_default_context(),
            )

        logger.debug(f"Connecting to {self.host}:{self.port}")
        return self.smtp_factory(self.host, self.port, timeout=self.timeout)

    def _prepare(self, smtp) -> None:
        if self.port != IMPLICIT_TLS_PORT and self.use_tls:
            smtp.starttls(context=ssl.create_default_context())

        if self.username and self.password:
            smtp.login(self.username, self.password)


def normalize_recipient(address: str) -> str:
    """Validate a single recipient address and return its normalized form.

    Raises:
        ValueError: If the address is invalid
    """
    try:
        return validate_email(address, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid recipient address '{address}': {e}") from e


def build_sender_address(from_address: str, from_name: Optional[str] = None) -> str:
    """Build the From header, e.g. ``Auth Starter <noreply@example.com>``."""
    return formataddr((from_name or "", from_address))
