"""Notification dispatcher for authentication lifecycle emails.

This module provides the NotificationDispatcher that turns one notification
kind plus engine-supplied parameters into a rendered HTML email and hands it
to the shared mail transport, exactly once, with no retry.
"""

import html
import logging
from email.message import EmailMessage
from typing import Optional, Union

from auth_starter.logging import get_logger
from auth_starter.logging.context import log_context
from auth_starter.utils.timestamps import current_year

from .models import (
    EXPIRY_TIMES,
    OTP_COPY,
    PASSWORD_CHANGED_SUBJECT,
    PASSWORD_RESET_COPY,
    TWO_FACTOR_COPY,
    VERIFICATION_SUBJECT,
    EmailCopy,
    NotificationDeliveryError,
    NotificationKind,
    NotificationRequest,
    NotificationResult,
    OtpType,
    SMTPDeliveryError,
)
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")


class NotificationDispatcher:
    """Sends transactional emails for the authentication lifecycle.

    Each send_* method:
    1. Selects subject and copy for the kind (OTP flavors via OTP_COPY)
    2. Renders the kind's template with CURRENT_YEAR and APP_NAME added
    3. Hands the message to the mail transport once

    Transport failures are logged and re-raised as NotificationDeliveryError
    with a stable per-kind message. Template errors propagate unchanged.
    """

    def __init__(
        self,
        mail_client: SMTPClient,
        app_name: str,
        from_address: str,
        from_name: Optional[str] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the dispatcher.

        Args:
            mail_client: Shared mail transport
            app_name: Display name substituted as APP_NAME
            from_address: Envelope sender address
            from_name: Sender display name (defaults to app_name)
            template_renderer: Renderer instance (bundled templates if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.mail_client = mail_client
        self.app_name = app_name
        self.sender = build_sender_address(from_address, from_name or app_name)
        self.template_renderer = template_renderer or TemplateRenderer()
        self.logger = logger_instance or logger

    @property
    def transport_healthy(self) -> bool:
        """Whether the transport passed its last verification check."""
        return self.mail_client.is_verified and not self.mail_client.is_closed

    def send_verification_otp(
        self, email: str, otp: str, otp_type: Union[str, OtpType, None]
    ) -> NotificationResult:
        """Send a one-time code for sign-in, email verification or password reset."""
        flavor = OtpType.parse(otp_type)
        copy = OTP_COPY[flavor]
        request = self._otp_request(NotificationKind.OTP, email, otp, copy)
        return self.dispatch(request, otp_type=flavor.value)

    def send_two_factor_otp(self, email: str, otp: str) -> NotificationResult:
        """Send a two-factor authentication code."""
        request = self._otp_request(NotificationKind.TWO_FACTOR_OTP, email, otp, TWO_FACTOR_COPY)
        return self.dispatch(request)

    def send_verification_email(
        self, email: str, verification_url: str, user_name: Optional[str] = None
    ) -> NotificationResult:
        """Send an email-verification link."""
        request = NotificationRequest(
            kind=NotificationKind.VERIFICATION,
            recipient_email=email,
            subject=VERIFICATION_SUBJECT,
            variables={
                "GREETING": _greeting(user_name),
                "VERIFICATION_URL": verification_url,
                "EXPIRY_TIME": EXPIRY_TIMES[NotificationKind.VERIFICATION],
            },
        )
        return self.dispatch(request)

    def send_password_reset_email(
        self, email: str, reset_url: str, user_name: Optional[str] = None
    ) -> NotificationResult:
        """Send a password-reset link."""
        copy = PASSWORD_RESET_COPY
        message = copy.message
        if user_name:
            message = f"Hi {_escape(user_name)}, {message[0].lower()}{message[1:]}"

        request = NotificationRequest(
            kind=NotificationKind.PASSWORD_RESET,
            recipient_email=email,
            subject=copy.subject,
            variables={
                "TITLE": copy.subject,
                "ICON": copy.icon,
                "HEADER_TITLE": copy.header_title,
                "GREETING": _greeting(user_name),
                "MESSAGE": message,
                "RESET_URL": reset_url,
                "EXPIRY_TIME": EXPIRY_TIMES[NotificationKind.PASSWORD_RESET],
            },
        )
        return self.dispatch(request)

    def send_password_change_success_email(
        self, email: str, user_name: Optional[str] = None
    ) -> NotificationResult:
        """Confirm that a password was changed."""
        request = NotificationRequest(
            kind=NotificationKind.PASSWORD_CHANGED,
            recipient_email=email,
            subject=PASSWORD_CHANGED_SUBJECT,
            variables={"GREETING": _greeting(user_name)},
        )
        return self.dispatch(request)

    def dispatch(self, request: NotificationRequest, **log_fields) -> NotificationResult:
        """Render and send one notification.

        Args:
            request: Notification to deliver
            **log_fields: Extra fields for the success log record

        Returns:
            NotificationResult describing the delivered message

        Raises:
            NotificationDeliveryError: Invalid recipient or transport failure
            TemplateNotFoundError: The kind's template is missing
        """
        kind = request.kind

        with log_context(notification_kind=kind.value):
            try:
                recipient = normalize_recipient(request.recipient_email)
            except ValueError as e:
                self.logger.error(
                    f"Rejected {kind.value} notification: {e}",
                    extra={"event": "notification.recipient.invalid"},
                )
                raise NotificationDeliveryError(kind, request.recipient_email) from e

            variables = {
                **request.variables,
                "CURRENT_YEAR": current_year(),
                "APP_NAME": self.app_name,
            }
            html_body = self.template_renderer.render(request.template_name, variables)

            message = EmailMessage()
            message["Subject"] = request.subject
            message["From"] = self.sender
            message["To"] = recipient
            message.set_content(html_body, subtype="html")

            best_effort = not self.transport_healthy

            try:
                self.mail_client.send(message)
            except SMTPDeliveryError as e:
                self.logger.error(
                    f"Failed to send {kind.value} email to {recipient}: {e}",
                    exc_info=True,
                    extra={
                        "event": "notification.send.failure",
                        "recipient": recipient,
                        "error_type": type(e).__name__,
                    },
                )
                raise NotificationDeliveryError(kind, recipient) from e

            self.logger.info(
                f"Sent {kind.value} email to {recipient}",
                extra={
                    "event": "notification.send.success",
                    "recipient": recipient,
                    "best_effort": best_effort,
                    **log_fields,
                },
            )

        return NotificationResult(
            kind=kind,
            recipient=recipient,
            subject=request.subject,
            best_effort=best_effort,
        )

    def _otp_request(
        self, kind: NotificationKind, email: str, otp: str, copy: EmailCopy
    ) -> NotificationRequest:
        return NotificationRequest(
            kind=kind,
            recipient_email=email,
            subject=copy.subject,
            variables={
                "TITLE": copy.subject,
                "ICON": copy.icon,
                "HEADER_TITLE": copy.header_title,
                "MESSAGE": copy.message,
                "OTP_CODE": otp,
                "EXPIRY_TIME": EXPIRY_TIMES[kind],
            },
        )


def _greeting(user_name: Optional[str]) -> str:
    return f"Hi {_escape(user_name)}," if user_name else "Hello,"


def _escape(value: str) -> str:
    # Names are user-supplied; URLs and codes come from the engine unescaped
    return html.escape(value, quote=True)
