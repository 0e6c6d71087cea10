"""Data models and exceptions for the notification pipeline.

This module defines the notification kinds, the closed OTP copy table, the
request/result types, and the exception hierarchy used by the template
renderer, the SMTP client and the dispatcher.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when a template cannot be loaded or rendered."""

    pass


class TemplateNotFoundError(NotificationTemplateError):
    """Raised when no template resource matches the requested name.

    This is a developer error (a missing or misnamed file), not a runtime
    condition to recover from.
    """

    def __init__(self, template_name: str, search_path: str):
        self.template_name = template_name
        self.search_path = search_path
        super().__init__(f"Template not found: {template_name} (searched {search_path})")


class SMTPDeliveryError(NotificationError):
    """Raised by the SMTP client when a connection, check or send fails.

    Carries raw transport detail and is never shown to API clients.
    """

    pass


class NotificationKind(str, Enum):
    """Kinds of transactional email the dispatcher sends."""

    VERIFICATION = "verification"
    OTP = "otp"
    TWO_FACTOR_OTP = "two-factor-otp"
    PASSWORD_RESET = "password-reset"
    PASSWORD_CHANGED = "password-changed"


# Stable, client-safe failure messages per kind
DELIVERY_FAILURE_MESSAGES: Dict[NotificationKind, str] = {
    NotificationKind.VERIFICATION: "Failed to send verification email",
    NotificationKind.OTP: "Failed to send verification email",
    NotificationKind.TWO_FACTOR_OTP: "Failed to send two-factor authentication email",
    NotificationKind.PASSWORD_RESET: "Failed to send password reset email",
    NotificationKind.PASSWORD_CHANGED: "Failed to send password change notification",
}

TEMPLATE_NAMES: Dict[NotificationKind, str] = {
    NotificationKind.VERIFICATION: "verification-email",
    NotificationKind.OTP: "otp-email",
    NotificationKind.TWO_FACTOR_OTP: "otp-email",
    NotificationKind.PASSWORD_RESET: "password-reset-email",
    NotificationKind.PASSWORD_CHANGED: "password-change-success",
}


class NotificationDeliveryError(NotificationError):
    """Raised by the dispatcher when a notification could not be delivered.

    The message is the stable per-kind text from DELIVERY_FAILURE_MESSAGES;
    the underlying transport error is chained as ``__cause__`` only.
    Callers must treat this as fatal to the operation that requested it.
    """

    def __init__(self, kind: NotificationKind, recipient: Optional[str] = None):
        self.kind = kind
        self.recipient = recipient
        super().__init__(DELIVERY_FAILURE_MESSAGES[kind])

    @property
    def message(self) -> str:
        return DELIVERY_FAILURE_MESSAGES[self.kind]


class OtpType(str, Enum):
    """OTP flavors issued by the engine; unknown values map to GENERIC."""

    SIGN_IN = "sign-in"
    EMAIL_VERIFICATION = "email-verification"
    FORGET_PASSWORD = "forget-password"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: Union[str, "OtpType", None]) -> "OtpType":
        if isinstance(value, OtpType):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.GENERIC


@dataclass(frozen=True)
class EmailCopy:
    """Subject line and header copy for one email variant."""

    subject: str
    header_title: str
    icon: str
    message: str


OTP_COPY: Dict[OtpType, EmailCopy] = {
    OtpType.SIGN_IN: EmailCopy(
        subject="Your Sign In OTP Code",
        header_title="Sign In Verification",
        icon="🔐",
        message=(
            "You requested to sign in to your account. "
            "Please use the code below to complete your sign in:"
        ),
    ),
    OtpType.EMAIL_VERIFICATION: EmailCopy(
        subject="Verify Your Email Address",
        header_title="Email Verification",
        icon="✉️",
        message=(
            "Thank you for signing up! "
            "Please verify your email address using the code below:"
        ),
    ),
    OtpType.FORGET_PASSWORD: EmailCopy(
        subject="Reset Your Password",
        header_title="Password Reset",
        icon="🔑",
        message=(
            "You requested to reset your password. "
            "Please use the code below to proceed:"
        ),
    ),
    OtpType.GENERIC: EmailCopy(
        subject="Your Verification Code",
        header_title="Verification Code",
        icon="🔒",
        message="Please use the verification code below:",
    ),
}

TWO_FACTOR_COPY = EmailCopy(
    subject="Your Two-Factor Authentication Code",
    header_title="Two-Factor Authentication",
    icon="🔐",
    message="Your two-factor authentication code is:",
)

PASSWORD_RESET_COPY = EmailCopy(
    subject="Reset Your Password",
    header_title="Password Reset",
    icon="🔑",
    message=(
        "You requested to reset your password. "
        "Click the button below to reset your password:"
    ),
)

VERIFICATION_SUBJECT = "Verify Your Email Address"
PASSWORD_CHANGED_SUBJECT = "Your Password Has Been Changed Successfully"

# Expiry copy shown to the user; the engine owns the real lifetimes
EXPIRY_TIMES: Dict[NotificationKind, str] = {
    NotificationKind.OTP: "10 minutes",
    NotificationKind.TWO_FACTOR_OTP: "5 minutes",
    NotificationKind.VERIFICATION: "24 hours",
    NotificationKind.PASSWORD_RESET: "1 hour",
}


@dataclass
class NotificationRequest:
    """One outbound notification, consumed once by the dispatcher.

    Attributes:
        kind: Notification kind (selects template and failure message)
        recipient_email: Destination address as supplied by the engine
        subject: Subject line
        variables: Placeholder name -> substitution value
    """

    kind: NotificationKind
    recipient_email: str
    subject: str
    variables: Dict[str, Union[str, int]] = field(default_factory=dict)

    @property
    def template_name(self) -> str:
        return TEMPLATE_NAMES[self.kind]


@dataclass
class NotificationResult:
    """Outcome of a delivered notification.

    Attributes:
        kind: Notification kind
        recipient: Normalized recipient address
        subject: Subject line that was sent
        best_effort: True when sent before the transport check succeeded
    """

    kind: NotificationKind
    recipient: str
    subject: str
    best_effort: bool = False
