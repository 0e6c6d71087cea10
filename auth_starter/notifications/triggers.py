"""Notification trigger bindings.

The authentication engine calls these at fixed lifecycle moments. Each
binding makes exactly one dispatcher call and blocks until it completes,
so a delivery failure fails the engine operation that requested it.
"""

from enum import Enum
from typing import Callable, Dict, Optional

from .models import NotificationResult
from .service import NotificationDispatcher


class TriggerMoment(str, Enum):
    """Lifecycle moments that request a notification."""

    SIGN_UP_VERIFICATION = "sign-up-verification"
    EMAIL_VERIFICATION_REQUESTED = "email-verification-requested"
    OTP_REQUESTED = "otp-requested"
    TWO_FACTOR_CHALLENGE = "two-factor-challenge"
    PASSWORD_RESET_REQUESTED = "password-reset-requested"
    PASSWORD_RESET = "password-reset"


class NotificationTriggers:
    """Binds engine lifecycle moments to dispatcher calls.

    Every method raises NotificationDeliveryError on failure; engines must
    let it propagate out of the operation in progress.
    """

    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher

    def on_sign_up_verification(
        self, email: str, url: str, name: Optional[str] = None
    ) -> NotificationResult:
        return self.dispatcher.send_verification_email(email, url, name)

    def on_email_verification_requested(
        self, email: str, url: str, name: Optional[str] = None
    ) -> NotificationResult:
        return self.dispatcher.send_verification_email(email, url, name)

    def on_otp_requested(self, email: str, otp: str, otp_type: str) -> NotificationResult:
        return self.dispatcher.send_verification_otp(email, otp, otp_type)

    def on_two_factor_challenge(self, email: str, otp: str) -> NotificationResult:
        return self.dispatcher.send_two_factor_otp(email, otp)

    def on_password_reset_requested(
        self, email: str, url: str, name: Optional[str] = None
    ) -> NotificationResult:
        return self.dispatcher.send_password_reset_email(email, url, name)

    def on_password_reset(self, email: str, name: Optional[str] = None) -> NotificationResult:
        return self.dispatcher.send_password_change_success_email(email, name)

    def as_mapping(self) -> Dict[TriggerMoment, Callable[..., NotificationResult]]:
        """Bindings keyed by moment, for engines configured by name."""
        return {
            TriggerMoment.SIGN_UP_VERIFICATION: self.on_sign_up_verification,
            TriggerMoment.EMAIL_VERIFICATION_REQUESTED: self.on_email_verification_requested,
            TriggerMoment.OTP_REQUESTED: self.on_otp_requested,
            TriggerMoment.TWO_FACTOR_CHALLENGE: self.on_two_factor_challenge,
            TriggerMoment.PASSWORD_RESET_REQUESTED: self.on_password_reset_requested,
            TriggerMoment.PASSWORD_RESET: self.on_password_reset,
        }
