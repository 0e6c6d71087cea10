"""Transactional email notifications for the authentication lifecycle.

Components:
- NotificationDispatcher: one method per notification kind
- NotificationTriggers: lifecycle moment -> dispatcher call bindings
- TemplateRenderer: Jinja2-backed ``{{KEY}}`` substitution over HTML files
- SMTPClient: shared mail transport with a startup verification check
"""

from .models import (
    NotificationDeliveryError,
    NotificationError,
    NotificationKind,
    NotificationRequest,
    NotificationResult,
    NotificationTemplateError,
    OtpType,
    SMTPDeliveryError,
    TemplateNotFoundError,
)
from .service import NotificationDispatcher
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import TemplateRenderer
from .triggers import NotificationTriggers, TriggerMoment

__all__ = [
    # Main services
    "NotificationDispatcher",
    "NotificationTriggers",
    "TriggerMoment",
    # Models
    "NotificationKind",
    "NotificationRequest",
    "NotificationResult",
    "OtpType",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "TemplateNotFoundError",
    "NotificationDeliveryError",
    "SMTPDeliveryError",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Utilities
    "build_sender_address",
    "normalize_recipient",
]
