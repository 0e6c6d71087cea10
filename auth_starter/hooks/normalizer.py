"""Lifecycle hook that normalizes engine results into response envelopes.

Only mutating (POST) requests are normalized. Error results are mapped
through a fixed code -> status table; success results get a path-specific
message. Normalization never raises: anything it cannot classify becomes a
generic 400 envelope.
"""

from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, Optional, Tuple

from auth_starter.logging import get_logger
from auth_starter.responses import Envelope, ErrorDetail
from auth_starter.responses import builder

from .models import LifecycleEvent, MalformedLifecycleResult

logger = get_logger(__name__, component="lifecycle")

MUTATING_METHODS = frozenset({"POST"})

GENERIC_ERROR_MESSAGE = "An error occurred"
DEFAULT_ERROR_CODE = "BAD_REQUEST"

ERROR_STATUS_CODES: Mapping = MappingProxyType({
    # 401
    "INVALID_EMAIL_OR_PASSWORD": 401,
    "INVALID_CREDENTIALS": 401,
    "INVALID_PASSWORD": 401,
    "UNAUTHORIZED": 401,
    # 404
    "USER_NOT_FOUND": 404,
    # 409
    "EMAIL_ALREADY_EXISTS": 409,
    "CONFLICT": 409,
    # 403
    "EMAIL_NOT_VERIFIED": 403,
    "USER_SUSPENDED": 403,
    "FORBIDDEN": 403,
    # 400
    "BAD_REQUEST": 400,
    "INVALID_EMAIL": 400,
    "PASSWORD_TOO_WEAK": 400,
    "INVALID_INPUT": 400,
    "VALIDATION_FAILED": 400,
    # 429
    "RATE_LIMIT_EXCEEDED": 429,
    "TOO_MANY_REQUESTS": 429,
    # 500
    "INTERNAL_SERVER_ERROR": 500,
})

# Checked in order; first path fragment contained in the request path wins
SUCCESS_ROUTES: Tuple[Tuple[str, str, int], ...] = (
    ("/sign-up", "User registered successfully", HTTPStatus.CREATED),
    ("/sign-in", "User signed in successfully", HTTPStatus.OK),
    ("/change-password", "Password changed successfully", HTTPStatus.OK),
    ("/verify-email", "Email verified successfully", HTTPStatus.OK),
    ("/forget-password", "Password reset email sent successfully", HTTPStatus.OK),
    ("/reset-password", "Password reset successfully", HTTPStatus.OK),
    ("/sign-out", "User signed out successfully", HTTPStatus.OK),
)


def status_for_code(code: Optional[str]) -> int:
    """Resolve an engine error code to an HTTP status (400 when unknown)."""
    if not isinstance(code, str):
        code = DEFAULT_ERROR_CODE
    return int(ERROR_STATUS_CODES.get(code, HTTPStatus.BAD_REQUEST))


def success_route(request_path: str) -> Tuple[str, int]:
    """Pick the success message and status for a request path."""
    for fragment, message, status in SUCCESS_ROUTES:
        if fragment in request_path:
            return message, int(status)
    return "Success", int(HTTPStatus.OK)


def is_error_result(raw_result: Any) -> bool:
    """An engine result is an error when it is an exception or flags ``error``."""
    if isinstance(raw_result, BaseException):
        return True
    return isinstance(raw_result, Mapping) and bool(raw_result.get("error"))


def extract_error(raw_result: Any) -> Tuple[Optional[str], str]:
    """Pull ``(code, message)`` out of an engine error result.

    Top-level ``code``/``message`` win; a nested ``error`` mapping fills in
    whatever the top level lacks.

    Raises:
        MalformedLifecycleResult: If the result has no readable error shape
    """
    if isinstance(raw_result, BaseException):
        code = getattr(raw_result, "code", None)
        message = getattr(raw_result, "message", None) or str(raw_result)
    elif isinstance(raw_result, Mapping):
        code = raw_result.get("code")
        message = raw_result.get("message")
        nested = raw_result.get("error")
        if isinstance(nested, Mapping):
            code = code if code is not None else nested.get("code")
            message = message if message else nested.get("message")
        elif isinstance(nested, str) and not message:
            message = nested
    else:
        raise MalformedLifecycleResult(f"Unclassifiable engine result: {type(raw_result).__name__}")

    if not isinstance(code, str):
        code = None
    if message is None or (isinstance(message, str) and not message.strip()):
        message = GENERIC_ERROR_MESSAGE
    elif not isinstance(message, str):
        message = str(message)

    return code, message


class LifecycleNormalizer:
    """Turns one LifecycleEvent into an Envelope (or passes it through)."""

    def before(self, event: LifecycleEvent) -> Any:
        """Hook run before the engine.

        A no-op hook point: there is no engine result to shape yet, so the
        event passes through untouched. The interceptor ignores the return
        value; subclasses override this to inspect a request before it runs.
        """
        return event.raw_result

    def after(self, event: LifecycleEvent) -> Any:
        """Hook run on the engine's terminal result."""
        return self.normalize(event)

    def normalize(self, event: LifecycleEvent) -> Any:
        """Normalize a lifecycle event.

        Returns:
            An Envelope for POST events with a result; otherwise the raw
            result unchanged
        """
        if (event.http_method or "").upper() not in MUTATING_METHODS:
            return event.raw_result

        if event.raw_result is None:
            return None

        try:
            if is_error_result(event.raw_result):
                envelope = self._error_envelope(event)
            else:
                envelope = self._success_envelope(event)
        except Exception as e:
            logger.warning(
                f"Could not classify engine result for {event.request_path}: {e}",
                extra={
                    "event": "lifecycle.malformed_result",
                    "error_type": type(e).__name__,
                },
            )
            return builder.error(
                GENERIC_ERROR_MESSAGE, HTTPStatus.BAD_REQUEST, path=event.request_path
            )

        logger.debug(
            f"Normalized {event.request_path} -> {envelope.status_code}",
            extra={"event": "lifecycle.normalized", "status_code": envelope.status_code},
        )
        return envelope

    def _error_envelope(self, event: LifecycleEvent) -> Envelope:
        code, message = extract_error(event.raw_result)
        status = status_for_code(code)
        return builder.error(
            message,
            status,
            errors=[ErrorDetail(message=message, code=code)],
            path=event.request_path,
        )

    def _success_envelope(self, event: LifecycleEvent) -> Envelope:
        message, status = success_route(event.request_path)
        return builder.success(event.raw_result, message, status, path=event.request_path)
