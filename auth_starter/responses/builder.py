"""Pure constructors for response envelopes.

Every constructor stamps a fresh UTC timestamp and never raises. Status
codes that are not standard HTTP codes fall back to the constructor's
default family (200 for success, 400 for error).
"""

from http import HTTPStatus
from typing import Any, Iterable, Optional

from auth_starter.utils.timestamps import format_iso_timestamp

from .models import Envelope, ErrorDetail

_KNOWN_STATUS_CODES = frozenset(status.value for status in HTTPStatus)


def success(
    data: Any,
    message: str = "Success",
    status: int = HTTPStatus.OK,
    path: Optional[str] = None,
) -> Envelope:
    """Build a success envelope carrying ``data``."""
    return Envelope(
        status_code=_coerce_status(status, HTTPStatus.OK),
        message=message,
        data=data,
        timestamp=format_iso_timestamp(),
        path=path,
    )


def error(
    message: str,
    status: int = HTTPStatus.BAD_REQUEST,
    errors: Optional[Iterable[ErrorDetail]] = None,
    path: Optional[str] = None,
) -> Envelope:
    """Build an error envelope; ``errors`` defaults to an empty list."""
    return Envelope(
        status_code=_coerce_status(status, HTTPStatus.BAD_REQUEST),
        message=message,
        errors=list(errors or []),
        timestamp=format_iso_timestamp(),
        path=path,
    )


def validation_error(
    message: str = "Validation failed",
    errors: Optional[Iterable[ErrorDetail]] = None,
    path: Optional[str] = None,
) -> Envelope:
    return error(message, HTTPStatus.BAD_REQUEST, errors, path)


def unauthorized(message: str = "Unauthorized", path: Optional[str] = None) -> Envelope:
    return _bare(HTTPStatus.UNAUTHORIZED, message, path)


def forbidden(message: str = "Forbidden", path: Optional[str] = None) -> Envelope:
    return _bare(HTTPStatus.FORBIDDEN, message, path)


def not_found(message: str = "Not found", path: Optional[str] = None) -> Envelope:
    return _bare(HTTPStatus.NOT_FOUND, message, path)


def internal_server_error(
    message: str = "Internal server error", path: Optional[str] = None
) -> Envelope:
    return _bare(HTTPStatus.INTERNAL_SERVER_ERROR, message, path)


def _bare(status: HTTPStatus, message: str, path: Optional[str]) -> Envelope:
    return Envelope(
        status_code=int(status),
        message=message,
        timestamp=format_iso_timestamp(),
        path=path,
    )


def _coerce_status(status: Any, default: HTTPStatus) -> int:
    try:
        code = int(status)
    except (TypeError, ValueError):
        return int(default)
    return code if code in _KNOWN_STATUS_CODES else int(default)
