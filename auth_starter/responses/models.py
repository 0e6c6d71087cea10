"""Uniform API response envelope."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

_MISSING = object()


@dataclass(frozen=True)
class ErrorDetail:
    """One entry of an error envelope's ``errors`` list."""

    message: str
    code: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {}
        if self.path is not None:
            item["path"] = self.path
        item["message"] = self.message
        if self.code is not None:
            item["code"] = self.code
        return item


@dataclass(frozen=True)
class Envelope:
    """Response shape returned to every API client.

    Attributes:
        status_code: HTTP status code, also used as the response status
        message: Human-readable summary
        timestamp: ISO-8601 UTC construction time
        data: Success payload (success envelopes only)
        errors: Error details (error envelopes only)
        path: Request path the envelope answers
    """

    status_code: int
    message: str
    timestamp: str
    data: Any = _MISSING
    errors: Optional[List[ErrorDetail]] = None
    path: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.data is not _MISSING

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys; absent optional keys are omitted."""
        body: Dict[str, Any] = {
            "statusCode": self.status_code,
            "message": self.message,
        }
        if self.has_data:
            body["data"] = self.data
        if self.errors is not None:
            body["errors"] = [error.to_dict() for error in self.errors]
        body["timestamp"] = self.timestamp
        if self.path is not None:
            body["path"] = self.path
        return body
