"""Shapes exchanged between the authentication engine and the lifecycle hooks."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


class EngineError(Exception):
    """Domain error reported by the authentication engine.

    Engines may raise it or return it; either way the lifecycle hook turns
    it into an error envelope for mutating requests.

    Attributes:
        code: Engine error code (e.g. USER_NOT_FOUND)
        message: Client-safe description
        status: HTTP status the engine suggests; used only on pass-through
    """

    def __init__(self, code: Optional[str], message: str, status: Optional[int] = None):
        self.code = code
        self.message = message
        self.status = status
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class MalformedLifecycleResult(Exception):
    """Raised internally when an engine result cannot be classified."""

    pass


@dataclass(frozen=True)
class EngineRequest:
    """One inbound request handed to the engine.

    Attributes:
        method: HTTP method, upper-case
        path: Path relative to the auth base path (e.g. /sign-in/email)
        body: Parsed JSON body, if any
        headers: Request headers (lower-case names)
        query: Query string parameters
        request_id: Correlation id used in logs
    """

    method: str
    path: str
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    request_id: Optional[str] = None


@dataclass(frozen=True)
class LifecycleEvent:
    """A single pass through the engine for one request.

    ``raw_result`` is None for the ``before`` hook, otherwise the engine's
    payload, an EngineError, or a mapping carrying an ``error`` marker.
    """

    http_method: str
    request_path: str
    raw_result: Any = None


@dataclass(frozen=True)
class InterceptedResponse:
    """What the HTTP layer emits for one engine call."""

    status_code: int
    body: Any
    normalized: bool
