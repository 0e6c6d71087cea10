"""Pipeline stage wrapping each engine call in the lifecycle hooks."""

import uuid
from typing import Optional

from auth_starter.logging import get_logger
from auth_starter.logging.context import log_context
from auth_starter.notifications.models import NotificationDeliveryError
from auth_starter.responses import Envelope

from .engine import AuthEngine
from .models import EngineError, EngineRequest, InterceptedResponse, LifecycleEvent
from .normalizer import LifecycleNormalizer, status_for_code

logger = get_logger(__name__, component="lifecycle")


class LifecycleInterceptor:
    """Runs before-hook, engine, after-hook for one request.

    EngineError and NotificationDeliveryError raised by the engine become the
    request's raw error result; any other exception propagates to the caller.
    """

    def __init__(self, engine: AuthEngine, normalizer: Optional[LifecycleNormalizer] = None):
        self.engine = engine
        self.normalizer = normalizer or LifecycleNormalizer()

    def dispatch(self, request: EngineRequest) -> InterceptedResponse:
        request_id = request.request_id or uuid.uuid4().hex

        with log_context(request_id=request_id, auth_path=request.path):
            self.normalizer.before(LifecycleEvent(request.method, request.path))

            try:
                raw_result = self.engine.handle(request)
            except EngineError as e:
                raw_result = e
            except NotificationDeliveryError as e:
                logger.error(
                    f"Engine operation failed on notification delivery: {e.message}",
                    extra={
                        "event": "lifecycle.notification_failed",
                        "notification_kind": e.kind.value,
                    },
                )
                raw_result = EngineError("INTERNAL_SERVER_ERROR", e.message, status=500)

            outcome = self.normalizer.after(
                LifecycleEvent(request.method, request.path, raw_result)
            )

            if isinstance(outcome, Envelope):
                logger.info(
                    f"{request.method} {request.path} -> {outcome.status_code}",
                    extra={"event": "lifecycle.completed", "status_code": outcome.status_code},
                )
                return InterceptedResponse(outcome.status_code, outcome.to_dict(), normalized=True)

            if isinstance(outcome, EngineError):
                status = outcome.status or status_for_code(outcome.code)
                return InterceptedResponse(status, outcome.to_dict(), normalized=False)

            return InterceptedResponse(200, outcome, normalized=False)
