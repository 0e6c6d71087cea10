"""Lifecycle hooks around the pluggable authentication engine."""

from .engine import AuthEngine, EngineFactory, EngineSettings, load_engine_factory
from .interceptor import LifecycleInterceptor
from .models import EngineError, EngineRequest, InterceptedResponse, LifecycleEvent
from .normalizer import (
    ERROR_STATUS_CODES,
    LifecycleNormalizer,
    status_for_code,
)

__all__ = [
    "AuthEngine",
    "EngineFactory",
    "EngineSettings",
    "load_engine_factory",
    "LifecycleInterceptor",
    "LifecycleNormalizer",
    "EngineError",
    "EngineRequest",
    "InterceptedResponse",
    "LifecycleEvent",
    "ERROR_STATUS_CODES",
    "status_for_code",
]
