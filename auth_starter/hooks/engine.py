"""Interface of the pluggable authentication engine.

The engine owns credentials, sessions and verification state. It is built
once at startup by a factory named in AUTH_ENGINE ('package.module:callable')
and receives the notification triggers, the database adapter and its
settings explicitly.
"""

import importlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from auth_starter.config.exceptions import ENV_SUGGESTIONS, ConfigurationError
from auth_starter.logging import get_logger

from .models import EngineRequest

logger = get_logger(__name__, component="engine")


@dataclass(frozen=True)
class EngineSettings:
    """Settings handed to the engine factory."""

    app_name: str
    base_path: str
    secret: Optional[str] = None
    base_url: Optional[str] = None
    trusted_origins: List[str] = field(default_factory=list)


class AuthEngine(ABC):
    """Base class for authentication engines.

    handle() returns the raw result for one request: a payload, an
    EngineError, or a mapping with an ``error`` marker. It may also raise
    EngineError. Notification triggers called from inside handle() raise
    NotificationDeliveryError, which must propagate out of handle().
    """

    @abstractmethod
    def handle(self, request: EngineRequest) -> Any:
        """Process one authentication request."""

    def close(self) -> None:
        """Release engine resources at shutdown."""


EngineFactory = Callable[..., AuthEngine]


def load_engine_factory(dotted_path: str) -> EngineFactory:
    """Import an engine factory from ``package.module:callable``.

    Raises:
        ConfigurationError: If the module or attribute cannot be loaded
    """
    module_name, sep, attribute = dotted_path.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            f"Invalid AUTH_ENGINE: '{dotted_path}'",
            suggestions=[ENV_SUGGESTIONS["AUTH_ENGINE"]],
            variables=["AUTH_ENGINE"],
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import authentication engine module '{module_name}': {e}",
            suggestions=[
                f"Install the package providing '{module_name}' in this environment",
                "Unset AUTH_ENGINE to start without an engine (auth routes answer 503)",
            ],
            variables=["AUTH_ENGINE"],
        ) from e

    factory = getattr(module, attribute, None)
    if factory is None or not callable(factory):
        raise ConfigurationError(
            f"'{attribute}' in module '{module_name}' is not a callable engine factory",
            suggestions=[f"Define {attribute}(triggers, database, settings) in {module_name}"],
            variables=["AUTH_ENGINE"],
        )

    logger.debug(
        "Loaded engine factory",
        extra={"event": "engine.factory.loaded", "engine_factory": dotted_path},
    )
    return factory
