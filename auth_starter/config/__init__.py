"""Configuration management for the auth starter service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    ApplicationConfig,
    EmailConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "load_config",
    "load_environment_config",
    "AppConfig",
    "ApplicationConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
