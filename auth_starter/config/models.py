"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ApplicationConfig(BaseModel):
    """HTTP surface settings."""

    name: str = Field("Auth Starter", min_length=1, description="Application display name")
    global_prefix: str = Field("api", description="Prefix for non-auth routes (e.g. /api/health)")
    auth_base_path: str = Field(
        "/api/auth", description="Mount point of the authentication engine routes"
    )
    frontend_urls: List[str] = Field(
        default_factory=list, description="Origins allowed by CORS"
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("name cannot be empty or whitespace-only")
        return stripped

    @field_validator("global_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Strip surrounding slashes: 'api', '/api/' and 'api/' are equivalent."""
        return v.strip().strip("/")

    @field_validator("auth_base_path")
    @classmethod
    def normalize_base_path(cls, v: str) -> str:
        """Ensure a single leading slash and no trailing slash."""
        stripped = v.strip().strip("/")
        if not stripped:
            raise ValueError("auth_base_path cannot be the root path")
        return f"/{stripped}"

    @field_validator("frontend_urls")
    @classmethod
    def normalize_urls(cls, v: List[str]) -> List[str]:
        """Drop blanks and trailing slashes so CORS origin matching is exact."""
        return [url.strip().rstrip("/") for url in v if url and url.strip()]


class EmailConfig(BaseModel):
    """Outbound mail settings that are not secrets."""

    use_tls: bool = Field(True, description="Use STARTTLS on non-465 ports")
    timeout_seconds: int = Field(
        30, ge=1, le=300, description="SMTP socket timeout in seconds"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object loaded from config.yaml."""

    app: ApplicationConfig = Field(
        default_factory=ApplicationConfig, description="HTTP application settings"
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
