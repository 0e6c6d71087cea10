"""Environment variable loading and validation."""

import os
import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/auth_starter.db"

_ENGINE_PATH_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Secrets and connection settings read from the process environment."""

    def __init__(
        self,
        mail_host: str,
        mail_port: int,
        mail_from: str,
        mail_user: Optional[str] = None,
        mail_password: Optional[str] = None,
        mail_from_name: Optional[str] = None,
        database_url: Optional[str] = None,
        auth_secret: Optional[str] = None,
        auth_base_url: Optional[str] = None,
        auth_engine: Optional[str] = None,
        app_port: int = 3000,
        log_level: Optional[str] = None,
    ):
        self.mail_host = mail_host
        self.mail_port = mail_port
        self.mail_from = mail_from
        self.mail_user = mail_user
        self.mail_password = mail_password
        self.mail_from_name = mail_from_name
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.auth_secret = auth_secret
        self.auth_base_url = auth_base_url
        self.auth_engine = auth_engine
        self.app_port = app_port
        self.log_level = log_level


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - MAIL_HOST: SMTP server hostname
    - MAIL_PORT: SMTP server port (1-65535)
    - MAIL_FROM: Sender address for outgoing mail

    Optional environment variables:
    - MAIL_USER / MAIL_PASSWORD: SMTP credentials (both or neither)
    - MAIL_FROM_NAME: Sender display name (defaults to the app name)
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/auth_starter.db)
    - AUTH_SECRET: Secret handed to the authentication engine
    - AUTH_BASE_URL: Public base URL handed to the authentication engine
    - AUTH_ENGINE: Engine factory as 'package.module:callable'
    - APP_PORT: HTTP port (default 3000)
    - LOG_LEVEL: Override log level

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    mail_host = os.getenv("MAIL_HOST")
    mail_port_str = os.getenv("MAIL_PORT")
    mail_from = os.getenv("MAIL_FROM")

    mail_user = os.getenv("MAIL_USER") or None
    mail_password = os.getenv("MAIL_PASSWORD") or None
    mail_from_name = os.getenv("MAIL_FROM_NAME") or None
    database_url = os.getenv("DATABASE_URL") or None
    auth_secret = os.getenv("AUTH_SECRET") or None
    auth_base_url = os.getenv("AUTH_BASE_URL") or None
    auth_engine = os.getenv("AUTH_ENGINE") or None
    app_port_str = os.getenv("APP_PORT")
    log_level = os.getenv("LOG_LEVEL") or None

    if not mail_host:
        errors.append("Missing required environment variable: MAIL_HOST")

    if not mail_port_str:
        errors.append("Missing required environment variable: MAIL_PORT")

    if not mail_from:
        errors.append("Missing required environment variable: MAIL_FROM")

    mail_port = _parse_port("MAIL_PORT", mail_port_str, errors)

    app_port = 3000
    if app_port_str:
        parsed = _parse_port("APP_PORT", app_port_str, errors)
        if parsed is not None:
            app_port = parsed

    if mail_from:
        try:
            mail_from = validate_email(mail_from, check_deliverability=False).normalized
        except EmailNotValidError as e:
            errors.append(f"Invalid email address in MAIL_FROM: '{mail_from}' - {e}")

    if log_level and log_level.upper() not in _VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(_VALID_LOG_LEVELS)}"
        )

    if mail_user and not mail_password:
        errors.append(
            "MAIL_USER is set but MAIL_PASSWORD is not. Both must be set for authentication."
        )
    elif mail_password and not mail_user:
        errors.append(
            "MAIL_PASSWORD is set but MAIL_USER is not. Both must be set for authentication."
        )

    if auth_engine and not _ENGINE_PATH_PATTERN.match(auth_engine):
        errors.append(
            f"Invalid AUTH_ENGINE: '{auth_engine}'. Expected 'package.module:callable'."
        )

    if errors:
        raise ConfigurationError.from_environment(errors)

    return EnvironmentConfig(
        mail_host=mail_host,
        mail_port=mail_port,
        mail_from=mail_from,
        mail_user=mail_user,
        mail_password=mail_password,
        mail_from_name=mail_from_name,
        database_url=database_url,
        auth_secret=auth_secret,
        auth_base_url=auth_base_url,
        auth_engine=auth_engine,
        app_port=app_port,
        log_level=log_level.upper() if log_level else None,
    )


def _parse_port(name: str, raw: Optional[str], errors: list) -> Optional[int]:
    if not raw:
        return None
    try:
        port = int(raw)
    except ValueError:
        errors.append(f"Invalid {name}: '{raw}'. Must be a valid integer.")
        return None
    if port < 1 or port > 65535:
        errors.append(f"Invalid {name}: {port}. Must be between 1 and 65535.")
        return None
    return port
