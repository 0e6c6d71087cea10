"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List, Optional

from .environment import EnvironmentConfig


def check_for_warnings(
    config_dict: Dict[str, Any], env_config: Optional[EnvironmentConfig] = None
) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary from YAML
        env_config: Validated environment configuration, if already loaded

    Returns:
        List of warning messages
    """
    warning_messages = []

    app_section = config_dict.get("app", {})
    if isinstance(app_section, dict):
        frontend_urls = app_section.get("frontend_urls", [])
        if not frontend_urls:
            warning_messages.append(
                "No frontend_urls configured; browsers on other origins will be blocked by CORS"
            )
        elif isinstance(frontend_urls, list) and "*" in frontend_urls:
            warning_messages.append(
                "frontend_urls contains '*'; credentialed requests from any origin are allowed"
            )

    email_section = config_dict.get("email", {})
    use_tls = True
    if isinstance(email_section, dict):
        use_tls = email_section.get("use_tls", True)

    if env_config is not None:
        if env_config.mail_port == 25 or (not use_tls and env_config.mail_port != 465):
            warning_messages.append(
                f"SMTP on port {env_config.mail_port} without TLS sends OTP codes in plaintext"
            )
        if env_config.auth_engine is None:
            warning_messages.append(
                "AUTH_ENGINE is not set; authentication routes will answer 503"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
