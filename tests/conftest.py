"""Shared fixtures for Auth Starter tests."""

from unittest.mock import MagicMock

import pytest

from auth_starter.config.environment import EnvironmentConfig
from auth_starter.config.models import AppConfig
from auth_starter.logging.context import clear_log_context
from auth_starter.notifications.smtp_client import SMTPClient


@pytest.fixture(autouse=True)
def clean_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the required environment variables and clear the optional ones."""
    monkeypatch.setenv("MAIL_HOST", "smtp.test.com")
    monkeypatch.setenv("MAIL_PORT", "587")
    monkeypatch.setenv("MAIL_FROM", "noreply@example.com")
    for name in (
        "MAIL_USER",
        "MAIL_PASSWORD",
        "MAIL_FROM_NAME",
        "DATABASE_URL",
        "AUTH_SECRET",
        "AUTH_BASE_URL",
        "AUTH_ENGINE",
        "APP_PORT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def env_config(tmp_path):
    """Environment config pointing at a throwaway SQLite file."""
    return EnvironmentConfig(
        mail_host="smtp.example.com",
        mail_port=587,
        mail_from="noreply@example.com",
        mail_user="mailer",
        mail_password="secret123",
        mail_from_name="Acme",
        database_url=f"sqlite:///{tmp_path / 'auth.db'}",
        auth_secret="s3cret",
        auth_base_url="http://localhost:3000",
    )


@pytest.fixture
def app_config():
    return AppConfig.model_validate(
        {"app": {"name": "Acme", "frontend_urls": ["http://localhost:5173"]}}
    )


@pytest.fixture
def smtp_connection():
    """The object returned by the mocked smtplib factory."""
    return MagicMock()


@pytest.fixture
def mail_client(smtp_connection):
    """SMTPClient whose connections are MagicMocks."""
    return SMTPClient(
        host="smtp.example.com",
        port=587,
        username="mailer",
        password="secret123",
        smtp_factory=MagicMock(return_value=smtp_connection),
        smtp_ssl_factory=MagicMock(return_value=smtp_connection),
    )
