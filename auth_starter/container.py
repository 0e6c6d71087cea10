"""Service container wiring the shared singletons together.

Built once per process from the loaded configuration. start() runs the
blocking startup checks (database, then mail transport) and builds the
authentication engine; stop() releases everything on a best-effort basis.
"""

from typing import Any, Dict, Optional

from auth_starter.config.environment import EnvironmentConfig
from auth_starter.config.models import AppConfig
from auth_starter.hooks.engine import (
    AuthEngine,
    EngineFactory,
    EngineSettings,
    load_engine_factory,
)
from auth_starter.hooks.interceptor import LifecycleInterceptor
from auth_starter.logging import get_logger
from auth_starter.notifications.models import SMTPDeliveryError
from auth_starter.notifications.service import NotificationDispatcher
from auth_starter.notifications.smtp_client import SMTPClient
from auth_starter.notifications.templates import TemplateRenderer
from auth_starter.notifications.triggers import NotificationTriggers
from auth_starter.persistence.database import Database
from auth_starter.persistence.exceptions import PersistenceError

logger = get_logger(__name__, component="container")


class StartupError(Exception):
    """Raised when a startup check fails; the service must not accept traffic."""

    pass


class ServiceContainer:
    """Holds the process-wide services.

    Attributes:
        app_config: Validated YAML configuration
        env_config: Validated environment configuration
        database: Database adapter handed to the engine
        mail_client: Shared SMTP transport
        dispatcher: Notification dispatcher over mail_client
        triggers: Trigger bindings handed to the engine
        engine: Authentication engine (None until start(), or when unset)
        interceptor: Lifecycle interceptor around engine
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        database: Optional[Database] = None,
        mail_client: Optional[SMTPClient] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        engine_factory: Optional[EngineFactory] = None,
    ):
        self.app_config = app_config
        self.env_config = env_config

        self.database = database or Database(env_config.database_url)
        self.mail_client = mail_client or SMTPClient.from_config(env_config, app_config.email)
        self.dispatcher = NotificationDispatcher(
            self.mail_client,
            app_name=env_config.mail_from_name or app_config.app.name,
            from_address=env_config.mail_from,
            from_name=env_config.mail_from_name,
            template_renderer=template_renderer,
        )
        self.triggers = NotificationTriggers(self.dispatcher)

        if engine_factory is None and env_config.auth_engine:
            engine_factory = load_engine_factory(env_config.auth_engine)
        self.engine_factory = engine_factory

        self.engine: Optional[AuthEngine] = None
        self.interceptor: Optional[LifecycleInterceptor] = None
        self.started = False

    @property
    def engine_settings(self) -> EngineSettings:
        app = self.app_config.app
        return EngineSettings(
            app_name=app.name,
            base_path=app.auth_base_path,
            secret=self.env_config.auth_secret,
            base_url=self.env_config.auth_base_url,
            trusted_origins=list(app.frontend_urls),
        )

    def start(self) -> None:
        """Run the startup checks and build the engine.

        Raises:
            StartupError: If the database or mail check fails, or the engine
                factory raises
        """
        logger.info("Starting services", extra={"event": "services.starting"})

        try:
            self.database.connect()
        except PersistenceError as e:
            raise StartupError(f"Database unavailable: {e}") from e

        try:
            self.mail_client.verify()
        except SMTPDeliveryError as e:
            self.database.close()
            raise StartupError(f"Mail transport unavailable: {e}") from e

        if self.engine_factory is not None:
            try:
                self.engine = self.engine_factory(self.triggers, self.database, self.engine_settings)
            except Exception as e:
                self.mail_client.close()
                self.database.close()
                raise StartupError(f"Authentication engine failed to initialize: {e}") from e
            self.interceptor = LifecycleInterceptor(self.engine)
        else:
            logger.warning(
                "No authentication engine configured; auth routes will answer 503",
                extra={"event": "engine.missing"},
            )

        self.started = True
        logger.info(
            "Services started",
            extra={"event": "services.started", "engine_configured": self.engine is not None},
        )

    def stop(self) -> None:
        """Release engine, mail transport and database. Never raises."""
        if self.engine is not None:
            try:
                self.engine.close()
            except Exception as e:
                logger.warning(f"Error closing authentication engine: {e}")

        for name, closer in (("mail", self.mail_client.close), ("database", self.database.close)):
            try:
                closer()
            except Exception as e:
                logger.warning(f"Error closing {name}: {e}", extra={"event": "services.stop.error"})

        self.engine = None
        self.interceptor = None
        self.started = False
        logger.info("Services stopped", extra={"event": "services.stopped"})

    def health(self) -> Dict[str, Any]:
        """Component status for the health route."""
        database_up = False
        if self.database.is_connected:
            try:
                self.database.ping()
                database_up = True
            except PersistenceError as e:
                logger.warning(f"Database health check failed: {e}")

        components = {
            "database": "up" if database_up else "down",
            "mail": "up" if self.dispatcher.transport_healthy else "down",
        }
        status = "ok" if all(value == "up" for value in components.values()) else "degraded"
        return {"status": status, "components": components}
