"""Main entry point for the Auth Starter service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

import uvicorn

from auth_starter.api import create_app
from auth_starter.config.environment import EnvironmentConfig
from auth_starter.config.exceptions import ConfigurationError
from auth_starter.config.loader import load_config
from auth_starter.config.models import AppConfig
from auth_starter.container import ServiceContainer, StartupError
from auth_starter.logging import get_logger
from auth_starter.logging.config import configure_logging

logger = get_logger(__name__, component="cli")

DEFAULT_HOST = "0.0.0.0"


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Auth Starter - authentication backend with lifecycle emails"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help=f"Bind address (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: APP_PORT or 3000)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Load configuration, run the startup checks, then exit",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the Auth Starter service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Configuration comes first so the log format is known
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(level=env_config.log_level, format_type=log_format, environment=environment)

        logger.info(
            f"{app_config.app.name} starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "check_only": args.check,
            },
        )

        container = ServiceContainer(app_config, env_config)

        if args.check:
            container.start()
            container.stop()
            logger.info("Startup checks passed", extra={"event": "service.check.passed"})
            return 0

        port = args.port or env_config.app_port
        logger.info(
            f"Serving on {args.host}:{port}",
            extra={"event": "service.serving", "host": args.host, "port": port},
        )
        uvicorn.run(create_app(container), host=args.host, port=port, log_config=None)

        logger.info(
            f"{app_config.app.name} stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except StartupError as e:
        print(f"Startup failed: {e}", file=sys.stderr)
        logger.critical(
            f"Startup failed: {e}",
            extra={"event": "service.startup.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
