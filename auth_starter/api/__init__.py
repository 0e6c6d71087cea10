"""HTTP surface of the auth starter service."""

from .app import create_app

__all__ = ["create_app"]
