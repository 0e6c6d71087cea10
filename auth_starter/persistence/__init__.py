"""Persistence adapter: pooled SQLAlchemy engine with a startup check.

Example usage:
    >>> from auth_starter.persistence import Database
    >>> database = Database("sqlite:///./data/auth_starter.db")
    >>> database.connect()
    >>> with database.session() as session:
    ...     ...
    >>> database.close()
"""

from .database import Database
from .exceptions import DatabaseConnectionError, PersistenceError

__all__ = [
    "Database",
    "PersistenceError",
    "DatabaseConnectionError",
]
