"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can catch
every database failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be reached or is used before connect().

    Examples:
    - Invalid database URL format
    - Server unreachable during the startup check
    - Driver for the URL's dialect not installed
    """

    pass
