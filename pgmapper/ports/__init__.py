"""Public port exports for concrete session implementations."""

from .db_api import Database, Dialect, PostgresDialect

__all__ = [
    "Database",
    "Dialect",
    "PostgresDialect",
]
