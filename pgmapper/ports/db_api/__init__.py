"""DB-API session adapter and dialect exports."""

from .database import Database
from .dialects import Dialect, PostgresDialect

__all__ = [
    "Database",
    "Dialect",
    "PostgresDialect",
]
