"""Exception taxonomy and driver error translation."""

from __future__ import annotations

import re
from typing import Any, Optional, Pattern, Sequence, Tuple, Type


class PgMapperError(Exception):
    """Base class for every error raised by pgmapper."""


class StatementInvalid(PgMapperError):
    """A statement failed inside the database driver."""

    def __init__(
        self,
        message: str,
        *,
        sql: Optional[str] = None,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.sql = sql
        self.original = original


class NotFoundError(StatementInvalid):
    """A table or sequence could not be resolved to a catalog object."""


class ConstraintViolationError(StatementInvalid):
    """A statement violated an integrity constraint."""


class UniqueViolationError(ConstraintViolationError):
    """Duplicate key for a unique index or primary key."""


class ForeignKeyViolationError(ConstraintViolationError):
    """Referenced row is missing or still referenced."""


class UnsupportedTypeError(PgMapperError, TypeError):
    """No logical mapping or literal form exists for a type or value."""


class MalformedIdentifierError(PgMapperError, ValueError):
    """A quoted or dotted identifier could not be parsed."""


ErrorPattern = Tuple[Pattern[str], Type[StatementInvalid]]

ERROR_PATTERNS: Sequence[ErrorPattern] = (
    (re.compile(r"duplicate key value violates unique constraint"), UniqueViolationError),
    (re.compile(r"violates foreign key constraint"), ForeignKeyViolationError),
    (re.compile(r'(relation|sequence) (?:"[^"]*"|\S+) does not exist'), NotFoundError),
)


def translate_exception(exc: BaseException, sql: Optional[str] = None) -> StatementInvalid:
    """Map a driver exception to a kind-specific `StatementInvalid`.

    Matching is done on the driver message only, so the result does not
    depend on which PostgreSQL driver raised it.
    """

    if isinstance(exc, StatementInvalid):
        return exc

    message = str(exc).strip() or type(exc).__name__
    for pattern, error_cls in ERROR_PATTERNS:
        if pattern.search(message):
            return error_cls(message, sql=sql, original=exc)
    return StatementInvalid(message, sql=sql, original=exc)


def driver_error_types(conn: Any) -> Tuple[Type[BaseException], ...]:
    """Return the DB-API `Error` base of the module that owns `conn`.

    Falls back to `Exception` when the connection module does not expose the
    DB-API error hierarchy.
    """

    module_name = conn.__class__.__module__.split(".")[0]
    try:
        module_obj = __import__(module_name)
    except ImportError:
        return (Exception,)
    error_cls = getattr(module_obj, "Error", None)
    if isinstance(error_cls, type) and issubclass(error_cls, BaseException):
        return (error_cls,)
    return (Exception,)
