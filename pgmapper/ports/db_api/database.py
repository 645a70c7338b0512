"""DB-API session implementation for the catalog engine."""

from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

from ...core.config import AdapterConfig
from ...core.errors import driver_error_types, translate_exception
from ...core.types import QueryParams, RowTuple, RowTuples
from .dialects import Dialect, PostgresDialect

logger = logging.getLogger(__name__)


class Database:
    """Thin DB-API wrapper exposing `execute`, `select_value`, and `select_rows`.

    Driver errors are re-raised as `StatementInvalid` subclasses. With
    `query_cache=True`, read results are memoized per `(sql, params)` until
    the next `execute()` or `clear_query_cache()`.
    """

    def __init__(
        self,
        conn: Any,
        dialect: Optional[Dialect] = None,
        *,
        query_cache: bool = False,
    ):
        """Create session adapter.

        Args:
            conn: DB-API connection object (psycopg, psycopg2, ...).
            dialect: SQL dialect instance, `PostgresDialect` by default.
            query_cache: Memoize `select_*` results between writes.
        """

        self._closed = False
        self.conn: Any | None = conn
        self.dialect = dialect or PostgresDialect()
        self._error_types = driver_error_types(conn)
        self._cache: Optional[Dict[Tuple[str, Hashable], Any]] = {} if query_cache else None

    @classmethod
    def from_config(
        cls,
        conn: Any,
        config: AdapterConfig,
        dialect: Optional[Dialect] = None,
    ) -> Database:
        return cls(conn, dialect, query_cache=config.query_cache)

    def _require_open_connection(self) -> Any:
        if self._closed or self.conn is None:
            raise RuntimeError("connection is closed")
        return self.conn

    def _cursor(self, sql: str, params: QueryParams) -> Any:
        conn = self._require_open_connection()
        cur = conn.cursor()
        try:
            if params is None:
                cur.execute(sql)
            else:
                cur.execute(sql, params)
        except self._error_types as exc:
            logger.debug("statement failed: %s", exc)
            raise translate_exception(exc, sql) from exc
        return cur

    def execute(self, sql: str, params: QueryParams = None) -> int:
        """Execute a statement and return the affected row count."""

        self.clear_query_cache()
        cur = self._cursor(sql, params)
        return getattr(cur, "rowcount", -1)

    def select_rows(self, sql: str, params: QueryParams = None) -> RowTuples:
        """Execute a query and return every row as a tuple."""

        return self._cached(sql, params, self._select_rows)

    def select_value(self, sql: str, params: QueryParams = None) -> Any:
        """Execute a query and return the first column of the first row."""

        return self._cached(sql, params, self._select_value)

    def clear_query_cache(self) -> None:
        if self._cache:
            self._cache.clear()

    def _select_rows(self, sql: str, params: QueryParams) -> RowTuples:
        cur = self._cursor(sql, params)
        return [self._row_to_tuple(r) for r in cur.fetchall()]

    def _select_value(self, sql: str, params: QueryParams) -> Any:
        cur = self._cursor(sql, params)
        row = cur.fetchone()
        if row is None:
            return None
        values = self._row_to_tuple(row)
        return values[0] if values else None

    def _cached(self, sql: str, params: QueryParams, run: Any) -> Any:
        if self._cache is None:
            return run(sql, params)
        key = (sql, _freeze_params(params))
        if key not in self._cache:
            self._cache[key] = run(sql, params)
        return self._cache[key]

    def _row_to_tuple(self, row: Any) -> RowTuple:
        if isinstance(row, tuple):
            return row
        if isinstance(row, Mapping):
            return tuple(row.values())
        return tuple(row)

    def close(self) -> None:
        """Close the underlying connection."""

        if self._closed:
            return
        conn = self.conn
        self._closed = True
        self.conn = None
        self.clear_query_cache()
        close = getattr(conn, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def _freeze_params(params: QueryParams) -> Hashable:
    if params is None:
        return None
    if isinstance(params, Mapping):
        return tuple(sorted((str(k), repr(v)) for k, v in params.items()))
    return tuple(repr(v) for v in params)
