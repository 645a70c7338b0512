"""Core port contracts used by the catalog engine and concrete adapters."""

from __future__ import annotations

from typing import Any, Protocol

from .types import QueryParams, RowTuples


class DialectPort(Protocol):
    """Dialect behavior required by SQL emission and the insert protocol."""

    name: str

    def q(self, ident: str) -> str: ...

    def returning_clause(self, pk_name: str) -> str: ...


class SessionPort(Protocol):
    """Execution session the catalog engine issues SQL through.

    Sessions may also expose `clear_query_cache()`; the insert protocol calls
    it after a `RETURNING` statement when present.
    """

    def execute(self, sql: str, params: QueryParams = None) -> Any: ...

    def select_value(self, sql: str, params: QueryParams = None) -> Any: ...

    def select_rows(self, sql: str, params: QueryParams = None) -> RowTuples: ...
