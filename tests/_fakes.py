from __future__ import annotations

from typing import Any, List, Optional, Tuple

COLUMNS_SQL = "FROM pg_attribute a LEFT JOIN pg_attrdef d"
INDEX_SQL = "FROM pg_class t, pg_class i, pg_index d"
OWNED_SEQUENCE_SQL = "pg_depend"
PK_DEFAULT_SQL = "~* 'nextval'"
PK_ONLY_SQL = "JOIN pg_constraint cons ON (cons.conrelid = attr.attrelid"
VERSION_SQL = "SELECT version()"


class FakeSession:
    """Session double that answers by SQL substring and records every call."""

    def __init__(self, *, version: Optional[str] = "PostgreSQL 16.2 on x86_64-pc-linux-gnu"):
        self._rows: List[Tuple[str, Any]] = []
        self._values: List[Tuple[str, Any]] = []
        self.executed: List[Tuple[str, Any]] = []
        self.selected_rows: List[Tuple[str, Any]] = []
        self.selected_values: List[Tuple[str, Any]] = []
        self.cache_clears = 0
        if version is not None:
            self.on_value(VERSION_SQL, version)

    def on_rows(self, needle: str, result: Any) -> FakeSession:
        self._rows.append((needle, result))
        return self

    def on_value(self, needle: str, result: Any) -> FakeSession:
        self._values.append((needle, result))
        return self

    def execute(self, sql: str, params: Any = None) -> int:
        self.executed.append((sql, params))
        return 1

    def select_rows(self, sql: str, params: Any = None) -> list:
        self.selected_rows.append((sql, params))
        return self._answer(self._rows, sql, [])

    def select_value(self, sql: str, params: Any = None) -> Any:
        self.selected_values.append((sql, params))
        return self._answer(self._values, sql, None)

    def clear_query_cache(self) -> None:
        self.cache_clears += 1

    def _answer(self, handlers: List[Tuple[str, Any]], sql: str, default: Any) -> Any:
        for needle, result in handlers:
            if needle in sql:
                if isinstance(result, BaseException):
                    raise result
                return result
        return default
