"""Catalog queries for columns, indexes, and tables."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .config import DEFAULT_INDEX_LIMIT
from .contracts import SessionPort
from .descriptors import TableIdentifier
from .quoting import quote_string
from .types import RowTuple, RowTuples

logger = logging.getLogger(__name__)

_USER_SCHEMA = "$user"


def string_literal(value: str) -> str:
    return f"'{quote_string(value)}'"


def regclass_literal(table: TableIdentifier) -> str:
    """`'"schema"."table"'::regclass` for catalog OID lookups."""

    return f"{string_literal(table.quoted)}::regclass"


def column_definitions_sql(table: TableIdentifier) -> str:
    # format_type keeps the size constraint, e.g. character varying(50)
    return f"""SELECT a.attname, pg_get_expr(d.adbin, d.adrelid), format_type(a.atttypid, a.atttypmod), a.attnotnull
  FROM pg_attribute a LEFT JOIN pg_attrdef d
    ON a.attrelid = d.adrelid AND a.attnum = d.adnum
 WHERE a.attrelid = {regclass_literal(table)}
   AND a.attnum > 0 AND NOT a.attisdropped
 ORDER BY a.attnum"""


def tables_sql() -> str:
    return """SELECT tablename
  FROM pg_tables
 WHERE schemaname = ANY (current_schemas(false))
 ORDER BY tablename"""


def parse_search_path(search_path: str) -> List[str]:
    """Split a `search_path` setting into bare schema names."""

    schemas: List[str] = []
    for part in search_path.split(","):
        name = part.strip()
        if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
            name = name[1:-1].replace('""', '"')
        if name:
            schemas.append(name)
    return schemas


def schema_list_sql(schemas: Sequence[str]) -> str:
    rendered = [
        "current_user" if schema == _USER_SCHEMA else string_literal(schema)
        for schema in schemas
    ]
    return ", ".join(rendered)


def index_rows_sql(
    table: TableIdentifier,
    schemas: Sequence[str],
    limit: int = DEFAULT_INDEX_LIMIT,
) -> str:
    """Index key rows; key positions at or past `limit` are not unnested."""

    if limit < 1:
        raise ValueError("index key limit must be >= 1.")
    if not schemas:
        raise ValueError("At least one schema is required to scope index lookups.")

    return f"""SELECT i.relname, d.indisunique, a.attname, a.attnum, d.indkey
  FROM pg_class t, pg_class i, pg_index d, pg_attribute a,
       generate_series(0, {limit - 1}) AS s(i)
 WHERE i.relkind = 'i'
   AND d.indexrelid = i.oid
   AND d.indisprimary = 'f'
   AND t.oid = d.indrelid
   AND t.relname = {string_literal(table.name)}
   AND i.relnamespace IN (SELECT oid FROM pg_namespace WHERE nspname IN ({schema_list_sql(schemas)}))
   AND a.attrelid = t.oid
   AND d.indkey[s.i] = a.attnum
 ORDER BY i.relname"""


class CatalogIntrospector:
    """Runs catalog queries through a session and returns raw rows."""

    def __init__(self, session: SessionPort, *, schema_search_path: Optional[str] = None):
        self.session = session
        self.schema_search_path = schema_search_path

    def column_definitions(self, table: TableIdentifier | str) -> RowTuples:
        """Column rows `(name, default, sql_type, not_null)` in attnum order.

        Unqualified names resolve through the session search path. A table
        that cannot be resolved raises `NotFoundError` from the session.
        """

        identifier = TableIdentifier.coerce(table)
        sql = column_definitions_sql(identifier)
        logger.debug("column definitions for %s", identifier)
        return [_as_tuple(row) for row in self.session.select_rows(sql)]

    def search_path(self) -> List[str]:
        raw = self.schema_search_path
        if raw is None:
            raw = str(self.session.select_value("SHOW search_path") or "")
        return parse_search_path(raw)

    def index_rows(
        self,
        table: TableIdentifier | str,
        limit: int = DEFAULT_INDEX_LIMIT,
    ) -> RowTuples:
        identifier = TableIdentifier.coerce(table)
        schemas = [identifier.schema] if identifier.schema else self.search_path()
        sql = index_rows_sql(identifier, schemas, limit)
        logger.debug("index rows for %s in schemas %s", identifier, schemas)
        return [_as_tuple(row) for row in self.session.select_rows(sql)]

    def tables(self) -> List[str]:
        return [row[0] for row in self.session.select_rows(tables_sql())]


def _as_tuple(row: Any) -> RowTuple:
    if isinstance(row, tuple):
        return row
    if isinstance(row, dict):
        return tuple(row.values())
    return tuple(row)
