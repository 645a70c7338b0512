"""PostgreSQL adapter facade consumed by the mapping layer."""

from __future__ import annotations

import contextlib
import logging
import re
from typing import Any, Iterator, List, Mapping, Optional

from . import ddl
from .catalog import CatalogIntrospector
from .config import AdapterConfig
from .contracts import DialectPort, SessionPort
from .descriptors import (
    ColumnDescriptor,
    IndexDescriptor,
    PrimaryKeyInfo,
    SequenceResolution,
    TableIdentifier,
)
from .indexes import build_index_descriptors
from .inserts import InsertProtocol
from .quoting import quote_identifier, quote_table_name, quote_timestamp, quote_value
from .sequences import PrimaryKeySequenceResolver
from .type_map import NATIVE_DATABASE_TYPES, LogicalType, TypeMappingEntry, type_to_sql
from .types import QueryParams

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"PostgreSQL (\d+)(?:\.(\d+))?(?:\.(\d+))?")
DEFAULT_IDENTIFIER_LENGTH = 63


def parse_server_version(text: Optional[str]) -> int:
    """Numeric server version from `SELECT version()` output.

    `8.2.4` -> 80204 and `16.2` -> 160002, matching `server_version_num`.
    Unparseable text gives 0.
    """

    match = _VERSION_RE.search(text or "")
    if not match:
        return 0
    major = int(match.group(1))
    minor = int(match.group(2) or 0)
    patch = int(match.group(3) or 0)
    if major >= 10:
        return major * 10000 + minor
    return major * 10000 + minor * 100 + patch


class PostgresAdapter:
    """Catalog, quoting, and insert operations for one PostgreSQL session.

    Descriptors are recomputed on every call; only the server version is
    memoized. One adapter per session, and one session per thread.
    """

    def __init__(self, session: SessionPort, config: Optional[AdapterConfig] = None):
        self.session = session
        self.config = config or AdapterConfig()
        self.dialect: Optional[DialectPort] = getattr(session, "dialect", None)
        self._server_version = self.config.server_version
        self._table_alias_length: Optional[int] = None

        self.catalog = CatalogIntrospector(
            session, schema_search_path=self.config.schema_search_path
        )
        self.sequences = PrimaryKeySequenceResolver(session)
        self.inserts = InsertProtocol(
            session,
            self.sequences,
            supports_returning=self.supports_insert_with_returning,
            dialect=self.dialect,
        )

    # server capabilities

    def postgresql_version(self) -> int:
        if self._server_version is None:
            self._server_version = parse_server_version(
                self.session.select_value("SELECT version()")
            )
            logger.debug("server version %s", self._server_version)
        return self._server_version

    def supports_insert_with_returning(self) -> bool:
        return self.postgresql_version() >= self.config.returning_min_version

    def table_alias_length(self) -> int:
        """Longest identifier the server keeps (63 before 8.0)."""

        if self._table_alias_length is None:
            if self.postgresql_version() >= 80000:
                value = self.session.select_value("SHOW max_identifier_length")
                self._table_alias_length = int(value)
            else:
                self._table_alias_length = DEFAULT_IDENTIFIER_LENGTH
        return self._table_alias_length

    # catalog introspection

    def column_descriptors_for(self, table: TableIdentifier | str) -> List[ColumnDescriptor]:
        rows = self.catalog.column_definitions(table)
        return [ColumnDescriptor.from_catalog_row(*row) for row in rows]

    def index_descriptors_for(self, table: TableIdentifier | str) -> List[IndexDescriptor]:
        identifier = TableIdentifier.coerce(table)
        limit = self.config.multi_column_index_limit
        rows = self.catalog.index_rows(identifier, limit)
        return build_index_descriptors(str(identifier), rows, limit=limit)

    def tables(self) -> List[str]:
        return self.catalog.tables()

    # quoting

    def quote_identifier(self, name: str) -> str:
        return quote_identifier(name)

    def quote_table_name(self, name: str) -> str:
        return quote_table_name(name)

    def quote_value(self, value: Any, column: Any = None) -> str:
        return quote_value(value, column)

    def quote_timestamp(self, value: Any) -> str:
        return quote_timestamp(value)

    # type mapping

    def native_database_types(self) -> Mapping[LogicalType, TypeMappingEntry]:
        return NATIVE_DATABASE_TYPES

    def type_to_sql(
        self,
        logical: LogicalType | str,
        limit: Optional[int] = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
    ) -> str:
        return type_to_sql(logical, limit, precision, scale)

    # primary keys and sequences

    def resolve_sequence(self, table: TableIdentifier | str) -> SequenceResolution:
        return self.sequences.resolve(table)

    def resolve_primary_key_and_sequence(
        self, table: TableIdentifier | str
    ) -> Optional[PrimaryKeyInfo]:
        return self.sequences.pk_and_sequence_for(table)

    def primary_key(self, table: TableIdentifier | str) -> Optional[str]:
        return self.sequences.primary_key(table)

    def default_sequence_name(self, table: TableIdentifier | str, pk: Optional[str] = None) -> str:
        return self.sequences.default_sequence_name(table, pk)

    def reset_pk_sequence(
        self,
        table: TableIdentifier | str,
        pk: Optional[str] = None,
        sequence: Optional[str] = None,
    ) -> Any:
        return self.sequences.reset_pk_sequence(table, pk, sequence)

    # inserts

    def perform_insert(
        self,
        sql: str,
        table: TableIdentifier | str,
        *,
        id_value: Any = None,
        pk: Optional[str] = None,
        sequence_name: Optional[str] = None,
        params: QueryParams = None,
    ) -> Any:
        return self.inserts.perform_insert(
            sql,
            table,
            id_value=id_value,
            pk=pk,
            sequence_name=sequence_name,
            params=params,
        )

    def last_insert_id(self, sequence_name: str) -> int:
        return self.inserts.last_insert_id(sequence_name)

    # column-level DDL

    def rename_table(self, name: str, new_name: str) -> None:
        self.session.execute(ddl.rename_table_sql(name, new_name))

    def rename_column(self, table: str, column: str, new_column: str) -> None:
        self.session.execute(ddl.rename_column_sql(table, column, new_column))

    def change_column_default(self, table: str, column: str, default: Any) -> None:
        self.session.execute(ddl.change_column_default_sql(table, column, default))

    def change_column_null(self, table: str, column: str, null: bool, default: Any = None) -> None:
        for sql in ddl.change_column_null_sql(table, column, null, default):
            self.session.execute(sql)

    def change_column(self, table: str, column: str, logical: LogicalType | str, **options: Any) -> None:
        self.session.execute(ddl.change_column_type_sql(table, column, logical, **options))

    def add_column(self, table: str, column: str, logical: LogicalType | str, **options: Any) -> None:
        for sql in ddl.add_column_sql(table, column, logical, **options):
            self.session.execute(sql)

    def remove_index(self, index_name: str) -> None:
        self.session.execute(ddl.remove_index_sql(index_name))

    @contextlib.contextmanager
    def disable_referential_integrity(self) -> Iterator[None]:
        """Disable all triggers (including FK checks) on visible tables."""

        names = self.tables()
        if not names:
            yield
            return
        self.session.execute(ddl.set_triggers_sql(names, enabled=False))
        try:
            yield
        finally:
            self.session.execute(ddl.set_triggers_sql(names, enabled=True))
