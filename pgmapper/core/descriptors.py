"""Immutable descriptors returned by catalog introspection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .defaults import normalize_default
from .quoting import quote_identifier, split_qualified_identifier
from .type_map import (
    LogicalType,
    cast_to_boolean,
    extract_limit,
    extract_precision,
    extract_scale,
    simplified_type,
    type_cast,
)


@dataclass(frozen=True)
class TableIdentifier:
    """Optionally schema-qualified table name."""

    name: str
    schema: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> TableIdentifier:
        outer, remainder = split_qualified_identifier(text)
        if remainder is None:
            return cls(name=outer)
        return cls(name=remainder, schema=outer)

    @classmethod
    def coerce(cls, value: TableIdentifier | str) -> TableIdentifier:
        if isinstance(value, TableIdentifier):
            return value
        return cls.parse(value)

    @property
    def quoted(self) -> str:
        if self.schema is None:
            return quote_identifier(self.name)
        return f"{quote_identifier(self.schema)}.{quote_identifier(self.name)}"

    def __str__(self) -> str:
        if self.schema is None:
            return self.name
        return f"{self.schema}.{self.name}"


@dataclass(frozen=True)
class ColumnDescriptor:
    """One table column as seen through the catalog."""

    name: str
    raw_default: Optional[str]
    sql_type: str
    null: bool
    type: LogicalType
    default: Optional[str] = None
    limit: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None

    @classmethod
    def from_catalog_row(
        cls,
        name: str,
        raw_default: Optional[str],
        sql_type: str,
        not_null: Any,
    ) -> ColumnDescriptor:
        """Build a descriptor from one `column_definitions` row."""

        logical = simplified_type(sql_type)
        is_decimal = logical == LogicalType.DECIMAL
        return cls(
            name=name,
            raw_default=raw_default,
            sql_type=sql_type,
            null=not cast_to_boolean(not_null),
            type=logical,
            default=normalize_default(raw_default),
            limit=extract_limit(sql_type),
            precision=extract_precision(sql_type) if is_decimal else None,
            scale=extract_scale(sql_type) if is_decimal else None,
        )

    @property
    def not_null(self) -> bool:
        return not self.null

    def type_cast(self, value: Any) -> Any:
        return type_cast(self.type, value)


@dataclass(frozen=True)
class IndexDescriptor:
    """Non-primary index with its key columns in catalog key order.

    `columns[i]` is `None` when key position `i` is an expression.
    """

    table: str
    name: str
    unique: bool
    columns: Tuple[Optional[str], ...] = ()


@dataclass(frozen=True)
class PrimaryKeyInfo:
    """Primary-key column and the sequence that feeds it, if any."""

    column: str
    sequence: Optional[str] = None

    def __iter__(self):
        return iter((self.column, self.sequence))


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class SequenceResolution:
    """Outcome of primary-key/sequence discovery.

    `RESOLVED` carries `info` (whose `sequence` may still be `None` for a
    natural key). `NOT_FOUND` means the table has no single-column primary
    key. `MALFORMED` means a catalog query failed or returned text that
    could not be parsed; `error` holds the cause.
    """

    status: ResolutionStatus
    info: Optional[PrimaryKeyInfo] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED
