"""pgmapper: PostgreSQL catalog translation for relational mapping layers."""

from .core import (
    NATIVE_DATABASE_TYPES,
    AdapterConfig,
    CatalogIntrospector,
    ColumnDescriptor,
    ConstraintViolationError,
    ForeignKeyViolationError,
    IndexDescriptor,
    InsertProtocol,
    LogicalType,
    MalformedIdentifierError,
    NotFoundError,
    PgMapperError,
    PostgresAdapter,
    PrimaryKeyInfo,
    PrimaryKeySequenceResolver,
    ResolutionStatus,
    SequenceResolution,
    StatementInvalid,
    TableIdentifier,
    TypeMappingEntry,
    UniqueViolationError,
    UnsupportedTypeError,
    build_index_descriptors,
    extract_limit,
    normalize_default,
    parse_server_version,
    quote_identifier,
    quote_table_name,
    quote_timestamp,
    quote_value,
    simplified_type,
    split_qualified_identifier,
    translate_exception,
    type_to_sql,
)
from .ports import Database, Dialect, PostgresDialect

__all__ = [
    "PostgresAdapter",
    "AdapterConfig",
    "Database",
    "Dialect",
    "PostgresDialect",
    "CatalogIntrospector",
    "PrimaryKeySequenceResolver",
    "InsertProtocol",
    "ColumnDescriptor",
    "IndexDescriptor",
    "PrimaryKeyInfo",
    "ResolutionStatus",
    "SequenceResolution",
    "TableIdentifier",
    "LogicalType",
    "TypeMappingEntry",
    "NATIVE_DATABASE_TYPES",
    "PgMapperError",
    "StatementInvalid",
    "NotFoundError",
    "ConstraintViolationError",
    "UniqueViolationError",
    "ForeignKeyViolationError",
    "UnsupportedTypeError",
    "MalformedIdentifierError",
    "build_index_descriptors",
    "extract_limit",
    "normalize_default",
    "parse_server_version",
    "quote_identifier",
    "quote_table_name",
    "quote_timestamp",
    "quote_value",
    "simplified_type",
    "split_qualified_identifier",
    "translate_exception",
    "type_to_sql",
]
