"""Public core API for catalog introspection, quoting, and insert handling."""

from .adapter import PostgresAdapter, parse_server_version
from .catalog import CatalogIntrospector
from .config import AdapterConfig
from .defaults import normalize_default
from .descriptors import (
    ColumnDescriptor,
    IndexDescriptor,
    PrimaryKeyInfo,
    ResolutionStatus,
    SequenceResolution,
    TableIdentifier,
)
from .errors import (
    ConstraintViolationError,
    ForeignKeyViolationError,
    MalformedIdentifierError,
    NotFoundError,
    PgMapperError,
    StatementInvalid,
    UniqueViolationError,
    UnsupportedTypeError,
    translate_exception,
)
from .indexes import build_index_descriptors
from .inserts import InsertProtocol
from .quoting import (
    quote_identifier,
    quote_table_name,
    quote_timestamp,
    quote_value,
    split_qualified_identifier,
)
from .sequences import PrimaryKeySequenceResolver
from .type_map import (
    NATIVE_DATABASE_TYPES,
    LogicalType,
    TypeMappingEntry,
    extract_limit,
    simplified_type,
    type_to_sql,
)

__all__ = [
    "PostgresAdapter",
    "AdapterConfig",
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
