"""Logical type <-> PostgreSQL native type translation tables."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from .errors import UnsupportedTypeError


class LogicalType(str, Enum):
    """Abstract column types understood by the mapping layer."""

    PRIMARY_KEY = "primary_key"
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME = "time"
    DATE = "date"
    BINARY = "binary"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class TypeMappingEntry:
    """Native spelling and default size limit for one logical type."""

    logical: LogicalType
    name: str
    limit: Optional[int] = None


NATIVE_DATABASE_TYPES: Mapping[LogicalType, TypeMappingEntry] = MappingProxyType(
    {
        entry.logical: entry
        for entry in (
            TypeMappingEntry(LogicalType.PRIMARY_KEY, "serial primary key"),
            TypeMappingEntry(LogicalType.STRING, "character varying", 255),
            TypeMappingEntry(LogicalType.TEXT, "text"),
            TypeMappingEntry(LogicalType.INTEGER, "integer"),
            TypeMappingEntry(LogicalType.FLOAT, "float"),
            TypeMappingEntry(LogicalType.DECIMAL, "decimal"),
            TypeMappingEntry(LogicalType.DATETIME, "timestamp"),
            TypeMappingEntry(LogicalType.TIMESTAMP, "timestamp"),
            TypeMappingEntry(LogicalType.TIME, "time"),
            TypeMappingEntry(LogicalType.DATE, "date"),
            TypeMappingEntry(LogicalType.BINARY, "bytea"),
            TypeMappingEntry(LogicalType.BOOLEAN, "boolean"),
        )
    }
)

# Native type names (as printed by `format_type`, without size) to logical types.
BASE_LOGICAL_TYPES: Mapping[str, LogicalType] = MappingProxyType(
    {
        "smallint": LogicalType.INTEGER,
        "integer": LogicalType.INTEGER,
        "bigint": LogicalType.INTEGER,
        "int2": LogicalType.INTEGER,
        "int4": LogicalType.INTEGER,
        "int8": LogicalType.INTEGER,
        "oid": LogicalType.INTEGER,
        "float4": LogicalType.FLOAT,
        "float8": LogicalType.FLOAT,
        "float": LogicalType.FLOAT,
        "numeric": LogicalType.DECIMAL,
        "decimal": LogicalType.DECIMAL,
        "money": LogicalType.DECIMAL,
        "character varying": LogicalType.STRING,
        "varchar": LogicalType.STRING,
        "character": LogicalType.STRING,
        "char": LogicalType.STRING,
        "bpchar": LogicalType.STRING,
        "\"char\"": LogicalType.STRING,
        "name": LogicalType.STRING,
        "citext": LogicalType.STRING,
        "bit": LogicalType.STRING,
        "bit varying": LogicalType.STRING,
        "varbit": LogicalType.STRING,
        "inet": LogicalType.STRING,
        "cidr": LogicalType.STRING,
        "macaddr": LogicalType.STRING,
        "xml": LogicalType.STRING,
        "tsvector": LogicalType.STRING,
        "tsquery": LogicalType.STRING,
        "text": LogicalType.TEXT,
        "json": LogicalType.TEXT,
        "jsonb": LogicalType.TEXT,
        "date": LogicalType.DATE,
        "time": LogicalType.TIME,
        "time without time zone": LogicalType.TIME,
        "time with time zone": LogicalType.TIME,
        "timetz": LogicalType.TIME,
        "timestamptz": LogicalType.DATETIME,
        "bytea": LogicalType.BINARY,
        "bool": LogicalType.BOOLEAN,
        "boolean": LogicalType.BOOLEAN,
    }
)

# `format_type` output for a numeric literal default without precision.
UNTYPED_NUMERIC_SENTINEL = "numeric(131089)"

TypeRule = Tuple[str, Callable[[str], bool], LogicalType]


def _matches(pattern: str, flags: int = re.IGNORECASE) -> Callable[[str], bool]:
    compiled = re.compile(pattern, flags)
    return lambda sql_type: compiled.search(sql_type) is not None


# Evaluated top-down; the first predicate that holds decides the logical type.
# Anything left falls through to `BASE_LOGICAL_TYPES`.
SIMPLIFIED_TYPE_RULES: Tuple[TypeRule, ...] = (
    ("serial", _matches(r"(?:big)?serial$"), LogicalType.INTEGER),
    ("array_or_interval", _matches(r"\[\]$|^interval"), LogicalType.STRING),
    ("geometric", _matches(r'^(?:point|lseg|box|"?path"?|polygon|circle)'), LogicalType.STRING),
    ("uuid", _matches(r"^uuid"), LogicalType.STRING),
    ("timestamp", _matches(r"^timestamp"), LogicalType.DATETIME),
    ("float", _matches(r"^(?:real|double precision)$"), LogicalType.FLOAT),
    ("bytea", _matches(r"^bytea"), LogicalType.BINARY),
    ("boolean", _matches(r"^bool"), LogicalType.BOOLEAN),
    ("untyped_numeric", lambda sql_type: sql_type == UNTYPED_NUMERIC_SENTINEL, LogicalType.DECIMAL),
)

_SIZE_RE = re.compile(r"\(([^)]*)\)")
_PRECISION_RE = re.compile(r"^(?:numeric|decimal)\((\d+)(?:,\s*(\d+))?\)", re.IGNORECASE)

_LIMIT_RULES: Tuple[Tuple[re.Pattern[str], Optional[int]], ...] = (
    (re.compile(r"^int2", re.IGNORECASE), 2),
    (re.compile(r"^smallint", re.IGNORECASE), 2),
    (re.compile(r"^int4", re.IGNORECASE), None),
    (re.compile(r"^integer", re.IGNORECASE), None),
    (re.compile(r"^int8", re.IGNORECASE), 8),
    (re.compile(r"^bigint", re.IGNORECASE), 8),
    (re.compile(r"^(?:bool|text|date|time|bytea)", re.IGNORECASE), None),
)


def base_type_name(sql_type: str) -> str:
    """Strip size constraints and normalize spacing/case of a native type."""

    stripped = _SIZE_RE.sub("", sql_type)
    return " ".join(stripped.split()).lower()


def simplified_type(sql_type: str) -> LogicalType:
    """Derive the logical type of a native type expression."""

    text = str(sql_type).strip()
    for _name, predicate, logical in SIMPLIFIED_TYPE_RULES:
        if predicate(text):
            return logical

    logical = BASE_LOGICAL_TYPES.get(base_type_name(text))
    if logical is None:
        raise UnsupportedTypeError(f"No logical type for native type {sql_type!r}")
    return logical


def extract_limit(sql_type: str) -> Optional[int]:
    """Storage width or declared size for a native type expression."""

    text = str(sql_type).strip()
    for pattern, limit in _LIMIT_RULES:
        if pattern.match(text):
            return limit

    match = _SIZE_RE.search(text)
    if not match:
        return None
    leading = re.match(r"\s*(\d+)", match.group(1))
    return int(leading.group(1)) if leading else None


def extract_precision(sql_type: str) -> Optional[int]:
    match = _PRECISION_RE.match(str(sql_type).strip())
    return int(match.group(1)) if match else None


def extract_scale(sql_type: str) -> Optional[int]:
    match = _PRECISION_RE.match(str(sql_type).strip())
    if not match:
        return None
    return int(match.group(2)) if match.group(2) is not None else 0


def coerce_logical_type(value: LogicalType | str) -> LogicalType:
    if isinstance(value, LogicalType):
        return value
    key = str(value).strip().lower()
    if key in LogicalType._value2member_map_:
        return LogicalType(key)
    raise UnsupportedTypeError(f"Unknown logical type: {value!r}")


def type_to_sql(
    logical: LogicalType | str,
    limit: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
) -> str:
    """Render the native column type for a logical type."""

    logical_type = coerce_logical_type(logical)
    entry = NATIVE_DATABASE_TYPES[logical_type]

    if logical_type == LogicalType.INTEGER:
        if limit is None or limit == 4:
            return "integer"
        if limit < 4:
            return "smallint"
        return "bigint"

    if logical_type == LogicalType.DECIMAL and precision is not None:
        if scale is not None:
            return f"{entry.name}({precision},{scale})"
        return f"{entry.name}({precision})"

    effective_limit = limit if limit is not None else entry.limit
    if effective_limit is not None:
        return f"{entry.name}({effective_limit})"
    return entry.name


def cast_to_boolean(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if value is True or value is False:
        return value
    return str(value).strip().lower() in {"true", "t", "1"}


def type_cast(logical: LogicalType, value: Any) -> Any:
    """Convert a raw database value to the Python type of `logical`."""

    if value is None:
        return None

    if logical == LogicalType.BOOLEAN:
        return cast_to_boolean(value)
    if logical == LogicalType.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return int(float(value))
    if logical == LogicalType.FLOAT:
        return float(value)
    if logical == LogicalType.DECIMAL:
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid decimal value: {value!r}") from exc
    if logical in (LogicalType.DATETIME, LogicalType.TIMESTAMP):
        if isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value).strip())
    if logical == LogicalType.DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value).strip())
    if logical == LogicalType.TIME:
        if isinstance(value, time):
            return value
        return time.fromisoformat(str(value).strip())
    if logical == LogicalType.BINARY:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        return unescape_bytea(str(value))
    return value if isinstance(value, str) else str(value)


def unescape_bytea(text: str) -> bytes:
    """Decode `\\x` hex or octal-escaped bytea text output."""

    if text.startswith("\\x"):
        return bytes.fromhex(text[2:])

    out = bytearray()
    idx = 0
    while idx < len(text):
        char = text[idx]
        if char == "\\" and text[idx + 1 : idx + 2] == "\\":
            out.append(0x5C)
            idx += 2
        elif char == "\\" and re.match(r"[0-7]{3}", text[idx + 1 : idx + 4]):
            out.append(int(text[idx + 1 : idx + 4], 8))
            idx += 4
        else:
            out.extend(char.encode("utf-8"))
            idx += 1
    return bytes(out)
