"""Identifier and literal quoting rules for PostgreSQL."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping, Sequence as SequenceABC
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional, Tuple

from .errors import MalformedIdentifierError, UnsupportedTypeError
from .type_map import LogicalType

_BIT_DIGITS_RE = re.compile(r"^[01]*$")
_HEX_DIGITS_RE = re.compile(r"^[0-9A-F]*$", re.IGNORECASE)


def quote_identifier(name: str) -> str:
    """Quote one identifier, doubling embedded double quotes."""

    text = str(name).replace('"', '""')
    return f'"{text}"'


def split_qualified_identifier(name: str) -> Tuple[str, Optional[str]]:
    """Split `"schema"."object"`, `schema.object` or a bare name.

    Returns `(outer, remainder)` where `remainder` is `None` for a bare name.
    Quoted segments are unquoted and may contain dots. An unquoted remainder
    is returned as written, so `a.b.c` splits into `("a", "b.c")`.
    """

    text = str(name)
    if not text:
        raise MalformedIdentifierError("Identifier must not be empty.")

    outer, rest = _read_segment(text, text)
    if not rest:
        return outer, None
    if not rest.startswith("."):
        raise MalformedIdentifierError(f"Unexpected text after identifier: {text!r}")

    rest = rest[1:]
    if not rest:
        raise MalformedIdentifierError(f"Missing identifier after '.': {text!r}")
    if not rest.startswith('"'):
        if '"' in rest:
            raise MalformedIdentifierError(f"Stray quote in identifier: {text!r}")
        return outer, rest

    remainder, tail = _read_quoted(rest, text)
    if tail:
        raise MalformedIdentifierError(f"Unexpected text after identifier: {text!r}")
    return outer, remainder


def _read_segment(text: str, original: str) -> Tuple[str, str]:
    if text.startswith('"'):
        return _read_quoted(text, original)

    dot = text.find(".")
    segment = text if dot < 0 else text[:dot]
    rest = "" if dot < 0 else text[dot:]
    if not segment:
        raise MalformedIdentifierError(f"Empty identifier segment: {original!r}")
    if '"' in segment:
        raise MalformedIdentifierError(f"Stray quote in identifier: {original!r}")
    return segment, rest


def _read_quoted(text: str, original: str) -> Tuple[str, str]:
    chars: list[str] = []
    idx = 1
    while idx < len(text):
        char = text[idx]
        if char == '"':
            if text[idx + 1 : idx + 2] == '"':
                chars.append('"')
                idx += 2
                continue
            if not chars:
                raise MalformedIdentifierError(f"Empty quoted identifier: {original!r}")
            return "".join(chars), text[idx + 1 :]
        chars.append(char)
        idx += 1
    raise MalformedIdentifierError(f"Unterminated quoted identifier: {original!r}")


def quote_table_name(name: str) -> str:
    """Quote a table name, keeping an optional schema qualifier."""

    schema, table = split_qualified_identifier(name)
    if table is None:
        return quote_identifier(schema)
    return f"{quote_identifier(schema)}.{quote_identifier(table)}"


def quote_string(value: str) -> str:
    """Escape a string for use inside single quotes."""

    return value.replace("'", "''")


def escape_bytea(value: bytes | str) -> str:
    """Octal-escape every byte, doubling the backslash for `E''` strings."""

    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    return "".join(f"\\\\{byte:03o}" for byte in raw)


def quote_timestamp(value: datetime) -> str:
    """Format a timestamp, adding microseconds when the value has them.

    Aware values are converted to UTC and keep an explicit `+00:00` offset.
    """

    aware = value.tzinfo is not None and value.utcoffset() is not None
    if aware:
        value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond:
        text += f".{value.microsecond:06d}"
    if aware:
        text += "+00:00"
    return text


def quote_value(value: Any, column: Any = None) -> str:
    """Render `value` as a SQL literal for the given column context.

    `column` is any object with `type` (`LogicalType`) and `sql_type`
    attributes, usually a `ColumnDescriptor`. Without a column the generic
    rule applies.
    """

    if column is not None:
        logical = getattr(column, "type", None)
        sql_type = str(getattr(column, "sql_type", "") or "").lower()
        is_text = isinstance(value, str)

        if logical == LogicalType.BINARY and isinstance(value, (str, bytes, bytearray, memoryview)):
            return f"E'{escape_bytea(value if is_text else bytes(value))}'"
        if is_text and sql_type == "xml":
            return f"xml '{quote_string(value)}'"
        if sql_type == "money" and _is_number(value):
            return f"'{_format_number(value)}'"
        if is_text and sql_type.startswith("bit"):
            if _BIT_DIGITS_RE.match(value):
                return f"B'{value}'"
            if _HEX_DIGITS_RE.match(value):
                return f"X'{value}'"

    return _quote_generic(value, column)


def _quote_generic(value: Any, column: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "'t'" if value else "'f'"
    if isinstance(value, str):
        logical = getattr(column, "type", None)
        if logical == LogicalType.INTEGER:
            return _coerce_number(value, int)
        if logical == LogicalType.FLOAT:
            return _coerce_number(value, float)
        return f"'{quote_string(value)}'"
    if _is_number(value):
        text = _format_number(value)
        if isinstance(value, float) and not math.isfinite(value):
            return f"'{text}'"
        return text
    if isinstance(value, datetime):
        return f"'{quote_timestamp(value)}'"
    if isinstance(value, date):
        return f"'{value.isoformat()}'"
    if isinstance(value, time):
        return f"'{value.isoformat()}'"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"E'{escape_bytea(bytes(value))}'"
    if isinstance(value, Mapping) or (
        isinstance(value, SequenceABC) and not isinstance(value, (str, bytes))
    ):
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise UnsupportedTypeError(f"Cannot quote value of type {type(value).__name__}") from exc
        return f"'{quote_string(payload)}'"
    raise UnsupportedTypeError(f"Cannot quote value of type {type(value).__name__}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _format_number(value: Any) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def _coerce_number(value: str, cast: type) -> str:
    try:
        number = cast(value.strip())
    except ValueError as exc:
        raise UnsupportedTypeError(f"Cannot quote {value!r} as {cast.__name__}") from exc
    return _quote_generic(number, None)
