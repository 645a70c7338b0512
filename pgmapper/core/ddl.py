"""Column-level ALTER statements rendered with PostgreSQL quoting."""

from __future__ import annotations

from typing import Any, List, Optional

from .quoting import quote_identifier, quote_table_name, quote_value
from .type_map import LogicalType, type_to_sql


def rename_table_sql(name: str, new_name: str) -> str:
    return f"ALTER TABLE {quote_table_name(name)} RENAME TO {quote_identifier(new_name)}"


def rename_column_sql(table: str, column: str, new_column: str) -> str:
    return (
        f"ALTER TABLE {quote_table_name(table)} "
        f"RENAME COLUMN {quote_identifier(column)} TO {quote_identifier(new_column)}"
    )


def change_column_default_sql(table: str, column: str, default: Any) -> str:
    return (
        f"ALTER TABLE {quote_table_name(table)} "
        f"ALTER COLUMN {quote_identifier(column)} SET DEFAULT {quote_value(default)}"
    )


def change_column_null_sql(
    table: str,
    column: str,
    null: bool,
    default: Any = None,
) -> List[str]:
    """Statements toggling NOT NULL, backfilling NULLs when a default is given."""

    statements: List[str] = []
    table_sql = quote_table_name(table)
    column_sql = quote_identifier(column)
    if not null and default is not None:
        statements.append(
            f"UPDATE {table_sql} SET {column_sql}={quote_value(default)} "
            f"WHERE {column_sql} IS NULL"
        )
    action = "DROP" if null else "SET"
    statements.append(f"ALTER TABLE {table_sql} ALTER {column_sql} {action} NOT NULL")
    return statements


def add_column_sql(
    table: str,
    column: str,
    logical: LogicalType | str,
    *,
    limit: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    default: Any = None,
    has_default: bool = False,
    null: bool = True,
) -> List[str]:
    """Statements adding a column, then its default and NOT NULL constraint."""

    column_type = type_to_sql(logical, limit, precision, scale)
    statements = [
        f"ALTER TABLE {quote_table_name(table)} "
        f"ADD COLUMN {quote_identifier(column)} {column_type}"
    ]
    if has_default or default is not None:
        statements.append(change_column_default_sql(table, column, default))
    if not null:
        statements.extend(change_column_null_sql(table, column, False, default))
    return statements


def change_column_type_sql(
    table: str,
    column: str,
    logical: LogicalType | str,
    *,
    limit: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
) -> str:
    column_type = type_to_sql(logical, limit, precision, scale)
    return (
        f"ALTER TABLE {quote_table_name(table)} "
        f"ALTER COLUMN {quote_identifier(column)} TYPE {column_type}"
    )


def remove_index_sql(index_name: str) -> str:
    return f"DROP INDEX {quote_table_name(index_name)}"


def set_triggers_sql(tables: List[str], enabled: bool) -> str:
    action = "ENABLE" if enabled else "DISABLE"
    return ";".join(
        f"ALTER TABLE {quote_identifier(name)} {action} TRIGGER ALL" for name in tables
    )
