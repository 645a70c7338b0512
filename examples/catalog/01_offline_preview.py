"""Show descriptors, quoting and insert SQL without a running server."""

from __future__ import annotations

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "pgmapper").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pgmapper import AdapterConfig, PostgresAdapter, quote_value


class CannedSession:
    """Answers catalog queries with fixed rows and prints every statement."""

    def __init__(self) -> None:
        self.columns = [
            ("id", "nextval('users_id_seq'::regclass)", "integer", True),
            ("name", "'x'::character varying", "character varying(50)", True),
            ("balance", "0.00", "numeric(12,2)", False),
            ("tags", None, "text[]", False),
            ("created_at", "now()", "timestamp without time zone", True),
        ]
        self.indexes = [
            ("users_name_balance", False, "balance", 3, "3 2"),
            ("users_name_balance", False, "name", 2, "3 2"),
        ]

    def execute(self, sql: str, params: Any = None) -> int:
        print("EXECUTE:", sql, params or "")
        return 1

    def select_rows(self, sql: str, params: Any = None) -> List[tuple]:
        if "pg_attribute a LEFT JOIN pg_attrdef" in sql:
            return self.columns
        if "pg_index d" in sql:
            return self.indexes
        if "pg_depend" in sql:
            return [("id", "users_id_seq")]
        return []

    def select_value(self, sql: str, params: Any = None) -> Optional[Any]:
        print("SELECT VALUE:", sql)
        if "RETURNING" in sql:
            return 1
        return None


def main() -> None:
    adapter = PostgresAdapter(
        CannedSession(),
        AdapterConfig(schema_search_path="public", server_version=160002),
    )

    print("\n===== columns =====")
    for column in adapter.column_descriptors_for("public.users"):
        print(column)

    print("\n===== indexes =====")
    for index in adapter.index_descriptors_for("users"):
        print(index)

    print("\n===== quoting =====")
    print(adapter.quote_table_name('app."Weird.Name"'))
    for value in [None, True, "O'Reilly", Decimal("1.50"), float("nan"), b"\x00\xff",
                  datetime(2024, 1, 2, 3, 4, 5, 6000), {"k": [1, 2]}]:
        print(repr(value), "->", quote_value(value))

    print("\n===== insert =====")
    new_id = adapter.perform_insert("""INSERT INTO "users" ("name") VALUES ('ada');""", "users")
    print("generated id:", new_id)


if __name__ == "__main__":
    main()
