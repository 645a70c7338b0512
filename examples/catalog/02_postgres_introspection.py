"""Introspect a live PostgreSQL table (optional dependency + running server)."""

from __future__ import annotations

import importlib
import logging
import os
import sys
from pathlib import Path
from typing import Any

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "pgmapper").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pgmapper import AdapterConfig, Database, PostgresAdapter, UniqueViolationError


def _load_connect() -> Any:
    for module_name in ("psycopg", "psycopg2"):
        try:
            module = importlib.import_module(module_name)
        except (ModuleNotFoundError, ImportError):
            continue
        connect = getattr(module, "connect", None)
        if connect is not None:
            return connect
    return None


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    connect = _load_connect()
    if connect is None:
        print("Postgres example skipped: psycopg/psycopg2 not installed.")
        print("Install dependency: pip install psycopg")
        return

    password = os.getenv(
        "PGMAPPER_PG_PASSWORD",
        os.getenv("PGPASSWORD", os.getenv("POSTGRES_PASSWORD", "password")),
    )
    params = {
        "host": os.getenv("PGMAPPER_PG_HOST", os.getenv("PGHOST", "localhost")),
        "port": int(os.getenv("PGMAPPER_PG_PORT", os.getenv("PGPORT", "5432"))),
        "user": os.getenv("PGMAPPER_PG_USER", os.getenv("PGUSER", "postgres")),
        "password": password,
        "dbname": os.getenv("PGMAPPER_PG_DATABASE", os.getenv("PGDATABASE", "postgres")),
    }

    try:
        conn = connect(**params)
    except Exception as exc:
        print("Postgres example skipped:", exc)
        return

    conn.autocommit = True
    config = AdapterConfig.from_env()
    db = Database.from_config(conn, config)
    adapter = PostgresAdapter(db, config)

    try:
        db.execute('DROP TABLE IF EXISTS "account"')
        db.execute(
            """CREATE TABLE "account" (
                id bigserial PRIMARY KEY,
                email character varying(120) NOT NULL UNIQUE,
                active boolean DEFAULT true,
                balance numeric(12,2) DEFAULT 0
            )"""
        )

        print("Server version:", adapter.postgresql_version())
        for column in adapter.column_descriptors_for("account"):
            print("Column:", column)
        for index in adapter.index_descriptors_for("account"):
            print("Index:", index)
        print("Primary key:", adapter.resolve_primary_key_and_sequence("account"))

        insert = """INSERT INTO "account" (email) VALUES (%s)"""
        print("Inserted id:", adapter.perform_insert(insert, "account", params=["ada@example.com"]))
        try:
            adapter.perform_insert(insert, "account", params=["ada@example.com"])
        except UniqueViolationError as exc:
            print("Duplicate rejected:", exc)
    finally:
        db.execute('DROP TABLE IF EXISTS "account"')
        db.close()


if __name__ == "__main__":
    main()
