from __future__ import annotations

import unittest

from pgmapper import (
    CatalogIntrospector,
    IndexDescriptor,
    NotFoundError,
    TableIdentifier,
    build_index_descriptors,
)
from pgmapper.core.catalog import (
    column_definitions_sql,
    index_rows_sql,
    parse_search_path,
    schema_list_sql,
)
from pgmapper.core.indexes import parse_index_keys
from tests._fakes import COLUMNS_SQL, INDEX_SQL, FakeSession


class CatalogSqlTests(unittest.TestCase):
    def test_column_definitions_sql_filters_and_orders(self) -> None:
        sql = column_definitions_sql(TableIdentifier("users"))

        self.assertIn("""WHERE a.attrelid = '"users"'::regclass""", sql)
        self.assertIn("pg_get_expr(d.adbin, d.adrelid)", sql)
        self.assertIn("format_type(a.atttypid, a.atttypmod)", sql)
        self.assertIn("a.attnum > 0 AND NOT a.attisdropped", sql)
        self.assertTrue(sql.rstrip().endswith("ORDER BY a.attnum"))

    def test_column_definitions_sql_schema_and_escaping(self) -> None:
        sql = column_definitions_sql(TableIdentifier.parse("public.users"))
        self.assertIn("""'"public"."users"'::regclass""", sql)

        sql = column_definitions_sql(TableIdentifier("o'brien"))
        self.assertIn("""'"o''brien"'::regclass""", sql)

    def test_index_rows_sql(self) -> None:
        sql = index_rows_sql(TableIdentifier("users"), ["public"])
        self.assertIn("generate_series(0, 31) AS s(i)", sql)
        self.assertIn("t.relname = 'users'", sql)
        self.assertIn("nspname IN ('public')", sql)
        self.assertIn("d.indisprimary = 'f'", sql)
        self.assertIn("d.indkey[s.i] = a.attnum", sql)

        sql = index_rows_sql(TableIdentifier("users"), ["public"], limit=4)
        self.assertIn("generate_series(0, 3) AS s(i)", sql)

    def test_index_rows_sql_rejects_bad_limits(self) -> None:
        with self.assertRaises(ValueError):
            index_rows_sql(TableIdentifier("users"), ["public"], limit=0)
        with self.assertRaises(ValueError):
            index_rows_sql(TableIdentifier("users"), [])

    def test_search_path_parsing(self) -> None:
        self.assertEqual(parse_search_path('"$user", public'), ["$user", "public"])
        self.assertEqual(parse_search_path("app ,  , public"), ["app", "public"])
        self.assertEqual(schema_list_sql(["$user", "public"]), "current_user, 'public'")


class CatalogIntrospectorTests(unittest.TestCase):
    def test_column_definitions_returns_session_rows(self) -> None:
        rows = [("id", None, "integer", True), ("name", None, "text", False)]
        session = FakeSession().on_rows(COLUMNS_SQL, rows)

        result = CatalogIntrospector(session).column_definitions("users")

        self.assertEqual(result, rows)

    def test_column_definitions_propagates_not_found(self) -> None:
        session = FakeSession().on_rows(
            COLUMNS_SQL, NotFoundError('relation "missing" does not exist')
        )
        with self.assertRaises(NotFoundError):
            CatalogIntrospector(session).column_definitions("missing")

    def test_index_rows_use_session_search_path(self) -> None:
        session = FakeSession().on_value("SHOW search_path", '"$user", public')
        session.on_rows(INDEX_SQL, [])

        CatalogIntrospector(session).index_rows("users")

        index_sql = session.selected_rows[-1][0]
        self.assertIn("nspname IN (current_user, 'public')", index_sql)

    def test_index_rows_configured_search_path_skips_show(self) -> None:
        session = FakeSession()
        CatalogIntrospector(session, schema_search_path="app").index_rows("users")

        self.assertFalse(any("SHOW" in sql for sql, _ in session.selected_values))
        self.assertIn("nspname IN ('app')", session.selected_rows[-1][0])

    def test_index_rows_qualified_table_uses_its_schema(self) -> None:
        session = FakeSession()
        CatalogIntrospector(session, schema_search_path="app").index_rows("sales.orders")

        sql = session.selected_rows[-1][0]
        self.assertIn("nspname IN ('sales')", sql)
        self.assertIn("t.relname = 'orders'", sql)


class IndexDescriptorBuilderTests(unittest.TestCase):
    def test_columns_follow_key_positions_in_either_row_order(self) -> None:
        rows = [
            ("idx_users_b_a", True, "b", 2, "2 1"),
            ("idx_users_b_a", True, "a", 1, "2 1"),
        ]
        expected = [IndexDescriptor("users", "idx_users_b_a", True, ("b", "a"))]

        self.assertEqual(build_index_descriptors("users", rows), expected)
        self.assertEqual(build_index_descriptors("users", list(reversed(rows))), expected)

    def test_multiple_indexes_keep_first_seen_order(self) -> None:
        rows = [
            ("idx_a", "f", "email", 3, [3, 1, 2]),
            ("idx_a", "f", "id", 1, [3, 1, 2]),
            ("idx_a", "f", "name", 2, [3, 1, 2]),
            ("idx_b", "t", "name", 2, "2"),
        ]
        result = build_index_descriptors("users", rows)

        self.assertEqual([index.name for index in result], ["idx_a", "idx_b"])
        self.assertEqual(result[0].columns, ("email", "id", "name"))
        self.assertFalse(result[0].unique)
        self.assertTrue(result[1].unique)

    def test_column_count_matches_key_positions(self) -> None:
        rows = [("idx_expr", False, "b", 2, "0 2")]
        result = build_index_descriptors("users", rows)

        self.assertEqual(len(result[0].columns), 2)
        self.assertEqual(result[0].columns, (None, "b"))

    def test_keys_past_limit_are_dropped(self) -> None:
        rows = [
            ("idx_wide", False, "a", 1, "1 2 3"),
            ("idx_wide", False, "b", 2, "1 2 3"),
        ]
        result = build_index_descriptors("users", rows, limit=2)
        self.assertEqual(result[0].columns, ("a", "b"))

    def test_parse_index_keys(self) -> None:
        self.assertEqual(parse_index_keys("2 1"), [2, 1])
        self.assertEqual(parse_index_keys("{2,1}"), [2, 1])
        self.assertEqual(parse_index_keys((3,)), [3])
        self.assertEqual(parse_index_keys(None), [])
        with self.assertRaises(TypeError):
            parse_index_keys(3.5)


if __name__ == "__main__":
    unittest.main()
