from __future__ import annotations

import dataclasses
import unittest
from datetime import date, datetime
from decimal import Decimal

from pgmapper import (
    NATIVE_DATABASE_TYPES,
    LogicalType,
    UnsupportedTypeError,
    extract_limit,
    simplified_type,
    type_to_sql,
)
from pgmapper.core.type_map import (
    SIMPLIFIED_TYPE_RULES,
    base_type_name,
    cast_to_boolean,
    extract_precision,
    extract_scale,
    type_cast,
)

NATIVE_TYPES = [
    "serial",
    "BIGSERIAL",
    "integer[]",
    "text[]",
    "interval",
    "interval day to second",
    "point",
    "circle",
    '"path"',
    "uuid",
    "timestamp without time zone",
    "timestamp(3) with time zone",
    "real",
    "double precision",
    "bytea",
    "boolean",
    "numeric(131089)",
    "numeric(10,2)",
    "character varying(50)",
    "character(3)",
    "text",
    "integer",
    "bigint",
    "date",
    "time without time zone",
    "jsonb",
    "money",
]


class SimplifiedTypeTests(unittest.TestCase):
    def test_rule_outcomes(self) -> None:
        expected = {
            "serial": LogicalType.INTEGER,
            "BIGSERIAL": LogicalType.INTEGER,
            "integer[]": LogicalType.STRING,
            "text[]": LogicalType.STRING,
            "interval": LogicalType.STRING,
            "point": LogicalType.STRING,
            "circle": LogicalType.STRING,
            '"path"': LogicalType.STRING,
            "uuid": LogicalType.STRING,
            "timestamp without time zone": LogicalType.DATETIME,
            "timestamp(3) with time zone": LogicalType.DATETIME,
            "real": LogicalType.FLOAT,
            "double precision": LogicalType.FLOAT,
            "bytea": LogicalType.BINARY,
            "boolean": LogicalType.BOOLEAN,
            "numeric(131089)": LogicalType.DECIMAL,
        }
        for sql_type, logical in expected.items():
            with self.subTest(sql_type=sql_type):
                self.assertEqual(simplified_type(sql_type), logical)

    def test_fallback_to_base_table(self) -> None:
        self.assertEqual(simplified_type("character varying(50)"), LogicalType.STRING)
        self.assertEqual(simplified_type("character(3)"), LogicalType.STRING)
        self.assertEqual(simplified_type("text"), LogicalType.TEXT)
        self.assertEqual(simplified_type("integer"), LogicalType.INTEGER)
        self.assertEqual(simplified_type("bigint"), LogicalType.INTEGER)
        self.assertEqual(simplified_type("numeric(10,2)"), LogicalType.DECIMAL)
        self.assertEqual(simplified_type("date"), LogicalType.DATE)
        self.assertEqual(simplified_type("time without time zone"), LogicalType.TIME)
        self.assertEqual(simplified_type("money"), LogicalType.DECIMAL)

    def test_rule_precedence(self) -> None:
        # array marker wins over the element type
        self.assertEqual(simplified_type("text[]"), LogicalType.STRING)
        # real/double precision must match exactly
        self.assertEqual(simplified_type("real"), LogicalType.FLOAT)
        self.assertEqual([name for name, _, _ in SIMPLIFIED_TYPE_RULES][0], "serial")

    def test_unknown_type_raises(self) -> None:
        with self.assertRaises(UnsupportedTypeError):
            simplified_type("mood")
        with self.assertRaises(TypeError):
            simplified_type("geography(Point,4326)")

    def test_deterministic_and_order_independent(self) -> None:
        forward = {sql_type: simplified_type(sql_type) for sql_type in NATIVE_TYPES}
        backward = {sql_type: simplified_type(sql_type) for sql_type in reversed(NATIVE_TYPES)}
        again = {sql_type: simplified_type(sql_type) for sql_type in NATIVE_TYPES}
        self.assertEqual(forward, backward)
        self.assertEqual(forward, again)

    def test_base_type_name(self) -> None:
        self.assertEqual(base_type_name("Character Varying(50)"), "character varying")
        self.assertEqual(base_type_name("numeric(10, 2)"), "numeric")


class LimitExtractionTests(unittest.TestCase):
    def test_integer_widths(self) -> None:
        self.assertEqual(extract_limit("smallint"), 2)
        self.assertEqual(extract_limit("int2"), 2)
        self.assertIsNone(extract_limit("integer"))
        self.assertIsNone(extract_limit("int4"))
        self.assertEqual(extract_limit("bigint"), 8)
        self.assertEqual(extract_limit("int8"), 8)

    def test_unconstrained_types(self) -> None:
        for sql_type in ["boolean", "text", "date", "time without time zone", "bytea", "timestamp(6) without time zone"]:
            with self.subTest(sql_type=sql_type):
                self.assertIsNone(extract_limit(sql_type))

    def test_declared_sizes(self) -> None:
        self.assertEqual(extract_limit("character varying(50)"), 50)
        self.assertEqual(extract_limit("numeric(10,2)"), 10)
        self.assertIsNone(extract_limit("double precision"))

    def test_precision_and_scale(self) -> None:
        self.assertEqual(extract_precision("numeric(10,2)"), 10)
        self.assertEqual(extract_scale("numeric(10,2)"), 2)
        self.assertEqual(extract_precision("numeric(8)"), 8)
        self.assertEqual(extract_scale("numeric(8)"), 0)
        self.assertIsNone(extract_precision("numeric"))
        self.assertIsNone(extract_scale("numeric"))


class TypeToSqlTests(unittest.TestCase):
    def test_integer_limits(self) -> None:
        self.assertEqual(type_to_sql(LogicalType.INTEGER), "integer")
        self.assertEqual(type_to_sql("integer", 4), "integer")
        self.assertEqual(type_to_sql("integer", 2), "smallint")
        self.assertEqual(type_to_sql("integer", 8), "bigint")

    def test_other_types(self) -> None:
        self.assertEqual(type_to_sql("string"), "character varying(255)")
        self.assertEqual(type_to_sql("string", 50), "character varying(50)")
        self.assertEqual(type_to_sql("text"), "text")
        self.assertEqual(type_to_sql("decimal", precision=10, scale=2), "decimal(10,2)")
        self.assertEqual(type_to_sql("decimal"), "decimal")
        self.assertEqual(type_to_sql("datetime"), "timestamp")
        self.assertEqual(type_to_sql("binary"), "bytea")
        self.assertEqual(type_to_sql("primary_key"), "serial primary key")

    def test_unknown_logical_type_raises(self) -> None:
        with self.assertRaises(UnsupportedTypeError):
            type_to_sql("geometry")

    def test_native_table_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            NATIVE_DATABASE_TYPES[LogicalType.STRING] = None  # type: ignore[index]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            NATIVE_DATABASE_TYPES[LogicalType.STRING].limit = 10  # type: ignore[misc]
        self.assertEqual(set(NATIVE_DATABASE_TYPES), set(LogicalType))


class TypeCastTests(unittest.TestCase):
    def test_cast_to_boolean(self) -> None:
        self.assertTrue(cast_to_boolean("t"))
        self.assertTrue(cast_to_boolean("TRUE"))
        self.assertTrue(cast_to_boolean(1))
        self.assertFalse(cast_to_boolean("f"))
        self.assertFalse(cast_to_boolean("false"))
        self.assertIsNone(cast_to_boolean(None))

    def test_type_cast_by_logical_type(self) -> None:
        self.assertEqual(type_cast(LogicalType.INTEGER, "42"), 42)
        self.assertEqual(type_cast(LogicalType.FLOAT, "1.5"), 1.5)
        self.assertEqual(type_cast(LogicalType.DECIMAL, "1.50"), Decimal("1.50"))
        self.assertEqual(type_cast(LogicalType.DATE, "2020-01-01"), date(2020, 1, 1))
        self.assertEqual(
            type_cast(LogicalType.DATETIME, "2020-01-01 10:00:00"),
            datetime(2020, 1, 1, 10, 0, 0),
        )
        self.assertEqual(type_cast(LogicalType.BINARY, "\\x6869"), b"hi")
        self.assertEqual(type_cast(LogicalType.BINARY, "\\150\\151"), b"hi")
        self.assertEqual(type_cast(LogicalType.STRING, 5), "5")
        self.assertIsNone(type_cast(LogicalType.INTEGER, None))


if __name__ == "__main__":
    unittest.main()
