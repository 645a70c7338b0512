"""Primary-key and backing-sequence discovery."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from .catalog import regclass_literal, string_literal
from .contracts import SessionPort
from .descriptors import PrimaryKeyInfo, ResolutionStatus, SequenceResolution, TableIdentifier
from .errors import MalformedIdentifierError
from .quoting import quote_identifier, split_qualified_identifier

logger = logging.getLogger(__name__)

# nextval('foo_id_seq'::regclass) since 8.1, nextval('foo_id_seq'::text) before.
_NEXTVAL_RE = re.compile(
    r"nextval\(\s*\(?\s*'((?:[^']|'')+)'(?:::(?:regclass|text|character varying))?\s*\)",
    re.IGNORECASE,
)


def owned_sequence_sql(table: TableIdentifier) -> str:
    """Sequence the dependency graph marks as owned by the pk column."""

    return f"""SELECT attr.attname, seq.relname
  FROM pg_class      seq,
       pg_attribute  attr,
       pg_depend     dep,
       pg_constraint cons
 WHERE seq.oid           = dep.objid
   AND seq.relkind       = 'S'
   AND attr.attrelid     = dep.refobjid
   AND attr.attnum       = dep.refobjsubid
   AND attr.attrelid     = cons.conrelid
   AND attr.attnum       = cons.conkey[1]
   AND cons.contype      = 'p'
   AND dep.refobjid      = {regclass_literal(table)}"""


def primary_key_default_sql(table: TableIdentifier) -> str:
    """Primary-key column with its default expression, when it calls nextval."""

    return f"""SELECT attr.attname, pg_get_expr(def.adbin, def.adrelid)
  FROM pg_class       t
  JOIN pg_attribute   attr ON (t.oid = attr.attrelid)
  JOIN pg_attrdef     def  ON (def.adrelid = attr.attrelid AND def.adnum = attr.attnum)
  JOIN pg_constraint  cons ON (cons.conrelid = def.adrelid AND def.adnum = cons.conkey[1])
 WHERE t.oid = {regclass_literal(table)}
   AND cons.contype = 'p'
   AND pg_get_expr(def.adbin, def.adrelid) ~* 'nextval'"""


def primary_key_sql(table: TableIdentifier) -> str:
    """First primary-key column, with or without a default."""

    return f"""SELECT attr.attname
  FROM pg_attribute  attr
  JOIN pg_constraint cons ON (cons.conrelid = attr.attrelid AND attr.attnum = cons.conkey[1])
 WHERE cons.contype = 'p'
   AND cons.conrelid = {regclass_literal(table)}"""


def reset_sequence_sql(table: TableIdentifier, pk: str, sequence: str) -> str:
    """`setval` so the next value is `MAX(pk) + increment`, or the sequence minimum."""

    sequence_literal = string_literal(quote_identifier(sequence))
    return f"""SELECT setval({sequence_literal},
       COALESCE((SELECT MAX({quote_identifier(pk)}) + s.seqincrement FROM {table.quoted}), s.seqmin),
       false)
  FROM pg_sequence s
 WHERE s.seqrelid = {sequence_literal}::regclass"""


def sequence_from_default(default_expr: str) -> Optional[str]:
    """Extract the unqualified sequence name from a `nextval(...)` default.

    Returns `None` when the expression has no `nextval` call. A schema
    qualifier is dropped up to and including the first separator outside
    quotes. Raises `MalformedIdentifierError` for unparseable names.
    """

    match = _NEXTVAL_RE.search(default_expr)
    if not match:
        return None
    raw_name = match.group(1).replace("''", "'")
    outer, remainder = split_qualified_identifier(raw_name)
    return outer if remainder is None else remainder


def conventional_sequence_name(table: TableIdentifier, pk: Optional[str] = None) -> str:
    """`<table>_<pk>_seq`, with `id` when the pk is unknown."""

    return f"{table.name}_{pk or 'id'}_seq"


class PrimaryKeySequenceResolver:
    """Finds a table's primary key and the sequence that feeds it."""

    def __init__(self, session: SessionPort):
        self.session = session

    def resolve(self, table: TableIdentifier | str) -> SequenceResolution:
        """Try ownership dependencies first, then the pk default expression."""

        try:
            identifier = TableIdentifier.coerce(table)
            row = self._first_row(owned_sequence_sql(identifier))
            if row is not None:
                logger.debug("sequence for %s resolved from dependencies", identifier)
                return SequenceResolution(
                    ResolutionStatus.RESOLVED,
                    PrimaryKeyInfo(column=row[0], sequence=row[1]),
                )

            row = self._first_row(primary_key_default_sql(identifier))
            if row is not None:
                sequence = sequence_from_default(str(row[1]))
                if sequence is None:
                    raise MalformedIdentifierError(f"Unparseable nextval default: {row[1]!r}")
                logger.debug("sequence for %s resolved from pk default", identifier)
                return SequenceResolution(
                    ResolutionStatus.RESOLVED,
                    PrimaryKeyInfo(column=row[0], sequence=sequence),
                )

            row = self._first_row(primary_key_sql(identifier))
        except Exception as exc:
            logger.warning("primary key lookup failed for %s: %s", table, exc)
            return SequenceResolution(ResolutionStatus.MALFORMED, error=exc)

        if row is None:
            return SequenceResolution(ResolutionStatus.NOT_FOUND)
        return SequenceResolution(ResolutionStatus.RESOLVED, PrimaryKeyInfo(column=row[0]))

    def pk_and_sequence_for(self, table: TableIdentifier | str) -> Optional[PrimaryKeyInfo]:
        """Resolved `PrimaryKeyInfo`, or `None` meaning no autogeneration support."""

        resolution = self.resolve(table)
        return resolution.info if resolution.resolved else None

    def primary_key(self, table: TableIdentifier | str) -> Optional[str]:
        info = self.pk_and_sequence_for(table)
        return info.column if info else None

    def default_sequence_name(self, table: TableIdentifier | str, pk: Optional[str] = None) -> str:
        """Discovered sequence, else the `<table>_<pk>_seq` naming convention."""

        identifier = TableIdentifier.coerce(table)
        info = self.pk_and_sequence_for(identifier)
        if info is not None and info.sequence:
            return info.sequence
        column = pk or (info.column if info else None)
        return conventional_sequence_name(identifier, column)

    def reset_pk_sequence(
        self,
        table: TableIdentifier | str,
        pk: Optional[str] = None,
        sequence: Optional[str] = None,
    ) -> Any:
        """Move the sequence to the current maximum of the pk column."""

        identifier = TableIdentifier.coerce(table)
        if not (pk and sequence):
            info = self.pk_and_sequence_for(identifier)
            if info is not None:
                pk = pk or info.column
                sequence = sequence or info.sequence

        if not pk:
            return None
        if not sequence:
            logger.warning("%s has primary key %s with no default sequence", identifier, pk)
            return None

        return self.session.select_value(reset_sequence_sql(identifier, pk, sequence))

    def _first_row(self, sql: str) -> Optional[Any]:
        rows = self.session.select_rows(sql)
        if not rows:
            return None
        row = rows[0]
        if row[0] is None:
            return None
        return row
