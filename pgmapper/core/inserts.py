"""Insert execution with generated-key retrieval."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .catalog import string_literal
from .contracts import DialectPort, SessionPort
from .descriptors import TableIdentifier
from .quoting import quote_identifier
from .sequences import PrimaryKeySequenceResolver, conventional_sequence_name
from .types import QueryParams

logger = logging.getLogger(__name__)


def strip_statement_terminator(sql: str) -> str:
    return sql.rstrip().rstrip(";").rstrip()


def currval_sql(sequence_name: str) -> str:
    return f"SELECT currval({string_literal(quote_identifier(sequence_name))})"


class InsertProtocol:
    """Runs INSERT statements and returns the generated primary key.

    Two paths are chosen per call:

    - RETURNING: the server supports it, the caller supplied no key and a
      primary key resolves. The statement gets ` RETURNING "<pk>"` and runs
      as a scalar query.
    - EXECUTE+CURRVAL: everything else. The statement runs as-is and, when
      no key was supplied, the key is read back with `currval` on the
      discovered (or conventionally named) sequence.
    """

    def __init__(
        self,
        session: SessionPort,
        resolver: PrimaryKeySequenceResolver,
        *,
        supports_returning: Callable[[], bool],
        dialect: Optional[DialectPort] = None,
    ):
        self.session = session
        self.resolver = resolver
        self._supports_returning = supports_returning
        self.dialect = dialect

    def perform_insert(
        self,
        sql: str,
        table: TableIdentifier | str,
        *,
        id_value: Any = None,
        pk: Optional[str] = None,
        sequence_name: Optional[str] = None,
        params: QueryParams = None,
    ) -> Any:
        """Execute `sql` against `table` and return the generated key.

        Returns `id_value` unchanged when the caller supplied it, and `None`
        when the table has no primary key.
        """

        identifier = TableIdentifier.coerce(table)
        resolved = False

        if id_value is None and self._supports_returning():
            if not pk:
                info = self.resolver.pk_and_sequence_for(identifier)
                resolved = True
                if info is not None:
                    pk, sequence_name = info.column, sequence_name or info.sequence
            if pk:
                return self._insert_returning(sql, pk, params)

        self.session.execute(sql, params)
        if id_value is not None:
            return id_value

        if not (pk or sequence_name or resolved):
            info = self.resolver.pk_and_sequence_for(identifier)
            resolved = True
            if info is not None:
                pk, sequence_name = info.column, info.sequence

        if not pk:
            logger.debug("%s has no primary key; no generated key to fetch", identifier)
            return None

        if not sequence_name and resolved:
            sequence_name = conventional_sequence_name(identifier, pk)
        elif not sequence_name:
            sequence_name = self.resolver.default_sequence_name(identifier, pk)
        return self.last_insert_id(sequence_name)

    def last_insert_id(self, sequence_name: str) -> int:
        return int(self.session.select_value(currval_sql(sequence_name)))

    def _insert_returning(self, sql: str, pk: str, params: QueryParams) -> Any:
        returning = self.dialect.returning_clause(pk) if self.dialect is not None else ""
        if not returning:
            returning = f" RETURNING {quote_identifier(pk)}"
        statement = strip_statement_terminator(sql) + returning
        logger.debug("insert with RETURNING %s", pk)
        try:
            return self.session.select_value(statement, params)
        finally:
            clear_cache = getattr(self.session, "clear_query_cache", None)
            if callable(clear_cache):
                clear_cache()
