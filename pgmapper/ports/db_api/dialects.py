"""SQL dialects used by the DB-API session and the insert protocol."""

from __future__ import annotations

from ...core.quoting import quote_identifier


class Dialect:
    """Identifier quoting and `RETURNING` support."""

    name: str = "generic"
    quote_char: str = '"'
    supports_returning: bool = False

    def q(self, ident: str) -> str:
        """Quote an identifier, doubling any embedded quote character."""

        escaped = str(ident).replace(self.quote_char, self.quote_char * 2)
        return f"{self.quote_char}{escaped}{self.quote_char}"

    def returning_clause(self, pk_name: str) -> str:
        """` RETURNING "<pk>"`, or an empty string without server support."""

        if not self.supports_returning:
            return ""
        return f" RETURNING {self.q(pk_name)}"


class PostgresDialect(Dialect):
    """PostgreSQL identifiers with doubled-quote escaping."""

    name = "postgres"
    supports_returning = True

    def q(self, ident: str) -> str:
        return quote_identifier(ident)
