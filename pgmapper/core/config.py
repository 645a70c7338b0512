"""Adapter configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

DEFAULT_INDEX_LIMIT = 32
RETURNING_MIN_VERSION = 80200

_TRUE_VALUES = {"1", "true", "t", "yes", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "off", ""}


@dataclass(frozen=True)
class AdapterConfig:
    """Settings consumed by `PostgresAdapter`.

    Args:
        schema_search_path: Comma separated schemas used to scope index
            lookups. `None` asks the session (`SHOW search_path`).
        multi_column_index_limit: Number of index key positions unnested per
            index. Key columns past this limit are not reported.
        returning_min_version: Lowest server version (`90600` style) that
            gets the `RETURNING` insert path.
        server_version: Known server version; skips the `version()` query.
        query_cache: Enable the result cache of the DB-API `Database`.
    """

    schema_search_path: Optional[str] = None
    multi_column_index_limit: int = DEFAULT_INDEX_LIMIT
    returning_min_version: int = RETURNING_MIN_VERSION
    server_version: Optional[int] = None
    query_cache: bool = False

    def __post_init__(self) -> None:
        if self.multi_column_index_limit < 1:
            raise ValueError("multi_column_index_limit must be >= 1.")
        if self.returning_min_version < 0:
            raise ValueError("returning_min_version must be >= 0.")
        if self.server_version is not None and self.server_version < 0:
            raise ValueError("server_version must be >= 0.")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = "PGMAPPER_",
    ) -> AdapterConfig:
        """Build config from `<prefix><FIELD_NAME>` environment variables."""

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for config_field in fields(cls):
            key = f"{prefix}{config_field.name.upper()}"
            if key not in env:
                continue
            values[config_field.name] = _parse_env_value(config_field.name, env[key])
        return cls(**values)


def _parse_env_value(name: str, raw: str) -> Any:
    text = raw.strip()
    if name == "schema_search_path":
        return text or None
    if name == "query_cache":
        lowered = text.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for {name}: {raw!r}")
    if name == "server_version" and not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {name}: {raw!r}") from exc
