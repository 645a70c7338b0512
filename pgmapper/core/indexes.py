"""Reassemble flat index key rows into ordered index descriptors."""

from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_INDEX_LIMIT
from .descriptors import IndexDescriptor
from .type_map import cast_to_boolean


def parse_index_keys(raw: Any) -> List[int]:
    """Parse `pg_index.indkey` given as int2vector text or a sequence."""

    if raw is None:
        return []
    if isinstance(raw, str):
        text = raw.strip().strip("{}").replace(",", " ")
        return [int(part) for part in text.split()]
    if isinstance(raw, SequenceABC):
        return [int(part) for part in raw]
    raise TypeError(f"Unsupported index key vector: {type(raw).__name__}")


def build_index_descriptors(
    table: str,
    rows: Sequence[Sequence[Any]],
    *,
    limit: int = DEFAULT_INDEX_LIMIT,
) -> List[IndexDescriptor]:
    """Group `(index, unique, column, attnum, indkey)` rows by index name.

    Each column is placed at the position of its attnum inside `indkey`, so
    rows for one index may arrive in any order. Key positions at or past
    `limit` are never joined by the catalog query and are dropped here too.
    """

    order: List[str] = []
    unique_by_name: Dict[str, bool] = {}
    keys_by_name: Dict[str, List[int]] = {}
    columns_by_name: Dict[str, List[Optional[str]]] = {}

    for index_name, is_unique, column_name, attnum, indkey in rows:
        if index_name not in keys_by_name:
            keys = parse_index_keys(indkey)[:limit]
            order.append(index_name)
            unique_by_name[index_name] = bool(cast_to_boolean(is_unique))
            keys_by_name[index_name] = keys
            columns_by_name[index_name] = [None] * len(keys)

        keys = keys_by_name[index_name]
        position = int(attnum)
        for slot, key in enumerate(keys):
            if key == position:
                columns_by_name[index_name][slot] = column_name

    return [
        IndexDescriptor(
            table=table,
            name=name,
            unique=unique_by_name[name],
            columns=tuple(columns_by_name[name]),
        )
        for name in order
    ]
