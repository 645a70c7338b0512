"""Shared core type aliases used across contracts, catalog, and ports."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple, Union

NamedParams = Dict[str, Any]
PositionalParams = List[Any]
QueryParams = Union[NamedParams, PositionalParams, None]

RowTuple = Tuple[Any, ...]
RowTuples = List[RowTuple]
