"""Normalization of catalog default expressions into literal values."""

from __future__ import annotations

import re
from typing import Optional

_BOOLEAN_RE = re.compile(r"^(true|false)$", re.IGNORECASE)
_QUOTED_STRING_RE = re.compile(
    r"^'((?:[^']|'')*)'::(?:bpchar|text|character varying|character|bytea)$", re.DOTALL
)
_NUMERIC_RE = re.compile(r"^\(?(-?[0-9]+(?:\.[0-9]*)?)\)?")
_QUOTED_DATE_RE = re.compile(r"^'((?:[^']|'')+)'::(?:date|timestamp[^']*)$", re.DOTALL)


def normalize_default(value: Optional[str]) -> Optional[str]:
    """Turn a default expression into its literal text.

    Returns `None` for a missing default and for expressions that are not
    literals (sequence calls, functions, user types).

        >>> normalize_default("true")
        't'
        >>> normalize_default("'x'::character varying")
        'x'
        >>> normalize_default("(5)::integer")
        '5'
        >>> normalize_default("nextval('foo_id_seq'::regclass)") is None
        True
    """

    if value is None:
        return None

    text = value.strip()

    match = _BOOLEAN_RE.match(text)
    if match:
        return "t" if match.group(1).lower() == "true" else "f"

    match = _QUOTED_STRING_RE.match(text)
    if match:
        return match.group(1).replace("''", "'")

    match = _NUMERIC_RE.match(text)
    if match:
        return match.group(1)

    match = _QUOTED_DATE_RE.match(text)
    if match:
        return match.group(1)

    return None
