"""Identifier sanitization helpers.

This module maps arbitrary dataset and header names onto safe
relational identifiers. The same transform is used for relation
names, column names, and remap rules so they always agree.
"""

from __future__ import annotations

import re
from typing import Iterable

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)
_UNSAFE_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_identifier(value: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with underscore.

    Args:
        value: Raw dataset or column name.

    Returns:
        Identifier of the same length containing only safe characters.
    """
    return _UNSAFE_CHARACTERS.sub("_", value)


def identifier_key(identifier: str) -> str:
    """Return the comparison key SQLite uses for identifiers."""
    return identifier.lower()


def quote_identifier(identifier: str) -> str:
    """Double-quote a sanitized identifier for SQL text."""
    return f'"{identifier}"'


def sanitize_headers(raw_headers: Iterable[str], table_name: str) -> list[str]:
    """Sanitize a header row, reporting post-sanitization collisions.

    Two distinct raw names that map onto the same identifier are not
    disambiguated; the later field overwrites the earlier on each row.

    Args:
        raw_headers: Header names as read from the source.
        table_name: Relation name for log context.

    Returns:
        Sanitized header names in source order.
    """
    sanitized_headers: list[str] = []
    raw_by_key: dict[str, str] = {}
    for raw_header in raw_headers:
        sanitized = sanitize_identifier(raw_header)
        key = identifier_key(sanitized)
        previous_raw = raw_by_key.get(key)
        if previous_raw is not None and previous_raw != raw_header:
            _LOGGER.warning(
                "identifier_collision",
                table_name=table_name,
                identifier=sanitized,
                first_raw_name=previous_raw,
                second_raw_name=raw_header,
            )
        raw_by_key.setdefault(key, raw_header)
        sanitized_headers.append(sanitized)
    return sanitized_headers
