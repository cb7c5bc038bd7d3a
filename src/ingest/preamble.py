"""Metadata preamble stripping.

Some exports wrap the real table beneath descriptive metadata lines.
The table starts after a line whose only content is ``OBSERVATIONS``,
optionally quoted, in any letter case.
"""

from __future__ import annotations

import re

from core.constants import OBSERVATIONS_MARKER

_MARKER_LINE = re.compile(
    rf'^[ \t]*"?{OBSERVATIONS_MARKER}"?[ \t]*$',
    re.IGNORECASE | re.MULTILINE,
)
_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\n)+")


def normalize_line_endings(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_preamble(text: str) -> str | None:
    """Return the payload after the ``OBSERVATIONS`` marker line.

    Args:
        text: Raw source text.

    Returns:
        Text strictly after the first marker line with leading blank
        lines removed, or ``None`` when no marker line exists.
    """
    normalized = normalize_line_endings(text)
    match = _MARKER_LINE.search(normalized)
    if match is None:
        return None
    remainder = normalized[match.end():]
    if remainder.startswith("\n"):
        remainder = remainder[1:]
    return _LEADING_BLANK_LINES.sub("", remainder)


def extract_tabular_payload(text: str) -> str:
    """Return the stripped payload, or the original text when unwrapped."""
    stripped = strip_preamble(text)
    if stripped is None:
        return text
    return stripped
