"""CSV header detection and lazy row iteration.

This module turns a tabular payload into a header list and a finite,
lazily evaluated sequence of raw rows. Each call to ``iter_csv_rows``
starts a fresh pass over the payload.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterator

from core.errors import SourceError


@dataclass(frozen=True)
class CsvHeader:
    """Detected header row.

    Attributes:
        names: Raw header names in source order.
        positions: Source positions of the named (non-blank) headers.
    """

    names: tuple[str, ...]
    positions: tuple[int, ...]

    @property
    def named(self) -> tuple[str, ...]:
        """Non-blank header names in source order."""
        return tuple(self.names[position] for position in self.positions)


def read_csv_header(payload: str) -> CsvHeader:
    """Read the header row of a CSV payload.

    Args:
        payload: Tabular text.

    Returns:
        Parsed header; ``named`` is empty when no usable column exists.

    Raises:
        SourceError: If the header line is malformed CSV.
    """
    reader = csv.reader(io.StringIO(payload))
    try:
        first_row = next(reader, [])
    except csv.Error as error:
        raise SourceError(f"Malformed CSV header: {error}") from error
    positions = tuple(index for index, name in enumerate(first_row) if name.strip())
    return CsvHeader(names=tuple(first_row), positions=positions)


def iter_csv_rows(payload: str, header: CsvHeader) -> Iterator[dict[str, str]]:
    """Yield data rows keyed by raw header name.

    Values at blank-named header positions and surplus values beyond the
    header are ignored; short rows simply lack the trailing fields.

    Args:
        payload: Tabular text including the header line.
        header: Header previously read from the same payload.

    Yields:
        One mapping per data row.

    Raises:
        SourceError: If a data line is malformed CSV.
    """
    reader = csv.reader(io.StringIO(payload))
    try:
        next(reader, None)
        for values in reader:
            yield {
                header.names[position]: values[position]
                for position in header.positions
                if position < len(values)
            }
    except csv.Error as error:
        raise SourceError(f"Malformed CSV at line {reader.line_num}: {error}") from error
