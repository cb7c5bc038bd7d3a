"""Schema-gated column remapping.

Historic exports of the same dataset name some columns differently.
A static rule table folds the old names into the current ones, but a
rule only fires once its target column exists in the relation.
"""

from __future__ import annotations

from typing import Sequence

from core.logging_config import get_logger
from core.naming import identifier_key
from core.types import RemapRule

_LOGGER = get_logger(__name__)


class ColumnRemapper:
    """Apply remap rules to rows of one relation.

    Build one instance per dataset from the column set returned by
    schema synchronization, so rules targeting columns created for the
    current batch are already live on its first row.
    """

    def __init__(
        self,
        rules: Sequence[RemapRule],
        columns: Sequence[str],
        table_name: str,
    ) -> None:
        self._table_name = table_name
        columns_by_key = {identifier_key(column): column for column in columns}
        self._active_rules: list[tuple[str, str]] = []
        for rule in rules:
            source = columns_by_key.get(identifier_key(rule.source), rule.source)
            target = columns_by_key.get(identifier_key(rule.target))
            if target is None or identifier_key(source) == identifier_key(target):
                continue
            self._active_rules.append((source, target))
        self._counts: dict[tuple[str, str], int] = {}

    def apply(self, row: dict[str, str]) -> dict[str, str]:
        """Rewrite a row in place and return it.

        Args:
            row: Field mapping keyed by canonical column spelling.

        Returns:
            The same mapping with remapped fields moved to their targets.
        """
        for source, target in self._active_rules:
            if source not in row:
                continue
            pair = (source, target)
            count = self._counts.get(pair, 0) + 1
            self._counts[pair] = count
            if count == 1:
                _LOGGER.info(
                    "column_remap_applied",
                    table_name=self._table_name,
                    source=source,
                    target=target,
                )
            value = row.pop(source)
            if target not in row:
                row[target] = value
        return row

    def totals(self) -> dict[tuple[str, str], int]:
        """Return rows remapped per ``(source, target)`` pair."""
        return dict(self._counts)

    def log_totals(self) -> None:
        """Emit one summary line per triggered rule."""
        for (source, target), count in self._counts.items():
            _LOGGER.info(
                "column_remap_total",
                table_name=self._table_name,
                source=source,
                target=target,
                row_count=count,
            )
