"""Raw payload retention for run traceability.

When enabled, each fetched payload is copied into a dated directory as
``<sequence>.csv`` and an ``index.json`` maps sequence numbers back to
dataset names. The archive is bookkeeping only; ingestion never reads it.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from core.constants import RAW_INDEX_FILE_NAME, RAW_PAYLOAD_SUFFIX
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class RawArchive:
    """Filesystem-backed archive of one run's raw payloads."""

    def __init__(self, root_dir: Path, run_date: date | None = None) -> None:
        day = (run_date or date.today()).isoformat()
        self._run_dir = root_dir / day
        self._run_dir.mkdir(parents=True, exist_ok=True)
        self._index: dict[str, str] = {}

    @property
    def run_dir(self) -> Path:
        """Directory holding this run's payload copies."""
        return self._run_dir

    def register(self, sequence: int, dataset_name: str) -> None:
        """Record which dataset a sequence number belongs to."""
        self._index[str(sequence)] = dataset_name

    def save_payload(self, sequence: int, text: str) -> Path:
        """Write a raw payload copy and return its path."""
        payload_path = self._run_dir / f"{sequence}{RAW_PAYLOAD_SUFFIX}"
        payload_path.write_text(text, encoding="utf-8")
        return payload_path

    def write_index(self) -> Path:
        """Persist the sequence-to-dataset index."""
        index_path = self._run_dir / RAW_INDEX_FILE_NAME
        index_path.write_text(json.dumps(self._index, indent=2) + "\n", encoding="utf-8")
        _LOGGER.info("raw_index_written", path=str(index_path), dataset_count=len(self._index))
        return index_path
