"""Core constants used across AutoStatsCan modules.

This module centralizes defaults and file names.
Keeping values here avoids magic literals in ingestion logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DB_PATH = Path("autostatscan.db")
DEFAULT_DATASETS_PATH = Path("urls.yaml")
DEFAULT_RAW_DIR = Path("csvtmp")
DEFAULT_HTTP_TIMEOUT_SECONDS = 90
DEFAULT_LOG_LEVEL = "INFO"
RAW_INDEX_FILE_NAME = "index.json"
RAW_PAYLOAD_SUFFIX = ".csv"
SOURCE_TEXT_ENCODING = "utf-8-sig"
COLUMN_TYPE = "TEXT"
OBSERVATIONS_MARKER = "OBSERVATIONS"
REMOTE_SCHEME_SEPARATOR = "://"
S3_SCHEME = "s3://"
HTTP_RETRY_TOTAL = 5
HTTP_RETRY_BACKOFF_FACTOR = 0.6
HTTP_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")
