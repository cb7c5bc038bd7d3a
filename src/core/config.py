"""Runtime configuration model for AutoStatsCan.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATASETS_PATH,
    DEFAULT_DB_PATH,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RAW_DIR,
    FALSE_VALUES,
    TRUE_VALUES,
)
from core.errors import ConfigError


@dataclass(frozen=True)
class AutoStatsCanConfig:
    """Validated runtime configuration.

    Attributes:
        db_path: SQLite database file receiving one relation per dataset.
        datasets_path: YAML dataset list file.
        remap_path: Optional YAML remap table file.
        overwrite: Clear each relation before reloading it.
        keep_raw: Retain raw payload copies under ``raw_dir``.
        raw_dir: Root directory for retained raw payloads.
        http_timeout_seconds: Per-request HTTP timeout.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
        log_level: Minimum structured log level.
    """

    db_path: Path
    datasets_path: Path
    remap_path: Path | None
    overwrite: bool
    keep_raw: bool
    raw_dir: Path
    http_timeout_seconds: int
    s3_region: str | None
    s3_profile: str | None
    log_level: str

    @classmethod
    def from_env(cls) -> "AutoStatsCanConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ConfigError: If environment values are invalid.
        """
        remap_value = os.getenv("AUTOSTATSCAN_REMAP")
        return cls(
            db_path=_resolve_path(os.getenv("AUTOSTATSCAN_DB_PATH", str(DEFAULT_DB_PATH))),
            datasets_path=_resolve_path(
                os.getenv("AUTOSTATSCAN_DATASETS", str(DEFAULT_DATASETS_PATH))
            ),
            remap_path=_resolve_path(remap_value) if remap_value else None,
            overwrite=_parse_bool("AUTOSTATSCAN_OVERWRITE", default=False),
            keep_raw=_parse_bool("AUTOSTATSCAN_KEEP_RAW", default=True),
            raw_dir=_resolve_path(os.getenv("AUTOSTATSCAN_RAW_DIR", str(DEFAULT_RAW_DIR))),
            http_timeout_seconds=_parse_timeout(
                os.getenv("AUTOSTATSCAN_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
            ),
            s3_region=os.getenv("AUTOSTATSCAN_S3_REGION"),
            s3_profile=os.getenv("AUTOSTATSCAN_S3_PROFILE"),
            log_level=os.getenv("AUTOSTATSCAN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def _resolve_path(raw_value: str) -> Path:
    return Path(raw_value).expanduser().resolve()


def _parse_bool(variable: str, default: bool) -> bool:
    """Parse a boolean flag environment value.

    Args:
        variable: Environment variable name.
        default: Value used when the variable is unset or blank.

    Returns:
        Parsed flag.

    Raises:
        ConfigError: If the value is not a recognised boolean literal.
    """
    raw_value = os.getenv(variable)
    if raw_value is None or not raw_value.strip():
        return default
    lowered = raw_value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(
        f"Invalid {variable} value: expected one of "
        f"{TRUE_VALUES + FALSE_VALUES}, got '{raw_value}'. "
        f"Set {variable} to true or false."
    )


def _parse_timeout(raw_value: str) -> int:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        ConfigError: If value is not a positive integer.
    """
    try:
        timeout = int(raw_value)
    except ValueError as error:
        raise ConfigError(
            "Invalid AUTOSTATSCAN_HTTP_TIMEOUT value: "
            f"expected integer, got '{raw_value}'. "
            "Set AUTOSTATSCAN_HTTP_TIMEOUT to a number of seconds."
        ) from error
    if timeout <= 0:
        raise ConfigError(
            f"Invalid AUTOSTATSCAN_HTTP_TIMEOUT value: expected a positive number, got {timeout}."
        )
    return timeout
