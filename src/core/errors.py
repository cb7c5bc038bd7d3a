"""AutoStatsCan exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each ingestion stage raises a specific error type so the orchestrator
can decide whether a failure is row-scoped or dataset-scoped.
"""

from __future__ import annotations


class AutoStatsCanError(Exception):
    """Base exception for all AutoStatsCan failures."""


class ConfigError(AutoStatsCanError):
    """Raised for invalid runtime configuration or catalog files."""


class SourceError(AutoStatsCanError):
    """Raised when a dataset source cannot be fetched, read, or parsed."""


class SchemaError(AutoStatsCanError):
    """Raised when creating or extending a relation fails.

    Attributes:
        statement: DDL statement that was attempted, when known.
    """

    def __init__(self, message: str, statement: str | None = None) -> None:
        super().__init__(message)
        self.statement = statement


class RowInsertError(AutoStatsCanError):
    """Raised when a single row insert fails.

    Attributes:
        statement: INSERT statement that was attempted.
    """

    def __init__(self, message: str, statement: str) -> None:
        super().__init__(message)
        self.statement = statement


class TransactionError(AutoStatsCanError):
    """Raised when transaction control or the pre-overwrite clear fails."""


class StoreError(AutoStatsCanError):
    """Raised when the relational store is unavailable or misbehaves."""


class DependencyError(AutoStatsCanError):
    """Raised when an optional runtime dependency is missing."""
