"""AutoStatsCan CLI entry points.
This module exposes commands for ingesting datasets and inspecting relations.
It maps argparse commands onto pipeline and store calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import AutoStatsCanConfig
from core.errors import ConfigError, StoreError
from core.logging_config import configure_logging
from core.naming import sanitize_identifier
from core.types import RunSummary
from ingest.pipeline import run_ingest
from store.sqlite_store import SqliteStore


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="autostatscan",
        description="Load tabular datasets into a schema-evolving SQLite store",
    )
    parser.add_argument("--db-path", help="Override AUTOSTATSCAN_DB_PATH for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_ingest_command(subparsers)
    _add_columns_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the AutoStatsCan CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except ConfigError as error:
        print(f"error: {error}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)
    if args.command == "ingest":
        return _run_ingest_command(config)
    if args.command == "columns":
        return _run_columns_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> AutoStatsCanConfig:
    """Build config from the environment and apply CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Effective runtime configuration.
    """
    config = AutoStatsCanConfig.from_env()
    if args.db_path:
        config = replace(config, db_path=_resolve(args.db_path))
    if args.command != "ingest":
        return config
    if args.datasets:
        config = replace(config, datasets_path=_resolve(args.datasets))
    if args.remap:
        config = replace(config, remap_path=_resolve(args.remap))
    if args.raw_dir:
        config = replace(config, raw_dir=_resolve(args.raw_dir))
    if args.overwrite:
        config = replace(config, overwrite=True)
    if args.keep_raw is not None:
        config = replace(config, keep_raw=args.keep_raw)
    return config


def _run_ingest_command(config: AutoStatsCanConfig) -> int:
    """Handle ingest command.

    Args:
        config: Effective runtime configuration.

    Returns:
        Exit code; 1 when the database could not be opened.
    """
    try:
        summary = run_ingest(config)
    except ConfigError as error:
        print(f"error: {error}", file=sys.stderr)
        return 2
    _print_summary(summary)
    if not summary.store_available:
        print(f"error: database at {config.db_path} could not be opened", file=sys.stderr)
        return 1
    return 0


def _run_columns_command(config: AutoStatsCanConfig, args: argparse.Namespace) -> int:
    """Handle columns command.

    Args:
        config: Effective runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when the relation does not exist.
    """
    table_name = sanitize_identifier(args.dataset)
    if not config.db_path.is_file():
        print(f"error: no database at {config.db_path}", file=sys.stderr)
        return 1
    store = SqliteStore(config.db_path)
    try:
        store.connect()
        if not store.table_exists(table_name):
            print(f"error: no relation named {table_name}", file=sys.stderr)
            return 1
        for column in store.table_columns(table_name):
            print(column)
    except StoreError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    finally:
        store.close()
    return 0


def _print_summary(summary: RunSummary) -> None:
    """Print one tab-separated line per dataset outcome."""
    for outcome in summary.outcomes:
        print(
            f"{outcome.state}\t"
            f"{outcome.table_name}\t"
            f"{outcome.rows_inserted}\t"
            f"{outcome.rows_skipped}\t"
            f"{outcome.rows_failed}\t"
            f"{outcome.error or '-'}"
        )


def _resolve(raw_path: str) -> Path:
    return Path(raw_path).expanduser().resolve()


def _add_ingest_command(subparsers: Any) -> None:
    """Register ingest subcommand."""
    parser = subparsers.add_parser("ingest", help="Ingest every dataset in the dataset list")
    parser.add_argument("--datasets", help="YAML dataset list (name: location)")
    parser.add_argument("--remap", help="YAML remap table (incoming: target)")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Clear each relation before loading it",
    )
    parser.add_argument(
        "--keep-raw",
        dest="keep_raw",
        action="store_true",
        default=None,
        help="Retain raw payload copies and an index.json",
    )
    parser.add_argument(
        "--no-keep-raw",
        dest="keep_raw",
        action="store_false",
        help="Do not retain raw payload copies",
    )
    parser.add_argument("--raw-dir", help="Root directory for retained raw payloads")


def _add_columns_command(subparsers: Any) -> None:
    """Register columns subcommand."""
    parser = subparsers.add_parser("columns", help="List a dataset relation's columns")
    parser.add_argument("--dataset", required=True, help="Dataset name")
