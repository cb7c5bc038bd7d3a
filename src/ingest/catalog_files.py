"""Dataset list and remap table loading.

This module parses the two YAML files an ingestion run consumes: the
ordered dataset list and the static remap table shared by every
dataset. Both are validated strictly and loaded once per run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.errors import ConfigError
from core.naming import sanitize_identifier
from core.types import DatasetDescriptor, RemapRule


def load_dataset_list(path: Path) -> list[DatasetDescriptor]:
    """Load the ordered dataset list.

    Accepted shapes, optionally nested under a ``datasets`` key, are a
    mapping of ``name: location`` or a list of ``{name, source}`` items.

    Args:
        path: YAML file path.

    Returns:
        Dataset descriptors in declaration order.

    Raises:
        ConfigError: If the file is missing or malformed.
    """
    payload = _load_yaml_payload(path, "dataset list")
    if isinstance(payload, Mapping) and "datasets" in payload:
        payload = payload["datasets"]
    if isinstance(payload, Mapping):
        return [
            DatasetDescriptor(
                name=_expect_text(name, f"dataset name in {path}"),
                source=_expect_text(source, f"location of dataset '{name}' in {path}"),
            )
            for name, source in payload.items()
        ]
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        return [_descriptor_from_item(item, index, path) for index, item in enumerate(payload)]
    raise ConfigError(
        f"Invalid dataset list at {path}: expected a mapping of name to location "
        f"or a list of {{name, source}} items, got {type(payload).__name__}."
    )


def load_remap_rules(path: Path | None) -> list[RemapRule]:
    """Load the static remap table.

    Names are sanitized with the same transform as incoming headers so
    rules can be written with the raw source spelling.

    Args:
        path: YAML file path, or ``None`` for no rules.

    Returns:
        Remap rules in file order.

    Raises:
        ConfigError: If the file is missing or malformed.
    """
    if path is None:
        return []
    payload = _load_yaml_payload(path, "remap table")
    if isinstance(payload, Mapping) and "remap" in payload:
        payload = payload["remap"]
    if not isinstance(payload, Mapping):
        raise ConfigError(
            f"Invalid remap table at {path}: expected a mapping of incoming "
            f"column to target column, got {type(payload).__name__}."
        )
    return [
        RemapRule(
            source=sanitize_identifier(_expect_text(source, f"remap source in {path}")),
            target=sanitize_identifier(_expect_text(target, f"remap target in {path}")),
        )
        for source, target in payload.items()
    ]


def _load_yaml_payload(path: Path, context: str) -> object:
    if not path.exists():
        raise ConfigError(
            f"The {context} file does not exist at {path}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(path.read_text(encoding="utf-8")))
    except OSError as error:
        raise ConfigError(
            f"Failed to read {context} at {path}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise ConfigError(
            f"Failed to parse YAML {context} at {path}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    return payload


def _descriptor_from_item(item: object, index: int, path: Path) -> DatasetDescriptor:
    if not isinstance(item, Mapping):
        raise ConfigError(
            f"Invalid dataset entry {index} in {path}: expected mapping with name and source."
        )
    return DatasetDescriptor(
        name=_expect_text(item.get("name"), f"name of dataset entry {index} in {path}"),
        source=_expect_text(item.get("source"), f"source of dataset entry {index} in {path}"),
    )


def _expect_text(value: object, context: str) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Invalid {context}: expected non-empty string, got {value!r}.")
    return value
