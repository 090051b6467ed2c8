"""Configuration loading and validation."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from open311_loader.common.constants import (
    DEFAULT_READ_CAPACITY,
    DEFAULT_REGION,
    DEFAULT_TABLE_NAMES,
    DEFAULT_WRITE_CAPACITY,
)
from open311_loader.common.errors import ConfigError
from open311_loader.common.fs import read_yaml
from open311_loader.common.schema import validate_loader_config

DEFAULT_CONFIG: dict[str, Any] = {
    "aws": {
        "region": DEFAULT_REGION,
        "endpoint_url": None,
        "connect_timeout": 10.0,
        "read_timeout": 30.0,
        "max_attempts": 5,
    },
    "capacity": {
        "read_units": DEFAULT_READ_CAPACITY,
        "write_units": DEFAULT_WRITE_CAPACITY,
    },
    "polling": {
        "max_attempts": 20,
        "initial_wait": 1.0,
        "max_wait": 20.0,
        "jitter": 1.0,
    },
    "tables": dict(DEFAULT_TABLE_NAMES),
}


@dataclass(frozen=True)
class AwsConfig:
    region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    max_attempts: int = 5


@dataclass(frozen=True)
class CapacityConfig:
    read_units: int = DEFAULT_READ_CAPACITY
    write_units: int = DEFAULT_WRITE_CAPACITY


@dataclass(frozen=True)
class PollingConfig:
    max_attempts: int = 20
    initial_wait: float = 1.0
    max_wait: float = 20.0
    jitter: float = 1.0


@dataclass(frozen=True)
class LoaderConfig:
    aws: AwsConfig
    capacity: CapacityConfig
    polling: PollingConfig
    tables: dict[str, str]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _from_mapping(cfg: dict) -> LoaderConfig:
    return LoaderConfig(
        aws=AwsConfig(**cfg["aws"]),
        capacity=CapacityConfig(**cfg["capacity"]),
        polling=PollingConfig(**cfg["polling"]),
        tables=dict(cfg["tables"]),
    )


def load_config(
    config_path: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
) -> LoaderConfig:
    """Build the loader config from defaults, an optional YAML file and CLI overrides."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            file_cfg = read_yaml(config_path)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Unable to read config file {config_path}: {exc}") from exc
        if file_cfg is not None:
            if not isinstance(file_cfg, dict):
                raise ConfigError(f"Config file {config_path} must contain a mapping")
            merged = _deep_merge(merged, file_cfg)
    if overrides:
        merged = _deep_merge(merged, overrides)
    return _from_mapping(validate_loader_config(merged))
