"""Minimal strict schemas for config validation and record decoding."""

from __future__ import annotations

import math
from typing import Any

from open311_loader.common.errors import ConfigError, ParseError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str) -> None:
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: Any, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_positive_int(value: Any, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{ctx} must be a positive integer")


def _assert_non_negative_number(value: Any, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"{ctx} must be a non-negative number")


def validate_loader_config(cfg: dict) -> dict:
    sections = {"aws", "capacity", "polling", "tables"}
    _assert_mapping(cfg, "loader config")
    _assert_required_keys(cfg, sections, "loader config")
    _assert_no_unknown_keys(cfg, sections, "loader config")

    aws = _assert_mapping(cfg["aws"], "aws")
    aws_keys = {"region", "endpoint_url", "connect_timeout", "read_timeout", "max_attempts"}
    _assert_required_keys(aws, aws_keys, "aws")
    _assert_no_unknown_keys(aws, aws_keys, "aws")
    if not isinstance(aws["region"], str) or not aws["region"]:
        raise ConfigError("aws.region must be a non-empty string")
    if aws["endpoint_url"] is not None and not isinstance(aws["endpoint_url"], str):
        raise ConfigError("aws.endpoint_url must be a string or null")
    _assert_non_negative_number(aws["connect_timeout"], "aws.connect_timeout")
    _assert_non_negative_number(aws["read_timeout"], "aws.read_timeout")
    _assert_positive_int(aws["max_attempts"], "aws.max_attempts")

    capacity = _assert_mapping(cfg["capacity"], "capacity")
    _assert_required_keys(capacity, {"read_units", "write_units"}, "capacity")
    _assert_no_unknown_keys(capacity, {"read_units", "write_units"}, "capacity")
    _assert_positive_int(capacity["read_units"], "capacity.read_units")
    _assert_positive_int(capacity["write_units"], "capacity.write_units")

    polling = _assert_mapping(cfg["polling"], "polling")
    polling_keys = {"max_attempts", "initial_wait", "max_wait", "jitter"}
    _assert_required_keys(polling, polling_keys, "polling")
    _assert_no_unknown_keys(polling, polling_keys, "polling")
    _assert_positive_int(polling["max_attempts"], "polling.max_attempts")
    _assert_non_negative_number(polling["initial_wait"], "polling.initial_wait")
    _assert_non_negative_number(polling["max_wait"], "polling.max_wait")
    _assert_non_negative_number(polling["jitter"], "polling.jitter")

    tables = _assert_mapping(cfg["tables"], "tables")
    table_keys = {"services", "requests", "cities"}
    _assert_required_keys(tables, table_keys, "tables")
    _assert_no_unknown_keys(tables, table_keys, "tables")
    for kind, name in tables.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"tables.{kind} must be a non-empty string")

    return cfg


# Record decoding: missing keys and JSON null take the field's zero value,
# unknown keys are ignored.


def string_field(obj: dict, name: str) -> str:
    value = obj.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"Field '{name}' must be a string, got {type(value).__name__}")
    return value


def bool_field(obj: dict, name: str) -> bool:
    value = obj.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ParseError(f"Field '{name}' must be a boolean, got {type(value).__name__}")
    return value


def int_field(obj: dict, name: str) -> int:
    value = obj.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"Field '{name}' must be an integer, got {type(value).__name__}")
    return value


def float_field(obj: dict, name: str) -> float:
    value = obj.get(name)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Field '{name}' must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise ParseError(f"Field '{name}' must be a finite number")
    return value


def list_field(obj: dict, name: str) -> list:
    value = obj.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"Field '{name}' must be an array, got {type(value).__name__}")
    return value


def key_field(obj: dict, name: str) -> str:
    value = string_field(obj, name)
    if not value:
        raise ParseError(f"Key field '{name}' must be a non-empty string")
    return value
