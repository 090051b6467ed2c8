"""Read Open311 JSON files into typed records."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Sequence, TypeVar

from open311_loader.common.errors import FileReadError, ParseError
from open311_loader.common.fs import read_bytes

T = TypeVar("T")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON.
    raise ValueError(f"invalid number literal {name!r}")


def load_records(path: Path | str, record_type: type[T]) -> list[T]:
    """Parse ``path`` as a JSON array of ``record_type`` objects, in file order."""
    path = Path(path)
    try:
        raw = read_bytes(path)
    except OSError as exc:
        raise FileReadError(f"Unable to read {path}: {exc.strerror or exc}") from exc

    try:
        payload = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path} is not valid UTF-8: {exc}") from exc
    except ValueError as exc:
        raise ParseError(f"Malformed JSON in {path}: {exc}") from exc

    if not isinstance(payload, list):
        raise ParseError(f"{path} must contain a JSON array, got {type(payload).__name__}")

    records = []
    for index, obj in enumerate(payload):
        try:
            records.append(record_type.from_dict(obj))
        except ParseError as exc:
            raise ParseError(f"{path} element {index}: {exc}") from exc
    return records


def duplicate_keys(records: Sequence) -> list[str]:
    """Return keys that appear more than once, in first-seen order."""
    if not records:
        return []
    key_field = type(records[0]).KEY_FIELD
    counts = Counter(getattr(record, key_field) for record in records)
    return [key for key, count in counts.items() if count > 1]
