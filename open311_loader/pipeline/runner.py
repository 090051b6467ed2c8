"""Per-kind orchestration: read file, ensure table, bulk load."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from open311_loader.common.config_loader import LoaderConfig
from open311_loader.common.errors import BulkLoadError
from open311_loader.common.logging import log_event
from open311_loader.common.models import City, Request, Service
from open311_loader.pipeline.bulk_load import load_items
from open311_loader.pipeline.file_loader import duplicate_keys, load_records
from open311_loader.store.dynamo import DynamoStore
from open311_loader.store.provision import ensure_table


@dataclass(frozen=True)
class RecordKind:
    name: str
    record_type: type
    file_flag: str
    label: str

    @property
    def key_field(self) -> str:
        return self.record_type.KEY_FIELD


RECORD_KINDS: dict[str, RecordKind] = {
    "services": RecordKind("services", Service, "serviceFile", "Services"),
    "requests": RecordKind("requests", Request, "requestFile", "Requests"),
    "cities": RecordKind("cities", City, "cityFile", "Cities"),
}


@dataclass
class KindResult:
    kind: str
    path: str
    table: str
    records_in: int = 0
    records_out: int = 0
    duplicate_keys: list[str] = field(default_factory=list)
    error_code: str | None = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "path": self.path,
            "table": self.table,
            "records_in": self.records_in,
            "records_out": self.records_out,
            "duplicate_keys": self.duplicate_keys,
            "error_code": self.error_code,
        }


def run_kind(
    store: DynamoStore,
    kind: RecordKind,
    path: Path,
    table_name: str,
    config: LoaderConfig,
    logger: logging.Logger | None = None,
    result: KindResult | None = None,
) -> KindResult:
    """Load one JSON file of ``kind`` records into ``table_name``.

    ``result`` is filled in as the steps complete so a caller still sees the
    partial counts when a step raises.
    """
    result = result or KindResult(kind=kind.name, path=str(path), table=table_name)

    records = load_records(path, kind.record_type)
    result.records_in = len(records)
    log_event(
        logger,
        f"read {len(records)} {kind.label} from {path}",
        kind=kind.name,
        event="FILE_READ",
        status="ok",
        records_in=len(records),
    )

    result.duplicate_keys = duplicate_keys(records)
    if result.duplicate_keys:
        log_event(
            logger,
            f"{len(result.duplicate_keys)} duplicate {kind.key_field} values in {path}; last one wins",
            level=logging.WARNING,
            kind=kind.name,
            event="DUPLICATE_KEYS",
            status="warning",
        )

    ensure_table(
        store,
        table_name,
        kind.key_field,
        capacity=config.capacity,
        polling=config.polling,
        logger=logger,
    )
    try:
        result.records_out = load_items(store, table_name, records, key_field=kind.key_field, logger=logger)
    except BulkLoadError as exc:
        result.records_out = exc.written
        raise
    return result
