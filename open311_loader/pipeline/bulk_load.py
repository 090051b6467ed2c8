"""Serialise records and put them into a DynamoDB table one at a time."""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Iterable, Mapping

from boto3.dynamodb.types import TypeSerializer

from open311_loader.common.errors import SerializationError, StoreError, WriteError
from open311_loader.common.logging import log_event
from open311_loader.store.dynamo import DynamoStore

_serializer = TypeSerializer()


def _to_dynamo_value(value: Any) -> Any:
    # DynamoDB numbers must be Decimal; str() keeps the shortest float repr.
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (list, tuple)):
        return [_to_dynamo_value(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _to_dynamo_value(item) for key, item in value.items()}
    return value


def _record_fields(record: Any) -> Mapping[str, Any]:
    if isinstance(record, Mapping):
        return record
    return record.to_dict()


def to_attribute_map(record: Any, key_field: str) -> dict[str, dict]:
    """Marshal a record into DynamoDB's attribute-value representation."""
    fields = _record_fields(record)
    key = fields.get(key_field)
    if not isinstance(key, str) or not key:
        raise ValueError(f"key attribute {key_field!r} must be a non-empty string")
    return {name: _serializer.serialize(_to_dynamo_value(value)) for name, value in fields.items()}


def load_items(
    store: DynamoStore,
    table_name: str,
    records: Iterable[Any],
    *,
    key_field: str | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Put every record into ``table_name`` in input order and return the count.

    PutItem overwrites by key, so reloading the same file does not duplicate
    items. The first serialisation or write failure stops the load; the
    raised error carries how many items were written before it.
    """
    written = 0
    started = time.monotonic()

    for index, record in enumerate(records):
        record_key_field = key_field or getattr(record, "KEY_FIELD", None)
        if record_key_field is None:
            raise SerializationError(
                f"Record {index} for table {table_name} has no key field",
                written=written,
                index=index,
            )
        try:
            item = to_attribute_map(record, record_key_field)
        except (TypeError, ValueError, ArithmeticError, AttributeError) as exc:
            raise SerializationError(
                f"Unable to serialise record {index} for table {table_name}: {exc}",
                written=written,
                index=index,
            ) from exc

        try:
            store.put_item(table_name, item)
        except StoreError as exc:
            raise WriteError(
                f"Unable to put record {index} into table {table_name}: {exc}",
                written=written,
                index=index,
            ) from exc
        written += 1
        key = item[record_key_field]["S"]
        log_event(
            logger,
            f"added item {key!r} to table {table_name}",
            level=logging.DEBUG,
            table=table_name,
            key=key,
            event="ITEM_PUT",
            status="ok",
        )

    log_event(
        logger,
        f"added {written} items to table {table_name}",
        table=table_name,
        event="BULK_LOAD",
        status="ok",
        records_out=written,
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    return written
