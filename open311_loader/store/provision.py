"""Idempotent table provisioning with bounded readiness polling."""

from __future__ import annotations

import logging
import time

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from open311_loader.common.config_loader import CapacityConfig, PollingConfig
from open311_loader.common.constants import TABLE_STATUS_ACTIVE, TABLE_STATUS_PENDING
from open311_loader.common.errors import (
    ProvisionError,
    ProvisionTimeoutError,
    StoreError,
    TableAlreadyExistsError,
    TableNotFoundError,
    TableNotReadyError,
)
from open311_loader.common.logging import log_event
from open311_loader.store.dynamo import DynamoStore, TableDescription


def _check_ready(store: DynamoStore, table_name: str) -> TableDescription:
    try:
        description = store.describe_table(table_name)
    except TableNotFoundError as exc:
        # A freshly created table can briefly be invisible to DescribeTable.
        raise TableNotReadyError(f"Table {table_name} is not visible yet") from exc
    except StoreError as exc:
        raise ProvisionError(f"Unable to describe table {table_name}: {exc}") from exc

    if description.status == TABLE_STATUS_ACTIVE:
        return description
    if description.status in TABLE_STATUS_PENDING:
        raise TableNotReadyError(f"Table {table_name} is {description.status}")
    raise ProvisionError(f"Table {table_name} cannot accept writes in status {description.status}")


def wait_until_active(
    store: DynamoStore,
    table_name: str,
    polling: PollingConfig | None = None,
    logger: logging.Logger | None = None,
) -> TableDescription:
    polling = polling or PollingConfig()

    def _log_wait(retry_state) -> None:
        log_event(
            logger,
            f"waiting for table {table_name}",
            table=table_name,
            event="TABLE_WAIT",
            status="pending",
            attempt=retry_state.attempt_number,
        )

    @retry(
        stop=stop_after_attempt(polling.max_attempts),
        wait=wait_exponential_jitter(
            initial=polling.initial_wait,
            max=polling.max_wait,
            jitter=polling.jitter,
        ),
        retry=retry_if_exception_type(TableNotReadyError),
        before_sleep=_log_wait,
        reraise=True,
    )
    def _wrapped() -> TableDescription:
        return _check_ready(store, table_name)

    try:
        return _wrapped()
    except TableNotReadyError as exc:
        raise ProvisionTimeoutError(
            f"Table {table_name} not ready after {polling.max_attempts} attempts: {exc}"
        ) from exc


def ensure_table(
    store: DynamoStore,
    table_name: str,
    key_field: str,
    *,
    capacity: CapacityConfig | None = None,
    polling: PollingConfig | None = None,
    logger: logging.Logger | None = None,
) -> TableDescription:
    """Create ``table_name`` keyed on ``key_field``, or reuse it if it exists.

    Blocks until the table is ACTIVE. Reusing an existing table succeeds only
    when its hash key is ``key_field``.
    """
    if not table_name or not table_name.strip():
        raise ProvisionError("Table name must be a non-empty string")
    if not key_field or not key_field.strip():
        raise ProvisionError(f"Primary key field for table {table_name} must be a non-empty string")

    capacity = capacity or CapacityConfig()
    started = time.monotonic()

    try:
        store.create_table(table_name, key_field, capacity)
    except TableAlreadyExistsError:
        try:
            existing = store.describe_table(table_name)
        except StoreError as exc:
            raise ProvisionError(f"Unable to describe existing table {table_name}: {exc}") from exc
        if existing.hash_key != key_field:
            raise ProvisionError(
                f"Table {table_name} already exists keyed on {existing.hash_key!r}, expected {key_field!r}"
            )
        log_event(
            logger,
            f"table {table_name} already exists, adding items to existing table",
            level=logging.WARNING,
            table=table_name,
            event="TABLE_EXISTS",
            status="ok",
        )
        if existing.status == TABLE_STATUS_ACTIVE:
            return existing
    except StoreError as exc:
        raise ProvisionError(f"Unable to create table {table_name}: {exc}") from exc
    else:
        log_event(
            logger,
            f"creating table {table_name}, waiting on AWS",
            table=table_name,
            event="TABLE_CREATE",
            status="pending",
        )

    description = wait_until_active(store, table_name, polling=polling, logger=logger)
    log_event(
        logger,
        f"table {table_name} ready",
        table=table_name,
        event="TABLE_READY",
        status="ok",
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    return description
