from __future__ import annotations

import pytest

from open311_loader.common.config_loader import PollingConfig
from open311_loader.common.errors import StoreError, TableAlreadyExistsError, TableNotFoundError
from open311_loader.store.dynamo import TableDescription


class FakeStore:
    """In-memory stand-in for DynamoStore; each instance owns its tables."""

    region = "us-east-1"

    def __init__(self, pending_polls: int = 0) -> None:
        self.pending_polls = pending_polls
        self.tables: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []
        self.create_error: Exception | None = None
        self.put_error_at: int | None = None
        self.put_calls = 0

    def create_table(self, table_name, key_field, capacity):
        self.calls.append(("create_table", table_name))
        if self.create_error is not None:
            raise self.create_error
        if table_name in self.tables:
            raise TableAlreadyExistsError(f"Table already exists: {table_name}", aws_code="ResourceInUseException")
        self.tables[table_name] = {
            "key": key_field,
            "capacity": capacity,
            "items": {},
            "polls_left": self.pending_polls,
            "status": "ACTIVE",
        }
        return TableDescription(table_name, "CREATING", key_field)

    def describe_table(self, table_name):
        self.calls.append(("describe_table", table_name))
        table = self.tables.get(table_name)
        if table is None:
            raise TableNotFoundError(f"Table not found: {table_name}", aws_code="ResourceNotFoundException")
        if table["polls_left"] > 0:
            table["polls_left"] -= 1
            return TableDescription(table_name, "CREATING", table["key"])
        return TableDescription(table_name, table["status"], table["key"])

    def put_item(self, table_name, item):
        self.calls.append(("put_item", table_name))
        index = self.put_calls
        self.put_calls += 1
        if self.put_error_at == index:
            raise StoreError("Rate exceeded", aws_code="ProvisionedThroughputExceededException")
        table = self.tables.get(table_name)
        if table is None:
            raise StoreError(f"Requested resource not found: {table_name}", aws_code="ResourceNotFoundException")
        table["items"][item[table["key"]]["S"]] = item

    def items(self, table_name):
        return self.tables[table_name]["items"]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def slow_store() -> FakeStore:
    return FakeStore(pending_polls=2)


@pytest.fixture
def fast_polling() -> PollingConfig:
    return PollingConfig(max_attempts=5, initial_wait=0, max_wait=0, jitter=0)


@pytest.fixture
def stuck_store() -> FakeStore:
    return FakeStore(pending_polls=100)
