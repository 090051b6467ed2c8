from __future__ import annotations

import pytest

from open311_loader.common.config_loader import CapacityConfig, PollingConfig
from open311_loader.common.errors import ProvisionError, ProvisionTimeoutError, StoreError
from open311_loader.store.provision import ensure_table


def test_ensure_table_creates_missing_table(fake_store, fast_polling):
    description = ensure_table(fake_store, "Cities", "city_name", polling=fast_polling)

    assert description.status == "ACTIVE"
    assert description.hash_key == "city_name"
    assert fake_store.calls[0] == ("create_table", "Cities")


def test_ensure_table_uses_free_tier_capacity_by_default(fake_store, fast_polling):
    ensure_table(fake_store, "Cities", "city_name", polling=fast_polling)
    assert fake_store.tables["Cities"]["capacity"] == CapacityConfig(read_units=5, write_units=5)


def test_ensure_table_passes_configured_capacity(fake_store, fast_polling):
    capacity = CapacityConfig(read_units=50, write_units=25)
    ensure_table(fake_store, "Cities", "city_name", capacity=capacity, polling=fast_polling)
    assert fake_store.tables["Cities"]["capacity"] == capacity


def test_ensure_table_is_idempotent(fake_store, fast_polling):
    first = ensure_table(fake_store, "Services", "service_code", polling=fast_polling)
    second = ensure_table(fake_store, "Services", "service_code", polling=fast_polling)

    assert first == second
    assert [call for call in fake_store.calls if call[0] == "create_table"] == [
        ("create_table", "Services"),
        ("create_table", "Services"),
    ]
    assert len(fake_store.tables) == 1


def test_existing_table_with_other_key_is_rejected(fake_store, fast_polling):
    ensure_table(fake_store, "Services", "service_code", polling=fast_polling)

    with pytest.raises(ProvisionError, match="service_code"):
        ensure_table(fake_store, "Services", "service_request_id", polling=fast_polling)


def test_ensure_table_waits_until_active(slow_store, fast_polling):
    description = ensure_table(slow_store, "Requests", "service_request_id", polling=fast_polling)

    assert description.status == "ACTIVE"
    assert slow_store.calls.count(("describe_table", "Requests")) == 3


def test_ensure_table_times_out_when_table_never_ready(stuck_store, fast_polling):
    store = stuck_store
    with pytest.raises(ProvisionTimeoutError, match="Requests"):
        ensure_table(store, "Requests", "service_request_id", polling=fast_polling)

    assert store.calls.count(("describe_table", "Requests")) == fast_polling.max_attempts


def test_table_in_terminal_status_fails_without_polling_further(fake_store, fast_polling):
    ensure_table(fake_store, "Cities", "city_name", polling=fast_polling)
    fake_store.tables["Cities"]["status"] = "DELETING"

    with pytest.raises(ProvisionError, match="DELETING") as excinfo:
        ensure_table(fake_store, "Cities", "city_name", polling=fast_polling)

    assert not isinstance(excinfo.value, ProvisionTimeoutError)


def test_create_failure_is_a_provision_error(fake_store, fast_polling):
    fake_store.create_error = StoreError("Access denied", aws_code="AccessDeniedException")

    with pytest.raises(ProvisionError, match="Cities") as excinfo:
        ensure_table(fake_store, "Cities", "city_name", polling=fast_polling)

    assert isinstance(excinfo.value.__cause__, StoreError)


@pytest.mark.parametrize(("table_name", "key_field"), [("", "city_name"), ("Cities", ""), ("  ", "city_name")])
def test_blank_arguments_are_rejected(fake_store, table_name, key_field):
    with pytest.raises(ProvisionError):
        ensure_table(fake_store, table_name, key_field, polling=PollingConfig(max_attempts=1))
    assert fake_store.calls == []


def test_reused_table_is_polled_until_active(fake_store, fast_polling):
    ensure_table(fake_store, "Requests", "service_request_id", polling=fast_polling)
    fake_store.tables["Requests"]["polls_left"] = 2
    fake_store.calls.clear()

    description = ensure_table(fake_store, "Requests", "service_request_id", polling=fast_polling)

    assert description.status == "ACTIVE"
    assert fake_store.calls == [
        ("create_table", "Requests"),
        ("describe_table", "Requests"),
        ("describe_table", "Requests"),
        ("describe_table", "Requests"),
    ]
