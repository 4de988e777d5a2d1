"""Tests for src.triage.store — the guarded incident register."""

from __future__ import annotations

import pytest

from src.contracts.enums import AlertStatus, HostStatus, SystemStatus
from src.triage.errors import NotFound
from src.triage.store import IncidentStore
from tests.conftest import default_hosts, make_alert


@pytest.fixture
def store() -> IncidentStore:
    return IncidentStore(make_alert(), default_hosts())


class TestReads:
    def test_initial_state(self, store):
        assert store.get_alert().id == "123"
        assert store.get_system_status() is SystemStatus.THREAT
        assert [h.hostname for h in store.get_hosts()] == [
            "WKSTN-HR-01", "WKSTN-FIN-03", "WKSTN-DEV-12", "WKSTN-MKT-07",
        ]

    def test_get_alert_by_other_id(self, store):
        with pytest.raises(NotFound) as exc:
            store.get_alert("999")
        assert exc.value.entity == "alert"
        assert exc.value.key == "999"

    def test_find_host_case_insensitive(self, store):
        assert store.find_host("wkstn-hr-01").id == "1"

    def test_find_missing_host(self, store):
        with pytest.raises(NotFound):
            store.find_host("WKSTN-NOPE-99")

    def test_get_hosts_returns_copy_of_order(self, store):
        hosts = store.get_hosts()
        hosts.clear()
        assert len(store.get_hosts()) == 4


class TestMutations:
    def test_set_host_status_returns_updated(self, store):
        host = store.set_host_status("1", HostStatus.ISOLATED)
        assert host.status == "isolated"
        assert store.get_host("1").status == "isolated"

    def test_set_host_status_missing(self, store):
        with pytest.raises(NotFound):
            store.set_host_status("42", "isolated")

    def test_set_alert_status(self, store):
        alert = store.set_alert_status("resolved")
        assert alert.status == AlertStatus.RESOLVED.value

    def test_set_system_status(self, store):
        assert store.set_system_status("secure") is SystemStatus.SECURE
        assert store.get_system_status() is SystemStatus.SECURE

    def test_invalid_enum_value(self, store):
        with pytest.raises(ValueError):
            store.set_host_status("1", "on-fire")
