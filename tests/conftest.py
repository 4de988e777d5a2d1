"""Shared fixtures for Cybermesh Triage tests."""

from __future__ import annotations

import copy

import pytest

from src.contracts.alert import Alert
from src.contracts.host import Host
from src.shared.clock import ManualClock, parse_ts
from src.triage.backend import SimulatedBackend
from src.triage.seed import build_seed
from src.triage.session import TriageSession

START = "2026-02-26T14:30:00Z"

# ── Helpers: records with sensible defaults ─────────────────────────────


def make_alert(
    *,
    id: str = "123",
    title: str = "POTENTIAL MALWARE OUTBREAK",
    description: str = "52 endpoints talking to a C2 server",
    severity: str = "critical",
    status: str = "active",
    source: str = "Network Anomaly Detection",
    detected_at: str = "2026-02-26T14:23:07.000Z",
    ip: str = "172.24.1.250",
    affected_host_count: int | None = 52,
) -> Alert:
    return Alert(
        id=id,
        title=title,
        description=description,
        severity=severity,
        status=status,
        source=source,
        detected_at=detected_at,
        ip=ip,
        affected_host_count=affected_host_count,
    )


def make_host(
    *,
    id: str = "1",
    hostname: str = "WKSTN-HR-01",
    ip: str = "10.10.10.21",
    status: str = "infected",
    last_seen: str = "2026-02-26T14:29:00.000Z",
) -> Host:
    return Host(id=id, hostname=hostname, ip=ip, status=status, last_seen=last_seen)


def default_hosts() -> list[Host]:
    return [
        make_host(id="1", hostname="WKSTN-HR-01", ip="10.10.10.21", status="infected"),
        make_host(id="2", hostname="WKSTN-FIN-03", ip="10.10.10.45", status="infected"),
        make_host(id="3", hostname="WKSTN-DEV-12", ip="10.10.10.78", status="scanning"),
        make_host(id="4", hostname="WKSTN-MKT-07", ip="10.10.10.92", status="isolated"),
    ]


# ── Config fixtures ─────────────────────────────────────────────────────

_INCIDENT_CFG = {
    "alert": {
        "id": "123",
        "title": "POTENTIAL MALWARE OUTBREAK",
        "description": "Cybermesh detected 52 endpoints establishing outbound connections.",
        "severity": "critical",
        "status": "active",
        "source": "Network Anomaly Detection",
        "ip": "172.24.1.250",
        "affected_host_count": 52,
    },
    "hosts": [
        {"id": "1", "hostname": "WKSTN-HR-01", "ip": "10.10.10.21", "status": "infected"},
        {"id": "2", "hostname": "WKSTN-FIN-03", "ip": "10.10.10.45", "status": "infected"},
        {"id": "3", "hostname": "WKSTN-DEV-12", "ip": "10.10.10.78", "status": "scanning"},
        {"id": "4", "hostname": "WKSTN-MKT-07", "ip": "10.10.10.92", "status": "isolated"},
    ],
    "incident": {"patient_zero": "WKSTN-HR-01", "playbook_hosts": ["WKSTN-HR-01"]},
    "actions": {"blocking": 3000, "isolating": 2000, "remediating": 5000},
}


@pytest.fixture
def incident_cfg() -> dict:
    """Parsed incident.yaml equivalent of the malware-outbreak drill."""
    return copy.deepcopy(_INCIDENT_CFG)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture
def backend() -> SimulatedBackend:
    return SimulatedBackend()


@pytest.fixture
def session(incident_cfg, clock, backend) -> TriageSession:
    seed = build_seed(incident_cfg, parse_ts(START))
    return TriageSession(seed, clock=clock, backend=backend)
