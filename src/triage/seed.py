"""Seed loader — build the initial incident from ``incident.yaml``.

Read once at startup.  Sections
───────────────────────────────
  alert     — the pre-loaded active alert (mandatory)
  hosts     — ordered affected-host inventory
  incident  — narrative facts used by the reply templates
  actions   — per-job durations in ms
  greeting  — opening assistant turn

Anything but ``alert`` may be omitted; built-in defaults describe the
Cybermesh malware-outbreak drill.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from src.contracts.alert import Alert
from src.contracts.enums import AlertStatus, HostStatus, JobKind, Severity
from src.contracts.host import Host
from src.shared.clock import iso_ms
from src.shared.config_loader import load_yaml

log = logging.getLogger(__name__)

DEFAULT_DURATIONS_MS: dict[str, int] = {
    JobKind.BLOCKING.value: 3000,
    JobKind.ISOLATING.value: 2000,
    JobKind.REMEDIATING.value: 5000,
    JobKind.SCANNING.value: 4000,
}

_DEFAULT_GREETING = (
    "CYBERMESH ALERT: **CRITICAL - Potential Malware Outbreak (50+ hosts)** detected. "
    "Anomalous outbound connections to `{ip}`. Process `{process}` identified. "
    "Immediate investigation required."
)

_REQUIRED_ALERT_FIELDS = ("id", "title", "description", "severity", "source")


@dataclass(slots=True)
class IncidentProfile:
    """Narrative facts of the incident that the templates quote."""

    process_name: str = "svchost_mal.exe"
    c2_port: int = 443
    patient_zero: str = "WKSTN-HR-01"
    vector: str = 'Phishing email - "Urgent Payroll Update"'
    first_seen: str = "14:23:07 UTC"
    user: str = "j.smith@company.com"
    playbook_hosts: list[str] = field(default_factory=lambda: ["WKSTN-HR-01"])
    iocs: list[tuple[str, str]] = field(default_factory=lambda: [
        ("Hash (SHA256)", "`a1b2c3d4e5f6789...`"),
        ("C2 IP", "`172.24.1.250:443`"),
        ("File Path", "`C:\\Users\\Public\\svchost_mal.exe`"),
        ("Email Subject", '"Urgent Payroll Update"'),
        ("Registry Key", "`HKLM\\Software\\Microsoft\\Windows\\CurrentVersion\\Run\\SvcHost`"),
    ])
    remediation_steps: list[tuple[str, str]] = field(default_factory=lambda: [
        ("Full System Scan", "Deep malware analysis"),
        ("Quarantine Infected Files", "Isolate malicious binaries"),
        ("User Account Review", "Check for privilege escalation"),
        ("Security Patching", "Close exploitation vectors"),
        ("System Re-imaging", "If compromise is severe"),
    ])
    remediation_phases: list[str] = field(default_factory=lambda: [
        "Malware Scanning",
        "File Quarantine",
        "Registry Cleanup",
        "User Account Audit",
    ])
    remediation_eta_min: int = 15


@dataclass(slots=True)
class IncidentSeed:
    """Everything the session needs to start."""

    alert: Alert
    hosts: list[Host]
    profile: IncidentProfile
    durations_ms: dict[str, int]
    greeting: str


# ═══════════════════════════════════════════════════════════════════════════
#  Builders
# ═══════════════════════════════════════════════════════════════════════════


def _build_alert(cfg: dict[str, Any], now: datetime) -> Alert:
    missing = [k for k in _REQUIRED_ALERT_FIELDS if k not in cfg]
    if missing:
        raise ValueError(f"alert section is missing: {', '.join(missing)}")
    severity = Severity(str(cfg["severity"]).lower()).value
    status = AlertStatus(str(cfg.get("status", "active")).lower()).value
    count = cfg.get("affected_host_count")
    if count is not None and int(count) < 0:
        raise ValueError("alert.affected_host_count must be >= 0")
    return Alert(
        id=str(cfg["id"]),
        title=cfg["title"],
        description=cfg["description"],
        severity=severity,
        status=status,
        source=cfg["source"],
        detected_at=str(cfg.get("detected_at") or iso_ms(now)),
        ip=str(cfg.get("ip", "")),
        affected_host_count=int(count) if count is not None else None,
    )


def _build_hosts(rows: list[dict[str, Any]], now: datetime) -> list[Host]:
    hosts: list[Host] = []
    seen: set[str] = set()
    for idx, row in enumerate(rows, 1):
        if not isinstance(row, dict):
            raise ValueError(f"host #{idx} must be a mapping")
        host_id = str(row.get("id", idx))
        if host_id in seen:
            raise ValueError(f"duplicate host id '{host_id}'")
        seen.add(host_id)
        hostname = row.get("hostname")
        if not hostname:
            raise ValueError(f"host #{idx} has no hostname")
        hosts.append(Host(
            id=host_id,
            hostname=str(hostname),
            ip=str(row.get("ip", "")),
            status=HostStatus(str(row.get("status", "infected")).lower()).value,
            last_seen=str(row.get("last_seen") or iso_ms(now)),
        ))
    return hosts


def _build_profile(cfg: dict[str, Any]) -> IncidentProfile:
    profile = IncidentProfile()
    for key in (
        "process_name", "c2_port", "patient_zero", "vector",
        "first_seen", "user", "playbook_hosts", "remediation_phases",
        "remediation_eta_min",
    ):
        if key in cfg:
            setattr(profile, key, cfg[key])
    if "iocs" in cfg:
        profile.iocs = [(i["label"], i["value"]) for i in cfg["iocs"]]
    if "remediation_steps" in cfg:
        profile.remediation_steps = [(s["title"], s.get("detail", "")) for s in cfg["remediation_steps"]]
    return profile


def build_seed(cfg: dict[str, Any], now: datetime) -> IncidentSeed:
    """Validate a parsed ``incident.yaml`` and build the seed.

    Raises
    ──────
    ValueError — missing alert section / fields, unknown enum values,
    duplicate host ids, hosts without a hostname, negative durations.
    """
    alert_cfg = cfg.get("alert")
    if not isinstance(alert_cfg, dict):
        raise ValueError("incident config has no 'alert' section")

    alert = _build_alert(alert_cfg, now)
    hosts = _build_hosts(cfg.get("hosts") or [], now)
    profile = _build_profile(cfg.get("incident") or {})

    durations = dict(DEFAULT_DURATIONS_MS)
    for kind, ms in (cfg.get("actions") or {}).items():
        JobKind(kind)
        if int(ms) < 0:
            raise ValueError(f"actions.{kind}: duration must be >= 0")
        durations[kind] = int(ms)

    greeting = cfg.get("greeting") or _DEFAULT_GREETING.format(
        ip=alert.ip, process=profile.process_name,
    )
    log.info(
        "Seed built: alert=%s severity=%s hosts=%d playbooks=%s",
        alert.id, alert.severity, len(hosts), ",".join(profile.playbook_hosts),
    )
    return IncidentSeed(alert=alert, hosts=hosts, profile=profile,
                        durations_ms=durations, greeting=greeting)


def load_seed(path: str | Path, now: datetime) -> IncidentSeed:
    """Read *path* (YAML) and build the seed."""
    return build_seed(load_yaml(path), now)
