"""Incident Store — the single source of truth for the live incident.

A guarded register: mutators check that the referenced entity exists and
apply the change. Legal-transition checks are the caller's job (the
executor), the store only enforces existence.
"""

from __future__ import annotations

import logging

from src.contracts.alert import Alert
from src.contracts.enums import AlertStatus, HostStatus, SystemStatus
from src.contracts.host import Host
from src.triage.errors import NotFound

log = logging.getLogger(__name__)


class IncidentStore:
    def __init__(
        self,
        alert: Alert,
        hosts: list[Host],
        system_status: SystemStatus = SystemStatus.THREAT,
    ) -> None:
        self._alert = alert
        self._hosts: dict[str, Host] = {h.id: h for h in hosts}
        self._system_status = SystemStatus(system_status)
        log.info(
            "Incident store ready: alert=%s (%s), hosts=%d, system=%s",
            alert.id, alert.status, len(self._hosts), self._system_status.value,
        )

    # ── reads ────────────────────────────────────────────────────────────

    def get_alert(self, alert_id: str | None = None) -> Alert:
        """Return the current alert; raise NotFound if *alert_id* differs."""
        if alert_id and alert_id != self._alert.id:
            raise NotFound("alert", alert_id)
        return self._alert

    def get_hosts(self) -> list[Host]:
        """Hosts in seed-inventory order."""
        return list(self._hosts.values())

    def get_host(self, host_id: str) -> Host:
        try:
            return self._hosts[host_id]
        except KeyError:
            raise NotFound("host", host_id) from None

    def find_host(self, hostname: str) -> Host:
        """Look a host up by hostname, case-insensitively."""
        wanted = hostname.casefold()
        for h in self._hosts.values():
            if h.hostname.casefold() == wanted:
                return h
        raise NotFound("host", hostname)

    def get_system_status(self) -> SystemStatus:
        return self._system_status

    # ── mutations ────────────────────────────────────────────────────────

    def set_alert_status(self, status: AlertStatus | str) -> Alert:
        new = AlertStatus(status).value
        log.info("Alert %s status: %s -> %s", self._alert.id, self._alert.status, new)
        self._alert.status = new
        return self._alert

    def set_host_status(self, host_id: str, status: HostStatus | str) -> Host:
        host = self.get_host(host_id)
        new = HostStatus(status).value
        log.info("Host %s status: %s -> %s", host.hostname, host.status, new)
        host.status = new
        return host

    def set_system_status(self, status: SystemStatus | str) -> SystemStatus:
        new = SystemStatus(status)
        log.info("System status: %s -> %s", self._system_status.value, new.value)
        self._system_status = new
        return new
