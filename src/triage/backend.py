"""Remediation backend — the control plane the executor drives.

Only the interface matters to the engine.  ``SimulatedBackend`` stands in
for firewall / EDR integrations: it records each call and logs it; the
observable effect on the incident comes from the tracker applying the
job's deferred mutation once the fixed latency has elapsed.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


class RemediationBackend(abc.ABC):
    """Abstract enforcement backend."""

    name: str = "base"

    @abc.abstractmethod
    def block_ip(self, ip: str) -> None:
        """Push a network-wide block for *ip*."""
        ...

    @abc.abstractmethod
    def isolate_host(self, hostname: str) -> None:
        """Cut *hostname* off the network."""
        ...

    @abc.abstractmethod
    def run_playbook(self, alert_id: str) -> None:
        """Start the automated remediation playbook for *alert_id*."""
        ...


@dataclass(slots=True)
class BackendCall:
    action: str
    target: str


@dataclass
class SimulatedBackend(RemediationBackend):
    """Records calls instead of enforcing anything."""

    name: str = "simulated"
    calls: list[BackendCall] = field(default_factory=list)

    def _record(self, action: str, target: str) -> None:
        self.calls.append(BackendCall(action, target))
        log.info("[%s] %s -> %s", self.name, action, target)

    def block_ip(self, ip: str) -> None:
        self._record("block_ip", ip)

    def isolate_host(self, hostname: str) -> None:
        self._record("isolate_host", hostname)

    def run_playbook(self, alert_id: str) -> None:
        self._record("run_playbook", alert_id)
