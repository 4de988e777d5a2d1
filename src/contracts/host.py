"""Affected host model."""

from __future__ import annotations

from dataclasses import dataclass

from src.contracts.enums import HostStatus

_CONTAINED = {HostStatus.ISOLATED.value, HostStatus.CLEAN.value}


@dataclass(slots=True)
class Host:
    """One endpoint from the seed inventory. Hosts are never deleted."""

    id: str
    hostname: str
    ip: str
    status: str  # infected | scanning | isolated | clean
    last_seen: str  # ISO-8601

    @property
    def contained(self) -> bool:
        return self.status in _CONTAINED
