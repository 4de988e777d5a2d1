"""Модель оповіщення (Alert)."""

from __future__ import annotations

from dataclasses import dataclass

from src.contracts.enums import ALERT_TRANSITIONS, AlertStatus


@dataclass(slots=True)
class Alert:
    """The security alert driving the current incident."""

    id: str  # e.g. "123"
    title: str
    description: str
    severity: str  # low | medium | high | critical
    status: str  # active | investigating | resolved
    source: str
    detected_at: str  # ISO-8601, immutable after creation
    ip: str = ""  # opaque token, not validated
    affected_host_count: int | None = None

    def can_transition(self, new_status: str) -> bool:
        """True when ``status -> new_status`` is a legal alert transition."""
        allowed = ALERT_TRANSITIONS.get(AlertStatus(self.status), frozenset())
        return AlertStatus(new_status) in allowed
