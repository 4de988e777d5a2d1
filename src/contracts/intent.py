"""Intent — the classified meaning of one operator message.

A closed tagged variant: ``kind`` selects the variant and only the
payload field belonging to that variant is populated.

    ALERT_DETAILS  -> alert_id   ("" means the current alert)
    BLOCK_IP       -> ip
    ISOLATE_HOST   -> hostname
    UNRECOGNIZED   -> raw_text
"""

from __future__ import annotations

from dataclasses import dataclass

from src.contracts.enums import IntentKind

LONG_RUNNING: frozenset[IntentKind] = frozenset({
    IntentKind.BLOCK_IP,
    IntentKind.ISOLATE_HOST,
    IntentKind.START_REMEDIATION,
})


@dataclass(frozen=True, slots=True)
class Intent:
    kind: IntentKind
    alert_id: str = ""
    ip: str = ""
    hostname: str = ""
    raw_text: str = ""

    @property
    def long_running(self) -> bool:
        return self.kind in LONG_RUNNING

    # ── variant constructors ─────────────────────────────────────────────

    @classmethod
    def of(cls, kind: IntentKind) -> Intent:
        return cls(kind=kind)

    @classmethod
    def alert_details(cls, alert_id: str = "") -> Intent:
        return cls(kind=IntentKind.ALERT_DETAILS, alert_id=alert_id)

    @classmethod
    def block_ip(cls, ip: str) -> Intent:
        return cls(kind=IntentKind.BLOCK_IP, ip=ip)

    @classmethod
    def isolate_host(cls, hostname: str) -> Intent:
        return cls(kind=IntentKind.ISOLATE_HOST, hostname=hostname)

    @classmethod
    def unrecognized(cls, raw_text: str) -> Intent:
        return cls(kind=IntentKind.UNRECOGNIZED, raw_text=raw_text)
