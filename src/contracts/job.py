"""AsyncJob — a long-running remediation action with a deferred mutation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from src.triage.store import IncidentStore


@dataclass(slots=True)
class AsyncJob:
    """One registered job.

    ``on_complete`` receives the incident store and applies the deferred
    mutation; it runs under the session lock exactly once.
    """

    kind: str  # blocking | isolating | remediating | scanning
    started_at: datetime
    duration_ms: int
    on_complete: Callable[[IncidentStore], None]
    description: str = ""
    completion_text: str = ""  # assistant turn appended on completion

    @property
    def due_at(self) -> datetime:
        return self.started_at + timedelta(milliseconds=self.duration_ms)

    def is_due(self, now: datetime) -> bool:
        return now - self.started_at >= timedelta(milliseconds=self.duration_ms)


@dataclass(frozen=True, slots=True)
class JobCompletion:
    """Event returned by the tracker when the in-flight job finishes."""

    kind: str
    completed_at: datetime
    applied: bool  # False when the deferred mutation was dropped
    completion_text: str = ""
    error: str = field(default="")
