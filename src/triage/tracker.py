"""Async Action Tracker — one in-flight job, advanced by explicit ticks.

Scheduling model
────────────────
  * single slot, no queue, no priority
  * ``submit`` on an occupied slot is rejected (``Submission.BUSY``)
  * ``tick(now)`` completes the job once ``now - started_at >= duration``
  * no cancellation: an accepted job always runs to completion

The tracker is not thread-safe on its own; the session serialises every
call under its lock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from src.contracts.job import AsyncJob, JobCompletion
from src.triage.errors import TriageError
from src.triage.store import IncidentStore

log = logging.getLogger(__name__)


class Submission(str, Enum):
    ACCEPTED = "accepted"
    BUSY = "busy"


class AsyncActionTracker:
    def __init__(self, store: IncidentStore) -> None:
        self._store = store
        self._job: AsyncJob | None = None

    @property
    def in_flight(self) -> AsyncJob | None:
        return self._job

    @property
    def busy(self) -> bool:
        return self._job is not None

    def submit(self, job: AsyncJob) -> Submission:
        if self._job is not None:
            log.info("Rejected %s job: %s still in flight", job.kind, self._job.kind)
            return Submission.BUSY
        self._job = job
        log.info(
            "Accepted %s job (%d ms, due %s): %s",
            job.kind, job.duration_ms, job.due_at.isoformat(), job.description,
        )
        return Submission.ACCEPTED

    def tick(self, now: datetime) -> JobCompletion | None:
        """Complete the in-flight job if it is due.

        The deferred mutation runs first; the slot is cleared whether or
        not it succeeded.  A mutation that references a vanished entity is
        dropped and logged, leaving the store as it was.
        """
        job = self._job
        if job is None or not job.is_due(now):
            return None

        applied = True
        error = ""
        try:
            job.on_complete(self._store)
        except TriageError as exc:
            applied = False
            error = str(exc)
            log.warning("Dropped completion of %s job: %s", job.kind, exc)
        finally:
            self._job = None

        log.info("Completed %s job at %s (applied=%s)", job.kind, now.isoformat(), applied)
        return JobCompletion(
            kind=job.kind,
            completed_at=now,
            applied=applied,
            completion_text=job.completion_text if applied else "",
            error=error,
        )
