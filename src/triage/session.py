"""Triage session — wires the components and serialises every mutation.

All entry points that read-decide-mutate (``handle``, ``tick``) run under
one re-entrant lock, so a job completion can never interleave with an
operator command.  ``snapshot`` copies state under the same lock.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from src.contracts.alert import Alert
from src.contracts.enums import Role
from src.contracts.host import Host
from src.contracts.turn import SuggestedAction, Turn
from src.shared.clock import Clock, ManualClock, SystemClock
from src.triage import responses
from src.triage.backend import RemediationBackend, SimulatedBackend
from src.triage.conversation import ConversationLog
from src.triage.executor import ActionExecutor
from src.triage.resolver import build_rules, resolve
from src.triage.seed import IncidentSeed, load_seed
from src.triage.store import IncidentStore
from src.triage.tracker import AsyncActionTracker

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view handed to the presentation layer."""

    alert: Alert
    hosts: tuple[Host, ...]
    conversation_log: tuple[Turn, ...]
    system_status: str
    in_flight_job_kind: str | None
    status_label: str
    progress_label: str | None
    quick_actions: tuple[SuggestedAction, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "alert": asdict(self.alert),
            "hosts": [asdict(h) for h in self.hosts],
            "conversation_log": [t.to_dict() for t in self.conversation_log],
            "system_status": self.system_status,
            "in_flight_job_kind": self.in_flight_job_kind,
            "status_label": self.status_label,
            "progress_label": self.progress_label,
            "quick_actions": [asdict(a) for a in self.quick_actions],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


class TriageSession:
    """One operator conversation over one incident."""

    def __init__(
        self,
        seed: IncidentSeed,
        clock: Clock | None = None,
        backend: RemediationBackend | None = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.backend = backend or SimulatedBackend()
        self.profile = seed.profile
        self.rules = build_rules((seed.alert.ip,), seed.profile.playbook_hosts)

        self.store = IncidentStore(seed.alert, seed.hosts)
        self.conversation = ConversationLog(self.clock)
        self.tracker = AsyncActionTracker(self.store)
        self.executor = ActionExecutor(
            store=self.store,
            tracker=self.tracker,
            conversation=self.conversation,
            backend=self.backend,
            profile=seed.profile,
            clock=self.clock,
            durations_ms=seed.durations_ms,
        )

        self._lock = threading.RLock()
        self._ticker: threading.Thread | None = None
        self._stop = threading.Event()

        self.conversation.append(
            Role.ASSISTANT, seed.greeting, responses.quick_actions(seed.alert, seed.profile),
        )

    @classmethod
    def from_config(
        cls,
        path: str | Path,
        clock: Clock | None = None,
        backend: RemediationBackend | None = None,
    ) -> TriageSession:
        clock = clock or SystemClock()
        return cls(load_seed(path, clock.now()), clock=clock, backend=backend)

    # ------------------------------------------------------------------
    # Request path
    # ------------------------------------------------------------------

    def handle(self, text: str) -> Turn:
        """Process one operator message and return the assistant reply.

        Due job completions are applied first so the reply reflects them.
        Whitespace-only input gets the help reply and no operator turn.
        """
        with self._lock:
            self._advance()
            message = text.strip()
            if not message:
                return self.conversation.append(Role.ASSISTANT, responses.HELP_TEXT)
            self.conversation.append(Role.OPERATOR, message)
            intent = resolve(message, self.conversation.turns(), self.rules)
            log.info("Operator %r -> %s", message, intent.kind.value)
            return self.executor.execute(intent)

    # ------------------------------------------------------------------
    # Delayed-completion path
    # ------------------------------------------------------------------

    def tick(self) -> list[Turn]:
        """Advance the tracker to the clock's current time.

        Returns the completion turns appended by this call.
        """
        with self._lock:
            return self._advance()

    def _advance(self) -> list[Turn]:
        completion = self.tracker.tick(self.clock.now())
        if completion is None or not completion.applied:
            return []
        return [self.conversation.append(Role.ASSISTANT, completion.completion_text)]

    def drain(self, timeout_sec: float = 30.0) -> list[Turn]:
        """Run until no job is in flight.

        A :class:`ManualClock` is stepped straight to the due time; a wall
        clock is slept on.
        """
        appended: list[Turn] = []
        deadline = time.monotonic() + timeout_sec
        while True:
            with self._lock:
                job = self.tracker.in_flight
                if job is None:
                    return appended
                remaining_ms = (job.due_at - self.clock.now()).total_seconds() * 1000
                if remaining_ms > 0 and isinstance(self.clock, ManualClock):
                    self.clock.advance(int(remaining_ms) + 1)
                    remaining_ms = 0
                if remaining_ms <= 0:
                    appended.extend(self._advance())
                    continue
            if time.monotonic() + remaining_ms / 1000 > deadline:
                raise TimeoutError(f"{job.kind} job still running after {timeout_sec:.1f}s")
            time.sleep(remaining_ms / 1000)

    def start_ticker(
        self,
        interval_sec: float = 0.25,
        on_turn: Callable[[Turn], None] | None = None,
    ) -> None:
        """Tick from a background thread until :meth:`stop_ticker`.

        *on_turn* is called, outside the session lock, with every
        completion turn the ticker appends.
        """
        if self._ticker is not None:
            return
        self._stop.clear()

        def _loop() -> None:
            while not self._stop.wait(interval_sec):
                for turn in self.tick():
                    log.debug("Ticker appended %s", turn.id)
                    if on_turn is not None:
                        on_turn(turn)

        self._ticker = threading.Thread(target=_loop, name="triage-ticker", daemon=True)
        self._ticker.start()
        log.info("Ticker started (interval=%.2fs)", interval_sec)

    def stop_ticker(self) -> None:
        if self._ticker is None:
            return
        self._stop.set()
        self._ticker.join()
        self._ticker = None
        log.info("Ticker stopped")

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        with self._lock:
            alert = self.store.get_alert()
            status = self.store.get_system_status().value
            job = self.tracker.in_flight
            kind = job.kind if job else None
            return Snapshot(
                alert=replace(alert),
                hosts=tuple(replace(h) for h in self.store.get_hosts()),
                conversation_log=self.conversation.turns(),
                system_status=status,
                in_flight_job_kind=kind,
                status_label=responses.STATUS_LABELS[status],
                progress_label=responses.progress_label(kind),
                quick_actions=responses.quick_actions(alert, self.profile),
            )
