"""Action Executor — Intent → mutation / AsyncJob → assistant Turn.

Intent classes
──────────────
  read-only     ListAlerts, AlertDetails, ListAffectedHosts, ShowOrigin,
                ListIoCs, ShowRemediationPlan — render from current state
  long-running  BlockIp (blocking), IsolateHost (isolating),
                StartRemediation (remediating) — register one AsyncJob
                and reply "in progress"; reply "busy" if a job is running
  fallback      Unrecognized — fixed help text

``execute`` never raises to the operator: ``NotFound`` from the store
degrades to the help reply.

System status
─────────────
  threat --(block job completes, alert resolved)--> secure
  threat --(remediation job completes)-----------> investigating
  investigating has no modeled exit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from src.contracts.enums import (
    AlertStatus,
    HostStatus,
    IntentKind,
    JobKind,
    Role,
    SystemStatus,
)
from src.contracts.intent import Intent
from src.contracts.job import AsyncJob
from src.contracts.turn import Turn
from src.shared.clock import Clock
from src.triage import responses
from src.triage.backend import RemediationBackend
from src.triage.conversation import ConversationLog
from src.triage.errors import NotFound
from src.triage.responses import Reply
from src.triage.seed import DEFAULT_DURATIONS_MS, IncidentProfile
from src.triage.store import IncidentStore
from src.triage.tracker import AsyncActionTracker, Submission

log = logging.getLogger(__name__)


class ActionExecutor:
    def __init__(
        self,
        store: IncidentStore,
        tracker: AsyncActionTracker,
        conversation: ConversationLog,
        backend: RemediationBackend,
        profile: IncidentProfile,
        clock: Clock,
        durations_ms: dict[str, int] | None = None,
    ) -> None:
        self._store = store
        self._tracker = tracker
        self._conversation = conversation
        self._backend = backend
        self._profile = profile
        self._clock = clock
        self._durations = {**DEFAULT_DURATIONS_MS, **(durations_ms or {})}

        self._handlers: dict[IntentKind, Callable[[Intent], Reply]] = {
            IntentKind.LIST_ALERTS: self._list_alerts,
            IntentKind.ALERT_DETAILS: self._alert_details,
            IntentKind.LIST_AFFECTED_HOSTS: self._affected_hosts,
            IntentKind.BLOCK_IP: self._block_ip,
            IntentKind.SHOW_ORIGIN: self._origin,
            IntentKind.ISOLATE_HOST: self._isolate_host,
            IntentKind.LIST_IOCS: self._iocs,
            IntentKind.SHOW_REMEDIATION_PLAN: self._remediation_plan,
            IntentKind.START_REMEDIATION: self._start_remediation,
            IntentKind.UNRECOGNIZED: self._help,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(self, intent: Intent) -> Turn:
        """Run *intent* and append the assistant reply to the conversation."""
        reply = self.reply_for(intent)
        return self._conversation.append(Role.ASSISTANT, reply.text, reply.actions)

    def reply_for(self, intent: Intent) -> Reply:
        if intent.long_running and self._tracker.busy:
            running = self._tracker.in_flight
            log.info("%s rejected: %s job in flight", intent.kind.value, running.kind)
            return responses.busy(running.kind)

        handler = self._handlers.get(intent.kind, self._help)
        try:
            return handler(intent)
        except NotFound as exc:
            log.warning("%s degraded to help: %s", intent.kind.value, exc)
            return responses.help_reply()

    # ------------------------------------------------------------------
    # Read-only intents
    # ------------------------------------------------------------------

    def _list_alerts(self, _intent: Intent) -> Reply:
        return responses.list_alerts(self._store.get_alert())

    def _alert_details(self, intent: Intent) -> Reply:
        alert = self._store.get_alert(intent.alert_id or None)
        return responses.alert_details(alert, self._profile)

    def _affected_hosts(self, _intent: Intent) -> Reply:
        return responses.affected_hosts(self._store.get_alert(), self._store.get_hosts())

    def _origin(self, _intent: Intent) -> Reply:
        try:
            patient_zero = self._store.find_host(self._profile.patient_zero)
        except NotFound:
            patient_zero = None
        return responses.origin(self._profile, patient_zero, self._store.get_alert())

    def _iocs(self, _intent: Intent) -> Reply:
        return responses.iocs(self._profile)

    def _remediation_plan(self, _intent: Intent) -> Reply:
        return responses.remediation_plan(self._profile)

    def _help(self, intent: Intent) -> Reply:
        if intent.kind is IntentKind.UNRECOGNIZED:
            log.debug("Unrecognized input %r", intent.raw_text)
        return responses.help_reply()

    # ------------------------------------------------------------------
    # Long-running intents
    # ------------------------------------------------------------------

    def _submit(self, job: AsyncJob, started: Reply, dispatch: Callable[[], None]) -> Reply:
        if self._tracker.submit(job) is Submission.BUSY:
            return responses.busy(self._tracker.in_flight.kind)
        dispatch()
        return started

    def _new_job(
        self,
        kind: JobKind,
        on_complete: Callable[[IncidentStore], None],
        description: str,
        completion_text: str,
    ) -> AsyncJob:
        return AsyncJob(
            kind=kind.value,
            started_at=self._clock.now(),
            duration_ms=self._durations[kind.value],
            on_complete=on_complete,
            description=description,
            completion_text=completion_text,
        )

    def _block_ip(self, intent: Intent) -> Reply:
        alert = self._store.get_alert()
        if not alert.ip or intent.ip.casefold() != alert.ip.casefold():
            raise NotFound("blockable ip", intent.ip)
        if alert.status == AlertStatus.RESOLVED.value:
            return responses.block_not_needed(alert)

        alert_id = alert.id

        def contain(store: IncidentStore) -> None:
            current = store.get_alert(alert_id)
            if current.can_transition(AlertStatus.RESOLVED.value):
                store.set_alert_status(AlertStatus.RESOLVED)
            if store.get_system_status() is SystemStatus.THREAT:
                store.set_system_status(SystemStatus.SECURE)

        job = self._new_job(
            JobKind.BLOCKING, contain,
            description=f"block {alert.ip} network-wide",
            completion_text=responses.block_done(alert.ip),
        )
        return self._submit(job, responses.block_started(alert.ip),
                            lambda: self._backend.block_ip(alert.ip))

    def _isolate_host(self, intent: Intent) -> Reply:
        host = self._store.find_host(intent.hostname)
        playbooks = {h.casefold() for h in self._profile.playbook_hosts}
        if host.hostname.casefold() not in playbooks:
            log.info("No containment playbook for %s", host.hostname)
            return responses.isolate_no_playbook(host, self._profile)
        if host.contained:
            return responses.isolate_not_needed(host)

        host_id = host.id

        def isolate(store: IncidentStore) -> None:
            store.set_host_status(host_id, HostStatus.ISOLATED)

        job = self._new_job(
            JobKind.ISOLATING, isolate,
            description=f"isolate {host.hostname}",
            completion_text=responses.isolate_done(host.hostname),
        )
        return self._submit(job, responses.isolate_started(host.hostname),
                            lambda: self._backend.isolate_host(host.hostname))

    def _start_remediation(self, _intent: Intent) -> Reply:
        alert = self._store.get_alert()
        if alert.status == AlertStatus.RESOLVED.value:
            return responses.remediation_not_needed(alert)

        alert_id = alert.id

        def remediate(store: IncidentStore) -> None:
            current = store.get_alert(alert_id)
            if current.status == AlertStatus.ACTIVE.value:
                store.set_alert_status(AlertStatus.INVESTIGATING)
            if store.get_system_status() is SystemStatus.THREAT:
                store.set_system_status(SystemStatus.INVESTIGATING)

        job = self._new_job(
            JobKind.REMEDIATING, remediate,
            description=f"automated remediation playbook for alert {alert.id}",
            completion_text=responses.remediation_done(self._profile),
        )
        return self._submit(job, responses.remediation_started(self._profile),
                            lambda: self._backend.run_playbook(alert.id))
