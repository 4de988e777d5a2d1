"""Reply templates — render assistant text and suggested actions.

Texts carry ``**emphasis**`` and backtick markers; they are opaque to the
engine and interpreted by whatever renders the conversation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.contracts.alert import Alert
from src.contracts.enums import ActionKind, AlertStatus, JobKind, SystemStatus
from src.contracts.host import Host
from src.contracts.turn import SuggestedAction
from src.triage.seed import IncidentProfile

PROGRESS_LABELS: dict[str, str] = {
    JobKind.BLOCKING.value: "EXECUTING NETWORK BLOCK...",
    JobKind.ISOLATING.value: "ISOLATING HOST...",
    JobKind.REMEDIATING.value: "AUTOMATED REMEDIATION IN PROGRESS...",
}
DEFAULT_PROGRESS_LABEL = "PROCESSING ACTION..."

STATUS_LABELS: dict[str, str] = {
    SystemStatus.SECURE.value: "CYBERMESH SECURE",
    SystemStatus.THREAT.value: "THREAT ACTIVE",
    SystemStatus.INVESTIGATING.value: "ANALYZING THREAT",
}

HELP_TEXT = (
    "**GUARDIAN AI READY**\n\n"
    "Available commands:\n"
    "• `show active alerts` - Display current threats\n"
    "• `details alert [ID]` - Get detailed threat analysis\n"
    "• `list affected hosts` - Show compromised systems\n"
    "• `block ip [ADDRESS]` - Network-wide IP blocking\n"
    "• `show origin` - Trace patient zero\n"
    "• `isolate host [HOSTNAME]` - Quarantine specific system\n"
    "• `ioc for alert [ID]` - Extract indicators of compromise\n"
    "• `recommended remediation` - Remediation plan\n"
    "• `start automated remediation playbook` - Systematic cleanup\n\n"
    "What would you like to investigate?"
)


@dataclass(frozen=True, slots=True)
class Reply:
    text: str
    actions: tuple[SuggestedAction, ...] = field(default_factory=tuple)


def progress_label(kind: str | None) -> str | None:
    if kind is None:
        return None
    return PROGRESS_LABELS.get(kind, DEFAULT_PROGRESS_LABEL)


# ── suggested actions ────────────────────────────────────────────────────


def block_action(alert: Alert, kind: ActionKind = ActionKind.DANGER) -> SuggestedAction:
    return SuggestedAction("block-c2", "BLOCK C2 IP", kind.value, f"block ip {alert.ip} network-wide")


def isolate_action(hostname: str, kind: ActionKind = ActionKind.DANGER) -> SuggestedAction:
    return SuggestedAction(
        f"isolate-{hostname.lower()}", f"ISOLATE {hostname}", kind.value, f"isolate host {hostname}",
    )


def remediation_action(kind: ActionKind = ActionKind.SECONDARY) -> SuggestedAction:
    return SuggestedAction(
        "start-remediation", "START REMEDIATION", kind.value, "start automated remediation playbook",
    )


def quick_actions(alert: Alert, profile: IncidentProfile) -> tuple[SuggestedAction, ...]:
    """The fixed one-click panel offered next to the conversation."""
    return (
        block_action(alert),
        SuggestedAction(
            "isolate-patient-zero", "ISOLATE PATIENT ZERO", ActionKind.DANGER.value,
            f"isolate host {profile.patient_zero}",
        ),
        remediation_action(ActionKind.PRIMARY),
    )


def _ask(label_id: str, label: str, command: str, kind: ActionKind = ActionKind.SECONDARY) -> SuggestedAction:
    return SuggestedAction(label_id, label, kind.value, command)


# ═══════════════════════════════════════════════════════════════════════════
#  Read-only replies
# ═══════════════════════════════════════════════════════════════════════════


def _headline(alert: Alert) -> str:
    count = f" ({alert.affected_host_count} hosts)" if alert.affected_host_count else ""
    return f"**{alert.severity.upper()} - {alert.title.title()}{count}**"


def list_alerts(alert: Alert) -> Reply:
    if alert.status == AlertStatus.RESOLVED.value:
        return Reply(
            f"Active Alerts (0). Alert {alert.id} {_headline(alert)} is **RESOLVED**.",
        )
    return Reply(
        f"Active Alerts (1): {_headline(alert)} - Status: {alert.status.upper()}. "
        f"Anomaly: outbound connections to `{alert.ip}`. "
        f"Type 'details alert {alert.id}' for more.",
        (_ask("details", "DETAILS", f"details alert {alert.id}", ActionKind.PRIMARY),),
    )


def alert_details(alert: Alert, profile: IncidentProfile) -> Reply:
    count = alert.affected_host_count if alert.affected_host_count is not None else "?"
    return Reply(
        f"Alert {alert.id}: **{alert.severity.upper()} - {alert.title.title()}.** "
        f"Source: {alert.source}. Detected: {alert.detected_at}. Status: {alert.status.upper()}. "
        f"{count} endpoints connecting to `{alert.ip}`:{profile.c2_port}. "
        f"Process `{profile.process_name}`. Potential C2. "
        f"IOCs: 'ioc for alert {alert.id}'. "
        f"Try: 'list affected hosts', 'block ip {alert.ip}'.",
        (
            _ask("list-hosts", "LIST AFFECTED HOSTS", "list affected hosts", ActionKind.PRIMARY),
            block_action(alert),
            _ask("iocs", "SHOW IOCs", f"ioc for alert {alert.id}"),
        ),
    )


def affected_hosts(alert: Alert, hosts: list[Host]) -> Reply:
    total = alert.affected_host_count if alert.affected_host_count is not None else len(hosts)
    lines = [f"• {h.hostname} ({h.ip}) - {h.status.upper()}" for h in hosts]
    more = total - len(hosts)
    text = (
        f"Displaying affected hosts in 'Affected Hosts' widget. **{total} total hosts affected**:\n\n"
        + "\n".join(lines)
    )
    if more > 0:
        text += f"\n\n...and {more} more."
    actions = tuple(isolate_action(h.hostname, ActionKind.SECONDARY)
                    for h in hosts if not h.contained)
    return Reply(text, actions)


def origin(profile: IncidentProfile, patient_zero: Host | None, alert: Alert) -> Reply:
    ip = patient_zero.ip if patient_zero else "unknown"
    return Reply(
        "**OUTBREAK ORIGIN ANALYSIS:**\n\n"
        f"Patient Zero: `{profile.patient_zero}` (`{ip}`)\n"
        f"Vector: {profile.vector}\n"
        f"Timestamp: {profile.first_seen}\n"
        f"User: {profile.user}\n\n"
        f"Recommend: 'isolate host {profile.patient_zero}', 'ioc for alert {alert.id}'",
        (
            isolate_action(profile.patient_zero, ActionKind.PRIMARY),
            _ask("iocs", "SHOW IOCs", f"ioc for alert {alert.id}"),
        ),
    )


def iocs(profile: IncidentProfile) -> Reply:
    lines = [f"• **{label}:** {value}" for label, value in profile.iocs]
    return Reply(
        "**INDICATORS OF COMPROMISE (IOCs):**\n\n" + "\n".join(lines),
        (_ask("remediation-plan", "REMEDIATION PLAN", "recommended remediation", ActionKind.PRIMARY),),
    )


def remediation_plan(profile: IncidentProfile) -> Reply:
    lines = [
        f"{i}. **{title}** - {detail}" if detail else f"{i}. **{title}**"
        for i, (title, detail) in enumerate(profile.remediation_steps, 1)
    ]
    return Reply(
        "**RECOMMENDED REMEDIATION STEPS:**\n\n"
        + "\n".join(lines)
        + "\n\nAction: 'start automated remediation playbook' for systematic cleanup.",
        (remediation_action(ActionKind.PRIMARY),),
    )


def help_reply() -> Reply:
    return Reply(HELP_TEXT)


# ═══════════════════════════════════════════════════════════════════════════
#  Long-running actions
# ═══════════════════════════════════════════════════════════════════════════


def busy(kind: str) -> Reply:
    return Reply(
        f"⏳ **ACTION IN PROGRESS** - {progress_label(kind)}\n\n"
        "Wait for the current action to finish before issuing another remediation command."
    )


def block_started(ip: str) -> Reply:
    return Reply(
        f"⚡ **INITIATING NETWORK-WIDE BLOCK** for `{ip}`\n\n"
        "```\n> UPDATING FIREWALL RULES...\n> BLOCKING C2 COMMUNICATION...\n"
        "> NOTIFYING SECURITY TEAM...\n```\n\n"
        "Status: **IN PROGRESS**."
    )


def block_done(ip: str) -> str:
    return (
        f"✓ **NETWORK BLOCK COMPLETE** for `{ip}`\n\n"
        "Status: **BLOCKED**. C2 communication severed. Monitor for reconnection attempts."
    )


def block_not_needed(alert: Alert) -> Reply:
    return Reply(
        f"`{alert.ip}` is already blocked. Alert {alert.id} is **RESOLVED**; no action taken."
    )


def isolate_started(hostname: str) -> Reply:
    return Reply(
        f"🔒 **ISOLATING HOST** `{hostname}`\n\n"
        "```\n> SEVERING NETWORK ACCESS...\n> QUARANTINE PROTOCOLS...\n"
        "> USER NOTIFICATION...\n```\n\n"
        "Status: **IN PROGRESS**."
    )


def isolate_done(hostname: str) -> str:
    return f"✓ Host `{hostname}` isolated successfully. Network access revoked."


def isolate_not_needed(host: Host) -> Reply:
    return Reply(f"Host `{host.hostname}` is already **{host.status.upper()}**; no action taken.")


def isolate_no_playbook(host: Host, profile: IncidentProfile) -> Reply:
    known = ", ".join(f"`{h}`" for h in profile.playbook_hosts) or "none"
    return Reply(
        f"No containment playbook is defined for `{host.hostname}`. "
        f"Hosts with a playbook: {known}.",
        tuple(isolate_action(h, ActionKind.SECONDARY) for h in profile.playbook_hosts),
    )


def remediation_started(profile: IncidentProfile) -> Reply:
    bars = [
        f"Phase {i}: {name}... [{'░' * 10}] 0%"
        for i, name in enumerate(profile.remediation_phases, 1)
    ]
    return Reply(
        "🔧 **AUTOMATED REMEDIATION INITIATED**\n\n"
        "```\n" + "\n".join(bars) + "\n```\n\n"
        f"Estimated completion: {profile.remediation_eta_min} minutes. "
        "Monitor progress in Quick Actions widget."
    )


def remediation_done(profile: IncidentProfile) -> str:
    bars = [
        f"Phase {i}: {name}... [{'█' * 10}] 100%"
        for i, name in enumerate(profile.remediation_phases, 1)
    ]
    return (
        "✓ **AUTOMATED REMEDIATION PHASES COMPLETE**\n\n"
        "```\n" + "\n".join(bars) + "\n```\n\n"
        "System status: **ANALYZING THREAT**. Review findings before closing the alert."
    )


def remediation_not_needed(alert: Alert) -> Reply:
    return Reply(f"Alert {alert.id} is **RESOLVED**; automated remediation is not required.")
