"""Intent Resolver — ordered keyword rules: operator text → Intent.

Matching policy
───────────────
  * input is lower-cased and matched by plain substring search
  * rules are evaluated top to bottom; the FIRST rule that matches wins
  * no scoring and no "most specific" tie-break: two rules may both match
    an input, the table order decides
  * nothing matches → ``Unrecognized(raw_text)``

Rules that carry an argument (IP, hostname, alert id) only match when the
argument token is present after the trigger phrase.  A table built with
:func:`build_rules` for one incident also requires the IP to be the C2
address and the hostname to be a playbook host.  The resolver never
touches the Incident Store.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from src.contracts.enums import ActionKind, IntentKind, Role
from src.contracts.intent import Intent
from src.contracts.turn import Turn

log = logging.getLogger(__name__)

_TRAILING = ".,;:!?'\"`)"

_BLOCK_IP_RE = re.compile(r"block ip\s+([^\s,;]+)", re.IGNORECASE)
_ISOLATE_RE = re.compile(r"isolate host\s+([^\s,;]+)", re.IGNORECASE)
_ALERT_ID_RE = re.compile(r"details alert\s+#?([\w-]*\d[\w-]*)", re.IGNORECASE)

CONFIRMATIONS = frozenset({"yes", "y", "do it", "proceed", "confirm", "ok", "go ahead"})

Builder = Callable[[str, Sequence[Turn]], Intent | None]


@dataclass(frozen=True, slots=True)
class IntentRule:
    """One row of the rule table.

    ``any_of`` — trigger phrases, at least one must occur.
    ``none_of`` — phrases that veto the rule.
    ``build`` — turns the raw text into an Intent, or returns None when a
    required argument token is missing (the rule then does not match).
    """

    name: str
    any_of: tuple[str, ...]
    build: Builder
    none_of: tuple[str, ...] = ()

    def matches(self, lowered: str) -> bool:
        if not any(k in lowered for k in self.any_of):
            return False
        return not any(k in lowered for k in self.none_of)


# ═══════════════════════════════════════════════════════════════════════════
#  Argument extraction
# ═══════════════════════════════════════════════════════════════════════════


def _token(pattern: re.Pattern[str], raw: str) -> str:
    m = pattern.search(raw)
    if not m:
        return ""
    return m.group(1).rstrip(_TRAILING)


def _build_alert_details(raw: str, _ctx: Sequence[Turn]) -> Intent:
    return Intent.alert_details(_token(_ALERT_ID_RE, raw))


def _accepts(token: str, targets: frozenset[str]) -> bool:
    """Empty *targets* means any non-empty token is accepted."""
    if not token:
        return False
    return not targets or token.casefold() in targets


def _confirmed_command(raw: str, ctx: Sequence[Turn]) -> str | None:
    """A bare "yes" points at the primary suggestion of the last assistant turn."""
    if raw.strip(" .!").lower() not in CONFIRMATIONS:
        return None
    for turn in reversed(ctx):
        if turn.role != Role.ASSISTANT.value:
            continue
        for action in turn.suggested_actions:
            if action.kind == ActionKind.PRIMARY.value and action.command:
                log.debug("Confirmation resolved to suggested command %r", action.command)
                return action.command
        return None
    return None


def _fixed(kind: IntentKind) -> Builder:
    return lambda _raw, _ctx: Intent.of(kind)


# ═══════════════════════════════════════════════════════════════════════════
#  Rule table — order is part of the contract
# ═══════════════════════════════════════════════════════════════════════════


def build_rules(
    blockable_ips: Iterable[str] = (),
    playbook_hosts: Iterable[str] = (),
) -> tuple[IntentRule, ...]:
    """Build the ordered rule table for one incident.

    ``block ip`` only matches when its token is one of *blockable_ips*,
    ``isolate host`` only when its token is one of *playbook_hosts*
    (both case-insensitive); otherwise later rules get their turn.  An
    empty collection accepts any token.
    """
    ips = frozenset(ip.casefold() for ip in blockable_ips if ip)
    hosts = frozenset(h.casefold() for h in playbook_hosts if h)

    def build_block_ip(raw: str, _ctx: Sequence[Turn]) -> Intent | None:
        ip = _token(_BLOCK_IP_RE, raw)
        return Intent.block_ip(ip) if _accepts(ip, ips) else None

    def build_isolate_host(raw: str, _ctx: Sequence[Turn]) -> Intent | None:
        hostname = _token(_ISOLATE_RE, raw)
        return Intent.isolate_host(hostname) if _accepts(hostname, hosts) else None

    def build_confirmation(raw: str, ctx: Sequence[Turn]) -> Intent | None:
        command = _confirmed_command(raw, ctx)
        return resolve(command, rules=table) if command else None

    table = (
        IntentRule(
            "list_alerts",
            ("show active alerts", "active alerts"),
            _fixed(IntentKind.LIST_ALERTS),
        ),
        IntentRule(
            "alert_details",
            ("details alert",),
            _build_alert_details,
        ),
        IntentRule(
            "list_affected_hosts",
            ("list affected hosts", "affected hosts"),
            _fixed(IntentKind.LIST_AFFECTED_HOSTS),
        ),
        IntentRule(
            "block_ip",
            ("block ip",),
            build_block_ip,
        ),
        IntentRule(
            "show_origin",
            ("show origin", "origin of outbreak"),
            _fixed(IntentKind.SHOW_ORIGIN),
        ),
        IntentRule(
            "isolate_host",
            ("isolate host",),
            build_isolate_host,
        ),
        IntentRule(
            "list_iocs",
            ("ioc for alert", "ioc"),
            _fixed(IntentKind.LIST_IOCS),
        ),
        IntentRule(
            "show_remediation_plan",
            ("recommended remediation", "remediation"),
            _fixed(IntentKind.SHOW_REMEDIATION_PLAN),
            none_of=("playbook", "start automated remediation"),
        ),
        IntentRule(
            "start_remediation",
            ("start automated remediation", "remediation playbook"),
            _fixed(IntentKind.START_REMEDIATION),
        ),
        IntentRule(
            "confirmation",
            tuple(sorted(CONFIRMATIONS)),
            build_confirmation,
        ),
    )
    return table


# Unbound table: any IP / hostname token is accepted.
RULES: tuple[IntentRule, ...] = build_rules()


def resolve(
    raw_text: str,
    conversation_context: Sequence[Turn] = (),
    rules: Sequence[IntentRule] = RULES,
) -> Intent:
    """Classify *raw_text* into an Intent.

    Parameters
    ──────────
    raw_text
        Operator input as typed.
    conversation_context
        Turns so far, oldest first.  Only consulted by the confirmation
        rule.
    rules
        Rule table; defaults to :data:`RULES`.

    Returns
    ───────
    The Intent built by the first matching rule, else ``Unrecognized``.
    """
    lowered = raw_text.lower()
    for rule in rules:
        if not rule.matches(lowered):
            continue
        intent = rule.build(raw_text, conversation_context)
        if intent is None:
            continue
        log.debug("Rule '%s' matched %r -> %s", rule.name, raw_text, intent.kind.value)
        return intent
    log.debug("No rule matched %r", raw_text)
    return Intent.unrecognized(raw_text)
