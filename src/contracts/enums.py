"""Canonical enumerations for the incident model."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


class HostStatus(str, Enum):
    INFECTED = "infected"
    SCANNING = "scanning"
    ISOLATED = "isolated"
    CLEAN = "clean"


class SystemStatus(str, Enum):
    SECURE = "secure"
    THREAT = "threat"
    INVESTIGATING = "investigating"


class Role(str, Enum):
    OPERATOR = "operator"
    ASSISTANT = "assistant"


class ActionKind(str, Enum):
    """Visual weight of a suggested action button."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    DANGER = "danger"


class JobKind(str, Enum):
    BLOCKING = "blocking"
    ISOLATING = "isolating"
    REMEDIATING = "remediating"
    SCANNING = "scanning"


class IntentKind(str, Enum):
    LIST_ALERTS = "list_alerts"
    ALERT_DETAILS = "alert_details"
    LIST_AFFECTED_HOSTS = "list_affected_hosts"
    BLOCK_IP = "block_ip"
    ISOLATE_HOST = "isolate_host"
    SHOW_ORIGIN = "show_origin"
    LIST_IOCS = "list_iocs"
    SHOW_REMEDIATION_PLAN = "show_remediation_plan"
    START_REMEDIATION = "start_remediation"
    UNRECOGNIZED = "unrecognized"


# Legal alert transitions; resolved is terminal.
ALERT_TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.ACTIVE: frozenset({AlertStatus.INVESTIGATING, AlertStatus.RESOLVED}),
    AlertStatus.INVESTIGATING: frozenset({AlertStatus.RESOLVED}),
    AlertStatus.RESOLVED: frozenset(),
}
