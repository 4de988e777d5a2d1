"""Incident contract — canonical data structures shared by all modules."""

from src.contracts.alert import Alert
from src.contracts.enums import (
    ActionKind,
    AlertStatus,
    HostStatus,
    IntentKind,
    JobKind,
    Role,
    Severity,
    SystemStatus,
)
from src.contracts.host import Host
from src.contracts.intent import Intent
from src.contracts.job import AsyncJob, JobCompletion
from src.contracts.turn import SuggestedAction, Turn

__all__ = [
    "ActionKind",
    "Alert",
    "AlertStatus",
    "AsyncJob",
    "Host",
    "HostStatus",
    "Intent",
    "IntentKind",
    "JobCompletion",
    "JobKind",
    "Role",
    "Severity",
    "SuggestedAction",
    "SystemStatus",
    "Turn",
]
