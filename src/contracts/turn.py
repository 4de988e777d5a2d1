"""Conversation turn and suggested action records."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class SuggestedAction:
    """A one-click follow-up offered with an assistant turn.

    ``command`` is the operator text the presentation layer sends back
    when the action is clicked.
    """

    id: str
    label: str
    kind: str  # primary | secondary | danger
    command: str = ""


@dataclass(frozen=True, slots=True)
class Turn:
    """One immutable entry of the conversation log."""

    id: str  # e.g. "T-0001"
    role: str  # operator | assistant
    text: str  # may contain **emphasis** / `code` markers, opaque here
    timestamp: str  # ISO-8601 UTC, millisecond precision
    suggested_actions: tuple[SuggestedAction, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["suggested_actions"] = [asdict(a) for a in self.suggested_actions]
        return d
