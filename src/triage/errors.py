"""Exceptions raised inside the triage engine.

None of these ever reach the operator: the executor and the tracker turn
them into conversational replies or logged no-ops.
"""

from __future__ import annotations


class TriageError(Exception):
    """Base class for engine errors."""


class NotFound(TriageError):
    """A referenced alert or host does not exist in the Incident Store."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key
