"""Conversation Log — append-only, ordered transcript of turns."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from src.contracts.enums import Role
from src.contracts.turn import SuggestedAction, Turn
from src.shared.clock import Clock, iso_ms

log = logging.getLogger(__name__)


class ConversationLog:
    """Turns are stored in insertion order and never reordered.

    Timestamps are clamped so that turn n+1 is never earlier than turn n,
    even if the clock handed in steps backwards.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._turns: list[Turn] = []
        self._seq = 0

    def append(
        self,
        role: Role | str,
        text: str,
        suggested_actions: Sequence[SuggestedAction] = (),
    ) -> Turn:
        self._seq += 1
        ts = iso_ms(self._clock.now())
        if self._turns and ts < self._turns[-1].timestamp:
            ts = self._turns[-1].timestamp
        turn = Turn(
            id=f"T-{self._seq:04d}",
            role=Role(role).value,
            text=text,
            timestamp=ts,
            suggested_actions=tuple(suggested_actions),
        )
        self._turns.append(turn)
        log.debug("Turn %s (%s) appended", turn.id, turn.role)
        return turn

    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def last(self, role: Role | str | None = None) -> Turn | None:
        for turn in reversed(self._turns):
            if role is None or turn.role == Role(role).value:
                return turn
        return None

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
