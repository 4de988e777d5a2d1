"""Clocks — wall time for live sessions, virtual time for deterministic runs."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Protocol

_EPOCH_DEFAULT = "2026-02-26T14:23:07Z"


def iso_ms(dt: datetime) -> str:
    """Render *dt* as ISO-8601 UTC with millisecond precision.

    Fixed width, so lexical order equals chronological order.
    """
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_ts(iso: str) -> datetime:
    return datetime.fromisoformat(iso.replace("Z", "+00:00"))


class Clock(Protocol):
    """Anything with a UTC-aware ``now()``."""

    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """Virtual clock that only moves when told to.

    Lets tests and batch runs step async jobs to completion without
    sleeping.
    """

    def __init__(self, start: datetime | str = _EPOCH_DEFAULT) -> None:
        if isinstance(start, str):
            start = parse_ts(start)
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, ms: int) -> datetime:
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        with self._lock:
            self._now += timedelta(milliseconds=ms)
            return self._now
