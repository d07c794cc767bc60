from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

from ..common.datetime_utils import elapsed_seconds
from .aggregator import ActivityKey


@dataclass(frozen=True)
class RunningTimer:
    started_at: datetime

    def elapsed(self, now: datetime) -> int:
        return max(elapsed_seconds(self.started_at, now), 0)


class RunningTimers:
    """Running activity timers keyed by ActivityKey.

    Only start instants are stored; elapsed time is sampled from the clock
    passed to each read.
    """

    def __init__(self):
        self._timers: dict[ActivityKey, RunningTimer] = {}

    def start(self, key: ActivityKey, started_at: datetime) -> None:
        """Start ``key``; any other running timer is stopped first."""

        self._timers.clear()
        self._timers[key] = RunningTimer(started_at=started_at)

    def is_active(self, key: ActivityKey) -> bool:
        return key in self._timers

    def elapsed(self, key: ActivityKey, now: datetime) -> int:
        timer = self._timers.get(key)
        return timer.elapsed(now) if timer else 0

    def __iter__(self) -> Iterator[tuple[ActivityKey, RunningTimer]]:
        return iter(self._timers.items())

    def __len__(self) -> int:
        return len(self._timers)
