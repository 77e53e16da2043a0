from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock in unix seconds."""

    def now(self) -> int:
        return int(time.time())


@dataclass
class ManualClock:
    """Frozen clock for tests and simulations.

    Starts at wall time unless given a value. Never moves backwards.
    """

    _frozen_now: Optional[int] = None

    def now(self) -> int:
        if self._frozen_now is None:
            self._frozen_now = int(time.time())
        return self._frozen_now

    def set(self, ts: int) -> None:
        t = int(ts)
        if t < self.now():
            raise ValueError(f"clock cannot move backwards: {t} < {self.now()}")
        self._frozen_now = t

    def advance(self, seconds: int) -> int:
        self.set(self.now() + int(seconds))
        return self.now()
