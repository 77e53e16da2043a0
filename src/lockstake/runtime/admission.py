from __future__ import annotations

"""Time-window and pause gating for stake/exit.

Phases are a pure function of the clock, relative to [start_time, stop_time]:

  before  now <  start_time              stake: NotStarted     exit: PeriodNotOver
  active  start_time <= now < stop_time  stake: allowed        exit: PeriodNotOver
  after   now >= stop_time               stake: StakingClosed  exit: allowed

Nothing is stored; no transition is triggered externally. The pause flag blocks
both operations in every phase.
"""

from dataclasses import dataclass
from enum import Enum

from lockstake.ledger.types import PoolState, PoolTerms
from lockstake.runtime.errors import NotStarted, Paused, PeriodNotOver, StakingClosed


class Phase(str, Enum):
    BEFORE = "before"
    ACTIVE = "active"
    AFTER = "after"


@dataclass(frozen=True, slots=True)
class AdmissionControl:
    terms: PoolTerms

    def phase(self, now: int) -> Phase:
        t = int(now)
        if t < self.terms.start_time:
            return Phase.BEFORE
        if t < self.terms.stop_time:
            return Phase.ACTIVE
        return Phase.AFTER

    def require_not_paused(self, state: PoolState) -> None:
        if state.paused:
            raise Paused()

    def require_can_stake(self, state: PoolState, now: int) -> None:
        self.require_not_paused(state)
        ph = self.phase(now)
        if ph is Phase.BEFORE:
            raise NotStarted(details={"now": int(now), "start_time": self.terms.start_time})
        if ph is Phase.AFTER:
            raise StakingClosed(details={"now": int(now), "stop_time": self.terms.stop_time})

    def require_can_exit(self, state: PoolState, now: int) -> None:
        self.require_not_paused(state)
        if self.phase(now) is not Phase.AFTER:
            raise PeriodNotOver(details={"now": int(now), "stop_time": self.terms.stop_time})
