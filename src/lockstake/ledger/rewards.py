# src/lockstake/ledger/rewards.py
from __future__ import annotations

"""Reward-per-unit streaming accumulator.

The pool streams `reward_rate` units per second between start_time and stop_time.
`reward_per_unit_stored` accumulates, scaled by SCALE, the reward earned by one
staked unit since the stream began. An account's entitlement since its last
settlement is `balance * (stored - paid) // SCALE`.

Rounding policy: every division truncates toward zero. The rate, the accumulator
increment and each account's share all round down, so the sum of all settled
rewards never exceeds `reward_rate * elapsed <= reward_amount`. Truncation dust
stays in the pool's custody.

While total_staked == 0 the accumulator does not move but last_update_time still
advances: the reward streamed over an empty interval is not assigned to anyone.
"""

from dataclasses import dataclass

from lockstake.ledger.constants import SCALE
from lockstake.ledger.types import AccountState, PoolState, PoolTerms


@dataclass(frozen=True, slots=True)
class RewardAccountant:
    """Pure accounting over a PoolState; never moves tokens."""

    terms: PoolTerms

    def _applicable_time(self, now: int) -> int:
        return min(int(now), int(self.terms.stop_time))

    def reward_per_unit(self, state: PoolState, now: int) -> int:
        if state.total_staked == 0:
            return state.reward_per_unit_stored
        elapsed = self._applicable_time(now) - state.last_update_time
        if elapsed <= 0:
            return state.reward_per_unit_stored
        return state.reward_per_unit_stored + (elapsed * state.reward_rate * SCALE) // state.total_staked

    def settle_global(self, state: PoolState, now: int) -> None:
        """Advance the accumulator to `now`. Must run before total_staked changes."""
        state.reward_per_unit_stored = self.reward_per_unit(state, now)
        state.last_update_time = max(state.last_update_time, self._applicable_time(now))

    def settle_account(self, state: PoolState, account_id: str, now: int) -> AccountState:
        self.settle_global(state, now)
        acct = state.account(account_id)
        acct.reward_owed += self._pending(acct, state.reward_per_unit_stored)
        acct.reward_per_unit_paid = state.reward_per_unit_stored
        return acct

    def earned(self, state: PoolState, account_id: str, now: int) -> int:
        """Projection of settle_account(...).reward_owed without mutating anything."""
        acct = state.peek(account_id)
        return acct.reward_owed + self._pending(acct, self.reward_per_unit(state, now))

    def start_stream(self, state: PoolState, now: int) -> int:
        """Fix the emission rate and anchor the accumulator at the stream start.

        Called once, at funding. Returns the per-second rate.
        """
        self.settle_global(state, now)
        state.reward_rate = int(self.terms.reward_amount) // int(self.terms.reward_duration)
        anchor = max(int(self.terms.start_time), int(now))
        state.last_update_time = self._applicable_time(anchor)
        return state.reward_rate

    @staticmethod
    def _pending(acct: AccountState, reward_per_unit: int) -> int:
        delta = int(reward_per_unit) - int(acct.reward_per_unit_paid)
        if acct.balance <= 0 or delta <= 0:
            return 0
        return (acct.balance * delta) // SCALE
