from __future__ import annotations

from lockstake.ledger.types import PoolState
from lockstake.runtime.errors import CapBelowStaked, NothingStaked, OverCap, ZeroAmount


class StakeLedger:
    """Staked balances, their aggregate and the admission cap.

    Callers must settle the account's rewards before any balance changes here.
    """

    def require_within_cap(self, state: PoolState, amount: int) -> None:
        """`total_staked + amount <= cap`, taken literally: a cap of 0 admits nothing."""
        projected = int(state.total_staked) + int(amount)
        if projected > int(state.cap):
            raise OverCap(details={"total_staked": state.total_staked, "amount": int(amount), "cap": state.cap})

    def deposit(self, state: PoolState, account_id: str, amount: int) -> int:
        amt = int(amount)
        if amt <= 0:
            raise ZeroAmount(details={"amount": amt})
        self.require_within_cap(state, amt)

        acct = state.account(account_id)
        acct.balance += amt
        state.total_staked += amt
        return acct.balance

    def withdraw_all(self, state: PoolState, account_id: str) -> int:
        acct = state.peek(account_id)
        amt = int(acct.balance)
        if amt <= 0:
            raise NothingStaked(details={"account": account_id})

        acct.balance = 0
        state.total_staked -= amt
        return amt

    def set_cap(self, state: PoolState, new_cap: int) -> int:
        """Replace the cap; returns the previous one."""
        cap = int(new_cap)
        if cap < int(state.total_staked):
            raise CapBelowStaked(details={"new_cap": cap, "total_staked": state.total_staked})
        old = state.cap
        state.cap = cap
        return old
