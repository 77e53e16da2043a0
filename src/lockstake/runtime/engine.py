# src/lockstake/runtime/engine.py
from __future__ import annotations

"""Staking engine: public operations over one fixed-reward, time-bounded pool.

Every mutating operation:
  1) enters the call guard (one operation at a time, no reentrancy)
  2) snapshots pool state
  3) settles rewards (global, then the caller where one is involved)
  4) runs checks, then applies all state effects
  5) only then calls the token ledgers
  6) on any failure restores the pool snapshot and both ledgers' snapshots,
     then re-raises; notifications raised by a failed operation are dropped

Both ledgers must be Revertible. A ledger that cannot roll back would keep a
transfer made before a later failure while the pool state is restored.

Reads are serialized on the same lock but never mark the engine as entered.
"""

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from lockstake.ledger.constants import POOL_ACCOUNT_ID
from lockstake.ledger.rewards import RewardAccountant
from lockstake.ledger.stakes import StakeLedger
from lockstake.ledger.token import Revertible, TokenLedger
from lockstake.ledger.types import PoolState, PoolTerms
from lockstake.runtime import events as ev
from lockstake.runtime.access import AccessControl, Authorizer, owner_only
from lockstake.runtime.admission import AdmissionControl, Phase
from lockstake.runtime.clock import Clock, SystemClock
from lockstake.runtime.engine_logging import log_operation
from lockstake.runtime.errors import (
    AlreadyFunded,
    InvalidAmount,
    InvalidAsset,
    InvalidTimestamps,
    NotPaused,
    Paused,
    StakingError,
    ZeroReward,
)
from lockstake.runtime.guard import CallGuard
from lockstake.runtime.metrics import inc_counter, set_gauge

Json = Dict[str, Any]

log = logging.getLogger("lockstake.engine")


def _as_amount(v: Any, name: str = "amount") -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidAmount(details={name: repr(v)})
    return int(v)


def _as_timestamp(v: Any, name: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidTimestamps("timestamp_must_be_int", {name: repr(v)})
    return int(v)


def _as_caller(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


@dataclass
class _Tx:
    op: str
    now: int
    pending: List[ev.Event] = field(default_factory=list)
    committed: List[ev.Event] = field(default_factory=list)

    def emit(self, name: str, **args: Any) -> None:
        self.pending.append(ev.Event(name=name, args=args, ts=self.now))


class StakingEngine:
    """One reward pool: `reward_amount` of the reward asset streamed linearly over
    [start_time, stop_time] to stakers of the staking asset, pro rata to stake.

    Construction fails with InvalidAsset (including a ledger that cannot take
    part in rollback), ZeroReward or InvalidTimestamps and leaves nothing behind.
    """

    def __init__(
        self,
        *,
        staking_token: TokenLedger,
        reward_token: TokenLedger,
        reward_amount: int,
        start_time: int,
        stop_time: int,
        cap: int,
        owner: str,
        clock: Optional[Clock] = None,
        authorizer: Optional[Authorizer] = None,
        pool_account: str = POOL_ACCOUNT_ID,
    ) -> None:
        self._clock: Clock = clock or SystemClock()
        deployed_at = int(self._clock.now())

        if not isinstance(staking_token, TokenLedger):
            raise InvalidAsset("staking_asset_not_a_token_ledger", {"staking_asset": repr(staking_token)})
        if not isinstance(reward_token, TokenLedger):
            raise InvalidAsset("reward_asset_not_a_token_ledger", {"reward_asset": repr(reward_token)})
        if not isinstance(staking_token, Revertible):
            raise InvalidAsset("staking_asset_not_revertible", {"staking_asset": str(staking_token.asset_id)})
        if not isinstance(reward_token, Revertible):
            raise InvalidAsset("reward_asset_not_revertible", {"reward_asset": str(reward_token.asset_id)})

        amount = _as_amount(reward_amount, "reward_amount")
        if amount <= 0:
            raise ZeroReward(details={"reward_amount": amount})

        start = _as_timestamp(start_time, "start_time")
        stop = _as_timestamp(stop_time, "stop_time")
        if not (deployed_at < start < stop):
            raise InvalidTimestamps(details={"now": deployed_at, "start_time": start, "stop_time": stop})

        cap_i = _as_amount(cap, "cap")
        if cap_i < 0:
            raise StakingError("invalid_cap", "cap_must_be_non_negative", {"cap": cap_i})

        owner_s = _as_caller(owner)
        if not owner_s:
            raise StakingError("invalid_owner", "owner_must_be_non_empty", {"owner": owner})

        self._staking_token = staking_token
        self._reward_token = reward_token
        self._pool_account = str(pool_account)
        self.terms = PoolTerms(
            staking_asset=str(staking_token.asset_id),
            reward_asset=str(reward_token.asset_id),
            reward_amount=amount,
            start_time=start,
            stop_time=stop,
        )
        self._state = PoolState(owner=owner_s, cap=cap_i, last_update_time=start)

        self._rewards = RewardAccountant(self.terms)
        self._stakes = StakeLedger()
        self._admission = AdmissionControl(self.terms)
        self._access = AccessControl(authorizer or owner_only)
        self._guard = CallGuard()
        self.events = ev.EventLog()

        log_operation(
            log,
            "pool_deployed",
            pool=self._pool_account,
            now=deployed_at,
            cap=cap_i,
            owner=owner_s,
            **self.terms.to_json(),
        )

    # ------------------------------------------------------------------
    # transaction plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, op: str) -> Iterator[_Tx]:
        with self._guard.guarded(op):
            snapshot = copy.deepcopy(self._state)
            ledger_snaps = [(tok, tok.snapshot()) for tok in self._revertible_ledgers()]
            tx = _Tx(op=op, now=int(self._clock.now()))
            try:
                yield tx
            except BaseException:
                self._state = snapshot
                for tok, snap in ledger_snaps:
                    tok.restore(snap)
                inc_counter(f"{op}_failed_total")
                raise
            tx.committed = self.events.extend(tx.pending)
            inc_counter(f"{op}_total")
            set_gauge("total_staked", self._state.total_staked)

    def _log(self, tx: _Tx, op: str, **fields: Any) -> None:
        log_operation(log, op, pool=self._pool_account, now=tx.now, committed=tx.committed, **fields)

    def _revertible_ledgers(self) -> List[Revertible]:
        out: List[Revertible] = []
        for tok in (self._staking_token, self._reward_token):
            if all(tok is not seen for seen in out):
                out.append(tok)  # type: ignore[arg-type]
        return out

    # ------------------------------------------------------------------
    # mutating operations
    # ------------------------------------------------------------------

    def fund(self, caller: str) -> int:
        """Pull the whole reward pool from the owner and start the stream.

        One-shot. Returns the per-second reward rate.
        """
        c = _as_caller(caller)
        with self._transaction("fund") as tx:
            st = self._state
            self._rewards.settle_global(st, tx.now)
            self._access.require_owner(st, c)
            if st.funded:
                raise AlreadyFunded()

            rate = self._rewards.start_stream(st, tx.now)
            st.funded = True
            tx.emit(ev.REWARD_ADDED, reward=self.terms.reward_amount)

            self._reward_token.transfer_from(self._pool_account, c, self._pool_account, self.terms.reward_amount)

        self._log(tx, "pool_funded", caller=c, reward=self.terms.reward_amount, reward_rate=rate)
        return rate

    def stake(self, caller: str, amount: int) -> int:
        """Deposit `amount` of the staking asset. Returns the caller's new balance."""
        c = _as_caller(caller)
        amt = _as_amount(amount)
        with self._transaction("stake") as tx:
            st = self._state
            self._rewards.settle_account(st, c, tx.now)
            self._admission.require_can_stake(st, tx.now)
            balance = self._stakes.deposit(st, c, amt)
            tx.emit(ev.STAKED, user=c, amount=amt)

            self._staking_token.transfer_from(self._pool_account, c, self._pool_account, amt)

        self._log(tx, "stake", caller=c, amount=amt, balance=balance, total_staked=self._state.total_staked)
        return balance

    def exit(self, caller: str) -> Json:
        """Withdraw the caller's whole stake plus accrued reward once the window is over."""
        c = _as_caller(caller)
        with self._transaction("exit") as tx:
            st = self._state
            acct = self._rewards.settle_account(st, c, tx.now)
            self._admission.require_can_exit(st, tx.now)
            principal = self._stakes.withdraw_all(st, c)
            reward = acct.reward_owed
            acct.reward_owed = 0
            tx.emit(ev.WITHDRAWN, user=c, amount=principal)
            if reward > 0:
                tx.emit(ev.REWARD_PAID, user=c, reward=reward)

            self._staking_token.transfer(self._pool_account, c, principal)
            if reward > 0:
                self._reward_token.transfer(self._pool_account, c, reward)

        self._log(tx, "exit", caller=c, principal=principal, reward=reward, total_staked=self._state.total_staked)
        return {"account": c, "principal": principal, "reward": reward}

    def set_cap(self, caller: str, new_cap: int) -> int:
        """Owner-only. Returns the previous cap."""
        c = _as_caller(caller)
        cap = _as_amount(new_cap, "new_cap")
        with self._transaction("set_cap") as tx:
            st = self._state
            self._rewards.settle_global(st, tx.now)
            self._access.require_owner(st, c)
            old = self._stakes.set_cap(st, cap)
            tx.emit(ev.CAP_CHANGE, old_cap=old, new_cap=cap)

        self._log(tx, "cap_change", caller=c, old_cap=old, new_cap=cap)
        return old

    def pause(self, caller: str) -> None:
        c = _as_caller(caller)
        with self._transaction("pause") as tx:
            st = self._state
            self._rewards.settle_global(st, tx.now)
            self._access.require_owner(st, c)
            if st.paused:
                raise Paused()
            st.paused = True
            tx.emit(ev.PAUSED, account=c)

        self._log(tx, "paused", caller=c)

    def unpause(self, caller: str) -> None:
        c = _as_caller(caller)
        with self._transaction("unpause") as tx:
            st = self._state
            self._rewards.settle_global(st, tx.now)
            self._access.require_owner(st, c)
            if not st.paused:
                raise NotPaused()
            st.paused = False
            tx.emit(ev.UNPAUSED, account=c)

        self._log(tx, "unpaused", caller=c)

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        c = _as_caller(caller)
        with self._transaction("transfer_ownership") as tx:
            prev = self._access.transfer_ownership(self._state, c, new_owner)
            tx.emit(ev.OWNERSHIP_TRANSFERRED, previous_owner=prev, new_owner=self._state.owner)

        self._log(tx, "ownership_transferred", previous_owner=prev, new_owner=self._state.owner)
        return prev

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def earned(self, account: str) -> int:
        with self._guard.serialized():
            return self._rewards.earned(self._state, _as_caller(account), int(self._clock.now()))

    def balance_of(self, account: str) -> int:
        with self._guard.serialized():
            return self._state.peek(_as_caller(account)).balance

    def phase(self) -> Phase:
        return self._admission.phase(int(self._clock.now()))

    @property
    def staking_asset(self) -> str:
        return self.terms.staking_asset

    @property
    def reward_asset(self) -> str:
        return self.terms.reward_asset

    @property
    def reward_amount(self) -> int:
        return self.terms.reward_amount

    @property
    def start_time(self) -> int:
        return self.terms.start_time

    @property
    def stop_time(self) -> int:
        return self.terms.stop_time

    @property
    def reward_duration(self) -> int:
        return self.terms.reward_duration

    @property
    def reward_rate(self) -> int:
        return self._state.reward_rate

    @property
    def total_staked(self) -> int:
        return self._state.total_staked

    @property
    def cap(self) -> int:
        return self._state.cap

    @property
    def paused(self) -> bool:
        return self._state.paused

    @property
    def funded(self) -> bool:
        return self._state.funded

    @property
    def owner(self) -> str:
        return self._state.owner

    @property
    def pool_account(self) -> str:
        return self._pool_account

    @property
    def staking_token(self) -> TokenLedger:
        return self._staking_token

    @property
    def reward_token(self) -> TokenLedger:
        return self._reward_token

    def snapshot(self) -> Json:
        with self._guard.serialized():
            now = int(self._clock.now())
            st = self._state
            return {
                "now": now,
                "phase": self._admission.phase(now).value,
                "pool_account": self._pool_account,
                "terms": self.terms.to_json(),
                "owner": st.owner,
                "cap": st.cap,
                "paused": st.paused,
                "funded": st.funded,
                "reward_rate": st.reward_rate,
                "reward_per_unit_stored": st.reward_per_unit_stored,
                "reward_per_unit": self._rewards.reward_per_unit(st, now),
                "last_update_time": st.last_update_time,
                "total_staked": st.total_staked,
                "accounts": len(st.accounts),
            }

    def account_view(self, account: str) -> Json:
        with self._guard.serialized():
            a = _as_caller(account)
            acct = self._state.peek(a)
            return {
                "account": a,
                "balance": acct.balance,
                "reward_per_unit_paid": acct.reward_per_unit_paid,
                "reward_owed": acct.reward_owed,
                "earned": self._rewards.earned(self._state, a, int(self._clock.now())),
            }
