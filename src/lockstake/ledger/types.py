from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict

Json = Dict[str, Any]


@dataclass(slots=True)
class AccountState:
    """Per-participant settlement record.

    Created on first stake and never removed, so `earned` stays queryable after exit.
    """

    balance: int = 0
    reward_per_unit_paid: int = 0
    reward_owed: int = 0


@dataclass(slots=True)
class PoolState:
    """Mutable pool state owned exclusively by one StakingEngine."""

    owner: str
    cap: int
    reward_rate: int = 0
    reward_per_unit_stored: int = 0
    last_update_time: int = 0
    total_staked: int = 0
    paused: bool = False
    funded: bool = False
    accounts: Dict[str, AccountState] = field(default_factory=dict)

    def account(self, account_id: str) -> AccountState:
        acct = self.accounts.get(account_id)
        if acct is None:
            acct = AccountState()
            self.accounts[account_id] = acct
        return acct

    def peek(self, account_id: str) -> AccountState:
        """Read-only lookup; unknown accounts read as empty without being created."""
        return self.accounts.get(account_id) or AccountState()

    def to_json(self) -> Json:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PoolTerms:
    """Construction-time parameters; immutable for the life of the pool."""

    staking_asset: str
    reward_asset: str
    reward_amount: int
    start_time: int
    stop_time: int

    @property
    def reward_duration(self) -> int:
        return int(self.stop_time) - int(self.start_time)

    def to_json(self) -> Json:
        d = asdict(self)
        d["reward_duration"] = self.reward_duration
        return d
