from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class StakingError(Exception):
    """Canonical error type for pool construction and operation failures.

    Every failure aborts the whole operation; nothing is retried.
    """

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class _Category(StakingError):
    CODE = "staking_error"
    REASON = "failed"

    def __init__(self, reason: Optional[str] = None, details: Any | None = None) -> None:
        super().__init__(self.CODE, reason or self.REASON, details)


# --- construction -----------------------------------------------------------


class InvalidAsset(_Category):
    CODE = "invalid_asset"
    REASON = "asset_not_a_token_ledger"


class ZeroReward(_Category):
    CODE = "zero_reward"
    REASON = "reward_amount_must_be_positive"


class InvalidTimestamps(_Category):
    CODE = "invalid_timestamps"
    REASON = "incorrect_timestamps"


# --- authorization ----------------------------------------------------------


class NotOwner(_Category):
    CODE = "not_owner"
    REASON = "caller_is_not_the_owner"


# --- lifecycle / admission --------------------------------------------------


class NotStarted(_Category):
    CODE = "not_started"
    REASON = "staking_not_started"


class PeriodNotOver(_Category):
    CODE = "period_not_over"
    REASON = "staking_period_not_over"


class StakingClosed(_Category):
    CODE = "staking_closed"
    REASON = "staking_period_over"


class Paused(_Category):
    CODE = "paused"
    REASON = "pool_is_paused"


# --- capacity ---------------------------------------------------------------


class OverCap(_Category):
    CODE = "over_cap"
    REASON = "over_cap_limit"


class CapBelowStaked(_Category):
    CODE = "cap_below_staked"
    REASON = "new_cap_less_than_staked"


# --- balances / funding -----------------------------------------------------


class NothingStaked(_Category):
    CODE = "nothing_staked"
    REASON = "cannot_withdraw_0"


class ZeroAmount(_Category):
    CODE = "zero_amount"
    REASON = "cannot_stake_0"


class AlreadyFunded(_Category):
    CODE = "already_funded"
    REASON = "reward_already_funded"


class Reentrancy(_Category):
    CODE = "reentrancy"
    REASON = "reentrant_call"


class NotPaused(_Category):
    CODE = "not_paused"
    REASON = "pool_is_not_paused"


class InvalidAmount(_Category):
    CODE = "invalid_amount"
    REASON = "amount_must_be_int"
