from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from lockstake.ledger.types import PoolState
from lockstake.runtime.errors import NotOwner, StakingError

# (state, caller) -> allowed
Authorizer = Callable[[PoolState, str], bool]


def owner_only(state: PoolState, caller: str) -> bool:
    return bool(caller) and caller == state.owner


def allow_list(accounts: Iterable[str]) -> Authorizer:
    allowed = frozenset(str(a).strip() for a in accounts if str(a).strip())

    def _check(state: PoolState, caller: str) -> bool:
        return caller in allowed

    return _check


def any_of(*authorizers: Authorizer) -> Authorizer:
    def _check(state: PoolState, caller: str) -> bool:
        return any(a(state, caller) for a in authorizers)

    return _check


@dataclass(frozen=True, slots=True)
class AccessControl:
    """Capability check for administrative operations (fund, cap, pause)."""

    authorizer: Authorizer = field(default=owner_only)

    def require_owner(self, state: PoolState, caller: str) -> None:
        if not self.authorizer(state, str(caller or "")):
            raise NotOwner(details={"caller": caller})

    def transfer_ownership(self, state: PoolState, caller: str, new_owner: str) -> str:
        """Hand the owner role to `new_owner`; returns the previous owner."""
        self.require_owner(state, caller)
        nxt = str(new_owner or "").strip()
        if not nxt:
            raise StakingError("invalid_owner", "new_owner_must_be_non_empty", {"new_owner": new_owner})
        prev = state.owner
        state.owner = nxt
        return prev
