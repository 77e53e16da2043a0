# src/lockstake/ledger/token.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol, Tuple, runtime_checkable

Json = Dict[str, Any]

MAX_UINT256: int = 2**256 - 1


@dataclass
class TokenError(RuntimeError):
    code: str
    reason: str
    details: Json

    def __str__(self) -> str:
        return f"{self.code}:{self.reason}:{self.details}"


@runtime_checkable
class TokenLedger(Protocol):
    """Fungible token ledger consumed by the staking engine.

    The engine never reaches into a ledger's storage; it only moves value through
    these calls. Any failure is raised and propagated to the engine's caller as-is.
    """

    asset_id: str

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...


@runtime_checkable
class Revertible(Protocol):
    """Ledger that can take part in an engine operation's rollback."""

    def snapshot(self) -> Any: ...

    def restore(self, snap: Any) -> None: ...


def _as_account(x: Any) -> str:
    s = x.strip() if isinstance(x, str) else ""
    if not s:
        raise TokenError("invalid_account", "account_must_be_non_empty_str", {"account": repr(x)})
    return s


def _as_amount(x: Any) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise TokenError("invalid_amount", "amount_must_be_int", {"amount": repr(x)})
    if x < 0:
        raise TokenError("invalid_amount", "amount_must_be_non_negative", {"amount": x})
    return int(x)


@dataclass
class InMemoryToken:
    """Reference token ledger with ERC20 allowance semantics.

    - transfer_from checks allowance before balance
    - an allowance of MAX_UINT256 is never decremented
    - every call validates fully before mutating, so a failed call has no effect
    """

    asset_id: str
    symbol: str = ""
    balances: Dict[str, int] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0

    def balance_of(self, account: str) -> int:
        return int(self.balances.get(str(account), 0))

    def allowance(self, owner: str, spender: str) -> int:
        return int(self.allowances.get((str(owner), str(spender)), 0))

    def snapshot(self) -> Tuple[Dict[str, int], Dict[Tuple[str, str], int], int]:
        return dict(self.balances), dict(self.allowances), int(self.total_supply)

    def restore(self, snap: Tuple[Dict[str, int], Dict[Tuple[str, str], int], int]) -> None:
        balances, allowances, supply = snap
        self.balances = dict(balances)
        self.allowances = dict(allowances)
        self.total_supply = int(supply)

    def mint(self, account: str, amount: int) -> None:
        acct = _as_account(account)
        amt = _as_amount(amount)
        self.balances[acct] = self.balance_of(acct) + amt
        self.total_supply += amt

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        o = _as_account(owner)
        s = _as_account(spender)
        self.allowances[(o, s)] = _as_amount(amount)
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        src = _as_account(sender)
        dst = _as_account(to)
        amt = _as_amount(amount)
        self._move(src, dst, amt)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        sp = _as_account(spender)
        src = _as_account(owner)
        dst = _as_account(to)
        amt = _as_amount(amount)

        allowed = self.allowance(src, sp)
        if allowed < amt:
            raise TokenError(
                "insufficient_allowance",
                "transfer_amount_exceeds_allowance",
                {"asset": self.asset_id, "owner": src, "spender": sp, "allowance": allowed, "amount": amt},
            )

        self._move(src, dst, amt)
        if allowed != MAX_UINT256:
            self.allowances[(src, sp)] = allowed - amt
        return True

    def _move(self, src: str, dst: str, amt: int) -> None:
        have = self.balance_of(src)
        if have < amt:
            raise TokenError(
                "insufficient_balance",
                "transfer_amount_exceeds_balance",
                {"asset": self.asset_id, "account": src, "balance": have, "amount": amt},
            )
        self.balances[src] = have - amt
        self.balances[dst] = self.balance_of(dst) + amt
