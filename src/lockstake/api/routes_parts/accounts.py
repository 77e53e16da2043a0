from __future__ import annotations

from fastapi import APIRouter, Request

from lockstake.api.routes_parts.common import Json, _engine, _ledger
from lockstake.api.schemas import ApproveRequest

router = APIRouter()


@router.get("/accounts/{account}")
def account_get(account: str, request: Request) -> Json:
    return {"ok": True, "state": _engine(request).account_view(account)}


@router.get("/accounts/{account}/earned")
def account_earned(account: str, request: Request) -> Json:
    return {"ok": True, "account": account, "earned": _engine(request).earned(account)}


@router.get("/assets/{asset}/balances/{account}")
def asset_balance(asset: str, account: str, request: Request) -> Json:
    tok = _ledger(request, asset)
    return {"ok": True, "asset": tok.asset_id, "account": account, "balance": tok.balance_of(account)}


@router.post("/assets/{asset}/approve")
def asset_approve(asset: str, body: ApproveRequest, request: Request) -> Json:
    """Grant an allowance on one of the pool's ledgers (the pool account by default)."""
    tok = _ledger(request, asset)
    spender = body.spender or _engine(request).pool_account
    tok.approve(body.owner, spender, body.amount)
    return {
        "ok": True,
        "asset": tok.asset_id,
        "owner": body.owner,
        "spender": spender,
        "allowance": tok.allowance(body.owner, spender),
    }
