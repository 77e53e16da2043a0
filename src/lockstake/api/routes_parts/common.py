from __future__ import annotations

from typing import Any, Dict

from fastapi import Request

from lockstake.api.errors import ApiError
from lockstake.ledger.token import TokenLedger
from lockstake.runtime.engine import StakingEngine

Json = Dict[str, Any]


def _engine(request: Request) -> StakingEngine:
    eng = getattr(request.app.state, "engine", None)
    if eng is None:
        raise ApiError.internal("not_ready", "engine not attached to app.state", {})
    return eng


def _ledger(request: Request, asset: str) -> TokenLedger:
    eng = _engine(request)
    a = str(asset or "").strip()
    for tok in (eng.staking_token, eng.reward_token):
        if tok.asset_id == a:
            return tok
    raise ApiError.not_found("unknown_asset", "asset is not served by this pool", {"asset": a})
