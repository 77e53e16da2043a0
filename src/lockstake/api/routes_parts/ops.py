from __future__ import annotations

from fastapi import APIRouter, Request

from lockstake.api.routes_parts.common import Json, _engine
from lockstake.api.schemas import CallerRequest, SetCapRequest, StakeRequest, TransferOwnershipRequest

router = APIRouter()


@router.post("/fund")
def fund(body: CallerRequest, request: Request) -> Json:
    rate = _engine(request).fund(body.caller)
    return {"ok": True, "reward_rate": rate}


@router.post("/stake")
def stake(body: StakeRequest, request: Request) -> Json:
    balance = _engine(request).stake(body.caller, body.amount)
    return {"ok": True, "account": body.caller, "balance": balance}


@router.post("/exit")
def exit_(body: CallerRequest, request: Request) -> Json:
    out = _engine(request).exit(body.caller)
    return {"ok": True, **out}


@router.post("/cap")
def set_cap(body: SetCapRequest, request: Request) -> Json:
    old = _engine(request).set_cap(body.caller, body.new_cap)
    return {"ok": True, "old_cap": old, "new_cap": body.new_cap}


@router.post("/pause")
def pause(body: CallerRequest, request: Request) -> Json:
    _engine(request).pause(body.caller)
    return {"ok": True, "paused": True}


@router.post("/unpause")
def unpause(body: CallerRequest, request: Request) -> Json:
    _engine(request).unpause(body.caller)
    return {"ok": True, "paused": False}


@router.post("/ownership")
def transfer_ownership(body: TransferOwnershipRequest, request: Request) -> Json:
    eng = _engine(request)
    prev = eng.transfer_ownership(body.caller, body.new_owner)
    return {"ok": True, "previous_owner": prev, "owner": eng.owner}
