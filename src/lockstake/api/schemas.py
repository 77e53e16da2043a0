from __future__ import annotations

"""Pydantic request schemas for the pool API.

Amounts are integer base units (1 token = 10**18).
"""

from typing import Optional

from pydantic import BaseModel, Field


class CallerRequest(BaseModel):
    caller: str = Field(..., min_length=1, description="Account id of the caller")


class StakeRequest(CallerRequest):
    amount: int = Field(..., description="Amount of the staking asset, base units")


class SetCapRequest(CallerRequest):
    new_cap: int = Field(..., ge=0, description="New cap, base units")


class TransferOwnershipRequest(CallerRequest):
    new_owner: str = Field(..., min_length=1)


class ApproveRequest(BaseModel):
    owner: str = Field(..., min_length=1, description="Account granting the allowance")
    amount: int = Field(..., ge=0)
    spender: Optional[str] = Field(default=None, description="Defaults to the pool's custody account")
