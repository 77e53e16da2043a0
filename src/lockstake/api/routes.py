# src/lockstake/api/routes.py
from __future__ import annotations

from fastapi import APIRouter

from lockstake.api.routes_parts.accounts import router as accounts_router
from lockstake.api.routes_parts.ops import router as ops_router
from lockstake.api.routes_parts.pool import router as pool_router

public_router = APIRouter()

public_router.include_router(pool_router, prefix="/v1", tags=["pool"])
public_router.include_router(accounts_router, prefix="/v1", tags=["accounts"])
public_router.include_router(ops_router, prefix="/v1", tags=["ops"])
