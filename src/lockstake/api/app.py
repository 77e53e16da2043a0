from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lockstake.api.errors import ApiError
from lockstake.api.routes import public_router
from lockstake.api.structured_logging import RequestLogMiddleware
from lockstake.ledger.token import TokenError
from lockstake.runtime.engine import StakingEngine
from lockstake.runtime.engine_boot import build_engine as _build_engine
from lockstake.runtime.errors import StakingError


def build_engine() -> StakingEngine:
    """Build the pool engine for API runtime.

    This wrapper exists so tests can monkeypatch `lockstake.api.app.build_engine`
    without reaching into runtime modules.
    """
    return _build_engine()


def _install_error_handlers(app: FastAPI) -> None:
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_json())

    async def _domain_error(request: Request, exc: Exception) -> JSONResponse:
        err = ApiError.from_domain(exc)
        return JSONResponse(status_code=err.status_code, content=err.to_json())

    app.add_exception_handler(ApiError, _api_error)
    app.add_exception_handler(StakingError, _domain_error)
    app.add_exception_handler(TokenError, _domain_error)


def create_app(*, engine: Optional[StakingEngine] = None, boot_runtime: bool = True) -> FastAPI:
    """Create the FastAPI application.

    engine:
      - explicit engine to serve (tests, embedding)
    boot_runtime:
      - True (default): build the engine from pool config when none is given
      - False: no engine; only /v1/health answers
    """
    mode = os.environ.get("LOCKSTAKE_MODE", "prod").strip().lower()

    # Disable docs in production.
    if mode == "prod":
        app = FastAPI(title="lockstake pool API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="lockstake pool API")

    if engine is None and boot_runtime:
        engine = build_engine()
    app.state.engine = engine

    app.add_middleware(RequestLogMiddleware)
    _install_error_handlers(app)
    app.include_router(public_router)

    return app
