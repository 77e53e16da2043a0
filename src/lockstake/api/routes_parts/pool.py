from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request, Response

from lockstake.api.routes_parts.common import Json, _engine
from lockstake.runtime.metrics import format_prometheus, metrics_enabled

router = APIRouter()


@router.get("/health")
def health(request: Request) -> Json:
    eng = getattr(request.app.state, "engine", None)
    return {"ok": True, "ready": eng is not None}


@router.get("/pool")
def pool(request: Request) -> Json:
    return {"ok": True, "pool": _engine(request).snapshot()}


@router.get("/events")
def events(request: Request, since: int = 0, name: Optional[str] = None) -> Json:
    eng = _engine(request)
    return {"ok": True, "events": [e.to_json() for e in eng.events.since(since, name=name)]}


@router.get("/metrics")
def metrics() -> Response:
    """Prometheus-style metrics.

    Disabled by default. Enable with:
      LOCKSTAKE_METRICS_ENABLED=1
    """
    if not metrics_enabled():
        return Response(status_code=404, content="not_found\n", media_type="text/plain")
    return Response(content=format_prometheus(), media_type="text/plain")
