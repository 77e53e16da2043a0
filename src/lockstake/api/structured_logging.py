# src/lockstake/api/structured_logging.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """One JSONL line on `logger`; fields left as None are omitted."""
    payload: Dict[str, Any] = {"ts_ms": int(time.time() * 1000), "event": str(event)}
    payload.update({k: v for k, v in fields.items() if v is not None})
    logger.info(json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str))


def configure_structured_logging(level_name: Optional[str] = None) -> None:
    """Configure stdlib logging for JSONL output (stdout).

    - Level from the argument, else LOCKSTAKE_LOG_LEVEL (default INFO).
    - Safe to call multiple times.
    """
    name = (level_name or os.environ.get("LOCKSTAKE_LOG_LEVEL") or "INFO").strip().upper()
    level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    if getattr(root, "_lockstake_configured", False):
        root.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.handlers = [handler]
    root.setLevel(level)
    setattr(root, "_lockstake_configured", True)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Structured request logging middleware.

    LOCKSTAKE_LOG_REQUESTS=0 disables it (default on).
    """

    def __init__(self, app) -> None:
        super().__init__(app)
        raw = (os.environ.get("LOCKSTAKE_LOG_REQUESTS") or "1").strip().lower()
        self._enabled = raw not in {"0", "false", "no", "n", "off"}
        self._logger = logging.getLogger("lockstake.http")

    async def dispatch(self, request: Request, call_next):
        if not self._enabled:
            return await call_next(request)

        started = time.monotonic()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex

        status = 500
        err: Optional[str] = None
        response: Optional[Response] = None

        try:
            response = await call_next(request)
            status = int(getattr(response, "status_code", 200) or 200)
            response.headers.setdefault("x-request-id", request_id)
            return response
        except Exception as e:
            err = str(e)
            raise
        finally:
            log_event(
                self._logger,
                "http_request",
                request_id=request_id,
                method=request.method,
                path=str(request.url.path or ""),
                status=status,
                duration_ms=int((time.monotonic() - started) * 1000),
                error=err,
            )
