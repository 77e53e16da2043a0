from __future__ import annotations

"""JSONL records for engine operations.

One line per operation that reached commit (plus one at deployment). A record
is stamped with the engine clock rather than wall time, names the pool's
custody account, and lists the notifications the operation committed by
sequence number, so log lines join against `GET /v1/events?since=`.
"""

import json
import logging
from typing import Any, Dict, Iterable, List

from lockstake.runtime.events import Event

Json = Dict[str, Any]


def _notifications(committed: Iterable[Event]) -> List[Json]:
    return [{"seq": int(e.seq), "name": e.name} for e in committed]


def operation_record(op: str, *, pool: str, now: int, committed: Iterable[Event] = (), **fields: Any) -> Json:
    rec: Json = {
        "event": str(op),
        "pool": str(pool),
        "now": int(now),
        "notifications": _notifications(committed),
    }
    rec.update(fields)
    return rec


def log_operation(
    logger: logging.Logger,
    op: str,
    *,
    pool: str,
    now: int,
    committed: Iterable[Event] = (),
    **fields: Any,
) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    rec = operation_record(op, pool=pool, now=now, committed=committed, **fields)
    # amounts are exact ints; anything else (enums, repr-only objects) goes through str()
    logger.info(json.dumps(rec, sort_keys=True, separators=(",", ":"), default=str))
