# src/lockstake/runtime/pool_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from lockstake.ledger.constants import DEFAULT_CAP, TOKEN

Json = Dict[str, Any]


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s.strip() if s.strip() else str(default)


def _as_balances(v: Any) -> Dict[str, Dict[str, int]]:
    """{asset: {account: amount}}; malformed entries are dropped."""
    out: Dict[str, Dict[str, int]] = {}
    if not isinstance(v, dict):
        return out
    for asset, rows in v.items():
        a = str(asset or "").strip()
        if not a or not isinstance(rows, dict):
            continue
        bucket: Dict[str, int] = {}
        for acct, amt in rows.items():
            k = str(acct or "").strip()
            n = _as_int(amt, -1)
            if k and n >= 0:
                bucket[k] = n
        out[a] = bucket
    return out


@dataclass(frozen=True)
class PoolConfig:
    pool_id: str
    mode: str  # "dev" | "testnet" | "prod"

    owner: str
    staking_asset: str
    reward_asset: str

    reward_amount: int
    cap: int

    # Absolute window (unix seconds). When start_time is 0 the window is placed
    # start_delay_s after boot and lasts duration_s.
    start_time: int
    stop_time: int
    start_delay_s: int
    duration_s: int

    api_host: str
    api_port: int
    log_level: str

    genesis_balances: Dict[str, Dict[str, int]] = field(default_factory=dict)


_ALLOWED_MODES = {"dev", "testnet", "prod"}


def validate_pool_config(cfg: PoolConfig) -> None:
    """Fail-fast validation for operator config.

    Engine construction re-checks the pool terms; this catches the mistakes
    that would otherwise surface only at boot.
    """
    if not cfg.pool_id.strip():
        raise ValueError("pool_id must be a non-empty string")

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {_ALLOWED_MODES}; got: {cfg.mode!r}")

    for name, v in (("owner", cfg.owner), ("staking_asset", cfg.staking_asset), ("reward_asset", cfg.reward_asset)):
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"{name} must be a non-empty string")

    if int(cfg.reward_amount) <= 0:
        raise ValueError(f"reward_amount must be > 0; got: {cfg.reward_amount}")

    if int(cfg.cap) < 0:
        raise ValueError(f"cap must be >= 0; got: {cfg.cap}")

    if int(cfg.start_time) > 0:
        if int(cfg.stop_time) <= int(cfg.start_time):
            raise ValueError(f"stop_time must be > start_time; got: {cfg.start_time}..{cfg.stop_time}")
    else:
        if int(cfg.start_delay_s) <= 0:
            raise ValueError(f"start_delay_s must be > 0; got: {cfg.start_delay_s}")
        if int(cfg.duration_s) <= 0:
            raise ValueError(f"duration_s must be > 0; got: {cfg.duration_s}")

    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")


def resolve_window(cfg: PoolConfig, now: int) -> Tuple[int, int]:
    if int(cfg.start_time) > 0:
        return int(cfg.start_time), int(cfg.stop_time)
    start = int(now) + int(cfg.start_delay_s)
    return start, start + int(cfg.duration_s)


def default_pool_config() -> PoolConfig:
    return PoolConfig(
        pool_id="lockstake-dev",
        mode="prod",
        owner="admin",
        staking_asset="ST",
        reward_asset="RT",
        reward_amount=100 * TOKEN,
        cap=DEFAULT_CAP,
        start_time=0,
        stop_time=0,
        start_delay_s=20,
        duration_s=3600,
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
        genesis_balances={},
    )


def pool_config_from_json(raw: Json) -> PoolConfig:
    if not isinstance(raw, dict):
        raise ValueError("pool config must be a JSON object")

    d = default_pool_config()
    cfg = PoolConfig(
        pool_id=_as_str(raw.get("pool_id"), d.pool_id),
        mode=_as_str(raw.get("mode"), d.mode).lower(),
        owner=_as_str(raw.get("owner"), d.owner),
        staking_asset=_as_str(raw.get("staking_asset"), d.staking_asset),
        reward_asset=_as_str(raw.get("reward_asset"), d.reward_asset),
        reward_amount=_as_int(raw.get("reward_amount"), d.reward_amount),
        cap=_as_int(raw.get("cap"), d.cap),
        start_time=_as_int(raw.get("start_time"), d.start_time),
        stop_time=_as_int(raw.get("stop_time"), d.stop_time),
        start_delay_s=_as_int(raw.get("start_delay_s"), d.start_delay_s),
        duration_s=_as_int(raw.get("duration_s"), d.duration_s),
        api_host=_as_str(raw.get("api_host"), d.api_host),
        api_port=_as_int(raw.get("api_port"), d.api_port),
        log_level=_as_str(raw.get("log_level"), d.log_level).upper(),
        genesis_balances=_as_balances(raw.get("genesis_balances")),
    )
    validate_pool_config(cfg)
    return cfg


def read_pool_config_file(path: str) -> PoolConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    return pool_config_from_json(raw)


def load_pool_config(*, config_path: Optional[str] = None) -> PoolConfig:
    p = config_path or os.environ.get("LOCKSTAKE_POOL_CONFIG_PATH")
    if p:
        return read_pool_config_file(p)

    cfg = default_pool_config()
    validate_pool_config(cfg)
    return cfg
