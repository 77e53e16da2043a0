# src/lockstake/runtime/engine_boot.py

from __future__ import annotations

from typing import Dict, Optional

from lockstake.ledger.token import InMemoryToken
from lockstake.runtime.clock import Clock, SystemClock
from lockstake.runtime.engine import StakingEngine
from lockstake.runtime.pool_config import PoolConfig, load_pool_config, resolve_window


def build_ledgers(cfg: PoolConfig) -> Dict[str, InMemoryToken]:
    """One in-memory ledger per distinct asset id, seeded with genesis balances.

    A pool whose reward asset equals its staking asset shares a single ledger.
    """
    ledgers: Dict[str, InMemoryToken] = {}
    for asset in (cfg.staking_asset, cfg.reward_asset, *cfg.genesis_balances.keys()):
        if asset not in ledgers:
            ledgers[asset] = InMemoryToken(asset_id=asset, symbol=asset)

    for asset, rows in cfg.genesis_balances.items():
        for account, amount in rows.items():
            ledgers[asset].mint(account, amount)
    return ledgers


def build_engine(
    cfg: Optional[PoolConfig] = None,
    *,
    clock: Optional[Clock] = None,
    ledgers: Optional[Dict[str, InMemoryToken]] = None,
) -> StakingEngine:
    """
    Build a StakingEngine from an explicit pool config or, if omitted,
    from LOCKSTAKE_POOL_CONFIG_PATH / defaults.

    The API calls build_engine() with no args in production.
    """
    c = cfg or load_pool_config()
    clk = clock or SystemClock()
    lg = ledgers if ledgers is not None else build_ledgers(c)
    start, stop = resolve_window(c, clk.now())

    return StakingEngine(
        staking_token=lg[c.staking_asset],
        reward_token=lg[c.reward_asset],
        reward_amount=c.reward_amount,
        start_time=start,
        stop_time=stop,
        cap=c.cap,
        owner=c.owner,
        clock=clk,
    )
