# src/lockstake/ledger/constants.py
from __future__ import annotations

"""Pool accounting constants.

- Token amounts are integer base units (18 decimals, 1 token = 10**18 units)
- The reward-per-unit accumulator is fixed point with the same 1e18 scale
- Clock values are unix seconds
"""

TOKEN_DECIMALS: int = 18
TOKEN: int = 10**TOKEN_DECIMALS

# Fixed-point scale of reward_per_unit_stored
SCALE: int = 10**18

# Default deployment cap: 10,000,000 tokens
DEFAULT_CAP: int = 10_000_000 * TOKEN

# Account id under which the engine holds custody on both token ledgers
POOL_ACCOUNT_ID: str = "POOL"
