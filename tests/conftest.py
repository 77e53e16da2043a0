from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure local "src/" takes precedence over any globally-installed "lockstake" package.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)

from lockstake.ledger.constants import TOKEN  # noqa: E402
from lockstake.ledger.token import MAX_UINT256, InMemoryToken  # noqa: E402
from lockstake.runtime.clock import ManualClock  # noqa: E402
from lockstake.runtime.engine import StakingEngine  # noqa: E402

T0 = 1_700_000_000
START = T0 + 20
STOP = START + 3600
REWARD = 100 * TOKEN
CAP = 10_000_000 * TOKEN

ADMIN = "admin"
ALICE = "alice"
BOB = "bob"


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def staking_token() -> InMemoryToken:
    tok = InMemoryToken(asset_id="ST", symbol="ST")
    tok.mint(ADMIN, 100_000_000 * TOKEN)
    return tok


@pytest.fixture
def reward_token() -> InMemoryToken:
    tok = InMemoryToken(asset_id="RT", symbol="RT")
    tok.mint(ADMIN, 1_000_000 * TOKEN)
    return tok


@pytest.fixture
def engine(clock, staking_token, reward_token) -> StakingEngine:
    return StakingEngine(
        staking_token=staking_token,
        reward_token=reward_token,
        reward_amount=REWARD,
        start_time=START,
        stop_time=STOP,
        cap=CAP,
        owner=ADMIN,
        clock=clock,
    )


@pytest.fixture
def live_engine(engine, clock, staking_token, reward_token) -> StakingEngine:
    """Funded pool at start_time; alice and bob hold 10M ST each with max approval."""
    reward_token.approve(ADMIN, engine.pool_account, REWARD)
    engine.fund(ADMIN)
    clock.set(START)

    for who in (ALICE, BOB):
        staking_token.transfer(ADMIN, who, 10_000_000 * TOKEN)
    for who in (ADMIN, ALICE, BOB):
        staking_token.approve(who, engine.pool_account, MAX_UINT256)
    return engine
