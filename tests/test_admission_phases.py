from __future__ import annotations

import pytest

from lockstake.ledger.types import PoolState, PoolTerms
from lockstake.runtime.admission import AdmissionControl, Phase
from lockstake.runtime.errors import NotStarted, Paused, PeriodNotOver, StakingClosed

TERMS = PoolTerms(staking_asset="ST", reward_asset="RT", reward_amount=1, start_time=100, stop_time=200)


def test_phase_is_a_pure_function_of_time() -> None:
    ac = AdmissionControl(TERMS)
    assert ac.phase(0) is Phase.BEFORE
    assert ac.phase(99) is Phase.BEFORE
    assert ac.phase(100) is Phase.ACTIVE
    assert ac.phase(199) is Phase.ACTIVE
    assert ac.phase(200) is Phase.AFTER
    assert ac.phase(10**9) is Phase.AFTER
    # going back in time goes back in phase; nothing is latched
    assert ac.phase(150) is Phase.ACTIVE


def test_stake_gate() -> None:
    ac = AdmissionControl(TERMS)
    st = PoolState(owner="admin", cap=0)

    with pytest.raises(NotStarted):
        ac.require_can_stake(st, 99)
    ac.require_can_stake(st, 100)
    with pytest.raises(StakingClosed):
        ac.require_can_stake(st, 200)


def test_exit_gate() -> None:
    ac = AdmissionControl(TERMS)
    st = PoolState(owner="admin", cap=0)

    for t in (50, 100, 199):
        with pytest.raises(PeriodNotOver):
            ac.require_can_exit(st, t)
    ac.require_can_exit(st, 200)


def test_pause_blocks_everything() -> None:
    ac = AdmissionControl(TERMS)
    st = PoolState(owner="admin", cap=0, paused=True)

    with pytest.raises(Paused):
        ac.require_can_stake(st, 150)
    with pytest.raises(Paused):
        ac.require_can_exit(st, 250)
