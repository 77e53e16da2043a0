from __future__ import annotations

import pytest

from lockstake.ledger.types import PoolState
from lockstake.runtime.access import AccessControl, allow_list, any_of, owner_only
from lockstake.runtime.errors import NotOwner, StakingError


def test_owner_only_default() -> None:
    st = PoolState(owner="admin", cap=0)
    ac = AccessControl()

    ac.require_owner(st, "admin")
    with pytest.raises(NotOwner) as e:
        ac.require_owner(st, "alice")
    assert e.value.code == "not_owner"
    with pytest.raises(NotOwner):
        ac.require_owner(st, "")


def test_injected_strategies() -> None:
    st = PoolState(owner="admin", cap=0)
    ops = AccessControl(allow_list(["ops1", " ops2 "]))

    ops.require_owner(st, "ops2")
    with pytest.raises(NotOwner):
        ops.require_owner(st, "admin")

    either = AccessControl(any_of(owner_only, allow_list(["ops1"])))
    either.require_owner(st, "admin")
    either.require_owner(st, "ops1")
    with pytest.raises(NotOwner):
        either.require_owner(st, "bob")


def test_transfer_ownership() -> None:
    st = PoolState(owner="admin", cap=0)
    ac = AccessControl()

    with pytest.raises(NotOwner):
        ac.transfer_ownership(st, "alice", "alice")
    with pytest.raises(StakingError) as e:
        ac.transfer_ownership(st, "admin", "  ")
    assert e.value.code == "invalid_owner"

    assert ac.transfer_ownership(st, "admin", "carol") == "admin"
    assert st.owner == "carol"
    with pytest.raises(NotOwner):
        ac.require_owner(st, "admin")
