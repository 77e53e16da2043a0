from __future__ import annotations

import os

import pytest

from lockstake import env
from lockstake.runtime import events as ev
from lockstake.runtime.clock import ManualClock
from lockstake.runtime.errors import Reentrancy
from lockstake.runtime.guard import CallGuard


def test_manual_clock_never_moves_backwards():
    c = ManualClock(100)
    assert c.advance(5) == 105
    c.set(105)
    with pytest.raises(ValueError):
        c.set(104)
    assert c.now() == 105


def test_guard_rejects_reentry_and_releases():
    g = CallGuard()
    with g.guarded("outer"):
        assert g.entered
        with pytest.raises(Reentrancy) as e:
            with g.guarded("inner"):
                pass
        assert e.value.details == {"op": "inner"}
        # reads may still run inside an operation
        with g.serialized():
            pass
    assert not g.entered

    with pytest.raises(RuntimeError):
        with g.guarded("boom"):
            raise RuntimeError("x")
    assert not g.entered


def test_event_log_sequencing():
    log = ev.EventLog()
    log.extend([ev.Event(name=ev.PAUSED, args={"account": "a"}, ts=1)])
    log.extend([ev.Event(name=ev.UNPAUSED, args={"account": "a"}, ts=2), ev.Event(name=ev.PAUSED, args={}, ts=2)])

    assert [e.seq for e in log.since(0)] == [1, 2, 3]
    assert [e.seq for e in log.since(1, name=ev.PAUSED)] == [3]
    assert log.last(ev.UNPAUSED).seq == 2
    assert log.last("Nope") is None
    assert log.since(0)[0].to_json() == {"seq": 1, "name": "Paused", "args": {"account": "a"}, "ts": 1}


def test_dotenv_loads_once_without_overriding(tmp_path, monkeypatch):
    p = tmp_path / ".env"
    p.write_text("LOCKSTAKE_TEST_A=from_file\nLOCKSTAKE_TEST_B=from_file\n", encoding="utf-8")
    monkeypatch.setattr(env, "_LOADED", False)
    monkeypatch.setenv("LOCKSTAKE_TEST_A", "from_env")
    monkeypatch.delenv("LOCKSTAKE_TEST_B", raising=False)
    monkeypatch.setenv("LOCKSTAKE_DOTENV_PATH", str(p))

    try:
        assert env.load_dotenv_if_present() is True
        assert os.environ["LOCKSTAKE_TEST_A"] == "from_env"
        assert os.environ["LOCKSTAKE_TEST_B"] == "from_file"
        assert env.load_dotenv_if_present() is False
    finally:
        os.environ.pop("LOCKSTAKE_TEST_B", None)


def test_dotenv_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(env, "_LOADED", False)
    assert env.load_dotenv_if_present(str(tmp_path / "nope.env")) is False
