from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import ADMIN, ALICE, REWARD, START, STOP
from lockstake.api.app import create_app
from lockstake.ledger.constants import TOKEN


def _client(engine) -> TestClient:
    return TestClient(create_app(engine=engine))


def test_health_without_engine(monkeypatch):
    app = create_app(boot_runtime=False)
    c = TestClient(app)

    r = c.get("/v1/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "ready": False}

    r = c.get("/v1/pool")
    assert r.status_code == 500
    assert r.json()["error"]["code"] == "not_ready"


def test_create_app_boots_engine(monkeypatch, engine):
    monkeypatch.setattr("lockstake.api.app.build_engine", lambda: engine)
    c = TestClient(create_app())

    r = c.get("/v1/pool")
    assert r.status_code == 200
    pool = r.json()["pool"]
    assert pool["phase"] == "before"
    assert pool["owner"] == ADMIN
    assert pool["terms"]["start_time"] == START
    assert pool["funded"] is False


def test_fund_stake_exit_flow(engine, clock, staking_token):
    c = _client(engine)

    r = c.post("/v1/assets/RT/approve", json={"owner": ADMIN, "amount": REWARD})
    assert r.status_code == 200
    assert r.json()["spender"] == engine.pool_account
    assert r.json()["allowance"] == REWARD

    r = c.post("/v1/fund", json={"caller": ADMIN})
    assert r.status_code == 200
    assert r.json()["reward_rate"] == REWARD // 3600

    staking_token.transfer(ADMIN, ALICE, 10 * TOKEN)
    c.post("/v1/assets/ST/approve", json={"owner": ALICE, "amount": 10 * TOKEN})

    r = c.post("/v1/stake", json={"caller": ALICE, "amount": TOKEN})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "not_started"

    clock.set(START)
    r = c.post("/v1/stake", json={"caller": ALICE, "amount": 10 * TOKEN})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "account": ALICE, "balance": 10 * TOKEN}

    clock.set(START + 1800)
    r = c.post("/v1/exit", json={"caller": ALICE})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "period_not_over"

    clock.set(STOP)
    earned = c.get(f"/v1/accounts/{ALICE}/earned").json()["earned"]
    assert 99 * TOKEN < earned <= REWARD

    r = c.post("/v1/exit", json={"caller": ALICE})
    assert r.status_code == 200
    j = r.json()
    assert j["principal"] == 10 * TOKEN
    assert j["reward"] == earned

    r = c.get(f"/v1/assets/RT/balances/{ALICE}")
    assert r.json()["balance"] == earned

    acct = c.get(f"/v1/accounts/{ALICE}").json()["state"]
    assert acct["balance"] == 0
    assert acct["earned"] == 0

    names = [e["name"] for e in c.get("/v1/events").json()["events"]]
    assert names == ["RewardAdded", "Staked", "Withdrawn", "RewardPaid"]

    paid = c.get("/v1/events", params={"since": 2, "name": "RewardPaid"}).json()["events"]
    assert len(paid) == 1
    assert paid[0]["args"]["reward"] == earned


def test_owner_operations_are_gated(engine):
    c = _client(engine)

    r = c.post("/v1/cap", json={"caller": ALICE, "new_cap": 5 * TOKEN})
    assert r.status_code == 403
    assert r.json()["ok"] is False
    assert r.json()["error"]["code"] == "not_owner"

    r = c.post("/v1/cap", json={"caller": ADMIN, "new_cap": 5 * TOKEN})
    assert r.status_code == 200
    assert r.json()["new_cap"] == 5 * TOKEN

    assert c.post("/v1/pause", json={"caller": ADMIN}).json()["paused"] is True
    r = c.post("/v1/pause", json={"caller": ADMIN})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "paused"
    assert c.post("/v1/unpause", json={"caller": ADMIN}).json()["paused"] is False

    r = c.post("/v1/ownership", json={"caller": ADMIN, "new_owner": ALICE})
    assert r.json() == {"ok": True, "previous_owner": ADMIN, "owner": ALICE}
    assert c.post("/v1/pause", json={"caller": ADMIN}).status_code == 403


def test_ledger_errors_surface_as_400(engine):
    c = _client(engine)
    r = c.post("/v1/fund", json={"caller": ADMIN})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "insufficient_allowance"
    assert engine.funded is False


def test_request_validation(engine):
    c = _client(engine)
    assert c.post("/v1/cap", json={"caller": ADMIN, "new_cap": -1}).status_code == 422
    assert c.post("/v1/stake", json={"caller": "", "amount": 1}).status_code == 422
    r = c.get(f"/v1/assets/XYZ/balances/{ALICE}")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "unknown_asset"


def test_request_id_is_echoed(engine):
    c = _client(engine)
    r = c.get("/v1/health", headers={"x-request-id": "abc123"})
    assert r.headers["x-request-id"] == "abc123"


def test_metrics_disabled_by_default(monkeypatch, engine):
    monkeypatch.delenv("LOCKSTAKE_METRICS_ENABLED", raising=False)
    c = _client(engine)
    assert c.get("/v1/metrics").status_code == 404


def test_metrics_enabled(monkeypatch, engine):
    monkeypatch.setenv("LOCKSTAKE_METRICS_ENABLED", "1")
    c = _client(engine)
    c.post("/v1/pause", json={"caller": ADMIN})

    r = c.get("/v1/metrics")
    assert r.status_code == 200
    assert "lockstake_uptime_ms" in r.text
    assert "lockstake_pause_total" in r.text
