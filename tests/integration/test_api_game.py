from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from settlement_chess.ai.chess_providers import Score
from settlement_chess.ai.oracle import Advice
from settlement_chess.app import app, get_oracle, get_store
from settlement_chess.engine.production import DEFAULT_CONVERSIONS
from settlement_chess.models.enums import NodeType
from settlement_chess.storage import MemorySessionStore


class _FakeOracle:
    def __init__(self, move: str | None = "e2e4"):
        self.move = move
        self.calls: list[tuple[str, int]] = []

    async def best_move(self, position: str, depth: int) -> Advice | None:
        self.calls.append((position, depth))
        if self.move is None:
            return None
        return Advice(move=self.move, source="fake", position=position, depth=depth)

    async def evaluate(self, position: str) -> Score | None:
        return None


@pytest.fixture()
def oracle() -> _FakeOracle:
    return _FakeOracle()


@pytest.fixture()
def client(oracle: _FakeOracle) -> Iterator[TestClient]:
    store = MemorySessionStore()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_oracle] = lambda: oracle
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _create(client: TestClient, **body) -> dict:
    r = client.post("/sessions", json={"width": 10, "height": 10, "seed": 1, "node_count": 0, **body})
    assert r.status_code == 200, r.text
    return r.json()


def _act(client: TestClient, sid: str, action: dict):
    return client.post(f"/sessions/{sid}/action", json={"action": action})


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200 and r.json()["ok"]


def test_create_and_fetch_session(client: TestClient):
    view = _create(client)
    sess = view["session"]
    assert sess["status"] == "playing" and sess["active_color"] == "W"
    assert set(sess["world"]["armies"]) == {"army1", "army2"}
    assert sess["world"]["map"]["width"] == 10
    r = client.get(f"/sessions/{view['id']}")
    assert r.json()["id"] == view["id"]
    assert client.get("/sessions/missing").status_code == 404
    assert [v["id"] for v in client.get("/sessions").json()] == [view["id"]]


def test_same_seed_same_map(client: TestClient):
    a = _create(client, node_count=6, seed=42)["session"]["world"]["production_nodes"]
    b = _create(client, node_count=6, seed=42)["session"]["world"]["production_nodes"]
    assert a == b and len(a) == 6


def test_claim_then_turn_flow(client: TestClient):
    sid = _create(client)["id"]
    r = _act(client, sid, {"kind": "claim_territory", "army_id": "army1", "at": [5, 5]})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["applied"] and body["result"] is True
    world = body["session"]["session"]["world"]
    assert world["claims"] == [{"pos": [5, 5], "owner": "W"}]

    # black cannot act on white's turn
    r = _act(client, sid, {"kind": "deploy_army", "army_id": "army2", "at": [2, 2]})
    assert r.status_code == 400 and "turn" in r.json()["detail"]

    r = _act(client, sid, {"kind": "end_turn"})
    assert r.json()["session"]["session"]["active_color"] == "B"

    r = _act(client, sid, {"kind": "claim_territory", "army_id": "army2", "at": [5, 5]})
    assert r.status_code == 400

    r = _act(client, sid, {"kind": "deploy_army", "army_id": "army2", "at": [2, 2]})
    assert r.status_code == 200
    assert len(r.json()["result"]) == 8


def test_productions_endpoint(client: TestClient):
    sid = _create(client, node_count=30, seed=5)["id"]
    sess = client.get(f"/sessions/{sid}").json()["session"]
    node = next(n for n in sess["world"]["production_nodes"] if n["type"] != "factory")
    rules = DEFAULT_CONVERSIONS[NodeType(node["type"])]
    x, y = node["pos"]
    r = client.get(f"/sessions/{sid}/productions", params={"army_id": "army1", "x": x, "y": y})
    assert [p["output_type"] for p in r.json()["productions"]] == [t.value for t in rules]

    output, rule = next(iter(rules.items()))
    r = _act(client, sid, {"kind": "produce", "army_id": "army1", "at": [x, y], "output": output.value})
    assert r.status_code == 200, r.text
    roster = r.json()["session"]["session"]["world"]["armies"]["army1"]["pieces"]
    assert [p["type"] for p in roster].count("P") == 3 - rule.required_count
    assert roster[-1]["type"] == output.value

    r = client.get(f"/sessions/{sid}/productions", params={"army_id": "army2", "x": x, "y": y})
    assert r.status_code == 200 and len(r.json()["productions"]) == len(rules)


def test_action_log_records_applied_and_illegal(client: TestClient):
    sid = _create(client)["id"]
    _act(client, sid, {"kind": "convert_peasants", "army_id": "army1", "count": 2})
    _act(client, sid, {"kind": "select_army", "army_id": "army2"})
    entries = client.get(f"/sessions/{sid}/log").json()["entries"]
    assert [(e["action"]["kind"], e["result"]) for e in entries] == [
        ("convert_peasants", "applied"),
        ("select_army", "illegal"),
    ]
    assert entries[0]["message"] == "1 converted"


def test_victory_endpoint(client: TestClient):
    sid = _create(client)["id"]
    assert client.get(f"/sessions/{sid}/victory").json() == {"victory": None}


def test_advice_uses_position_descriptor(client: TestClient, oracle: _FakeOracle):
    sid = _create(client)["id"]
    _act(client, sid, {"kind": "deploy_army", "army_id": "army1", "at": [4, 4]})
    r = client.post(f"/sessions/{sid}/advice", json={"army_id": "army1", "depth": 12})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["move"] == "e2e4"
    # the 8x8 window around (4, 4) on a 10x10 world starts at (1, 1)
    assert body["origin"] == [5, 7] and body["target"] == [5, 5]
    position, depth = oracle.calls[0]
    assert depth == 12 and position.split()[1] == "w"
    assert client.post(f"/sessions/{sid}/advice", json={"army_id": "nope"}).status_code == 404


def test_advice_unavailable(client: TestClient, oracle: _FakeOracle):
    oracle.move = None
    sid = _create(client)["id"]
    r = client.post(f"/sessions/{sid}/advice", json={"army_id": "army1"})
    assert r.status_code == 502


def test_delete_session(client: TestClient):
    sid = _create(client)["id"]
    assert client.delete(f"/sessions/{sid}").json() == {"ok": True}
    assert client.get(f"/sessions/{sid}").status_code == 404
