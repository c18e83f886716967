from __future__ import annotations

from typing import Any
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import TypeAdapter, ValidationError

from . import storage
from .ai.fen import describe_position, square_to_coord
from .ai.oracle import AdvisoryOracle, HostedOracle, request_best_move
from .config import ADVISOR_DEPTH, NODE_COUNT, WORLD_HEIGHT, WORLD_WIDTH
from .engine.core import TurnController
from .engine.worldgen import create_world, setup_armies
from .logging_listeners import register_listeners
from .models.api import (
    ActionLogEntry,
    ActionLogResponse,
    AdviceRequest,
    AdviceResponse,
    ApplyActionRequest,
    ApplyActionResponse,
    CreateSessionRequest,
    ProductionsResponse,
    SessionView,
    VictoryResponse,
)
from .models.session import GameSession
from .storage import SessionStore

app = FastAPI(title="Settlement Chess")

_oracle: AdvisoryOracle = HostedOracle()


def get_store() -> SessionStore:
    return storage.store


def get_oracle() -> AdvisoryOracle:
    return _oracle


async def _load(store: SessionStore, sid: str) -> GameSession:
    sess = await store.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    return sess


def _view(sess: GameSession) -> SessionView:
    return SessionView(id=sess.id, session=sess)


@app.get("/health")
def health() -> dict[str, Any]:
    kind = "redis" if isinstance(storage.store, storage.RedisSessionStore) else "memory"
    return {"ok": True, "storage": kind}


@app.get("/sessions", response_model=list[SessionView])
async def list_sessions(store: SessionStore = Depends(get_store)):
    return [_view(s) for s in (await store.all()).values()]


@app.post("/sessions", response_model=SessionView)
async def create_session(
    req: CreateSessionRequest | None = None, store: SessionStore = Depends(get_store)
):
    req = req or CreateSessionRequest()
    world = create_world(
        width=req.width or WORLD_WIDTH,
        height=req.height or WORLD_HEIGHT,
        seed=req.seed,
        node_count=NODE_COUNT if req.node_count is None else req.node_count,
    )
    setup_armies(world)
    sess = GameSession(id=str(uuid4()), world=world, seed=req.seed)
    await store.set(sess)
    return _view(sess)


@app.get("/sessions/{sid}", response_model=SessionView)
async def get_session(sid: str, store: SessionStore = Depends(get_store)):
    return _view(await _load(store, sid))


@app.delete("/sessions/{sid}")
async def delete_session(sid: str, store: SessionStore = Depends(get_store)):
    await _load(store, sid)
    await store.delete(sid)
    return {"ok": True}


@app.post("/sessions/{sid}/action", response_model=ApplyActionResponse)
async def apply_action(
    sid: str, req: ApplyActionRequest, store: SessionStore = Depends(get_store)
):
    sess = await _load(store, sid)
    ctl = TurnController(sess)
    recorder = register_listeners(ctl.channel)
    try:
        ev, result = ctl.process_action(req.action)
    finally:
        ctl.close()
        await recorder.flush(store, sid)
    if not ev.legal:
        raise HTTPException(400, ev.explanation)
    await store.set(ctl.session)
    return ApplyActionResponse(
        applied=True,
        explanation=ev.explanation,
        result=result,
        session=_view(ctl.session),
    )


@app.get("/sessions/{sid}/productions", response_model=ProductionsResponse)
async def list_productions(
    sid: str,
    army_id: str,
    x: int,
    y: int,
    store: SessionStore = Depends(get_store),
):
    ctl = TurnController(await _load(store, sid))
    try:
        return ProductionsResponse(productions=ctl.available_productions(army_id, (x, y)))
    finally:
        ctl.close()


@app.get("/sessions/{sid}/victory", response_model=VictoryResponse)
async def victory(sid: str, store: SessionStore = Depends(get_store)):
    ctl = TurnController(await _load(store, sid))
    try:
        return VictoryResponse(victory=ctl.check_victory_conditions())
    finally:
        ctl.close()


@app.get("/sessions/{sid}/log", response_model=ActionLogResponse)
async def get_action_log(
    sid: str,
    limit: int = Query(50, ge=1, le=1000),
    store: SessionStore = Depends(get_store),
):
    await _load(store, sid)
    raw = await store.list_log(sid, limit)
    entries: list[ActionLogEntry] = []
    ta = TypeAdapter(ActionLogEntry)
    for s in raw:
        try:
            entries.append(ta.validate_json(s))
        except ValidationError:
            # Skip malformed entries rather than failing the whole response
            continue
    return ActionLogResponse(entries=entries)


@app.post("/sessions/{sid}/advice", response_model=AdviceResponse)
async def advice(
    sid: str,
    req: AdviceRequest,
    store: SessionStore = Depends(get_store),
    oracle: AdvisoryOracle = Depends(get_oracle),
):
    sess = await _load(store, sid)
    fen = describe_position(sess.world, req.army_id, sess.active_color, sess.turn // 2 + 1)
    if fen is None:
        raise HTTPException(404, "army not found")
    suggestion = await request_best_move(oracle, fen, req.depth or ADVISOR_DEPTH)
    if suggestion is None:
        raise HTTPException(502, "no engine move available")
    move = suggestion.move
    return AdviceResponse(
        **suggestion.model_dump(),
        origin=square_to_coord(sess.world, req.army_id, move[:2]),
        target=square_to_coord(sess.world, req.army_id, move[2:4]),
    )
