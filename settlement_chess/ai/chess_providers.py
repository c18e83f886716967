from __future__ import annotations

import re
from typing import Any, Literal

import httpx
from pydantic import BaseModel

LICHESS_CLOUD_EVAL = "https://lichess.org/api/cloud-eval"
CHESSDB = "http://www.chessdb.cn/cdb.php"

_eval_re = re.compile(r"eval:\s*(-?\d+)")


class Score(BaseModel):
    kind: Literal["cp", "mate"]
    value: int


def _pv_score(pv: dict[str, Any]) -> Score | None:
    if pv.get("mate") is not None:
        return Score(kind="mate", value=int(pv["mate"]))
    if pv.get("cp") is not None:
        return Score(kind="cp", value=int(pv["cp"]))
    return None


async def lichess_cloud_eval(
    client: httpx.AsyncClient, fen: str, multipv: int = 1
) -> dict[str, Any] | None:
    # Cached Stockfish analysis from Lichess; 404 means the position is not cached
    r = await client.get(
        LICHESS_CLOUD_EVAL,
        params={"fen": fen, "multiPv": multipv},
        headers={"Accept": "application/json"},
    )
    if r.status_code == 404:
        return None
    r.raise_for_status()
    j = r.json()
    pvs = j.get("pvs") or []
    if not pvs:
        return None
    return {"depth": j.get("depth"), "pv": pvs[0]}


def best_move_from_cloud_eval(found: dict[str, Any]) -> tuple[str | None, Score | None]:
    pv = found["pv"]
    # pv["moves"] is a space-separated UCI line, first token is the best move.
    move = (pv.get("moves") or "").split(" ")[0] or None
    return move, _pv_score(pv)


async def chessdb_best_uci(client: httpx.AsyncClient, fen: str) -> str | None:
    # Free community engine/book
    r = await client.get(CHESSDB, params={"action": "querybest", "board": fen})
    if r.status_code != 200:
        return None
    # returns like: "move:e7e5 ponder:..."; we just need the move
    txt = (r.text or "").strip()
    if "move:" in txt:
        return txt.split("move:")[1].split()[0]
    return None


async def chessdb_score(client: httpx.AsyncClient, fen: str) -> Score | None:
    r = await client.get(CHESSDB, params={"action": "queryscore", "board": fen})
    if r.status_code != 200:
        return None
    m = _eval_re.search(r.text or "")
    return Score(kind="cp", value=int(m.group(1))) if m else None
