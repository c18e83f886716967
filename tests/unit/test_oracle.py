import asyncio

import httpx
import pytest

from settlement_chess.ai.chess_providers import Score
from settlement_chess.ai.oracle import Advice, HostedOracle, request_best_move

FEN = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"


def _oracle(handler) -> HostedOracle:
    return HostedOracle(timeout=2, transport=httpx.MockTransport(handler))


def test_best_move_from_cloud_eval():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "lichess.org"
        assert request.url.params["fen"] == FEN
        return httpx.Response(
            200, json={"depth": 30, "pvs": [{"moves": "a1a7 e8f8", "cp": 950}]}
        )

    advice = asyncio.run(_oracle(handler).best_move(FEN, 15))
    assert advice == Advice(
        move="a1a7",
        score=Score(kind="cp", value=950),
        source="lichess-cloud-eval",
        position=FEN,
        depth=30,
    )


def test_best_move_falls_back_to_chessdb():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "lichess.org":
            return httpx.Response(404, json={"error": "Not found"})
        assert request.url.params["action"] == "querybest"
        return httpx.Response(200, text="move:e1d2 ponder:e8d7")

    advice = asyncio.run(_oracle(handler).best_move(FEN, 15))
    assert advice.move == "e1d2" and advice.source == "chessdb"
    assert advice.score is None


def test_unavailable_advisor_gives_no_suggestion():
    def server_error(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    assert asyncio.run(_oracle(server_error).best_move(FEN, 10)) is None
    assert asyncio.run(_oracle(unreachable).best_move(FEN, 10)) is None
    assert asyncio.run(_oracle(unreachable).evaluate(FEN)) is None


def test_evaluate_reads_mate_and_chessdb_scores():
    def mate(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"depth": 40, "pvs": [{"moves": "a1a8", "mate": 1}]})

    assert asyncio.run(_oracle(mate).evaluate(FEN)) == Score(kind="mate", value=1)

    def fallback(request: httpx.Request) -> httpx.Response:
        if request.url.host == "lichess.org":
            return httpx.Response(404)
        return httpx.Response(200, text="eval:-35")

    assert asyncio.run(_oracle(fallback).evaluate(FEN)) == Score(kind="cp", value=-35)


class _SlowOracle:
    async def best_move(self, position: str, depth: int) -> Advice | None:
        await asyncio.sleep(10)
        return Advice(move="a1a2", source="slow", position=position)

    async def evaluate(self, position: str) -> Score | None:
        return None


def test_request_can_be_cancelled():
    async def run():
        task = request_best_move(_SlowOracle(), FEN, 5)
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return task.cancelled()

    assert asyncio.run(run())


def test_timeout_degrades_to_none():
    async def slow_handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    oracle = HostedOracle(timeout=0.05, transport=httpx.MockTransport(slow_handler))
    assert asyncio.run(oracle.best_move(FEN, 5)) is None


def test_stale_advice_is_detectable():
    advice = Advice(move="a1a7", source="x", position=FEN)
    assert not advice.is_stale(FEN)
    assert advice.is_stale("8/8/8/8/8/8/8/8 b - - 0 1")
