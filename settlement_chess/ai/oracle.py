from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx
from pydantic import BaseModel

from ..config import ADVISOR_TIMEOUT, AI_USER_AGENT
from .chess_providers import (
    Score,
    best_move_from_cloud_eval,
    chessdb_best_uci,
    chessdb_score,
    lichess_cloud_eval,
)

logger = logging.getLogger(__name__)


class Advice(BaseModel):
    move: str
    score: Score | None = None
    source: str
    # the descriptor this advice answers; compare before applying
    position: str
    depth: int | None = None

    def is_stale(self, current_position: str | None) -> bool:
        return current_position != self.position


class AdvisoryOracle(Protocol):
    async def best_move(self, position: str, depth: int) -> Advice | None: ...

    async def evaluate(self, position: str) -> Score | None: ...


class HostedOracle:
    """Best-move/evaluation lookups against hosted engines.

    Strategy: Lichess cloud eval -> ChessDB. Timeouts and HTTP failures give
    None so a turn never waits on the advisor. Cancellation is not swallowed.
    """

    def __init__(
        self,
        timeout: float = ADVISOR_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str = AI_USER_AGENT,
    ):
        self.timeout = timeout
        self._transport = transport
        self._headers = {"User-Agent": user_agent}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers, transport=self._transport
        )

    async def _best_move(self, position: str, depth: int) -> Advice | None:
        async with self._client() as client:
            found = await lichess_cloud_eval(client, position)
            if found:
                move, score = best_move_from_cloud_eval(found)
                if move:
                    if found["depth"] is not None and found["depth"] < depth:
                        logger.debug(
                            "cloud eval depth %s below requested %s",
                            found["depth"],
                            depth,
                        )
                    return Advice(
                        move=move,
                        score=score,
                        source="lichess-cloud-eval",
                        position=position,
                        depth=found["depth"],
                    )
            move = await chessdb_best_uci(client, position)
            if move:
                return Advice(move=move, source="chessdb", position=position)
        return None

    async def _evaluate(self, position: str) -> Score | None:
        async with self._client() as client:
            found = await lichess_cloud_eval(client, position)
            if found:
                _, score = best_move_from_cloud_eval(found)
                if score:
                    return score
            return await chessdb_score(client, position)

    async def best_move(self, position: str, depth: int) -> Advice | None:
        try:
            return await asyncio.wait_for(
                self._best_move(position, depth), self.timeout
            )
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
            logger.warning("advisor best_move unavailable: %s", e)
            return None

    async def evaluate(self, position: str) -> Score | None:
        try:
            return await asyncio.wait_for(self._evaluate(position), self.timeout)
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
            logger.warning("advisor evaluate unavailable: %s", e)
            return None


def request_best_move(
    oracle: AdvisoryOracle, position: str, depth: int
) -> asyncio.Task[Advice | None]:
    """Start a lookup in the background; cancel the task to abandon it."""
    return asyncio.create_task(oracle.best_move(position, depth))
