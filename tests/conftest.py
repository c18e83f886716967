from __future__ import annotations

from collections.abc import Iterator

import pytest

from settlement_chess.engine.core import TurnController
from settlement_chess.engine.worldgen import setup_armies
from settlement_chess.models.session import GameSession
from settlement_chess.models.world import WorldState


@pytest.fixture()
def world() -> WorldState:
    return WorldState.empty(10, 10)


@pytest.fixture()
def game() -> Iterator[TurnController]:
    """Two starting armies (army1/W, army2/B) on an empty, node-less 10x10 world."""
    w = WorldState.empty(10, 10)
    setup_armies(w)
    ctl = TurnController(GameSession(id="test", world=w))
    yield ctl
    ctl.close()
