from pydantic import BaseModel

from .enums import Color, GameStatus
from .world import VictoryResult, WorldState


class GameSession(BaseModel):
    id: str
    world: WorldState
    status: GameStatus = GameStatus.PLAYING
    active_color: Color = Color.WHITE
    turn: int = 0
    winner: VictoryResult | None = None
    seed: int | None = None
