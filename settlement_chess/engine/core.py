from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config import TERRITORY_TO_WIN
from ..events import EventChannel
from ..models.api import (
    Action,
    AvailableProduction,
    ClaimTerritoryAction,
    ConvertPeasantsAction,
    DeployArmyAction,
    EndTurnAction,
    EvaluateResponse,
    ProduceAction,
    SelectArmyAction,
)
from ..models.enums import Color, Coord, GameStatus, PieceType
from .actions.claim import ClaimTerritoryHandler
from .actions.convert import ConvertPeasantsHandler
from .actions.deploy import DeployArmyHandler
from .actions.end_turn import EndTurnHandler
from .actions.produce import ProduceHandler
from .actions.select_army import SelectArmyHandler
from .logging.logger import log_error, log_illegal
from .production import ProductionSystem
from .systems import victory

if TYPE_CHECKING:
    from ..models.army import Army
    from ..models.map import Tile
    from ..models.pieces import Placement
    from ..models.session import GameSession
    from ..models.world import VictoryResult, WorldState
    from .actions.base import Registry

default_handlers: Registry = {
    SelectArmyHandler.action_type: SelectArmyHandler(),
    ClaimTerritoryHandler.action_type: ClaimTerritoryHandler(),
    DeployArmyHandler.action_type: DeployArmyHandler(),
    ProduceHandler.action_type: ProduceHandler(),
    ConvertPeasantsHandler.action_type: ConvertPeasantsHandler(),
    EndTurnHandler.action_type: EndTurnHandler(),
}


class TurnController:
    """Single entry point for mutating a game session.

    Every action goes through evaluate -> apply; anything illegal is logged
    and leaves the session untouched.
    """

    def __init__(
        self,
        session: GameSession,
        handlers: Registry | None = None,
        production: ProductionSystem | None = None,
        channel: EventChannel | None = None,
        territory_to_win: int = TERRITORY_TO_WIN,
    ):
        self.session = session
        self.handlers: Registry = handlers or default_handlers
        self.production = production or ProductionSystem()
        self.channel = channel or EventChannel()
        self.territory_to_win = territory_to_win

    @property
    def world(self) -> WorldState:
        return self.session.world

    @property
    def active_color(self) -> Color:
        return self.session.active_color

    @property
    def finished(self) -> bool:
        return self.session.status == GameStatus.FINISHED

    # ----- dispatch -----

    def evaluate(self, action: Action) -> EvaluateResponse:
        h = self.handlers.get(type(action))
        if not h:
            return EvaluateResponse(legal=False, explanation="unknown action")
        ok, why = h.evaluate(self, action)
        return EvaluateResponse(legal=ok, explanation=why)

    def process_action(self, action: Action) -> tuple[EvaluateResponse, Any]:
        ev = self.evaluate(action)
        if not ev.legal:
            log_illegal(self.channel, self.session, action, ev.explanation)
            return ev, None
        try:
            return ev, self.handlers[type(action)].apply(self, action)
        except Exception as e:
            log_error(self.channel, self.session, action, e)
            raise

    # ----- action API -----

    def select_army(self, army_id: str) -> bool:
        ev, _ = self.process_action(SelectArmyAction(army_id=army_id))
        return ev.legal

    def claim_territory(self, army_id: str, at: Coord) -> bool:
        _, res = self.process_action(ClaimTerritoryAction(army_id=army_id, at=at))
        return bool(res)

    def deploy_army(self, army_id: str, at: Coord) -> list[Placement]:
        _, res = self.process_action(DeployArmyAction(army_id=army_id, at=at))
        return res or []

    def produce_at_node(self, army_id: str, at: Coord, output: PieceType) -> bool:
        _, res = self.process_action(
            ProduceAction(army_id=army_id, at=at, output=output)
        )
        return bool(res)

    def convert_peasants_to_pawns(self, army_id: str, count: int) -> int:
        _, res = self.process_action(
            ConvertPeasantsAction(army_id=army_id, count=count)
        )
        return res or 0

    def end_turn(self) -> VictoryResult | None:
        _, res = self.process_action(EndTurnAction())
        return res

    # ----- query API -----

    def get_army(self, army_id: str) -> Army | None:
        return self.world.get_army(army_id)

    def get_armies_by_player(self, color: Color | str) -> list[Army]:
        return self.world.get_armies_by_player(color)

    def get_all_armies(self) -> list[Army]:
        return self.world.get_all_armies()

    def tile(self, at: Coord) -> Tile:
        return self.world.tile(at)

    def is_fogged(self, at: Coord) -> bool:
        return self.world.is_fogged(at)

    def check_victory_conditions(self) -> VictoryResult | None:
        return victory.check(self)

    def available_productions(
        self, army_id: str, at: Coord
    ) -> list[AvailableProduction]:
        return self.production.get_available_productions(self.world, at, army_id)

    def close(self) -> None:
        self.channel.close()
