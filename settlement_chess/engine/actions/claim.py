from __future__ import annotations

from ...events import TerritoryClaimed
from ...models.api import ClaimTerritoryAction
from ...models.enums import ActionLogResult, PieceType
from ..logging.logger import log_event
from ..systems.victory import eliminate_if_empty
from .base import ActionHandler, check_actor


class ClaimTerritoryHandler(ActionHandler):
    """Plant a claim marker on an empty tile, spending one Pawn."""

    action_type = ClaimTerritoryAction

    def evaluate(self, ctl, action: ClaimTerritoryAction):
        ok, why = check_actor(ctl, action.army_id)
        if not ok:
            return ok, why
        world = ctl.world
        if world.get_army(action.army_id).index_of(PieceType.PAWN) is None:
            return False, "no pawn to claim with"
        if not world.in_bounds(action.at):
            return False, "target out of bounds"
        if world.owner_of(action.at) is not None:
            return False, "tile already claimed"
        if not world.tile(action.at).empty:
            return False, "tile occupied"
        return True, "ok"

    def apply(self, ctl, action: ClaimTerritoryAction):
        world = ctl.world
        army = world.armies[action.army_id]
        player = army.color.value
        if not world.claim_territory(action.at, player):
            return False
        army.remove_piece(army.index_of(PieceType.PAWN), world)
        ctl.channel.emit(
            TerritoryClaimed(at=action.at, player=player, army_id=army.id)
        )
        log_event(ctl.channel, ctl.session, action, ActionLogResult.APPLIED)
        eliminate_if_empty(ctl, army.id)
        return True
