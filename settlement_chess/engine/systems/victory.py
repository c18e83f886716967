from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.world import VictoryResult
    from ..core import TurnController

from ...events import ArmyEliminated
from ...models.enums import GameStatus

logger = logging.getLogger(__name__)


def check(ctl: TurnController) -> VictoryResult | None:
    sess = ctl.session
    if sess.status == GameStatus.FINISHED:
        return sess.winner
    return ctl.world.check_victory_conditions(ctl.territory_to_win)


def eliminate_if_empty(ctl: TurnController, army_id: str) -> bool:
    """Drop an army that has run out of pieces from the registry."""
    army = ctl.world.get_army(army_id)
    if army is None or army.pieces:
        return False
    ctl.world.remove_army(army_id)
    logger.info("session %s: army %s eliminated", ctl.session.id, army_id)
    ctl.channel.emit(ArmyEliminated(army_id=army_id, color=army.color))
    return True
