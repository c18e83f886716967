from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.world import VictoryResult
    from ..core import TurnController

from ...events import GameEnded, TurnEnded
from ...models.enums import GameStatus
from . import victory


def end_turn(ctl: TurnController) -> VictoryResult | None:
    """Hand the move to the other color, then settle the game if it is over."""
    sess = ctl.session
    sess.turn += 1
    sess.active_color = sess.active_color.opponent
    ctl.channel.emit(TurnEnded(turn=sess.turn, active_color=sess.active_color))

    result = victory.check(ctl)
    if result is not None:
        sess.status = GameStatus.FINISHED
        sess.winner = result
        ctl.channel.emit(GameEnded(victory=result.model_copy()))
    return result
