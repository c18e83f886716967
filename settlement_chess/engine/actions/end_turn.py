from __future__ import annotations

from ...models.api import EndTurnAction
from ...models.enums import ActionLogResult, GameStatus
from ..logging.logger import log_event
from ..systems.turn import end_turn
from .base import ActionHandler


class EndTurnHandler(ActionHandler):
    action_type = EndTurnAction

    def evaluate(self, ctl, action: EndTurnAction):
        if ctl.session.status == GameStatus.FINISHED:
            return False, "game is finished"
        return True, "ok"

    def apply(self, ctl, action: EndTurnAction):
        log_event(ctl.channel, ctl.session, action, ActionLogResult.APPLIED)
        return end_turn(ctl)
