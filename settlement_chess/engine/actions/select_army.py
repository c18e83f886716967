from __future__ import annotations

from ...events import ArmySelected
from ...models.api import SelectArmyAction
from ...models.enums import ActionLogResult
from ..logging.logger import log_event
from .base import ActionHandler, check_actor


class SelectArmyHandler(ActionHandler):
    action_type = SelectArmyAction

    def evaluate(self, ctl, action: SelectArmyAction):
        return check_actor(ctl, action.army_id)

    def apply(self, ctl, action: SelectArmyAction):
        army = ctl.world.armies[action.army_id]
        ctl.channel.emit(
            ArmySelected(army_id=army.id, color=army.color, strength=army.strength)
        )
        log_event(ctl.channel, ctl.session, action, ActionLogResult.APPLIED)
        return army.id
