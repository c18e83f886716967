from __future__ import annotations

from ...events import ArmyDeployed
from ...models.api import DeployArmyAction
from ...models.enums import ActionLogResult
from ..logging.logger import log_event
from .base import ActionHandler, check_actor


class DeployArmyHandler(ActionHandler):
    action_type = DeployArmyAction

    def evaluate(self, ctl, action: DeployArmyAction):
        ok, why = check_actor(ctl, action.army_id)
        if not ok:
            return ok, why
        if not ctl.world.in_bounds(action.at):
            return False, "target out of bounds"
        return True, "ok"

    def apply(self, ctl, action: DeployArmyAction):
        placements = ctl.world.deploy_army(action.army_id, action.at)
        # emitted even when every square was blocked; anchor and fog still moved
        ctl.channel.emit(
            ArmyDeployed(
                army_id=action.army_id,
                at=action.at,
                placements=tuple(p.model_copy(deep=True) for p in placements),
            )
        )
        log_event(
            ctl.channel,
            ctl.session,
            action,
            ActionLogResult.APPLIED,
            f"{len(placements)} placed",
        )
        return placements
