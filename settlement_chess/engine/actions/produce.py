from __future__ import annotations

from ...events import ProductionCompleted
from ...models.api import AvailableProduction, ProduceAction
from ...models.enums import ActionLogResult
from ..logging.logger import log_event
from .base import ActionHandler, check_actor


class ProduceHandler(ActionHandler):
    action_type = ProduceAction

    def evaluate(self, ctl, action: ProduceAction):
        ok, why = check_actor(ctl, action.army_id)
        if not ok:
            return ok, why
        return ctl.production.explain(
            ctl.world, action.at, action.army_id, action.output
        )

    def apply(self, ctl, action: ProduceAction):
        world = ctl.world
        node = world.node_at(action.at)
        if not ctl.production.produce_at_node(
            world, action.at, action.army_id, action.output
        ):
            return False
        rule = ctl.production.get_rule(node.type, action.output)
        ctl.channel.emit(
            ProductionCompleted(
                at=action.at,
                army_id=action.army_id,
                production=AvailableProduction(
                    output_type=action.output,
                    required_type=rule.required_type,
                    required_count=rule.required_count,
                    node_type=node.type,
                ),
            )
        )
        log_event(ctl.channel, ctl.session, action, ActionLogResult.APPLIED)
        return True
