from __future__ import annotations

from ...events import PeasantsConverted
from ...models.api import ConvertPeasantsAction
from ...models.enums import ActionLogResult, PieceType
from ..logging.logger import log_event
from .base import ActionHandler, check_actor


class ConvertPeasantsHandler(ActionHandler):
    action_type = ConvertPeasantsAction

    def evaluate(self, ctl, action: ConvertPeasantsAction):
        ok, why = check_actor(ctl, action.army_id)
        if not ok:
            return ok, why
        if action.count < 1:
            return False, "nothing to convert"
        if ctl.world.get_army(action.army_id).count(PieceType.BISHOP) == 0:
            return False, "no bishops"
        return True, "ok"

    def apply(self, ctl, action: ConvertPeasantsAction):
        n = ctl.production.convert_peasants_to_pawns(
            ctl.world, action.army_id, action.count
        )
        ctl.channel.emit(PeasantsConverted(army_id=action.army_id, converted=n))
        log_event(
            ctl.channel, ctl.session, action, ActionLogResult.APPLIED, f"{n} converted"
        )
        return n
