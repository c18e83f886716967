from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from ...models.enums import GameStatus

if TYPE_CHECKING:
    from ...models.api import Action
    from ..core import TurnController


class ActionHandler(Protocol):
    action_type: type

    def evaluate(self, ctl: TurnController, action: Action) -> tuple[bool, str]: ...

    def apply(self, ctl: TurnController, action: Action) -> Any: ...


Registry = dict[type, ActionHandler]


def check_actor(ctl: TurnController, army_id: str) -> tuple[bool, str]:
    """Shared gate for army actions: game running, army known, army's turn."""
    if ctl.session.status == GameStatus.FINISHED:
        return False, "game is finished"
    army = ctl.world.get_army(army_id)
    if army is None:
        return False, "unknown army"
    if army.color != ctl.session.active_color:
        return False, f"not {army.color.value}'s turn"
    return True, "ok"
