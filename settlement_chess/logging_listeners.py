from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .events import GAME_EVENTS, ActionEvent
from .models.api import ActionLogEntry

if TYPE_CHECKING:
    from .events import EventChannel
    from .storage import SessionStore

logger = logging.getLogger(__name__)


class ActionLogRecorder:
    """Collects action log entries emitted while a request is processed."""

    def __init__(self) -> None:
        self.entries: list[ActionLogEntry] = []

    def __call__(self, ev: ActionEvent) -> None:
        # Convert event to ActionLogEntry JSON for persistence
        entry = ActionLogEntry(
            session_id=ev.session_id,
            turn=ev.turn,
            actor_army_id=ev.actor_army_id,
            action=ev.action,
            result=ev.result,
            message=ev.message,
        )
        self.entries.append(entry)
        logger.debug(
            "session %s turn %s: %s %s (%s)",
            ev.session_id,
            ev.turn,
            ev.action.kind,
            ev.result.value,
            ev.message or "",
        )

    async def flush(self, store: SessionStore, sid: str) -> int:
        n = 0
        for entry in self.entries:
            await store.append_log(sid, entry.model_dump_json())
            n += 1
        self.entries.clear()
        return n


def _log_game_event(ev: Any) -> None:
    logger.info("%s %s", type(ev).__name__, ev)


def register_listeners(channel: EventChannel) -> ActionLogRecorder:
    recorder = ActionLogRecorder()
    channel.subscribe(ActionEvent, recorder)
    for et in GAME_EVENTS:
        channel.subscribe(et, _log_game_event)
    return recorder
