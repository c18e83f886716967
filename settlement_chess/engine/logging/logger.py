from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...events import EventChannel
    from ...models.session import GameSession

from ...events import ActionEvent
from ...models.api import Action
from ...models.enums import ActionLogResult


def actor_id(action: Action) -> str | None:
    return getattr(action, "army_id", None)


def log_event(
    channel: EventChannel,
    sess: GameSession,
    action: Action,
    result: ActionLogResult,
    message: str | None = None,
) -> None:
    channel.emit(
        ActionEvent(
            session_id=sess.id,
            turn=sess.turn,
            actor_army_id=actor_id(action),
            action=action,
            result=result,
            message=message,
        )
    )


def log_illegal(
    channel: EventChannel, sess: GameSession, action: Action, explanation: str
) -> None:
    log_event(channel, sess, action, ActionLogResult.ILLEGAL, explanation)


def log_error(
    channel: EventChannel, sess: GameSession, action: Action, error: Exception
) -> None:
    log_event(channel, sess, action, ActionLogResult.ERROR, str(error))
