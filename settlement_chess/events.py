from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, cast

if TYPE_CHECKING:
    from collections.abc import Callable

    from .models.api import Action, AvailableProduction
    from .models.enums import ActionLogResult, Color, Coord, PieceType
    from .models.pieces import Placement
    from .models.world import VictoryResult


# Payloads are frozen snapshots; observers never get a handle on live state.


@dataclass(frozen=True)
class ArmySelected:
    army_id: str
    color: Color
    strength: int


@dataclass(frozen=True)
class TerritoryClaimed:
    at: Coord
    player: str
    army_id: str


@dataclass(frozen=True)
class ProductionCompleted:
    at: Coord
    army_id: str
    production: AvailableProduction


@dataclass(frozen=True)
class ArmyDeployed:
    army_id: str
    at: Coord
    placements: tuple[Placement, ...]


@dataclass(frozen=True)
class PeasantsConverted:
    army_id: str
    converted: int


@dataclass(frozen=True)
class TurnEnded:
    turn: int
    active_color: Color


@dataclass(frozen=True)
class GameEnded:
    victory: VictoryResult


@dataclass(frozen=True)
class ArmyEliminated:
    army_id: str
    color: Color


@dataclass(frozen=True)
class ActionEvent:
    session_id: str
    turn: int
    actor_army_id: str | None
    action: Action
    result: ActionLogResult
    message: str | None = None


GAME_EVENTS: tuple[type, ...] = (
    ArmySelected,
    TerritoryClaimed,
    ProductionCompleted,
    ArmyDeployed,
    PeasantsConverted,
    TurnEnded,
    GameEnded,
    ArmyEliminated,
)

T = TypeVar("T")


class EventChannel:
    """Publish/subscribe keyed by event class, scoped to one game session."""

    def __init__(self) -> None:
        self._subs: dict[type[Any], list[object]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(
        self, event_type: type[T], handler: Callable[[T], None]
    ) -> Callable[[], None]:
        if self._closed:
            raise RuntimeError("event channel is closed")
        lst = self._subs.setdefault(event_type, [])
        lst.append(cast("object", handler))
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        lst = self._subs.get(event_type, [])
        try:
            lst.remove(handler)
        except ValueError:
            return False
        return True

    def subscriber_count(self, event_type: type[Any] | None = None) -> int:
        if event_type is not None:
            return len(self._subs.get(event_type, []))
        return sum(len(v) for v in self._subs.values())

    def emit(self, event: Any) -> None:
        if self._closed:
            return
        et = type(event)
        # copy so a handler may unsubscribe itself mid-dispatch
        for h in list(self._subs.get(et, [])):
            # Let exceptions propagate; callers decide how to handle them
            cast("Callable[[Any], None]", h)(event)

    def close(self) -> None:
        self._subs.clear()
        self._closed = True
