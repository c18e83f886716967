from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from ..ai.oracle import Advice
from .enums import ActionLogResult, Coord, NodeType, PieceType
from .session import GameSession
from .world import VictoryResult

# ----- Actions (discriminated union) -----


class SelectArmyAction(BaseModel):
    kind: Literal["select_army"] = "select_army"
    army_id: str


class ClaimTerritoryAction(BaseModel):
    kind: Literal["claim_territory"] = "claim_territory"
    army_id: str
    at: Coord


class DeployArmyAction(BaseModel):
    kind: Literal["deploy_army"] = "deploy_army"
    army_id: str
    at: Coord


class ProduceAction(BaseModel):
    kind: Literal["produce"] = "produce"
    army_id: str
    at: Coord
    output: PieceType


class ConvertPeasantsAction(BaseModel):
    kind: Literal["convert_peasants"] = "convert_peasants"
    army_id: str
    count: int


class EndTurnAction(BaseModel):
    kind: Literal["end_turn"] = "end_turn"


Action = Annotated[
    SelectArmyAction
    | ClaimTerritoryAction
    | DeployArmyAction
    | ProduceAction
    | ConvertPeasantsAction
    | EndTurnAction,
    Field(discriminator="kind"),
]


# ----- Production listing -----


class AvailableProduction(BaseModel):
    output_type: PieceType
    required_type: PieceType
    required_count: int
    node_type: NodeType


# ----- API IO -----


class CreateSessionRequest(BaseModel):
    width: int | None = Field(default=None, ge=3, le=128)
    height: int | None = Field(default=None, ge=3, le=128)
    seed: int | None = None
    node_count: int | None = Field(default=None, ge=0)


class SessionView(BaseModel):
    id: str
    session: GameSession


class EvaluateResponse(BaseModel):
    legal: bool
    explanation: str


class ApplyActionRequest(BaseModel):
    action: Action


class ApplyActionResponse(BaseModel):
    applied: bool
    explanation: str
    result: Any = None
    session: SessionView


class ProductionsResponse(BaseModel):
    productions: list[AvailableProduction]


class VictoryResponse(BaseModel):
    victory: VictoryResult | None = None


class AdviceRequest(BaseModel):
    army_id: str
    depth: int | None = Field(default=None, ge=1, le=40)


class AdviceResponse(Advice):
    # world squares of the suggested move; None when it leaves the window
    origin: Coord | None = None
    target: Coord | None = None


# ----- Action Log -----


class ActionLogEntry(BaseModel):
    ts: datetime = Field(default_factory=datetime.now)
    session_id: str
    turn: int
    actor_army_id: str | None = None
    action: Action
    result: ActionLogResult = ActionLogResult.APPLIED
    message: str | None = None


class ActionLogResponse(BaseModel):
    entries: list[ActionLogEntry]
