from pydantic import BaseModel

from .enums import BonusKind, Color, Coord, PieceType


class Piece(BaseModel):
    type: PieceType
    color: Color
    # lookup key into WorldState.armies, not an owning link
    army_id: str


class Placement(BaseModel):
    piece: Piece
    pos: Coord


class ArmyBonus(BaseModel):
    kind: BonusKind
    value: int
