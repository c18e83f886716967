from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator

from .enums import BonusKind, Color, Coord, PieceType, TileKind
from .map import Tile
from .pieces import ArmyBonus, Piece, Placement

if TYPE_CHECKING:
    from .world import WorldState

# 3x3 block around the target, row-major: NW, N, NE, W, C, E, SW, S, SE
DEPLOYMENT_OFFSETS: tuple[Coord, ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
)

_BONUS_SOURCES: tuple[tuple[BonusKind, PieceType], ...] = (
    (BonusKind.EXTRA_MOVE, PieceType.KNIGHT),
    (BonusKind.CONVERT_PEASANTS, PieceType.BISHOP),
    (BonusKind.FORTIFICATIONS, PieceType.ROOK),
)


class Army(BaseModel):
    id: str
    color: Color
    # full roster; deployed pieces stay in it
    pieces: list[Piece] = Field(default_factory=list)
    anchor: Coord = (0, 0)
    consolidated: bool = True
    deployment_tiles: list[Coord] = Field(default_factory=list)
    strength: int = 0

    @model_validator(mode="after")
    def _sync_strength(self) -> Army:
        self.update_strength()
        return self

    def update_strength(self) -> None:
        self.strength = len(self.pieces)

    def add_piece(self, piece: Piece | PieceType | str) -> Piece:
        """Append a piece to the roster, re-tagged as owned by this army."""
        ptype = piece.type if isinstance(piece, Piece) else PieceType(piece)
        new = Piece(type=ptype, color=self.color, army_id=self.id)
        self.pieces.append(new)
        self.update_strength()
        return new

    def remove_piece(self, index: int, world: WorldState | None = None) -> bool:
        """Drop roster piece `index`.

        Given the world, a deployed army is laid out again at its anchor so
        the grid only shows pieces still on the roster.
        """
        if not 0 <= index < len(self.pieces):
            return False
        del self.pieces[index]
        self.update_strength()
        if world is not None and not self.consolidated:
            self.deploy(self.anchor, world)
        return True

    def count(self, ptype: PieceType) -> int:
        return sum(1 for p in self.pieces if p.type == ptype)

    def index_of(self, ptype: PieceType) -> int | None:
        for i, p in enumerate(self.pieces):
            if p.type == ptype:
                return i
        return None

    def deploy(self, target: Coord, world: WorldState) -> list[Placement]:
        """Spread up to nine roster pieces over the 3x3 block centred on target.

        Roster piece i goes to DEPLOYMENT_OFFSETS[i]. Candidates that fall off
        the grid or onto a non-empty tile are skipped; their piece stays
        undeployed rather than moving to another square.
        """
        if not world.in_bounds(target):
            return []
        self.clear_deployment(world)

        tx, ty = target
        placed: list[Placement] = []
        for piece, (dx, dy) in zip(self.pieces, DEPLOYMENT_OFFSETS):
            pos = (tx + dx, ty + dy)
            if not world.in_bounds(pos) or not world.tile(pos).empty:
                continue
            world.map.set_tile(pos, Tile.piece_marker(piece))
            placed.append(Placement(piece=piece, pos=pos))

        self.anchor = target
        self.consolidated = False
        self.deployment_tiles = [p.pos for p in placed]
        return placed

    def clear_deployment(self, world: WorldState) -> None:
        for pos in self.deployment_tiles:
            t = world.tile(pos)
            if t.kind == TileKind.PIECE and t.army_id == self.id:
                world.map.set_tile(pos, Tile())
        self.deployment_tiles = []
        self.consolidated = True

    def get_army_bonuses(self) -> list[ArmyBonus]:
        counts = Counter(p.type for p in self.pieces)
        return [
            ArmyBonus(kind=kind, value=counts[ptype])
            for kind, ptype in _BONUS_SOURCES
            if counts[ptype] > 0
        ]

    def get_most_common_piece(self) -> PieceType | None:
        counts = Counter(p.type for p in self.pieces)
        if not counts:
            return None
        # Counter keeps first-seen order, and max() keeps the first of equals
        return max(counts, key=counts.__getitem__)
