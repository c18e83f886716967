from __future__ import annotations

from pydantic import BaseModel

from .enums import Color, Coord, NodeType, PieceType, TileKind
from .pieces import Piece


class ProductionNode(BaseModel):
    id: str
    pos: Coord
    type: NodeType
    active: bool = True


class TerritoryClaim(BaseModel):
    pos: Coord
    owner: str


class Tile(BaseModel):
    """Content of one grid cell. Fog is tracked separately on the grid."""

    kind: TileKind = TileKind.EMPTY
    piece_type: PieceType | None = None
    color: Color | None = None
    army_id: str | None = None
    deployed: bool = False
    node_id: str | None = None
    node_type: NodeType | None = None
    player: str | None = None

    @property
    def empty(self) -> bool:
        return self.kind == TileKind.EMPTY

    @classmethod
    def piece_marker(cls, piece: Piece) -> Tile:
        return cls(
            kind=TileKind.PIECE,
            piece_type=piece.type,
            color=piece.color,
            army_id=piece.army_id,
            deployed=True,
        )

    @classmethod
    def production_marker(cls, node: ProductionNode) -> Tile:
        return cls(kind=TileKind.PRODUCTION, node_id=node.id, node_type=node.type)

    @classmethod
    def claim_marker(cls, player: str) -> Tile:
        return cls(kind=TileKind.CLAIMED, player=player)


class MapGrid(BaseModel):
    width: int
    height: int
    tiles: list[list[Tile]]  # tiles[y][x]
    fog: list[list[bool]]  # fog[y][x], True while hidden

    @classmethod
    def blank(cls, width: int, height: int) -> MapGrid:
        return cls(
            width=width,
            height=height,
            tiles=[[Tile() for _ in range(width)] for _ in range(height)],
            fog=[[True for _ in range(width)] for _ in range(height)],
        )

    def in_bounds(self, c: Coord) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, c: Coord) -> None:
        # negative indices would silently wrap around
        if not self.in_bounds(c):
            raise IndexError(f"{c} outside {self.width}x{self.height} grid")

    def tile(self, c: Coord) -> Tile:
        self._check(c)
        x, y = c
        return self.tiles[y][x]

    def set_tile(self, c: Coord, tile: Tile) -> None:
        self._check(c)
        x, y = c
        self.tiles[y][x] = tile

    def fogged(self, c: Coord) -> bool:
        self._check(c)
        x, y = c
        return self.fog[y][x]
