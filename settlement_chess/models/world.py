from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field, PrivateAttr

from ..config import DEPLOY_REVEAL_RADIUS, TERRITORY_TO_WIN
from .army import Army
from .enums import Color, Coord, VictoryReason
from .map import MapGrid, ProductionNode, TerritoryClaim, Tile
from .pieces import Placement


class VictoryResult(BaseModel):
    winner: str
    reason: VictoryReason
    count: int | None = None


class WorldState(BaseModel):
    map: MapGrid
    armies: dict[str, Army] = Field(default_factory=dict)
    production_nodes: list[ProductionNode] = Field(default_factory=list)
    # insertion order is the territory tie-break order
    claims: list[TerritoryClaim] = Field(default_factory=list)

    _claim_index: dict[Coord, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._claim_index = {c.pos: c.owner for c in self.claims}

    @classmethod
    def empty(cls, width: int, height: int) -> WorldState:
        return cls(map=MapGrid.blank(width, height))

    # ----- grid queries -----

    @property
    def width(self) -> int:
        return self.map.width

    @property
    def height(self) -> int:
        return self.map.height

    def in_bounds(self, c: Coord) -> bool:
        return self.map.in_bounds(c)

    def tile(self, c: Coord) -> Tile:
        return self.map.tile(c)

    def is_fogged(self, c: Coord) -> bool:
        return self.map.fogged(c)

    def reveal_tiles(self, center: Coord, radius: int = 1) -> list[Coord]:
        """Lift fog within Chebyshev distance `radius` of `center`.

        Returns only the coordinates revealed by this call; fog never returns.
        """
        cx, cy = center
        revealed: list[Coord] = []
        for y in range(max(0, cy - radius), min(self.height - 1, cy + radius) + 1):
            for x in range(max(0, cx - radius), min(self.width - 1, cx + radius) + 1):
                if self.map.fog[y][x]:
                    self.map.fog[y][x] = False
                    revealed.append((x, y))
        return revealed

    # ----- territory -----

    def owner_of(self, c: Coord) -> str | None:
        return self._claim_index.get(c)

    def claim_territory(self, c: Coord, player_id: str) -> bool:
        if not self.in_bounds(c) or c in self._claim_index:
            return False
        if not self.tile(c).empty:
            return False
        self.claims.append(TerritoryClaim(pos=c, owner=player_id))
        self._claim_index[c] = player_id
        self.map.set_tile(c, Tile.claim_marker(player_id))
        return True

    def claim_counts(self) -> dict[str, int]:
        return dict(Counter(c.owner for c in self.claims))

    # ----- production nodes -----

    def node_at(self, c: Coord) -> ProductionNode | None:
        for n in self.production_nodes:
            if n.pos == c:
                return n
        return None

    def add_production_node(self, node: ProductionNode) -> bool:
        if not self.in_bounds(node.pos) or self.node_at(node.pos) is not None:
            return False
        if not self.tile(node.pos).empty:
            return False
        self.production_nodes.append(node)
        self.map.set_tile(node.pos, Tile.production_marker(node))
        return True

    def deactivate_node(self, c: Coord) -> bool:
        node = self.node_at(c)
        if node is None or not node.active:
            return False
        node.active = False
        return True

    # ----- armies -----

    def add_army(self, army: Army) -> None:
        if army.id in self.armies:
            raise ValueError(f"army {army.id!r} already registered")
        self.armies[army.id] = army

    def remove_army(self, army_id: str) -> bool:
        army = self.armies.get(army_id)
        if army is None:
            return False
        army.clear_deployment(self)
        del self.armies[army_id]
        return True

    def get_army(self, army_id: str) -> Army | None:
        return self.armies.get(army_id)

    def get_all_armies(self) -> list[Army]:
        return list(self.armies.values())

    def get_armies_by_player(self, color: Color | str) -> list[Army]:
        return [a for a in self.armies.values() if a.color == color]

    def deploy_army(self, army_id: str, target: Coord) -> list[Placement]:
        army = self.armies.get(army_id)
        if army is None or not self.in_bounds(target):
            return []
        placed = army.deploy(target, self)
        self.reveal_tiles(target, DEPLOY_REVEAL_RADIUS)
        return placed

    # ----- victory -----

    def check_victory_conditions(
        self, threshold: int = TERRITORY_TO_WIN
    ) -> VictoryResult | None:
        for player, count in self.claim_counts().items():
            if count >= threshold:
                return VictoryResult(
                    winner=player, reason=VictoryReason.TERRITORY, count=count
                )

        colors = {a.color for a in self.armies.values()}
        if len(colors) == 1:
            (only,) = colors
            return VictoryResult(winner=only.value, reason=VictoryReason.ELIMINATION)
        return None
