from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from ..models.api import AvailableProduction
from ..models.enums import Coord, NodeType, PieceType

if TYPE_CHECKING:
    from ..models.army import Army
    from ..models.map import ProductionNode
    from ..models.world import WorldState


class ConversionRule(BaseModel):
    required_type: PieceType
    required_count: int


ConversionTable = dict[NodeType, dict[PieceType, ConversionRule]]

# node type -> output piece -> cost; dict order is the listing order
DEFAULT_CONVERSIONS: ConversionTable = {
    NodeType.FACTORY: {},
    NodeType.TRAINING: {
        PieceType.KNIGHT: ConversionRule(required_type=PieceType.PAWN, required_count=2),
        PieceType.BISHOP: ConversionRule(required_type=PieceType.PAWN, required_count=2),
        PieceType.ROOK: ConversionRule(required_type=PieceType.PAWN, required_count=2),
    },
    NodeType.MONASTERY: {
        PieceType.BISHOP: ConversionRule(required_type=PieceType.PAWN, required_count=1),
    },
    NodeType.CASTLE: {
        PieceType.ROOK: ConversionRule(required_type=PieceType.PAWN, required_count=1),
    },
    NodeType.STABLE: {
        PieceType.KNIGHT: ConversionRule(required_type=PieceType.PAWN, required_count=1),
    },
}


class ProductionSystem:
    """Stateless conversion rules over a world's nodes and armies."""

    def __init__(self, conversions: ConversionTable | None = None):
        self.conversions: ConversionTable = (
            DEFAULT_CONVERSIONS if conversions is None else conversions
        )

    def get_rule(self, node_type: NodeType, output: PieceType) -> ConversionRule | None:
        return self.conversions.get(node_type, {}).get(output)

    def _active_node(self, world: WorldState, at: Coord) -> ProductionNode | None:
        node = world.node_at(at)
        return node if node is not None and node.active else None

    def explain(
        self, world: WorldState, at: Coord, army_id: str, output: PieceType
    ) -> tuple[bool, str]:
        node = self._active_node(world, at)
        if node is None:
            return False, "no active production node"
        rule = self.get_rule(node.type, output)
        if rule is None:
            return False, f"{node.type.value} cannot produce {output.value}"
        army = world.get_army(army_id)
        if army is None:
            return False, "unknown army"
        have = army.count(rule.required_type)
        if have < rule.required_count:
            return (
                False,
                f"needs {rule.required_count} {rule.required_type.value}, has {have}",
            )
        return True, "ok"

    def can_produce_at_node(
        self, world: WorldState, at: Coord, army_id: str, output: PieceType
    ) -> bool:
        return self.explain(world, at, army_id, output)[0]

    def produce_at_node(
        self, world: WorldState, at: Coord, army_id: str, output: PieceType
    ) -> bool:
        if not self.can_produce_at_node(world, at, army_id, output):
            return False
        node = world.node_at(at)
        army = world.get_army(army_id)
        rule = self.get_rule(node.type, output)

        _consume_latest(army, rule, world)
        army.add_piece(output)
        return True

    def get_available_productions(
        self, world: WorldState, at: Coord, army_id: str
    ) -> list[AvailableProduction]:
        node = self._active_node(world, at)
        if node is None:
            return []
        return [
            AvailableProduction(
                output_type=output,
                required_type=rule.required_type,
                required_count=rule.required_count,
                node_type=node.type,
            )
            for output, rule in self.conversions.get(node.type, {}).items()
            if self.can_produce_at_node(world, at, army_id, output)
        ]

    def convert_peasants_to_pawns(
        self, world: WorldState, army_id: str, count: int
    ) -> int:
        """Each Bishop sponsors at most one new Pawn; Bishops are not spent."""
        army = world.get_army(army_id)
        if army is None:
            return 0
        n = min(max(count, 0), army.count(PieceType.BISHOP))
        for _ in range(n):
            army.add_piece(PieceType.PAWN)
        return n


def _consume_latest(army: Army, rule: ConversionRule, world: WorldState) -> None:
    removed = 0
    for i in range(len(army.pieces) - 1, -1, -1):
        if removed >= rule.required_count:
            break
        if army.pieces[i].type == rule.required_type:
            army.remove_piece(i, world)
            removed += 1
