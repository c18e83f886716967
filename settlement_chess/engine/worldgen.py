from __future__ import annotations

import random
from collections.abc import Sequence

from ..config import NODE_COUNT, WORLD_HEIGHT, WORLD_WIDTH
from ..models.army import Army
from ..models.enums import Color, NodeType, PieceType
from ..models.map import ProductionNode
from ..models.world import WorldState

STARTING_ROSTER: tuple[PieceType, ...] = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
    PieceType.PAWN,
    PieceType.PAWN,
)

STARTING_ARMIES: tuple[tuple[str, Color], ...] = (
    ("army1", Color.WHITE),
    ("army2", Color.BLACK),
)


def generate_node_layout(
    width: int,
    height: int,
    node_types: Sequence[NodeType],
    seed: int | None,
    count: int = NODE_COUNT,
) -> list[ProductionNode]:
    """Place `count` production nodes on distinct tiles.

    Pure in (width, height, node_types, seed, count): the same inputs always
    give the same layout. Count is capped at the number of tiles.
    """
    if not node_types or width <= 0 or height <= 0:
        return []
    rng = random.Random(seed)
    cells = [(x, y) for y in range(height) for x in range(width)]
    picks = rng.sample(cells, min(max(count, 0), len(cells)))
    return [
        ProductionNode(id=f"node_{i}", pos=pos, type=rng.choice(list(node_types)))
        for i, pos in enumerate(picks)
    ]


def create_world(
    width: int = WORLD_WIDTH,
    height: int = WORLD_HEIGHT,
    seed: int | None = None,
    node_count: int = NODE_COUNT,
    node_types: Sequence[NodeType] = tuple(NodeType),
) -> WorldState:
    world = WorldState.empty(width, height)
    for node in generate_node_layout(width, height, node_types, seed, node_count):
        world.add_production_node(node)
    return world


def setup_armies(
    world: WorldState, roster: Sequence[PieceType] = STARTING_ROSTER
) -> list[Army]:
    armies = []
    for army_id, color in STARTING_ARMIES:
        army = Army(id=army_id, color=color)
        for ptype in roster:
            army.add_piece(ptype)
        world.add_army(army)
        armies.append(army)
    return armies
