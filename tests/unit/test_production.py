from settlement_chess.engine.production import (
    DEFAULT_CONVERSIONS,
    ConversionRule,
    ProductionSystem,
)
from settlement_chess.models.enums import Color, NodeType, PieceType
from settlement_chess.models.world import WorldState
from tests.utils.builders import make_army, place_node


def _setup(roster: str, ntype: NodeType | None = NodeType.TRAINING):
    world = WorldState.empty(10, 10)
    world.add_army(make_army("armyX", Color.WHITE, roster))
    if ntype is not None:
        place_node(world, (3, 3), ntype)
    return world, ProductionSystem()


def test_no_node_means_no_production():
    world, ps = _setup("PPPPPPPP", ntype=None)
    assert not ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.PAWN)
    assert not ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.KNIGHT)
    assert ps.get_available_productions(world, (3, 3), "armyX") == []


def test_preconditions():
    world, ps = _setup("P")
    assert not ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.KNIGHT)
    assert not ps.can_produce_at_node(world, (3, 3), "ghost", PieceType.KNIGHT)
    assert not ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.QUEEN)
    world.get_army("armyX").add_piece(PieceType.PAWN)
    assert ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.KNIGHT)
    world.deactivate_node((3, 3))
    assert not ps.can_produce_at_node(world, (3, 3), "armyX", PieceType.KNIGHT)


def test_produce_consumes_latest_matching_pieces():
    world, ps = _setup("PKPQP")
    army = world.get_army("armyX")
    assert ps.produce_at_node(world, (3, 3), "armyX", PieceType.ROOK)
    assert [p.type.value for p in army.pieces] == ["P", "K", "Q", "R"]
    new = army.pieces[-1]
    assert new.color == Color.WHITE and new.army_id == "armyX"
    assert army.strength == 4


def test_failed_production_leaves_roster_untouched():
    world, ps = _setup("PKQ")
    army = world.get_army("armyX")
    before = [p.model_copy() for p in army.pieces]
    assert not ps.produce_at_node(world, (3, 3), "armyX", PieceType.BISHOP)
    assert not ps.produce_at_node(world, (4, 4), "armyX", PieceType.BISHOP)
    assert not ps.produce_at_node(world, (3, 3), "armyX", PieceType.KING)
    assert army.pieces == before and army.strength == 3


def test_available_productions_in_declaration_order():
    world, ps = _setup("PP")
    avail = ps.get_available_productions(world, (3, 3), "armyX")
    assert [a.output_type for a in avail] == [
        PieceType.KNIGHT,
        PieceType.BISHOP,
        PieceType.ROOK,
    ]
    assert all(a.required_type == PieceType.PAWN and a.required_count == 2 for a in avail)
    assert all(a.node_type == NodeType.TRAINING for a in avail)


def test_specialised_nodes_and_factory():
    world, ps = _setup("P", NodeType.MONASTERY)
    assert [a.output_type for a in ps.get_available_productions(world, (3, 3), "armyX")] == [
        PieceType.BISHOP
    ]
    world, ps = _setup("PPPP", NodeType.FACTORY)
    assert ps.get_available_productions(world, (3, 3), "armyX") == []
    assert DEFAULT_CONVERSIONS[NodeType.STABLE][PieceType.KNIGHT].required_count == 1


def test_custom_conversion_table():
    table = {NodeType.FACTORY: {PieceType.QUEEN: ConversionRule(required_type=PieceType.ROOK, required_count=2)}}
    world, _ = _setup("RRB", NodeType.FACTORY)
    ps = ProductionSystem(table)
    assert ps.produce_at_node(world, (3, 3), "armyX", PieceType.QUEEN)
    assert [p.type for p in world.get_army("armyX").pieces] == [PieceType.BISHOP, PieceType.QUEEN]
    assert ps.get_rule(NodeType.TRAINING, PieceType.KNIGHT) is None


def test_convert_peasants_limited_by_bishops():
    world, ps = _setup("BBK")
    army = world.get_army("armyX")
    assert ps.convert_peasants_to_pawns(world, "armyX", 5) == 2
    assert army.count(PieceType.PAWN) == 2
    assert army.count(PieceType.BISHOP) == 2
    assert ps.convert_peasants_to_pawns(world, "armyX", 1) == 1
    assert army.strength == 6


def test_convert_peasants_without_bishops_or_army():
    world, ps = _setup("KPP")
    assert ps.convert_peasants_to_pawns(world, "armyX", 3) == 0
    assert ps.convert_peasants_to_pawns(world, "ghost", 3) == 0
    assert ps.convert_peasants_to_pawns(world, "armyX", -2) == 0
    assert world.get_army("armyX").strength == 3
