from __future__ import annotations

from typing import TYPE_CHECKING

from ..models.enums import Color, Coord, TileKind

if TYPE_CHECKING:
    from ..models.world import WorldState

WINDOW = 8


def to_fen_from_board(
    board: list[list[str | None]],  # ranks 8..1 as outer list; files a..h inner; pieces like "p","N", None
    turn: str,  # "w" | "b"
    castling: str = "-",
    ep: str | None = None,
    halfmove_clock: int = 0,
    fullmove_number: int = 1,
) -> str:
    ranks = []
    for rank in board:  # expects rank 8 first
        empty = 0
        parts = []
        for sq in rank:
            if not sq:
                empty += 1
            else:
                if empty:
                    parts.append(str(empty))
                    empty = 0
                parts.append(sq)
        if empty:
            parts.append(str(empty))
        ranks.append("".join(parts))
    board_fen = "/".join(ranks)
    ep_part = ep if ep and ep != "-" else "-"
    return f"{board_fen} {turn} {castling or '-'} {ep_part} {halfmove_clock} {fullmove_number}"


def window_origin(world: WorldState, anchor: Coord) -> Coord:
    """Top-left corner of the 8x8 window around anchor, kept inside the world."""
    ax, ay = anchor
    x0 = min(max(ax - WINDOW // 2 + 1, 0), max(world.width - WINDOW, 0))
    y0 = min(max(ay - WINDOW // 2 + 1, 0), max(world.height - WINDOW, 0))
    return x0, y0


def describe_position(
    world: WorldState, army_id: str, side_to_move: Color, fullmove_number: int = 1
) -> str | None:
    """FEN of the deployed pieces within the 8x8 window around an army.

    World row y0 becomes rank 8. Returns None for an unknown army.
    """
    army = world.get_army(army_id)
    if army is None:
        return None
    x0, y0 = window_origin(world, army.anchor)
    board: list[list[str | None]] = []
    for y in range(y0, y0 + WINDOW):
        rank: list[str | None] = []
        for x in range(x0, x0 + WINDOW):
            letter = None
            if world.in_bounds((x, y)):
                t = world.tile((x, y))
                if t.kind == TileKind.PIECE and t.piece_type is not None:
                    letter = t.piece_type.value
                    letter = letter if t.color == Color.WHITE else letter.lower()
            rank.append(letter)
        board.append(rank)
    turn = "w" if side_to_move == Color.WHITE else "b"
    return to_fen_from_board(board, turn, fullmove_number=fullmove_number)


def square_to_coord(world: WorldState, army_id: str, square: str) -> Coord | None:
    """Map an algebraic square of describe_position's window back to the world."""
    army = world.get_army(army_id)
    if army is None or len(square) != 2:
        return None
    file, rank = square[0], square[1]
    if file not in "abcdefgh" or rank not in "12345678":
        return None
    x0, y0 = window_origin(world, army.anchor)
    pos = (x0 + "abcdefgh".index(file), y0 + (8 - int(rank)))
    return pos if world.in_bounds(pos) else None
