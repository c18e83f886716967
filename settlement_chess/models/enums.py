from enum import Enum

Coord = tuple[int, int]  # (x, y)


class Color(str, Enum):
    WHITE = "W"
    BLACK = "B"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(str, Enum):
    KING = "K"
    QUEEN = "Q"
    ROOK = "R"
    BISHOP = "B"
    KNIGHT = "N"
    PAWN = "P"


class NodeType(str, Enum):
    FACTORY = "factory"
    TRAINING = "training"
    MONASTERY = "monastery"
    CASTLE = "castle"
    STABLE = "stable"


class TileKind(str, Enum):
    EMPTY = "empty"
    PIECE = "piece"
    PRODUCTION = "production"
    CLAIMED = "claimed"


class BonusKind(str, Enum):
    EXTRA_MOVE = "extraMove"
    CONVERT_PEASANTS = "convertPeasants"
    FORTIFICATIONS = "fortifications"


class VictoryReason(str, Enum):
    TERRITORY = "territory"
    ELIMINATION = "elimination"


class GameStatus(str, Enum):
    PLAYING = "playing"
    FINISHED = "finished"


class ActionLogResult(str, Enum):
    APPLIED = "applied"
    ILLEGAL = "illegal"
    ERROR = "error"
