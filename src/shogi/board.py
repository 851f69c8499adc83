"""
Shogi board layout, piece types and promotion zones.

9 x 9 squares. Row 0 is gote's back row (top), row 8 sente's back row (bottom). Sente moves first.
The promotion zone of each side is the three rows furthest from it.
"""

from enum import StrEnum

from src.core.shared_types import Color
from src.engine.position import Dimensions, Position

SHOGI_DIMENSIONS = Dimensions(rows=9, cols=9)


class PieceType(StrEnum):
    KING = "king"
    ROOK = "rook"
    BISHOP = "bishop"
    GOLD = "gold"
    SILVER = "silver"
    KNIGHT = "knight"
    LANCE = "lance"
    PAWN = "pawn"
    # promoted forms
    DRAGON = "dragon"
    HORSE = "horse"
    PROMOTED_SILVER = "promoted_silver"
    PROMOTED_KNIGHT = "promoted_knight"
    PROMOTED_LANCE = "promoted_lance"
    PROMOTED_PAWN = "promoted_pawn"


PROMOTED_FORMS: dict[PieceType, PieceType] = {
    PieceType.ROOK: PieceType.DRAGON,
    PieceType.BISHOP: PieceType.HORSE,
    PieceType.SILVER: PieceType.PROMOTED_SILVER,
    PieceType.KNIGHT: PieceType.PROMOTED_KNIGHT,
    PieceType.LANCE: PieceType.PROMOTED_LANCE,
    PieceType.PAWN: PieceType.PROMOTED_PAWN,
}

# A captured piece goes to the hand unpromoted
BASE_FORMS: dict[PieceType, PieceType] = {value: key for key, value in PROMOTED_FORMS.items()}

# SFEN letters. A promoted piece is its base letter with a '+' in front
PIECE_TO_FEN: dict[PieceType, str] = {
    PieceType.KING: "k",
    PieceType.ROOK: "r",
    PieceType.BISHOP: "b",
    PieceType.GOLD: "g",
    PieceType.SILVER: "s",
    PieceType.KNIGHT: "n",
    PieceType.LANCE: "l",
    PieceType.PAWN: "p",
    PieceType.DRAGON: "+r",
    PieceType.HORSE: "+b",
    PieceType.PROMOTED_SILVER: "+s",
    PieceType.PROMOTED_KNIGHT: "+n",
    PieceType.PROMOTED_LANCE: "+l",
    PieceType.PROMOTED_PAWN: "+p",
}

STARTING_POSITION = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL"

PROMOTION_ZONE: dict[Color, range] = {Color.SENTE: range(0, 3), Color.GOTE: range(6, 9)}


def forward_direction(color: Color) -> int:
    """Sente moves UP the board (towards row 0), gote moves DOWN"""
    return -1 if color == Color.SENTE else 1


def is_in_promotion_zone(square: Position, color: Color) -> bool:
    return square.row in PROMOTION_ZONE[color]


def rows_to_last_rank(square: Position, color: Color) -> int:
    """0 on the far rank, 1 on the one before it, ..."""
    return square.row if color == Color.SENTE else SHOGI_DIMENSIONS.rows - 1 - square.row
