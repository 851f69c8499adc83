"""
Xiangqi board layout and zones.

10 rows x 9 columns. Row 0 is black's back row (top), row 9 red's back row (bottom).
The river runs between rows 4 and 5. Each side has a 3x3 palace around the middle column.
"""

from enum import StrEnum

from src.core.shared_types import Color
from src.engine.position import Dimensions, Position

XIANGQI_DIMENSIONS = Dimensions(rows=10, cols=9)


class PieceType(StrEnum):
    KING = "king"  # general
    ADVISOR = "advisor"
    ELEPHANT = "elephant"
    HORSE = "horse"
    CHARIOT = "chariot"
    CANNON = "cannon"
    SOLDIER = "soldier"


# Letters as used by the common xiangqi FEN dialect
FEN_TO_PIECE: dict[str, PieceType] = {
    "k": PieceType.KING,
    "a": PieceType.ADVISOR,
    "b": PieceType.ELEPHANT,
    "n": PieceType.HORSE,
    "r": PieceType.CHARIOT,
    "c": PieceType.CANNON,
    "p": PieceType.SOLDIER,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

STARTING_POSITION = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR"

PALACE_ROWS: dict[Color, range] = {Color.RED: range(7, 10), Color.BLACK: range(0, 3)}
PALACE_COLS = range(3, 6)
# Own half of the board for each side
HOME_ROWS: dict[Color, range] = {Color.RED: range(5, 10), Color.BLACK: range(0, 5)}


def is_in_palace(square: Position, color: Color) -> bool:
    return square.row in PALACE_ROWS[color] and square.col in PALACE_COLS


def is_on_same_side_of_river(square: Position, color: Color) -> bool:
    return square.row in HOME_ROWS[color]


def has_crossed_river(square: Position, color: Color) -> bool:
    """Only meaningful for squares on the board (used to switch soldier movement)."""
    return not is_on_same_side_of_river(square, color)


def forward_direction(color: Color) -> int:
    """Red moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.RED else 1
