"""Chess board layout: dimensions, starting position and the rows that matter to pawns."""

from src.core.shared_types import Color
from src.engine.position import Dimensions

CHESS_DIMENSIONS = Dimensions(rows=8, cols=8)

# Row 0 is the 8th rank (black's back rank), row 7 the 1st rank.
STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1
