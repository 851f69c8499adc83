"""
Movement rules for xiangqi pieces

One predicate per piece type (strategy pattern, see MOVEMENT_RULES at the bottom).
Every predicate assumes the engine already rejected destinations holding a piece of the mover's own color.
"""

from src.core.shared_types import Color
from src.engine.board import Board
from src.engine.pieces import Piece
from src.engine.position import Position, squares_between
from src.engine.rules import MovementRule
from src.xiangqi.board import (
    PieceType,
    forward_direction,
    has_crossed_river,
    is_in_palace,
    is_on_same_side_of_river,
)


def opponent_of(color: Color) -> Color:
    return Color.BLACK if color == Color.RED else Color.RED


def _deltas(from_square: Position, to_square: Position) -> tuple[int, int]:
    return to_square.row - from_square.row, to_square.col - from_square.col


def is_orthogonal_step(from_square: Position, to_square: Position) -> bool:
    d_row, d_col = _deltas(from_square, to_square)
    return abs(d_row) + abs(d_col) == 1


def is_on_straight_line(from_square: Position, to_square: Position) -> bool:
    return from_square != to_square and (from_square.row == to_square.row or from_square.col == to_square.col)


# --- FLYING GENERAL ---
def kings_facing(board: Board) -> bool:
    """Both kings on the same column without a single piece in between."""
    red_king = board.find_king(PieceType.KING, Color.RED)
    black_king = board.find_king(PieceType.KING, Color.BLACK)
    if red_king is None or black_king is None:
        return False
    return red_king.col == black_king.col and board.is_path_clear(red_king, black_king)


def king_exposed(board: Board, color: Color) -> bool:
    """A position where the kings face each other counts as check for the side to move into it."""
    return kings_facing(board)


# --- MOVEMENT RULES ---
def is_valid_king_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    One step orthogonally, never leaving the palace.

    Flying general: the king may not step onto the column of the enemy king when no piece stands between them.
    The square it leaves does not count as a blocker (retreating along an open column).
    """
    if not is_in_palace(to_square, piece.color):
        return False
    if not is_orthogonal_step(from_square, to_square):
        return False

    enemy_king = board.find_king(PieceType.KING, opponent_of(piece.color))
    if enemy_king is None or enemy_king.col != to_square.col:
        return True
    return any(
        square != from_square and not board.is_empty(square)
        for square in squares_between(to_square, enemy_king)
    )


def is_valid_advisor_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """One step diagonally, never leaving the palace."""
    if not is_in_palace(to_square, piece.color):
        return False
    d_row, d_col = _deltas(from_square, to_square)
    return abs(d_row) == 1 and abs(d_col) == 1


def is_valid_elephant_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Exactly two steps diagonally, on its own side of the river. Blocked when the 'eye' (midpoint) is occupied."""
    if not is_on_same_side_of_river(to_square, piece.color):
        return False
    d_row, d_col = _deltas(from_square, to_square)
    if abs(d_row) != 2 or abs(d_col) != 2:
        return False
    eye = Position(from_square.row + d_row // 2, from_square.col + d_col // 2)
    return board.is_empty(eye)


def is_valid_horse_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    L-shape: two along one axis, one along the other.

    Blocked when the 'leg' is occupied: the square next to the horse in the direction of the long axis.
    """
    d_row, d_col = _deltas(from_square, to_square)
    if sorted((abs(d_row), abs(d_col))) != [1, 2]:
        return False
    if abs(d_row) == 2:
        leg = Position(from_square.row + d_row // 2, from_square.col)
    else:
        leg = Position(from_square.row, from_square.col + d_col // 2)
    return board.is_empty(leg)


def is_valid_chariot_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Any distance along a row or column, nothing in between."""
    return is_on_straight_line(from_square, to_square) and board.is_path_clear(from_square, to_square)


def is_valid_cannon_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    Moves like a chariot, but captures by jumping.
    ----

    * non-capturing: the path must be clear
    * capturing: exactly one piece (of either color) in between, the 'screen'
    """
    if not is_on_straight_line(from_square, to_square):
        return False
    pieces_between = board.count_pieces_between(from_square, to_square)
    if board.is_empty(to_square):
        return pieces_between == 0
    return pieces_between == 1


def is_valid_soldier_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    A single step, never backwards.

    Before crossing the river: straight ahead only. After: straight ahead or sideways.
    """
    if not is_orthogonal_step(from_square, to_square):
        return False
    d_row, d_col = _deltas(from_square, to_square)
    forward = forward_direction(piece.color)
    if d_row == forward:
        return True

    crossed = piece.has_crossed_river or has_crossed_river(from_square, piece.color)
    return crossed and d_row == 0


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    PieceType.KING: is_valid_king_move,
    PieceType.ADVISOR: is_valid_advisor_move,
    PieceType.ELEPHANT: is_valid_elephant_move,
    PieceType.HORSE: is_valid_horse_move,
    PieceType.CHARIOT: is_valid_chariot_move,
    PieceType.CANNON: is_valid_cannon_move,
    PieceType.SOLDIER: is_valid_soldier_move,
}


# --- PIECE FLAGS ---
def update_piece(piece: Piece, from_square: Position, to_square: Position) -> Piece:
    """Mark the piece as moved. A soldier landing across the river keeps that fact for the rest of the game."""
    moved = piece.moved()
    if piece.type == PieceType.SOLDIER and has_crossed_river(to_square, piece.color):
        return moved.crossed_river()
    return moved


def initial_flags(piece: Piece, square: Position) -> Piece:
    """Setting up a custom position: soldiers already across the river start with the flag set."""
    if piece.type == PieceType.SOLDIER and has_crossed_river(square, piece.color):
        return piece.crossed_river()
    return piece
