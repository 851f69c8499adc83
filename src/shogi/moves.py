"""
Movement rules for shogi pieces, promotion and drops

The sliders move like their chess counterparts (see src/chess/moves.py), everything else is a fixed set of steps.
Steps are written for sente (moving up the board) and mirrored for gote.
"""

from dataclasses import replace

from src.chess.moves import DIAGONALS, KING_DELTAS, STRAIGHTS, single_step_move, sliding_move
from src.core.shared_types import Color
from src.engine.board import Board
from src.engine.moves import Move
from src.engine.pieces import Piece
from src.engine.position import Position, Vector
from src.engine.rules import MovementRule
from src.shogi.board import (
    BASE_FORMS,
    PROMOTED_FORMS,
    PieceType,
    forward_direction,
    is_in_promotion_zone,
    rows_to_last_rank,
)

# Forward is -1 (sente's point of view)
GOLD_STEPS: list[Vector] = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, 0)]
SILVER_STEPS: list[Vector] = [(-1, -1), (-1, 0), (-1, 1), (1, -1), (1, 1)]
KNIGHT_STEPS: list[Vector] = [(-2, -1), (-2, 1)]
PAWN_STEPS: list[Vector] = [(-1, 0)]

# How close to the far rank a piece may stand and still have a move: pawn / lance need 1 row, a knight 2
MIN_ROWS_TO_LAST_RANK: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.LANCE: 1,
    PieceType.KNIGHT: 2,
}


def _oriented(steps: list[Vector], color: Color) -> list[Vector]:
    """Mirror sente's steps vertically for gote."""
    if forward_direction(color) == -1:
        return steps
    return [(-d_row, d_col) for d_row, d_col in steps]


def stepping_rule(steps: list[Vector]) -> MovementRule:
    def is_valid_step(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
        return single_step_move(from_square, to_square, _oriented(steps, piece.color))

    return is_valid_step


# --- MOVEMENT RULES ---
def is_valid_lance_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Any distance straight ahead, nothing in between."""
    return sliding_move(board, from_square, to_square, [(forward_direction(piece.color), 0)])


def is_valid_rook_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    return sliding_move(board, from_square, to_square, STRAIGHTS)


def is_valid_bishop_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    return sliding_move(board, from_square, to_square, DIAGONALS)


def is_valid_king_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    return single_step_move(from_square, to_square, KING_DELTAS)


def is_valid_dragon_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Promoted rook: a rook that can also step one square diagonally."""
    return is_valid_rook_move(board, piece, from_square, to_square) or single_step_move(
        from_square, to_square, DIAGONALS
    )


def is_valid_horse_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Promoted bishop: a bishop that can also step one square orthogonally."""
    return is_valid_bishop_move(board, piece, from_square, to_square) or single_step_move(
        from_square, to_square, STRAIGHTS
    )


is_valid_gold_move = stepping_rule(GOLD_STEPS)

# -- STRATEGY PATTERN: MOVEMENT RULES ---
MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    PieceType.KING: is_valid_king_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.GOLD: is_valid_gold_move,
    PieceType.SILVER: stepping_rule(SILVER_STEPS),
    PieceType.KNIGHT: stepping_rule(KNIGHT_STEPS),
    PieceType.LANCE: is_valid_lance_move,
    PieceType.PAWN: stepping_rule(PAWN_STEPS),
    PieceType.DRAGON: is_valid_dragon_move,
    PieceType.HORSE: is_valid_horse_move,
    # promoted minor pieces all move like a gold general
    PieceType.PROMOTED_SILVER: is_valid_gold_move,
    PieceType.PROMOTED_KNIGHT: is_valid_gold_move,
    PieceType.PROMOTED_LANCE: is_valid_gold_move,
    PieceType.PROMOTED_PAWN: is_valid_gold_move,
}


# --- PROMOTION ---
def would_be_stuck(piece_type: PieceType, square: Position, color: Color) -> bool:
    """Pawn / lance on the far rank, knight on the last two ranks: no move left from there."""
    min_rows = MIN_ROWS_TO_LAST_RANK.get(piece_type)
    return min_rows is not None and rows_to_last_rank(square, color) < min_rows


def may_promote(piece: Piece, from_square: Position, to_square: Position) -> bool:
    """A promotable piece moving into, out of, or within the promotion zone."""
    return piece.type in PROMOTED_FORMS and (
        is_in_promotion_zone(from_square, piece.color) or is_in_promotion_zone(to_square, piece.color)
    )


def after_shogi_move(board_before: Board, board: Board, move: Move) -> Move:
    """
    Board update after the plain part of the move
    ----

    1. a captured piece changes sides: it goes to the mover's hand, unpromoted
    2. promotion: optional when moving into, out of or inside the zone, asked for with the promoted type.
       Forced when the piece would be stuck otherwise.
       A promotion request that does not apply is dropped from the move record.
    """
    piece = move.piece
    if move.captured_piece is not None:
        captured_type = move.captured_piece.type
        board.add_to_hand(piece.color, BASE_FORMS.get(captured_type, captured_type))

    if not may_promote(piece, move.from_square, move.to_square):
        return replace(move, promotion=None) if move.promotion is not None else move

    promoted = PROMOTED_FORMS[piece.type]
    if move.promotion == promoted or would_be_stuck(piece.type, move.to_square, piece.color):
        board.set_piece(move.to_square, piece.promoted(promoted).moved())
        return replace(move, promotion=promoted)
    return replace(move, promotion=None)


# --- DROPS ---
def can_drop(board: Board, piece: Piece, to_square: Position) -> bool:
    """
    On any empty square (checked by the engine) except:

    * where the piece would never be able to move (see `would_be_stuck`)
    * a pawn on a column that already holds an unpromoted pawn of the same side (nifu)
    """
    if would_be_stuck(piece.type, to_square, piece.color):
        return False
    if piece.type != PieceType.PAWN:
        return True
    return not any(
        square.col == to_square.col
        for square in board.locate_pieces(PieceType.PAWN, piece.color)
    )
