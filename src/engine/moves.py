"""
Variant independent move logic: validation, enumeration and application.

The per-piece geometry lives in the variant's movement rules (see VariantRules).
Nothing here checks whether the mover's own king is left in check: that is done in check.py,
on top of these pseudo-legal moves.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.engine.board import Board
from src.engine.notation import format_drop, format_move
from src.engine.pieces import Piece
from src.engine.position import Position
from src.engine.rules import VariantRules


@dataclass(frozen=True)
class Move:
    """
    Immutable historical record of a move. `piece` is the moving piece as it was before the move.

    A drop (a piece from the hand put on the board) has no origin square.
    """

    from_square: Optional[Position]
    to_square: Position
    piece: Piece
    captured_piece: Optional[Piece] = None
    promotion: Optional[StrEnum] = None
    is_castling: bool = False
    is_en_passant: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_drop(self) -> bool:
        return self.from_square is None

    def to_notation(self, rules: VariantRules) -> str:
        if self.from_square is None:
            return format_drop(rules.fen_letters[self.piece.type], self.to_square, rules.dimensions)
        return format_move(
            self.from_square, self.to_square, rules.dimensions, rules.promotion_letter(self.promotion)
        )


def is_valid_move(rules: VariantRules, board: Board, from_square: Position, to_square: Position) -> bool:
    """
    Pseudo-legal move check
    ----

    1. both squares on the board, and not the same square
    2. there is a piece to move
    3. the destination is not occupied by a piece of the same color (checked here, not in every rule)
    4. the geometry rule of the piece type allows it
    """
    if not (board.is_valid_position(from_square) and board.is_valid_position(to_square)):
        return False
    if from_square == to_square:
        return False

    piece = board.piece_at(from_square)
    if piece is None:
        return False

    target = board.piece_at(to_square)
    if target is not None and target.color == piece.color:
        return False

    movement_rule = rules.movement_rule(piece)
    if movement_rule is None:
        return False
    return movement_rule(board, piece, from_square, to_square)


def is_move_valid(
    rules: VariantRules,
    board: Board,
    from_square: Position,
    to_square: Position,
    piece: Piece,
) -> bool:
    """Same as `is_valid_move`, but also require that the piece on the origin square is the expected one."""
    piece_on_square = board.piece_at(from_square)
    if piece_on_square is None or not piece_on_square.is_same_kind(piece):
        return False
    return is_valid_move(rules, board, from_square, to_square)


def get_possible_moves(rules: VariantRules, board: Board, from_square: Position) -> set[Position]:
    """
    All pseudo-legal destinations of the piece on `from_square`.

    Scans every square of the board and filters through `is_valid_move`.
    Cost is O(rows * cols) rule evaluations, fine at these board sizes.
    """
    if board.piece_at(from_square) is None:
        return set()
    return {
        to_square
        for to_square in board.squares()
        if is_valid_move(rules, board, from_square, to_square)
    }


def apply_move(
    rules: VariantRules,
    board: Board,
    from_square: Position,
    to_square: Position,
    promotion: Optional[StrEnum] = None,
) -> tuple[Board, Move]:
    """
    Produce the position after the move. The given board is left untouched.
    ----

    1. copy the board
    2. clear the origin, place the (flag-updated) piece on the destination. Whatever stood there is captured.
    3. let the variant apply its side effects (castling rook, en passant, promotion, ...)

    Legality is NOT checked here.
    """
    piece = board.piece_at(from_square)
    if piece is None:
        raise ValueError(f"No piece to move on {from_square}")

    new_board = board.copy()
    new_board.en_passant_target = None
    captured_piece = new_board.piece_at(to_square)
    new_board.set_piece(from_square, None)
    new_board.set_piece(to_square, rules.update_piece(piece, from_square, to_square))

    move = Move(
        from_square=from_square,
        to_square=to_square,
        piece=piece,
        captured_piece=captured_piece,
        promotion=promotion,
    )
    if rules.after_move is not None:
        move = rules.after_move(board, new_board, move)
    return new_board, move


# --- DROPS ---
def is_valid_drop(rules: VariantRules, board: Board, piece: Piece, to_square: Position) -> bool:
    """
    Put a piece from the hand back on the board
    ----

    1. the variant allows drops at all
    2. the piece type is in the hand of that color
    3. the destination is an empty square on the board
    4. the variant's drop rule allows it (ex. shogi: no second pawn on a file)
    """
    if rules.drop_rule is None:
        return False
    if piece.type not in board.hand(piece.color):
        return False
    if not board.is_valid_position(to_square) or not board.is_empty(to_square):
        return False
    return rules.drop_rule(board, piece, to_square)


def get_possible_drops(rules: VariantRules, board: Board, piece: Piece) -> set[Position]:
    if rules.drop_rule is None or piece.type not in board.hand(piece.color):
        return set()
    return {to_square for to_square in board.squares() if is_valid_drop(rules, board, piece, to_square)}


def apply_drop(rules: VariantRules, board: Board, piece: Piece, to_square: Position) -> tuple[Board, Move]:
    """Take the piece out of the hand and place it. Legality is NOT checked here."""
    new_board = board.copy()
    new_board.en_passant_target = None
    new_board.remove_from_hand(piece.color, piece.type)
    new_board.set_piece(to_square, piece)
    return new_board, Move(from_square=None, to_square=to_square, piece=piece)
