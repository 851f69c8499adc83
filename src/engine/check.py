"""
Check and terminal state detection.

A move is only legal if it does not leave the mover's own king in check.
That requires a lookahead: copy the board, make the move, and look for attacks on the king.
Every simulation happens on a private copy, so nothing here mutates the boards it is given.
"""

import logging
from typing import Optional

from src.core.exceptions import InvariantViolationError
from src.core.shared_types import Color, GameStatus
from src.engine.board import Board
from src.engine.moves import apply_drop, apply_move, get_possible_drops, get_possible_moves, is_valid_move
from src.engine.pieces import Piece
from src.engine.position import Position
from src.engine.rules import VariantRules

logger = logging.getLogger(__name__)


def find_king(rules: VariantRules, board: Board, color: Color) -> Optional[Position]:
    if rules.king_type is None:
        return None
    return board.find_king(rules.king_type, color)


def is_square_attacked(rules: VariantRules, board: Board, square: Position, by_color: Color) -> bool:
    """Can any piece of `by_color` move onto the square?"""
    return any(
        is_valid_move(rules, board, attacker_square, square)
        for attacker_square in board.locate_color(by_color)
    )


def is_king_in_check(rules: VariantRules, board: Board, color: Color) -> bool:
    """
    Is the king of `color` attacked?
    ----

    * attacked: some opposing piece has the king's square among its moves
    * exposed: variant specific (xiangqi: the two kings face each other on an open file)

    A board without a king for `color` is reported as not in check (conservative default).
    So is every position of a variant without kings.
    """
    king_square = find_king(rules, board, color)
    if king_square is None:
        return False

    if is_square_attacked(rules, board, king_square, rules.opponent(color)):
        return True
    return rules.king_exposed is not None and rules.king_exposed(board, color)


def leaves_king_in_check(
    rules: VariantRules, board: Board, from_square: Position, to_square: Position
) -> bool:
    """Simulate the move on a copy and test the mover's own king."""
    piece = board.piece_at(from_square)
    if piece is None:
        return False
    simulated_board, _ = apply_move(rules, board, from_square, to_square)
    return is_king_in_check(rules, simulated_board, piece.color)


def get_legal_moves(rules: VariantRules, board: Board, from_square: Position) -> set[Position]:
    """Pseudo-legal moves of the piece, minus those that put (or leave) its own king in check."""
    return {
        to_square
        for to_square in get_possible_moves(rules, board, from_square)
        if not leaves_king_in_check(rules, board, from_square, to_square)
    }


def drop_leaves_king_in_check(rules: VariantRules, board: Board, piece: Piece, to_square: Position) -> bool:
    """A drop never exposes the king, but it has to get it out of check if it is in check."""
    simulated_board, _ = apply_drop(rules, board, piece, to_square)
    return is_king_in_check(rules, simulated_board, piece.color)


def get_legal_drops(rules: VariantRules, board: Board, piece: Piece) -> set[Position]:
    return {
        to_square
        for to_square in get_possible_drops(rules, board, piece)
        if not drop_leaves_king_in_check(rules, board, piece, to_square)
    }


def has_any_legal_moves(rules: VariantRules, board: Board, color: Color) -> bool:
    """Stops at the first move (or drop) that does not leave the mover in check."""
    for from_square in board.locate_color(color):
        for to_square in get_possible_moves(rules, board, from_square):
            if not leaves_king_in_check(rules, board, from_square, to_square):
                return True

    for piece_type in set(board.hand(color)):
        piece = Piece(piece_type, color)
        for to_square in get_possible_drops(rules, board, piece):
            if not drop_leaves_king_in_check(rules, board, piece, to_square):
                return True
    return False


def get_game_status(rules: VariantRules, board: Board, color: Color) -> GameStatus:
    """
    Classify the position for the side to move.

    lost by a variant rule (jungle: enemy piece in your den): checkmate.
    in check: checkmate without an escape, check otherwise.
    not in check: without any legal move the variant decides (stalemate in chess / xiangqi,
    a loss in shogi / jungle), playing otherwise.

    (draw is never produced here: repetition / agreement is up to the session.)
    """
    if rules.has_lost is not None and rules.has_lost(board, color):
        return GameStatus.CHECKMATE

    in_check = is_king_in_check(rules, board, color)
    has_moves = has_any_legal_moves(rules, board, color)
    if in_check:
        return GameStatus.CHECK if has_moves else GameStatus.CHECKMATE
    return GameStatus.PLAYING if has_moves else rules.no_moves_status


def require_kings(rules: VariantRules, board: Board) -> None:
    """Fail fast on positions a real game can never reach: every side needs exactly one king."""
    if rules.king_type is None:
        return
    for color in rules.players:
        kings = board.locate_pieces(rules.king_type, color)
        if len(kings) != 1:
            logger.warning("Rejecting %s position: %s has %d kings", rules.variant, color, len(kings))
            raise InvariantViolationError(
                f"{rules.variant} position must have exactly one {rules.king_type} per side, "
                f"{color} has {len(kings)}"
            )
