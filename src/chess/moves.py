"""
Geometry/Base movement and capturing/attacking rules for chess

Key idea: Use strategy pattern to define the movement rule for each piece type.
Every rule answers: "may this piece move from A to B on this board?"

Leaving your own king in check is handled by the engine (src/engine/check.py), not here.
"""

from dataclasses import replace
from typing import Callable

from src.chess.board import PAWN_START_ROW, PROMOTION_ROW, pawn_direction
from src.chess.castling import CastlingSquares, castling_rule_for
from src.chess.pieces import PROMOTION_OPTIONS, PieceType
from src.core.shared_types import Color
from src.engine.board import Board
from src.engine.moves import Move
from src.engine.pieces import Piece
from src.engine.position import Position, Vector, squares_between, step_towards
from src.engine.rules import MovementRule

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def opponent_of(color: Color) -> Color:
    return Color.WHITE if color == Color.BLACK else Color.BLACK


# --- MOVEMENT RULES ---
def sliding_move(board: Board, from_square: Position, to_square: Position, directions: list[Vector]) -> bool:
    """
    Sliding pieces (bishop, rook, queen)
    ----

    The destination must lie along one of the directions, and every square strictly in between must be empty.
    (Whatever stands on the destination itself is the capture, the engine already filtered out your own pieces.)
    """
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    on_a_line = d_row == 0 or d_col == 0 or abs(d_row) == abs(d_col)
    if not on_a_line:
        return False
    if step_towards(from_square, to_square) not in directions:
        return False
    return board.is_path_clear(from_square, to_square)


def single_step_move(from_square: Position, to_square: Position, deltas: list[Vector]) -> bool:
    """Sliding is for bishops, rooks, and queens. This is the equivalent for kings and knights that just jump by a fixed delta"""
    delta = (to_square.row - from_square.row, to_square.col - from_square.col)
    return delta in deltas


def is_valid_pawn_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally (one square forward)
    - takes en passant: diagonally onto the square the opponent's pawn just skipped
    """
    direction = pawn_direction(piece.color)
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    target = board.piece_at(to_square)

    # pawn pushes
    if d_col == 0:
        if target is not None:
            return False
        if d_row == direction:
            return True
        between = from_square.offset((direction, 0))
        return (
            d_row == 2 * direction
            and from_square.row == PAWN_START_ROW[piece.color]
            and board.is_empty(between)
        )

    # pawn takes
    if d_row != direction or abs(d_col) != 1:
        return False
    if target is not None:
        return target.color != piece.color
    return is_en_passant_capture(board, piece, from_square, to_square)


def is_en_passant_capture(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    Diagonal pawn move onto the en passant square.

    NOTE: the pawn being taken stands next to the moving pawn: same row as where we start, same column as where we end.
    """
    if board.en_passant_target != to_square:
        return False
    taken = board.piece_at(Position(from_square.row, to_square.col))
    return (
        taken is not None
        and taken.type == PieceType.PAWN
        and taken.color == opponent_of(piece.color)
    )


def is_valid_knight_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Knights always jump such that |delta_row| + |delta_col| = 3. Never blocked."""
    return single_step_move(from_square, to_square, KNIGHT_DELTAS)


def is_valid_bishop_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return sliding_move(board, from_square, to_square, DIAGONALS)


def is_valid_rook_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Rooks move either horizontally or vertically"""
    return sliding_move(board, from_square, to_square, STRAIGHTS)


def is_valid_queen_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return sliding_move(board, from_square, to_square, STRAIGHTS + DIAGONALS)


def is_valid_king_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (two squares towards one of the rooks).
    """
    if single_step_move(from_square, to_square, KING_DELTAS):
        return True
    castling = castling_rule_for(piece.color, from_square, to_square)
    return castling is not None and can_castle(board, piece, castling)


def can_castle(board: Board, king: Piece, castling: CastlingSquares) -> bool:
    """
    **you are allowed to castle if**

    * Neither the king nor the rook has moved before.
    * There is no piece in between the king and the rook.
    * You are not in check, and the king does not pass through or land on an attacked square.
    """
    if king.has_moved:
        return False

    rook = board.piece_at(castling.rook_from)
    if rook is None or rook.type != PieceType.ROOK or rook.color != king.color or rook.has_moved:
        return False

    if any(not board.is_empty(square) for square in castling.empty_path()):
        return False

    opponent = opponent_of(king.color)
    return not any(is_square_attacked(board, square, opponent) for square in castling.king_path())


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Position,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    We walk along the directions until we hit another piece or the edge of the board.

    ---
    NOTE: castling needs to know about attacked squares, and the king's own movement rule handles castling.
    Walking the rays (instead of asking every enemy piece for its moves) keeps that from recursing.
    """
    for direction in directions:
        target_square = square.offset(direction)
        while board.is_valid_position(target_square):
            piece_found = board.piece_at(target_square)
            if piece_found is not None:
                # only the first piece in sight matters
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(direction)
    return False


def single_step_attack(
    square: Position,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights.

    ---
    Returns TRUE if a piece of the given color and type stands on one of the squares.
    """
    for delta in deltas:
        piece_found = board.piece_at(square.offset(delta))
        if piece_found is not None and piece_found.color == by_color and piece_found.type == by_piece_type:
            return True
    return False


def is_attacked_by_pawn(square: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one row DOWN the board (a white pawn moves UP the board).

    Hence, vectors are exactly opposite to the direction the attacking pawn moves in.
    """
    back = -pawn_direction(by_color)
    return single_step_attack(square, by_color, PieceType.PAWN, board, [(back, 1), (back, -1)])


def is_attacked_by_knight(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_on_diagonal(square: Position, by_color: Color, board: Board) -> bool:
    """Bishops and queens"""
    return raycasting_attack(square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS)


def is_attacked_on_straight(square: Position, by_color: Color, board: Board) -> bool:
    """Rooks and queens"""
    return raycasting_attack(square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS)


def is_attacked_by_king(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_on_diagonal,
    is_attacked_on_straight,
    is_attacked_by_king,
]


def is_square_attacked(board: Board, square: Position, by_color: Color) -> bool:
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)


# --- SIDE EFFECTS OF A MOVE ---
def after_chess_move(board_before: Board, board: Board, move: Move) -> Move:
    """
    Board update for the special moves (the plain part of the move has already been made on `board`)
    ----

    1. castling: move the rook too
    2. en passant: remove the pawn that gets taken
    3. double pawn push: record the en passant square for the next move
    4. promotion: replace the pawn on the last row (queen unless another piece type was requested)
    """
    piece = move.piece
    if piece.type != PieceType.PAWN and move.promotion is not None:
        move = replace(move, promotion=None)

    if piece.type == PieceType.KING:
        castling = castling_rule_for(piece.color, move.from_square, move.to_square)
        if castling is not None:
            rook = board.piece_at(castling.rook_from)
            board.set_piece(castling.rook_from, None)
            board.set_piece(castling.rook_to, rook.moved() if rook else None)
            return replace(move, is_castling=True)
        return move

    if piece.type != PieceType.PAWN:
        return move

    if move.captured_piece is None and move.from_square.col != move.to_square.col:
        # the pawn taken stood in the same column as the en passant square, on the row the moving pawn came from
        take_square = Position(move.from_square.row, move.to_square.col)
        captured = board.piece_at(take_square)
        board.set_piece(take_square, None)
        move = replace(move, captured_piece=captured, is_en_passant=True)

    if abs(move.to_square.row - move.from_square.row) == 2:
        skipped = squares_between(move.from_square, move.to_square)
        board.en_passant_target = skipped[0]

    if move.to_square.row == PROMOTION_ROW[piece.color]:
        promote_to = move.promotion if move.promotion in PROMOTION_OPTIONS else PieceType.QUEEN
        board.set_piece(move.to_square, piece.promoted(promote_to).moved())
        move = replace(move, promotion=promote_to)
    elif move.promotion is not None:
        move = replace(move, promotion=None)
    return move
