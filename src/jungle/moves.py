"""
Movement and capture rules for jungle pieces

Every animal steps one square orthogonally. On top of that:
* only the rat swims (enters water)
* lion and tiger jump straight across a pond, unless a piece (a swimming rat) is in the way
* nobody enters its own den. Reaching the enemy den wins the game (see `has_lost`)

There is no king and no check: the engine only needs the movement rules and the loss condition.
"""

from src.core.shared_types import Color
from src.engine.board import Board
from src.engine.pieces import Piece
from src.engine.position import Position, squares_between
from src.engine.rules import MovementRule
from src.jungle.board import DENS, RANKS, PieceType, Terrain, den_owner, is_water, terrain_at, trap_owner

JUMPERS = frozenset({PieceType.LION, PieceType.TIGER})


def can_enter(piece: Piece, square: Position) -> bool:
    terrain = terrain_at(square)
    if terrain == Terrain.WATER:
        return piece.type == PieceType.RAT
    if terrain == Terrain.DEN:
        return den_owner(square) != piece.color
    return True


def outranks(attacker: Piece, defender: Piece) -> bool:
    """Rank against rank (equal ranks take each other). The rat takes the elephant, never the other way round."""
    if attacker.type == PieceType.RAT and defender.type == PieceType.ELEPHANT:
        return True
    if attacker.type == PieceType.ELEPHANT and defender.type == PieceType.RAT:
        return False
    return RANKS[attacker.type] >= RANKS[defender.type]


def can_capture(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """
    May the piece take whatever stands on `to_square`? (True for an empty square)
    ----

    1. nothing leaves the water to take a piece on land
    2. a piece standing in an enemy trap takes nothing
    3. a piece standing in an enemy trap is taken by anything
    4. otherwise by rank
    """
    target = board.piece_at(to_square)
    if target is None:
        return True
    if is_water(from_square) and not is_water(to_square):
        return False
    attacker_trap = trap_owner(from_square)
    if attacker_trap is not None and attacker_trap != piece.color:
        return False
    target_trap = trap_owner(to_square)
    if target_trap is not None and target_trap != target.color:
        return True
    return outranks(piece, target)


def is_step(from_square: Position, to_square: Position) -> bool:
    return abs(to_square.row - from_square.row) + abs(to_square.col - from_square.col) == 1


def is_river_jump(board: Board, from_square: Position, to_square: Position) -> bool:
    """Straight across water only: every square in between is water, and empty. Landing on land."""
    if from_square.row != to_square.row and from_square.col != to_square.col:
        return False
    between = squares_between(from_square, to_square)
    if not between or is_water(to_square):
        return False
    return all(is_water(square) and board.is_empty(square) for square in between)


# --- MOVEMENT RULES ---
def is_valid_animal_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """One step up, down, left or right, onto terrain the animal may enter."""
    return (
        is_step(from_square, to_square)
        and can_enter(piece, to_square)
        and can_capture(board, piece, from_square, to_square)
    )


def is_valid_jumper_move(board: Board, piece: Piece, from_square: Position, to_square: Position) -> bool:
    """Lion and tiger: a normal step, or a jump across a pond."""
    if is_valid_animal_move(board, piece, from_square, to_square):
        return True
    return (
        piece.type in JUMPERS
        and is_river_jump(board, from_square, to_square)
        and can_enter(piece, to_square)
        and can_capture(board, piece, from_square, to_square)
    )


MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    piece_type: is_valid_jumper_move if piece_type in JUMPERS else is_valid_animal_move
    for piece_type in PieceType
}


# --- WINNING ---
def has_lost(board: Board, color: Color) -> bool:
    """An enemy animal stands in the den of `color`"""
    occupant = board.piece_at(DENS[color])
    return occupant is not None and occupant.color != color
