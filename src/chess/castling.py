"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.board import CHESS_DIMENSIONS
from src.core.shared_types import Color
from src.engine.notation import algebraic_to_position
from src.engine.position import Position, squares_between


class CastlingSide(Enum):
    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: Castling is only possible while both pieces are still unmoved, so they are known to be on their starting squares.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingSide) more readable"""
        king_from = algebraic_to_position(k_from, CHESS_DIMENSIONS)
        king_to = algebraic_to_position(k_to, CHESS_DIMENSIONS)
        rook_from = algebraic_to_position(r_from, CHESS_DIMENSIONS)
        rook_to = algebraic_to_position(r_to, CHESS_DIMENSIONS)
        return cls(king_from, king_to, rook_from, rook_to)

    def empty_path(self) -> list[Position]:
        """Every square between king and rook must be empty"""
        return squares_between(self.king_from, self.rook_from)

    def king_path(self) -> list[Position]:
        """The king may not start on, pass through, or land on an attacked square"""
        return [self.king_from, *squares_between(self.king_from, self.king_to), self.king_to]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic("e1", "g1", "h1", "f1"),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic("e1", "c1", "a1", "d1"),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic("e8", "g8", "h8", "f8"),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic("e8", "c8", "a8", "d8"),
}


def castling_rule_for(color: Color, king_from: Position, king_to: Position) -> Optional[CastlingSquares]:
    """The castling rule matching a king move, if the move is one."""
    for side in CastlingSide:
        rule = CASTLING_RULES[(color, side)]
        if rule.king_from == king_from and rule.king_to == king_to:
            return rule
    return None
