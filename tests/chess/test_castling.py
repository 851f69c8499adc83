"""unit tests for src/chess/castling.py"""

from src.chess.castling import CASTLING_RULES, CastlingSide, CastlingSquares, castling_rule_for
from src.core.shared_types import Color
from tests.helpers import square


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == square("e1")
    assert castling_squares.king_to == square("g1")
    assert castling_squares.rook_from == square("h1")
    assert castling_squares.rook_to == square("f1")


def test_paths_queen_side() -> None:
    """Queen side: b1 must be empty, but the king never passes it."""
    rule = CASTLING_RULES[(Color.WHITE, CastlingSide.QUEEN_SIDE)]
    assert set(rule.empty_path()) == {square("b1"), square("c1"), square("d1")}
    assert rule.king_path() == [square("e1"), square("d1"), square("c1")]


def test_paths_king_side() -> None:
    rule = CASTLING_RULES[(Color.BLACK, CastlingSide.KING_SIDE)]
    assert set(rule.empty_path()) == {square("f8"), square("g8")}
    assert rule.king_path() == [square("e8"), square("f8"), square("g8")]


def test_castling_rule_for_king_moves() -> None:
    assert castling_rule_for(Color.WHITE, square("e1"), square("g1")) == CASTLING_RULES[
        (Color.WHITE, CastlingSide.KING_SIDE)
    ]
    assert castling_rule_for(Color.BLACK, square("e8"), square("c8")) == CASTLING_RULES[
        (Color.BLACK, CastlingSide.QUEEN_SIDE)
    ]
    # right squares, wrong color
    assert castling_rule_for(Color.BLACK, square("e1"), square("g1")) is None
    # a normal king move
    assert castling_rule_for(Color.WHITE, square("e1"), square("f1")) is None
