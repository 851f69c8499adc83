"""Unit tests for /src/shogi/board.py"""

import pytest

from src.core.shared_types import Color
from src.engine.pieces import Piece
from src.engine.position import Position
from src.shogi.board import (
    BASE_FORMS,
    PROMOTED_FORMS,
    STARTING_POSITION,
    PieceType,
    forward_direction,
    is_in_promotion_zone,
    rows_to_last_rank,
)
from src.shogi.rules import SHOGI_RULES


def test_starting_position() -> None:
    board = SHOGI_RULES.initial_board()
    assert board.to_fen(SHOGI_RULES) == STARTING_POSITION
    assert len(list(board.pieces())) == 40
    assert board.find_king(PieceType.KING, Color.SENTE) == Position(8, 4)
    assert board.find_king(PieceType.KING, Color.GOTE) == Position(0, 4)
    # sente's rook on the right, its bishop on the left
    assert board.piece_at(Position(7, 7)) == Piece(PieceType.ROOK, Color.SENTE)
    assert board.piece_at(Position(7, 1)) == Piece(PieceType.BISHOP, Color.SENTE)
    assert board.hands == {}


def test_promoted_forms() -> None:
    assert PROMOTED_FORMS[PieceType.ROOK] == PieceType.DRAGON
    assert PROMOTED_FORMS[PieceType.BISHOP] == PieceType.HORSE
    assert PieceType.GOLD not in PROMOTED_FORMS
    assert PieceType.KING not in PROMOTED_FORMS
    assert all(BASE_FORMS[promoted] == base for base, promoted in PROMOTED_FORMS.items())


@pytest.mark.parametrize(
    "row, color, expected",
    [
        (0, Color.SENTE, True),
        (2, Color.SENTE, True),
        (3, Color.SENTE, False),
        (8, Color.SENTE, False),
        (6, Color.GOTE, True),
        (8, Color.GOTE, True),
        (5, Color.GOTE, False),
    ],
)
def test_promotion_zone(row: int, color: Color, expected: bool) -> None:
    assert is_in_promotion_zone(Position(row, 4), color) is expected


def test_directions() -> None:
    assert forward_direction(Color.SENTE) == -1
    assert forward_direction(Color.GOTE) == 1
    assert rows_to_last_rank(Position(0, 0), Color.SENTE) == 0
    assert rows_to_last_rank(Position(8, 0), Color.GOTE) == 0
    assert rows_to_last_rank(Position(1, 0), Color.GOTE) == 7
