from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    DropRequest,
    LegalMovesRequest,
    MoveRequest,
    SelectHandPieceRequest,
    SelectSquareRequest,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Variant


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
@pytest.mark.parametrize(
    "starting_position",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
        "4k3/8/8/8/8/8/8/4K3 b",
        "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL w -",
        "4k4/9/9/9/9/9/9/9/4K4 b PPr",
    ],
)
def test_valid_starting_position(starting_position: str) -> None:
    """Test that CreateGameRequest accepts a placement, optionally with the side to move and the pieces in hand."""
    request = CreateGameRequest(
        variant=Variant.CHESS,
        player_name="don't hate the player, hate the name.",
        color=Color.BLACK,
        starting_position=starting_position,
    )
    assert request.starting_position == starting_position


def test_starting_position_is_optional() -> None:
    """Should be able to not supply a starting position, and validator just returns None."""
    request = CreateGameRequest(
        variant="xiangqi",
        player_name="don't hate the player, hate the name.",
        color=Color.RED,
    )
    assert request.starting_position is None
    assert request.variant == Variant.XIANGQI


@pytest.mark.parametrize(
    "invalid_position",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # full FEN: too many space-separated values
        "4k3/8/8/8/8/8/8/4K3 r",  # unknown side to move
        "4k4/9/9/9/9/9/9/9/4K4 w P2",  # digits in the hand
        "e2e4",  # not a placement at all
    ],
)
def test_invalid_starting_position(invalid_position: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(
            variant=Variant.CHESS,
            player_name="don't hate the player, hate the name.",
            color=Color.BLACK,
            starting_position=invalid_position,
        )


# -- Validation - MoveRequest --
@pytest.mark.parametrize("from_square, to_square", [("e2", "e4"), ("h10", "h9"), ("B1", "c3")])
def test_valid_square_names(mock_id: UUID, from_square: str, to_square: str) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation (ranks up to 2 digits)."""
    request = MoveRequest(game_id=mock_id, from_square=from_square, to_square=to_square)
    assert request.from_square == from_square.lower()
    assert request.to_square == to_square


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than three characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "a0",  # ranks start at 1
        "a100",  # at most two digits
    ],
)
def test_invalid_from_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square=square, to_square="e4")


def test_promotion_letter(mock_id: UUID) -> None:
    request = MoveRequest(game_id=mock_id, from_square="e7", to_square="e8", promote_to="Q")
    assert request.promote_to == "q"
    assert MoveRequest(game_id=mock_id, from_square="b7", to_square="b8", promote_to="+").promote_to == "+"
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square="e7", to_square="e8", promote_to="queen")


# -- Validation - click / legal moves --
def test_select_square_request(mock_id: UUID) -> None:
    request = SelectSquareRequest(game_id=mock_id, square="e2")
    assert request.selected_square is None
    with pytest.raises(InvalidRequestError):
        _ = SelectSquareRequest(game_id=mock_id, square="e2", selected_square="e")


def test_legal_moves_request(mock_id: UUID) -> None:
    assert LegalMovesRequest(game_id=mock_id).square is None
    assert LegalMovesRequest(game_id=mock_id, square="a10").square == "a10"
    with pytest.raises(InvalidRequestError):
        _ = LegalMovesRequest(game_id=mock_id, square="10a")


# -- Validation - pieces in hand --
def test_drop_request(mock_id: UUID) -> None:
    request = DropRequest(game_id=mock_id, piece="P", to_square="E5")
    assert request.piece == "p"
    assert request.to_square == "e5"
    with pytest.raises(InvalidRequestError):
        _ = DropRequest(game_id=mock_id, piece="pawn", to_square="e5")
    with pytest.raises(InvalidRequestError):
        _ = DropRequest(game_id=mock_id, piece="+", to_square="e5")


def test_hand_piece_selection_requests(mock_id: UUID) -> None:
    assert SelectHandPieceRequest(game_id=mock_id, piece="R").piece == "r"
    assert SelectSquareRequest(game_id=mock_id, square="e5", selected_drop="p").selected_drop == "p"
    with pytest.raises(InvalidRequestError):
        _ = SelectSquareRequest(game_id=mock_id, square="e5", selected_drop="1")
