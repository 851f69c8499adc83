"""Requests and Response models"""

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameStatus, Variant

PieceColor = str
PlayerName = str

# Syntax only: a file letter and a 1-2 digit rank. Whether the square exists depends on the variant.
SQUARE_SYNTAX = re.compile(r"^[a-zA-Z][1-9][0-9]?$")
# Pieces in hand, ex. "PPb", or "-" for empty hands
HAND_SYNTAX = re.compile(r"^(-|[a-zA-Z]+)$")


def _validate_square(value: str) -> str:
    if not isinstance(value, str) or SQUARE_SYNTAX.match(value.strip()) is None:
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value.strip().lower()


def _validate_piece_letter(value: str) -> str:
    if not isinstance(value, str) or len(value.strip()) != 1 or not value.strip().isalpha():
        raise InvalidRequestError(f"Expected a single piece letter, got {value!r}.")
    return value.strip().lower()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    variant: Variant
    player_name: str
    color: Color
    opponent_id: Optional[str] = None
    # '<placement>', '<placement> <w|b>' or '<placement> <w|b> <hand>'. None: the variant's initial layout
    starting_position: Optional[str] = None

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split()
        if not parts or len(parts) > 3 or "/" not in parts[0]:
            raise InvalidRequestError(
                "Starting position must be a placement string, optionally followed by the side to move (w/b) "
                "and the pieces in hand."
            )
        if len(parts) >= 2 and parts[1] not in ("w", "b"):
            raise InvalidRequestError(f"Side to move must be 'w' or 'b', got {parts[1]!r}.")
        if len(parts) == 3 and HAND_SYNTAX.match(parts[2]) is None:
            raise InvalidRequestError(f"Pieces in hand must be piece letters or '-', got {parts[2]!r}.")
        return " ".join(parts)


class GetGameRequest(BaseModel):
    game_id: UUID


class SelectSquareRequest(BaseModel):
    """
    A click on the board. `selected_square` is the square the client currently has selected (if any).
    `selected_drop` is the letter of the piece the client has picked from the hand instead (shogi).
    """

    game_id: UUID
    square: str
    selected_square: Optional[str] = None
    selected_drop: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)

    @field_validator("selected_square")
    @classmethod
    def validate_selected_square(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _validate_square(value)

    @field_validator("selected_drop")
    @classmethod
    def validate_selected_drop(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _validate_piece_letter(value)


class SelectHandPieceRequest(BaseModel):
    """A click on a piece in the hand of the side to move (shogi)."""

    game_id: UUID
    piece: str

    @field_validator("piece")
    @classmethod
    def validate_piece(cls, value: str) -> str:
        return _validate_piece_letter(value)


class LegalMovesRequest(BaseModel):
    """Legal moves of the side to move, or only of the piece on `square`."""

    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _validate_square(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    player_name: Optional[str] = None
    promote_to: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if value == "+":
            return value
        if len(value) != 1 or not value.isalpha():
            raise InvalidRequestError(f"Promotion must be a single piece letter or '+', got {value!r}.")
        return value.lower()


class DropRequest(BaseModel):
    """Put a piece from the hand of the side to move on an empty square (shogi)."""

    game_id: UUID
    piece: str
    to_square: str
    player_name: Optional[str] = None

    @field_validator("piece")
    @classmethod
    def validate_piece(cls, value: str) -> str:
        return _validate_piece_letter(value)

    @field_validator("to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class UndoMoveRequest(BaseModel):
    game_id: UUID


class DrawRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    variant: Variant
    players: dict[PieceColor, PlayerName]
    board: str
    current_player: Color
    status: GameStatus
    starting_position: str
    move_history: list[str]
    winner: Optional[Color] = None
    selected_square: Optional[str] = None
    possible_moves: list[str] = []
    # shogi: letters of the pieces each side holds in hand, and the hand piece the client picked
    hands: dict[PieceColor, list[str]] = {}
    selected_drop: Optional[str] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
