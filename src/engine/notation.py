"""
Algebraic notation: the serialization boundary towards users and AI adapters.

Files are letters starting at 'a' (left to right), ranks are numbers counted from the bottom of the board
(white's / red's side). So the rank of a square is `rows - row`.
Chess: a1-h8. Xiangqi: a1-i10 (a rank can have two digits). Shogi: a1-i9. Jungle: a1-g9.
"""

import re
from string import ascii_lowercase
from typing import Optional

from src.core.exceptions import InvalidNotationError
from src.engine.position import Dimensions, Position

# A letter, then the rank digits. The rank is matched greedily: 'a10' is rank 10, never 'a1' + '0'
SQUARE_PATTERN = re.compile(r"([a-z])([1-9][0-9]?)")
MOVE_PATTERN = re.compile(r"^([a-z][1-9][0-9]?)-?([a-z][1-9][0-9]?)([a-z+])?$")
# Dropping a piece from the hand (shogi): piece letter, '*', square. ex. 'p*e5'
DROP_PATTERN = re.compile(r"^([a-z])\*([a-z][1-9][0-9]?)$")
DROP_MARKER = "*"


def position_to_algebraic(square: Position, dimensions: Dimensions) -> str:
    if not square.is_within(dimensions):
        raise InvalidNotationError(f"{square} is not on a {dimensions.rows}x{dimensions.cols} board")
    return f"{ascii_lowercase[square.col]}{dimensions.rows - square.row}"


def algebraic_to_position(text: str, dimensions: Dimensions) -> Position:
    """Parse untrusted text like 'e4' / 'a10'. Fails loudly on anything malformed."""
    normalized = text.strip().lower() if isinstance(text, str) else ""
    match = SQUARE_PATTERN.fullmatch(normalized)
    if match is None:
        raise InvalidNotationError(f"Invalid algebraic notation: {text!r}")

    file_letter, rank_digits = match.groups()
    col = ascii_lowercase.index(file_letter)
    rank = int(rank_digits)
    if col >= dimensions.cols:
        raise InvalidNotationError(
            f"Unknown file {file_letter!r} in {text!r} (files a-{ascii_lowercase[dimensions.cols - 1]})"
        )
    if not 1 <= rank <= dimensions.rows:
        raise InvalidNotationError(f"Rank {rank} out of range 1-{dimensions.rows} in {text!r}")
    return Position(dimensions.rows - rank, col)


def format_move(
    from_square: Position,
    to_square: Position,
    dimensions: Dimensions,
    promotion_letter: Optional[str] = None,
) -> str:
    """<from><to>[promotion], ex. 'e2e4', 'e7e8q', 'h10h9', 'b8b9+'"""
    return (
        f"{position_to_algebraic(from_square, dimensions)}"
        f"{position_to_algebraic(to_square, dimensions)}"
        f"{promotion_letter or ''}"
    )


def parse_move(text: str, dimensions: Dimensions) -> tuple[Position, Position, Optional[str]]:
    """
    Split move text into (from, to, promotion letter).

    Accepts an optional '-' between the squares ('b1-c3'). Without the separator the first rank
    is still read greedily, so 'a10a9' splits as a10 / a9.
    """
    normalized = text.strip().lower() if isinstance(text, str) else ""
    match = MOVE_PATTERN.match(normalized)
    if match is None:
        raise InvalidNotationError(f"Invalid move notation: {text!r}")
    from_text, to_text, promotion_letter = match.groups()
    from_square = algebraic_to_position(from_text, dimensions)
    to_square = algebraic_to_position(to_text, dimensions)
    return from_square, to_square, promotion_letter


def is_drop_notation(text: str) -> bool:
    return isinstance(text, str) and DROP_MARKER in text


def format_drop(piece_letter: str, to_square: Position, dimensions: Dimensions) -> str:
    """<piece letter>*<square>, ex. 'p*e5'"""
    return f"{piece_letter.lower()}{DROP_MARKER}{position_to_algebraic(to_square, dimensions)}"


def parse_drop(text: str, dimensions: Dimensions) -> tuple[str, Position]:
    """Split drop text into (piece letter, destination)."""
    normalized = text.strip().lower() if isinstance(text, str) else ""
    match = DROP_PATTERN.match(normalized)
    if match is None:
        raise InvalidNotationError(f"Invalid drop notation: {text!r}")
    piece_letter, to_text = match.groups()
    return piece_letter, algebraic_to_position(to_text, dimensions)
