"""The board implements all the bookkeeping of the `position` (the configuration of pieces on the grid)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Iterator, Optional, Self

from src.core.exceptions import InvalidPositionError
from src.core.shared_types import Color
from src.engine.pieces import Piece
from src.engine.position import Dimensions, Position, squares_between

if TYPE_CHECKING:
    from src.engine.rules import VariantRules

Grid = list[list[Optional[Piece]]]
# Marks a promoted piece in FEN strings (shogi: +P is a promoted pawn)
PROMOTED_PREFIX = "+"


@dataclass
class Board:
    """
    A rows x cols grid of optional pieces.

    Ownership: a board is exclusively owned by whoever holds it.
    Always `copy()` before a hypothetical change (check simulations / applying a move).
    """

    dimensions: Dimensions
    grid: Grid
    # chess: square a pawn may capture on by en passant during the next move only
    en_passant_target: Optional[Position] = field(default=None)
    # shogi: captured piece types each side can drop back onto the board
    hands: dict[Color, tuple[StrEnum, ...]] = field(default_factory=dict)

    @classmethod
    def empty(cls, dimensions: Dimensions) -> Self:
        grid: Grid = [[None] * dimensions.cols for _ in range(dimensions.rows)]
        return cls(dimensions, grid)

    @classmethod
    def from_fen(cls, placement: str, rules: VariantRules) -> Self:
        """Construct a board from the placement part of a FEN string.

        ex. chess starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * the first rank listed is row 0 (top of the board, black's side)
        * every letter is a piece: upper case for the side that moves first (white/red), lower case for black
        * a number denotes the amount of consecutive empty squares (xiangqi allows 9, so a single digit is enough)
        * a '+' in front of a letter is a promoted piece (shogi)
        """
        dimensions = rules.dimensions
        rows = placement.strip().split("/")
        if len(rows) != dimensions.rows:
            raise InvalidPositionError(
                f"Expected {dimensions.rows} ranks separated by '/', got {len(rows)}: {placement!r}"
            )

        board = cls.empty(dimensions)
        for row, fen_one_row in enumerate(rows):
            col = 0
            prefix = ""
            for character in fen_one_row:
                if character == PROMOTED_PREFIX and not prefix:
                    prefix = character
                    continue
                if character.isdigit() and not prefix:
                    col += int(character)
                    continue

                piece = rules.piece_from_fen(prefix + character)
                if piece is None:
                    raise InvalidPositionError(
                        f"Unknown piece letter {prefix + character!r} in {placement!r}"
                    )
                prefix = ""
                if col >= dimensions.cols:
                    raise InvalidPositionError(f"Row {row} is too long: {fen_one_row!r}")
                board.grid[row][col] = rules.initial_flags(piece, Position(row, col))
                col += 1

            if prefix:
                raise InvalidPositionError(f"Dangling {PROMOTED_PREFIX!r} in row {row}: {fen_one_row!r}")
            if col != dimensions.cols:
                raise InvalidPositionError(
                    f"Row {row} should describe {dimensions.cols} squares, got {col}: {fen_one_row!r}"
                )
        return board

    def to_fen(self, rules: VariantRules) -> str:
        """Rows are separated by slashes in the FEN string."""
        return "/".join(self._row_to_fen(row, rules) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: list[Optional[Piece]], rules: VariantRules) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(rules.piece_to_fen(piece))

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- LOOKUPS ---
    def is_valid_position(self, square: Position) -> bool:
        return square.is_within(self.dimensions)

    def piece_at(self, square: Position) -> Optional[Piece]:
        """Absent for an out of range or empty square. Never raises."""
        if not self.is_valid_position(square):
            return None
        return self.grid[square.row][square.col]

    def set_piece(self, square: Position, piece: Optional[Piece]) -> None:
        """Out of range squares are silently ignored (they come from offset arithmetic near the edges)."""
        if self.is_valid_position(square):
            self.grid[square.row][square.col] = piece

    def is_empty(self, square: Position) -> bool:
        return self.piece_at(square) is None

    def copy(self) -> Board:
        """New grid: rows are never shared. Pieces are immutable, so they can be."""
        return Board(
            dimensions=self.dimensions,
            grid=[list(row) for row in self.grid],
            en_passant_target=self.en_passant_target,
            hands=dict(self.hands),
        )

    # --- PIECES IN HAND ---
    def hand(self, color: Color) -> tuple[StrEnum, ...]:
        return self.hands.get(color, ())

    def add_to_hand(self, color: Color, piece_type: StrEnum) -> None:
        self.hands[color] = (*self.hand(color), piece_type)

    def remove_from_hand(self, color: Color, piece_type: StrEnum) -> None:
        """Raises ValueError if that piece type is not in hand."""
        hand = list(self.hand(color))
        hand.remove(piece_type)
        self.hands[color] = tuple(hand)

    def hand_to_fen(self, rules: VariantRules) -> str:
        """All pieces in hand, first player's in upper case, ex. 'PPb'. '-' when both hands are empty."""
        letters = [
            rules.piece_to_fen(Piece(piece_type, color))
            for color in rules.players
            for piece_type in self.hand(color)
        ]
        return "".join(sorted(letters, key=lambda letter: (letter.islower(), letter))) or "-"

    def set_hand_from_fen(self, text: str, rules: VariantRules) -> None:
        """Inverse of `hand_to_fen`. Replaces both hands."""
        self.hands = {}
        if text == "-":
            return
        for character in text:
            piece = rules.piece_from_fen(character)
            if piece is None:
                raise InvalidPositionError(f"Unknown piece letter {character!r} in hand {text!r}")
            self.add_to_hand(piece.color, piece.type)

    def squares(self) -> Iterator[Position]:
        for row in range(self.dimensions.rows):
            for col in range(self.dimensions.cols):
                yield Position(row, col)

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        for square in self.squares():
            piece = self.piece_at(square)
            if piece is not None:
                yield square, piece

    def locate_color(self, color: Color) -> list[Position]:
        return [square for square, piece in self.pieces() if piece.color == color]

    def locate_pieces(self, piece_type: str, color: Color) -> list[Position]:
        return [
            square
            for square, piece in self.pieces()
            if piece.type == piece_type and piece.color == color
        ]

    def find_king(self, king_type: str, color: Color) -> Optional[Position]:
        """Linear scan. None if that side has no king on the board."""
        return next(iter(self.locate_pieces(king_type, color)), None)

    # --- PATHS ---
    def count_pieces_between(self, from_square: Position, to_square: Position) -> int:
        """Number of pieces strictly between two squares on a shared line."""
        return sum(
            1 for square in squares_between(from_square, to_square) if not self.is_empty(square)
        )

    def is_path_clear(self, from_square: Position, to_square: Position) -> bool:
        return self.count_pieces_between(from_square, to_square) == 0
