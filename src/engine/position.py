"""
A square on the board, addressed by (row, col)

(placed in its own module as multiple other modules need to import it)

Row 0 is the top of the board as displayed (black's side in both chess and xiangqi).
"""

from __future__ import annotations

from dataclasses import dataclass

Vector = tuple[int, int]


@dataclass(frozen=True)
class Dimensions:
    rows: int
    cols: int


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def is_within(self, dimensions: Dimensions) -> bool:
        """Bounds check only. Out of range positions are perfectly representable."""
        return (0 <= self.row < dimensions.rows) and (0 <= self.col < dimensions.cols)

    def offset(self, vector: Vector) -> Position:
        d_row, d_col = vector
        return Position(self.row + d_row, self.col + d_col)


def step_towards(from_square: Position, to_square: Position) -> Vector:
    """Unit step (-1, 0 or 1 per axis) pointing from one square to the other."""
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    return (_sign(d_row), _sign(d_col))


def squares_between(from_square: Position, to_square: Position) -> list[Position]:
    """
    Squares strictly between two squares on the same row, column or diagonal.

    Returns an empty list for adjacent squares or squares that do not share a line.
    """
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    on_a_line = d_row == 0 or d_col == 0 or abs(d_row) == abs(d_col)
    if not on_a_line:
        return []

    step = step_towards(from_square, to_square)
    squares: list[Position] = []
    square = from_square.offset(step)
    while square != to_square:
        squares.append(square)
        square = square.offset(step)
    return squares


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)
