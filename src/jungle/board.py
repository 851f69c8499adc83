"""
Jungle (dou shou qi) board layout and terrain.

9 rows x 7 columns. Row 0 is blue's side (top), row 8 red's side (bottom).
Two 3x2 ponds fill the middle rows. Every side has a den in the middle of its back row, guarded by three traps.
"""

from enum import StrEnum
from typing import Optional

from src.core.shared_types import Color
from src.engine.position import Dimensions, Position

JUNGLE_DIMENSIONS = Dimensions(rows=9, cols=7)


class PieceType(StrEnum):
    ELEPHANT = "elephant"
    LION = "lion"
    TIGER = "tiger"
    LEOPARD = "leopard"
    DOG = "dog"
    WOLF = "wolf"
    CAT = "cat"
    RAT = "rat"


class Terrain(StrEnum):
    LAND = "land"
    WATER = "water"
    TRAP = "trap"
    DEN = "den"


FEN_TO_PIECE: dict[str, PieceType] = {
    "e": PieceType.ELEPHANT,
    "l": PieceType.LION,
    "t": PieceType.TIGER,
    "p": PieceType.LEOPARD,
    "d": PieceType.DOG,
    "w": PieceType.WOLF,
    "c": PieceType.CAT,
    "r": PieceType.RAT,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Higher ranks capture lower or equal ranks (the rat / elephant exception lives in moves.py)
RANKS: dict[PieceType, int] = {
    PieceType.ELEPHANT: 8,
    PieceType.LION: 7,
    PieceType.TIGER: 6,
    PieceType.LEOPARD: 5,
    PieceType.DOG: 4,
    PieceType.WOLF: 3,
    PieceType.CAT: 2,
    PieceType.RAT: 1,
}

STARTING_POSITION = "t5l/1c3d1/r1p1w1e/7/7/7/E1W1P1R/1D3C1/L5T"

WATER_ROWS = range(3, 6)
WATER_COLS = (1, 2, 4, 5)

DENS: dict[Color, Position] = {Color.RED: Position(8, 3), Color.BLUE: Position(0, 3)}
TRAPS: dict[Color, frozenset[Position]] = {
    Color.RED: frozenset({Position(8, 2), Position(8, 4), Position(7, 3)}),
    Color.BLUE: frozenset({Position(0, 2), Position(0, 4), Position(1, 3)}),
}


def is_water(square: Position) -> bool:
    return square.row in WATER_ROWS and square.col in WATER_COLS


def trap_owner(square: Position) -> Optional[Color]:
    """The side whose traps include this square, None for any other square."""
    return next((color for color, traps in TRAPS.items() if square in traps), None)


def den_owner(square: Position) -> Optional[Color]:
    return next((color for color, den in DENS.items() if den == square), None)


def terrain_at(square: Position) -> Terrain:
    if is_water(square):
        return Terrain.WATER
    if den_owner(square) is not None:
        return Terrain.DEN
    if trap_owner(square) is not None:
        return Terrain.TRAP
    return Terrain.LAND
