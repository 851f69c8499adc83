"""
Type definitions used across layers
"""

from enum import StrEnum


class Variant(StrEnum):
    CHESS = "chess"
    XIANGQI = "xiangqi"
    SHOGI = "shogi"
    JUNGLE = "jungle"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"
    RED = "red"
    BLUE = "blue"
    # shogi: sente moves first, gote second
    SENTE = "sente"
    GOTE = "gote"


class GameStatus(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"


# Once reached, no further moves are accepted
TERMINAL_STATUSES: frozenset[GameStatus] = frozenset(
    {GameStatus.CHECKMATE, GameStatus.STALEMATE, GameStatus.DRAW}
)
