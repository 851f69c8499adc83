"""Shorthands shared by the test modules"""

from src.chess.rules import CHESS_RULES
from src.engine.notation import algebraic_to_position
from src.engine.position import Position
from src.engine.rules import VariantRules
from src.xiangqi.rules import XIANGQI_RULES

EMPTY_CHESS = "/".join(["8"] * 8)
EMPTY_XIANGQI = "/".join(["9"] * 10)


def square(name: str, rules: VariantRules = CHESS_RULES) -> Position:
    """'e4' -> Position, on the board of the given variant"""
    return algebraic_to_position(name, rules.dimensions)


def xq(name: str) -> Position:
    """'e10' -> Position on the xiangqi board"""
    return square(name, XIANGQI_RULES)


def squares(*names: str, rules: VariantRules = CHESS_RULES) -> set[Position]:
    return {square(name, rules) for name in names}
