"""Defines the piece value shared by all variants"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

from src.core.shared_types import Color


@dataclass(frozen=True)
class Piece:
    """
    Immutable value type.

    A piece that moved is a new piece value with updated flags, never an in-place mutation.
    That way board copies can share piece values without one simulation leaking into another.
    """

    type: StrEnum
    color: Color
    has_moved: bool = False
    has_crossed_river: bool = False

    def moved(self) -> Self:
        return self if self.has_moved else replace(self, has_moved=True)

    def crossed_river(self) -> Self:
        return self if self.has_crossed_river else replace(self, has_crossed_river=True)

    def promoted(self, new_type: StrEnum) -> Self:
        return replace(self, type=new_type)

    def is_same_kind(self, other: "Piece") -> bool:
        """Same type and color, ignoring the movement flags."""
        return self.type == other.type and self.color == other.color
