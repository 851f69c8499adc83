"""
Capability interface of a game variant.

Key idea: the engine (enumeration, check detection, move application, session) is written once.
A variant is a configuration: board dimensions, the two players, which piece is the king,
a table of movement rules (strategy pattern: one predicate per piece type) and a few optional hooks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, Mapping, Optional

from src.core.shared_types import Color, GameStatus, Variant
from src.engine.board import Board
from src.engine.pieces import Piece
from src.engine.position import Dimensions, Position

if TYPE_CHECKING:
    from src.engine.moves import Move

# Is this a legal geometric move for this piece from A to B on this board?
MovementRule = Callable[[Board, Piece, Position, Position], bool]
# Value transition of the moving piece (ex. set has_moved / has_crossed_river)
PieceUpdate = Callable[[Piece, Position, Position], Piece]
# Flags a piece should carry when it is placed on a square while setting up a position
InitialFlags = Callable[[Piece, Position], Piece]
# Variant specific side effects on the (already copied) board after the basic move was made.
# Returns the move record, possibly enriched (castling, en passant, promotion)
AfterMove = Callable[[Board, Board, "Move"], "Move"]
# Extra reasons a king counts as attacked, beyond "an enemy piece can move onto it"
KingExposed = Callable[[Board, Color], bool]
# Variant specific way to lose besides checkmate (jungle: an enemy piece entered your den)
LossCondition = Callable[[Board, Color], bool]
# May this piece (taken from the hand) be dropped on this empty square?
DropRule = Callable[[Board, Piece, Position], bool]

# Move text suffix asking for the promoted form of the moving piece (shogi)
PROMOTE_SUFFIX = "+"


def mark_moved(piece: Piece, from_square: Position, to_square: Position) -> Piece:
    return piece.moved()


def keep_flags(piece: Piece, square: Position) -> Piece:
    return piece


@dataclass(frozen=True)
class VariantRules:
    variant: Variant
    dimensions: Dimensions
    # first entry moves first and uses upper case letters in FEN strings
    players: tuple[Color, Color]
    # None: the variant has no royal piece (jungle), so nobody is ever in check
    king_type: Optional[StrEnum]
    movement_rules: Mapping[StrEnum, MovementRule]
    fen_letters: Mapping[StrEnum, str]
    starting_position: str
    update_piece: PieceUpdate = mark_moved
    initial_flags: InitialFlags = keep_flags
    after_move: Optional[AfterMove] = None
    king_exposed: Optional[KingExposed] = None
    promotion_types: tuple[StrEnum, ...] = field(default=())
    # shogi: unpromoted type -> promoted type. Such promotions are written with the "+" suffix
    promoted_forms: Mapping[StrEnum, StrEnum] = field(default_factory=dict)
    drop_rule: Optional[DropRule] = None
    has_lost: Optional[LossCondition] = None
    # Status of a side without any legal move that is not in check
    no_moves_status: GameStatus = GameStatus.STALEMATE
    # Same position + same side to move this many times -> draw
    repetition_limit: int = 3

    @property
    def first_player(self) -> Color:
        return self.players[0]

    def opponent(self, color: Color) -> Color:
        first, second = self.players
        return second if color == first else first

    def initial_board(self) -> Board:
        return Board.from_fen(self.starting_position, self)

    def movement_rule(self, piece: Piece) -> Optional[MovementRule]:
        return self.movement_rules.get(piece.type)

    # --- FEN LETTERS ---
    def piece_to_fen(self, piece: Piece) -> str:
        letter = self.fen_letters[piece.type]
        return letter.upper() if piece.color == self.first_player else letter.lower()

    def piece_from_fen(self, character: str) -> Optional[Piece]:
        """Upper case: first player's pieces, lower case: second player's pieces. None for unknown letters."""
        piece_type = self._fen_to_type.get(character.lower())
        if piece_type is None:
            return None
        color = self.players[0] if character.isupper() else self.players[1]
        return Piece(piece_type, color)

    def piece_type_from_letter(self, letter: str) -> Optional[StrEnum]:
        return self._fen_to_type.get(letter.lower())

    @property
    def _fen_to_type(self) -> dict[str, StrEnum]:
        return {letter: piece_type for piece_type, letter in self.fen_letters.items()}

    # --- POSITION KEYS ---
    def side_to_fen(self, color: Color) -> str:
        """Active color field: 'w' for the first player (white/red), 'b' for black"""
        return "w" if color == self.first_player else "b"

    def side_from_fen(self, code: str) -> Optional[Color]:
        return {"w": self.players[0], "b": self.players[1]}.get(code)

    # --- PROMOTION LETTERS ---
    def promotion_letter(self, promotion: Optional[StrEnum]) -> Optional[str]:
        """Suffix of the move text: '+' for a shogi promotion, the piece letter otherwise ('q' in 'e7e8q')."""
        if promotion is None:
            return None
        if promotion in self.promoted_forms.values():
            return PROMOTE_SUFFIX
        return self.fen_letters[promotion]

    @property
    def allows_drops(self) -> bool:
        return self.drop_rule is not None
