"""Jungle (dou shou qi) as a configuration of the generic engine"""

from src.core.shared_types import Color, GameStatus, Variant
from src.engine.rules import VariantRules
from src.jungle.board import JUNGLE_DIMENSIONS, PIECE_TO_FEN, STARTING_POSITION
from src.jungle.moves import MOVEMENT_RULES, has_lost

# No king: winning is entering the enemy den, or leaving the opponent without a move
JUNGLE_RULES = VariantRules(
    variant=Variant.JUNGLE,
    dimensions=JUNGLE_DIMENSIONS,
    players=(Color.RED, Color.BLUE),
    king_type=None,
    movement_rules=MOVEMENT_RULES,
    fen_letters=PIECE_TO_FEN,
    starting_position=STARTING_POSITION,
    has_lost=has_lost,
    no_moves_status=GameStatus.CHECKMATE,
)
