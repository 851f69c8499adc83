"""Shogi (Japanese chess) as a configuration of the generic engine"""

from src.core.shared_types import Color, GameStatus, Variant
from src.engine.rules import VariantRules
from src.shogi.board import PIECE_TO_FEN, PROMOTED_FORMS, SHOGI_DIMENSIONS, STARTING_POSITION, PieceType
from src.shogi.moves import MOVEMENT_RULES, after_shogi_move, can_drop

# Stalemate does not exist in shogi: a side without a legal move has lost.
# The same position four times (sennichite) is a draw.
SHOGI_RULES = VariantRules(
    variant=Variant.SHOGI,
    dimensions=SHOGI_DIMENSIONS,
    players=(Color.SENTE, Color.GOTE),
    king_type=PieceType.KING,
    movement_rules=MOVEMENT_RULES,
    fen_letters=PIECE_TO_FEN,
    starting_position=STARTING_POSITION,
    after_move=after_shogi_move,
    promotion_types=tuple(PROMOTED_FORMS.values()),
    promoted_forms=PROMOTED_FORMS,
    drop_rule=can_drop,
    no_moves_status=GameStatus.CHECKMATE,
    repetition_limit=4,
)
