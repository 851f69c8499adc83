"""Xiangqi (Chinese chess) as a configuration of the generic engine"""

from src.core.shared_types import Color, Variant
from src.engine.rules import VariantRules
from src.xiangqi.board import PIECE_TO_FEN, STARTING_POSITION, XIANGQI_DIMENSIONS, PieceType
from src.xiangqi.moves import MOVEMENT_RULES, initial_flags, king_exposed, update_piece

XIANGQI_RULES = VariantRules(
    variant=Variant.XIANGQI,
    dimensions=XIANGQI_DIMENSIONS,
    players=(Color.RED, Color.BLACK),
    king_type=PieceType.KING,
    movement_rules=MOVEMENT_RULES,
    fen_letters=PIECE_TO_FEN,
    starting_position=STARTING_POSITION,
    update_piece=update_piece,
    initial_flags=initial_flags,
    king_exposed=king_exposed,
)
