"""Orthodox chess as a configuration of the generic engine"""

from src.chess.board import CHESS_DIMENSIONS, STARTING_POSITION
from src.chess.moves import MOVEMENT_RULES, after_chess_move
from src.chess.pieces import PIECE_TO_FEN, PROMOTION_OPTIONS, PieceType
from src.core.shared_types import Color, Variant
from src.engine.rules import VariantRules

CHESS_RULES = VariantRules(
    variant=Variant.CHESS,
    dimensions=CHESS_DIMENSIONS,
    players=(Color.WHITE, Color.BLACK),
    king_type=PieceType.KING,
    movement_rules=MOVEMENT_RULES,
    fen_letters=PIECE_TO_FEN,
    starting_position=STARTING_POSITION,
    after_move=after_chess_move,
    promotion_types=PROMOTION_OPTIONS,
)
