"""Which rules belong to which variant. New variants only need an entry here."""

from src.chess.rules import CHESS_RULES
from src.core.exceptions import GameStateError
from src.core.shared_types import Variant
from src.engine.rules import VariantRules
from src.jungle.rules import JUNGLE_RULES
from src.shogi.rules import SHOGI_RULES
from src.xiangqi.rules import XIANGQI_RULES

VARIANT_RULES: dict[Variant, VariantRules] = {
    Variant.CHESS: CHESS_RULES,
    Variant.XIANGQI: XIANGQI_RULES,
    Variant.SHOGI: SHOGI_RULES,
    Variant.JUNGLE: JUNGLE_RULES,
}


def get_rules(variant: str) -> VariantRules:
    try:
        return VARIANT_RULES[Variant(variant)]
    except (ValueError, KeyError) as error:
        raise GameStateError(
            f"Unknown variant {variant!r}. Pick one from {', '.join(VARIANT_RULES)}"
        ) from error
