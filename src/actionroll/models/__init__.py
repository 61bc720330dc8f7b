from .ranks import (
    RankTier,
    RANK_BONUSES,
    RANK_LEVELS,
    lookup_by_rank,
)

from .formula import (
    RankTable,
    RankFactorTable,
    MasteryLevel,
    WeaponLevel,
    RankScaled,
    DiceCount,
    DiceSpec,
    DiceGroupSpec,
    Multiplier,
    ThresholdMultiplier,
    SuccessBonus,
    Explosion,
    Divisor,
    AoeDivisor,
    BonusConversion,
    Conditional,
    ModifierSpec,
    MODIFIER_TYPES,
    BonusTag,
    ActionDefinition,
    CatalogDocument,
)

from .results import (
    DiceGroupResult,
    BonusEntry,
    ModifierEntry,
    EvaluationResult,
)

__all__ = [
    # Ranks
    "RankTier",
    "RANK_BONUSES",
    "RANK_LEVELS",
    "lookup_by_rank",

    # Formula
    "RankTable",
    "RankFactorTable",
    "MasteryLevel",
    "WeaponLevel",
    "RankScaled",
    "DiceCount",
    "DiceSpec",
    "DiceGroupSpec",
    "Multiplier",
    "ThresholdMultiplier",
    "SuccessBonus",
    "Explosion",
    "Divisor",
    "AoeDivisor",
    "BonusConversion",
    "Conditional",
    "ModifierSpec",
    "MODIFIER_TYPES",
    "BonusTag",
    "ActionDefinition",
    "CatalogDocument",

    # Results
    "DiceGroupResult",
    "BonusEntry",
    "ModifierEntry",
    "EvaluationResult",
]
