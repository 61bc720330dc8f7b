from enum import Enum
from typing import Annotated, Dict, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from .ranks import RANK_LEVELS, RankTier

# ========================================================================================
# FORMULA CONFIGURATION: the trusted, immutable description of what an action rolls.
# ========================================================================================

RankTable = Dict[RankTier, int]                 # Per-rank integer map, E is the fallback
RankFactorTable = Dict[RankTier, float]         # Per-rank multiplier map, E is the fallback

MAX_RANK_LEVEL = max(RANK_LEVELS.values())


class FormulaModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================
# DICE COUNTS
# ============================================================
class MasteryLevel(FormulaModel):
    """One die per mastery rank level (E=0 .. S=5)"""
    kind: Literal["mastery_level"] = "mastery_level"


class WeaponLevel(FormulaModel):
    """One die per weapon rank level (E=0 .. S=5)"""
    kind: Literal["weapon_level"] = "weapon_level"


class RankScaled(FormulaModel):
    """Dice count looked up by mastery rank"""
    kind: Literal["by_rank"] = "by_rank"
    by_rank: RankTable


SymbolicCount = Annotated[
    Union[MasteryLevel, WeaponLevel, RankScaled],
    Field(discriminator="kind"),
]
DiceCount = Union[int, SymbolicCount]


class DiceSpec(FormulaModel):
    """Plain NdS, used for explosion and conversion dice"""
    count: PositiveInt = 1
    sides: PositiveInt


class DiceGroupSpec(FormulaModel):
    count: DiceCount                            # Literal or resolved against the rank context
    sides: PositiveInt
    keep_highest: PositiveInt | None = None     # Advantage: keep the N best
    keep_lowest: PositiveInt | None = None      # Disadvantage: keep the N worst

    @model_validator(mode="after")
    def _check_keep(self) -> "DiceGroupSpec":
        if self.keep_highest is not None and self.keep_lowest is not None:
            raise ValueError("keep_highest and keep_lowest are mutually exclusive")
        keep = self.keep_highest or self.keep_lowest
        if keep is None:
            return self
        if isinstance(self.count, int):
            if keep > self.count:
                raise ValueError(f"cannot keep {keep} of {self.count} dice")
        elif isinstance(self.count, RankScaled):
            short = {rank.value: n for rank, n in self.count.by_rank.items() if 0 < n < keep}
            if short:
                raise ValueError(f"cannot keep {keep} dice when the count by rank is {short}")
        elif keep > MAX_RANK_LEVEL:
            # Level counts below keep (low ranks) keep every die rolled
            raise ValueError(f"cannot keep {keep} dice of a rank-level count (at most {MAX_RANK_LEVEL})")
        return self

    @property
    def keep(self) -> int | None:
        return self.keep_highest or self.keep_lowest


# ============================================================
# MODIFIERS: closed set, applied in declaration order
# ============================================================
class Multiplier(FormulaModel):
    type: Literal["multiplier"] = "multiplier"
    factor: float


class ThresholdMultiplier(FormulaModel):
    """Multiply the running total once it reaches the threshold (a critical)"""
    type: Literal["threshold_multiplier"] = "threshold_multiplier"
    threshold: int
    multiplier: float | None = None
    multiplier_by_rank: RankFactorTable | None = None

    @model_validator(mode="after")
    def _check_factor(self) -> "ThresholdMultiplier":
        if (self.multiplier is None) == (self.multiplier_by_rank is None):
            raise ValueError("exactly one of multiplier / multiplier_by_rank is required")
        return self


class SuccessBonus(FormulaModel):
    type: Literal["success_bonus"] = "success_bonus"
    threshold: int
    bonus: int | None = None
    bonus_by_rank: RankTable | None = None
    failure_bonus: int | None = None            # Consolation when the threshold is missed

    @model_validator(mode="after")
    def _check_bonus(self) -> "SuccessBonus":
        if (self.bonus is None) == (self.bonus_by_rank is None):
            raise ValueError("exactly one of bonus / bonus_by_rank is required")
        return self


class Explosion(FormulaModel):
    """Each die at or above the threshold grants an extra die, which may itself explode"""
    type: Literal["explosion"] = "explosion"
    threshold: int
    chance: float | None = Field(default=None, ge=0, le=1)  # Display only
    extra_dice: DiceSpec                        # One die per trigger

    @model_validator(mode="after")
    def _check_extra_dice(self) -> "Explosion":
        if self.extra_dice.count != 1:
            raise ValueError(f"explosions roll one extra die per trigger, got count {self.extra_dice.count}")
        return self


class Divisor(FormulaModel):
    type: Literal["divisor"] = "divisor"
    divisor: PositiveInt


class AoeDivisor(FormulaModel):
    """Area-of-effect split. Always resolves as single target for now."""
    type: Literal["aoe_divisor"] = "aoe_divisor"
    divisor: PositiveInt


class BonusConversion(FormulaModel):
    """Trade the other bonus for dice: convert_to per full `rate` points, leftovers stay flat"""
    type: Literal["bonus_conversion"] = "bonus_conversion"
    rate: PositiveInt
    convert_to: DiceSpec


class Conditional(FormulaModel):
    """Situational bonus (e.g. adjacency). Never applied by the evaluator."""
    type: Literal["conditional"] = "conditional"
    condition: str
    value: int


ModifierSpec = Annotated[
    Union[
        Multiplier,
        ThresholdMultiplier,
        SuccessBonus,
        Explosion,
        Divisor,
        AoeDivisor,
        BonusConversion,
        Conditional,
    ],
    Field(discriminator="type"),
]

MODIFIER_TYPES: Tuple[type, ...] = (
    Multiplier,
    ThresholdMultiplier,
    SuccessBonus,
    Explosion,
    Divisor,
    AoeDivisor,
    BonusConversion,
    Conditional,
)


# ============================================================
# ACTIONS
# ============================================================
class BonusTag(str, Enum):
    """Rank bonuses an action adds. Declaration order is evaluation order."""
    MASTERY = "mastery"
    WEAPON = "weapon"

    @property
    def abbreviation(self) -> str:
        return "MR" if self is BonusTag.MASTERY else "WR"

    @property
    def display_name(self) -> str:
        return "Mastery Rank" if self is BonusTag.MASTERY else "Weapon Rank"


class ActionDefinition(FormulaModel):
    """
    One entry of the action catalog.
    Owned by the catalog; the evaluator only reads it.
    """
    name: str = Field(min_length=1)
    category: str
    subtype: str | None = None              # "Damage", "Heal", "Bonus"
    description: str = ""
    roll_formula: str = ""                  # Human-facing formula text

    dice: Tuple[DiceGroupSpec, ...] = ()
    bonuses: frozenset[BonusTag] = frozenset()
    modifiers: Tuple[ModifierSpec, ...] = ()


class CatalogDocument(FormulaModel):
    """On-disk shape of the action table"""
    categories: Tuple[str, ...] = ()
    actions: Tuple[ActionDefinition, ...]
