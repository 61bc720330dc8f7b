from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .ranks import RankTier

# ============================================================
# EVALUATION RESULTS: built once per evaluation, never mutated
# ============================================================

class ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class DiceGroupResult(ResultModel):
    """One rolled dice group"""
    label: str                              # e.g. "2d20"
    count: int
    sides: int
    rolls: Tuple[int, ...]                  # Every raw face, in roll order
    kept: Tuple[int, ...] | None = None     # Trimmed subset (keep highest/lowest), sorted
    sum: int                                # Sum of the counted dice

    @property
    def counted(self) -> Tuple[int, ...]:
        """The faces that contribute to the total"""
        return self.kept if self.kept is not None else self.rolls


class BonusEntry(ResultModel):
    source: str                             # "Mastery Rank", "Weapon Rank", "Other"
    label: str                              # "B MR", "S WR", "Buff"
    rank: RankTier | None = None
    value: int


class ModifierEntry(ResultModel):
    """Audit fragment produced by one modifier, including no-ops"""
    kind: str                               # Modifier type tag
    description: str
    added_value: int = 0
    multiplier: float = 1.0
    extra_rolls: Tuple[int, ...] = ()       # Explosion or conversion dice
    triggers: int | None = None             # Explosion: dice that met the threshold
    converted_dice: int | None = None       # Bonus conversion: dice bought


class EvaluationResult(ResultModel):
    """
    Final result of evaluating one action.
    The structured fields are the audit trail; rendered_expression is for display.
    """
    action_name: str
    weapon_rank: RankTier
    mastery_rank: RankTier
    other_bonus: int

    final_result: int                       # Always >= 1
    raw_dice_total: int                     # Natural + explosion faces only
    base_total: int                         # Dice + bonuses, before modifiers
    unclamped_total: float                  # Running total before floor / clamp

    dice_groups: Tuple[DiceGroupResult, ...] = ()
    bonus_breakdown: Tuple[BonusEntry, ...] = ()
    modifier_breakdown: Tuple[ModifierEntry, ...] = ()
    explosion_rolls: Tuple[int, ...] = ()
    rendered_expression: str

    @property
    def explosion_count(self) -> int:
        return sum(m.triggers or 0 for m in self.modifier_breakdown if m.kind == "explosion")
