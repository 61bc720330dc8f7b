import logging

from pydantic import BaseModel, ConfigDict

from actionroll.core.catalog import ActionCatalog
from actionroll.core.evaluator import FormulaEvaluator
from actionroll.exceptions import InvalidBonusError
from actionroll.models import EvaluationResult, RankTier

logger = logging.getLogger(__name__)


class ActionRoll(BaseModel):
    """A validated roll request together with its evaluation"""
    model_config = ConfigDict(frozen=True)

    action_name: str
    category: str
    weapon_rank: RankTier
    mastery_rank: RankTier
    other_bonus: int
    result: EvaluationResult

    @property
    def final_result(self) -> int:
        return self.result.final_result

    @property
    def raw_dice_total(self) -> int:
        return self.result.raw_dice_total


def parse_bonus(value) -> int:
    """None or blank means no bonus; otherwise a non-negative integer (or numeric string)."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidBonusError(f"Invalid bonus: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
        try:
            value = int(value)
        except ValueError:
            raise InvalidBonusError(f"Invalid bonus: {value!r}") from None
    if not isinstance(value, int):
        raise InvalidBonusError(f"Invalid bonus: {value!r}")
    if value < 0:
        raise InvalidBonusError(f"Bonus must be non-negative, got {value}")
    return value


class RollService:
    """
    Front door for action rolls. Checks the request against the catalog
    before anything is rolled; the evaluator never sees untrusted input.
    """

    def __init__(self, catalog: ActionCatalog, evaluator: FormulaEvaluator):
        self.catalog = catalog
        self.evaluator = evaluator

    def roll(self, action_name: str, weapon_rank, mastery_rank, other_bonus=0) -> ActionRoll:
        """
        Validate and evaluate one roll.

        Raises:
            UnknownActionError: action_name is not in the catalog.
            InvalidRankError: a rank is not one of E, D, C, B, A, S.
            InvalidBonusError: other_bonus is not a non-negative integer.
        """
        action = self.catalog.get(action_name)
        weapon = RankTier.parse(weapon_rank)
        mastery = RankTier.parse(mastery_rank)
        bonus = parse_bonus(other_bonus)

        result = self.evaluator.evaluate(action, weapon, mastery, bonus)
        logger.info(
            "%s (WR %s, MR %s, bonus %d) -> %d: %s",
            action.name, weapon.value, mastery.value, bonus,
            result.final_result, result.rendered_expression,
        )
        return ActionRoll(
            action_name=action.name,
            category=action.category,
            weapon_rank=weapon,
            mastery_rank=mastery,
            other_bonus=bonus,
            result=result,
        )
