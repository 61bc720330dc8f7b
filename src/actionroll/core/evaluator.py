import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from actionroll.core.breakdown import render_expression
from actionroll.core.dice import (
    DieSource,
    RandomDieSource,
    resolve_dice_count,
    roll_dice_group,
    roll_die,
)
from actionroll.exceptions import CatalogConfigurationError
from actionroll.models import (
    ActionDefinition,
    AoeDivisor,
    BonusConversion,
    BonusEntry,
    BonusTag,
    Conditional,
    DiceGroupResult,
    Divisor,
    EvaluationResult,
    Explosion,
    ModifierEntry,
    ModifierSpec,
    Multiplier,
    RankTier,
    SuccessBonus,
    ThresholdMultiplier,
    lookup_by_rank,
)

logger = logging.getLogger(__name__)

# Cascade guard for explosions; not a game-balance rule
DEFAULT_MAX_EXPLOSION_ROUNDS = 10


@dataclass(frozen=True)
class ModifierContext:
    """Everything a modifier may read. Built fresh for each modifier."""
    total: float
    rolls: Tuple[int, ...]                  # Counted dice of the dice phase
    weapon_rank: RankTier
    mastery_rank: RankTier
    other_bonus: int
    dice: DieSource


ModifierHandler = Callable[[ModifierSpec, ModifierContext], Tuple[float, ModifierEntry]]


# ============================================================
# FORMULA EVALUATOR
# ============================================================

class FormulaEvaluator:
    """
    Evaluates catalog actions: rolls the dice, adds rank bonuses and runs the
    modifier pipeline, returning the result with a full audit breakdown.

    Holds no per-call state, so one instance can serve concurrent callers as
    long as each call's die source is independent or thread-safe.
    """

    def __init__(
        self,
        die_source: DieSource | None = None,
        max_explosion_rounds: int = DEFAULT_MAX_EXPLOSION_ROUNDS,
    ):
        if max_explosion_rounds < 1:
            raise ValueError(f"max_explosion_rounds must be at least 1, got {max_explosion_rounds}")
        self.die_source = die_source or RandomDieSource()
        self.max_explosion_rounds = max_explosion_rounds
        self._handlers: Dict[type, ModifierHandler] = {
            Multiplier: self._apply_multiplier,
            ThresholdMultiplier: self._apply_threshold_multiplier,
            SuccessBonus: self._apply_success_bonus,
            Explosion: self._apply_explosion,
            Divisor: self._apply_divisor,
            AoeDivisor: self._apply_aoe_divisor,
            BonusConversion: self._apply_bonus_conversion,
            Conditional: self._apply_conditional,
        }

    def supports(self, modifier_type: type) -> bool:
        return modifier_type in self._handlers

    def evaluate(
        self,
        action: ActionDefinition,
        weapon_rank: RankTier,
        mastery_rank: RankTier,
        other_bonus: int = 0,
        die_source: DieSource | None = None,
    ) -> EvaluationResult:
        """
        Evaluate one action for a rank pair.

        Args:
            action: Catalog entry to evaluate.
            weapon_rank: Drives WR bonuses and weapon-level dice counts.
            mastery_rank: Drives MR bonuses, mastery-level and per-rank dice
                counts and per-rank modifier values.
            other_bonus: Flat non-negative bonus from buffs.
            die_source: Overrides the evaluator's die source for this call.

        Returns:
            EvaluationResult with final_result >= 1.
        """
        if other_bonus < 0:
            raise ValueError(f"other_bonus must be non-negative, got {other_bonus}")
        dice = die_source or self.die_source

        total: float = 0
        raw_dice_total = 0

        # 1. Dice
        dice_groups: List[DiceGroupResult] = []
        for spec in action.dice:
            count = resolve_dice_count(spec.count, weapon_rank, mastery_rank)
            if count <= 0:
                logger.debug("%s: skipping d%d group, resolved count %d", action.name, spec.sides, count)
                continue
            group = roll_dice_group(spec, count, dice)
            dice_groups.append(group)
            total += group.sum
            raw_dice_total += group.sum

        # 2. Bonuses, MR before WR regardless of how the catalog lists them
        bonuses: List[BonusEntry] = []
        for tag in BonusTag:
            if tag not in action.bonuses:
                continue
            rank = mastery_rank if tag is BonusTag.MASTERY else weapon_rank
            bonuses.append(BonusEntry(
                source=tag.display_name,
                label=f"{rank.value} {tag.abbreviation}",
                rank=rank,
                value=rank.bonus,
            ))
            total += rank.bonus
        if other_bonus > 0:
            bonuses.append(BonusEntry(source="Other", label="Buff", value=other_bonus))
            total += other_bonus
        base_total = int(total)

        # 3. Modifiers, in declaration order
        rolls = tuple(face for group in dice_groups for face in group.counted)
        modifier_entries: List[ModifierEntry] = []
        explosion_rolls: List[int] = []
        for modifier in action.modifiers:
            handler = self._handlers.get(type(modifier))
            if handler is None:
                raise CatalogConfigurationError(
                    f"{action.name}: no handler for modifier {type(modifier).__name__}"
                )
            context = ModifierContext(
                total=total,
                rolls=rolls,
                weapon_rank=weapon_rank,
                mastery_rank=mastery_rank,
                other_bonus=other_bonus,
                dice=dice,
            )
            total, entry = handler(modifier, context)
            modifier_entries.append(entry)
            if isinstance(modifier, Explosion):
                explosion_rolls.extend(entry.extra_rolls)
                raw_dice_total += sum(entry.extra_rolls)

        # 4. Finalize
        final_result = max(1, math.floor(total))
        result = EvaluationResult(
            action_name=action.name,
            weapon_rank=weapon_rank,
            mastery_rank=mastery_rank,
            other_bonus=other_bonus,
            final_result=final_result,
            raw_dice_total=raw_dice_total,
            base_total=base_total,
            unclamped_total=total,
            dice_groups=tuple(dice_groups),
            bonus_breakdown=tuple(bonuses),
            modifier_breakdown=tuple(modifier_entries),
            explosion_rolls=tuple(explosion_rolls),
            rendered_expression=render_expression(dice_groups, bonuses, modifier_entries, explosion_rolls),
        )
        logger.debug(
            "%s (WR %s, MR %s, +%d) = %d [raw %d]",
            action.name, weapon_rank.value, mastery_rank.value, other_bonus,
            final_result, raw_dice_total,
        )
        return result

    # ------------------------------------------------------------
    # Modifier handlers: (modifier, context) -> (new total, entry)
    # ------------------------------------------------------------

    def _apply_multiplier(self, modifier: Multiplier, ctx: ModifierContext):
        return ctx.total * modifier.factor, ModifierEntry(
            kind=modifier.type,
            description=f"Base multiplier {modifier.factor:g}x",
            multiplier=modifier.factor,
        )

    def _apply_threshold_multiplier(self, modifier: ThresholdMultiplier, ctx: ModifierContext):
        if ctx.total < modifier.threshold:
            return ctx.total, ModifierEntry(
                kind=modifier.type,
                description=f"Threshold {modifier.threshold} not met",
            )
        if modifier.multiplier_by_rank is not None:
            factor = lookup_by_rank(modifier.multiplier_by_rank, ctx.mastery_rank, "critical multiplier")
        else:
            factor = modifier.multiplier
        return ctx.total * factor, ModifierEntry(
            kind=modifier.type,
            description=f"{ctx.mastery_rank.value} Critical",
            multiplier=factor,
        )

    def _apply_success_bonus(self, modifier: SuccessBonus, ctx: ModifierContext):
        if ctx.total >= modifier.threshold:
            if modifier.bonus_by_rank is not None:
                bonus = lookup_by_rank(modifier.bonus_by_rank, ctx.mastery_rank, "success bonus")
            else:
                bonus = modifier.bonus
            return ctx.total + bonus, ModifierEntry(
                kind=modifier.type,
                description="Success bonus",
                added_value=bonus,
            )
        if modifier.failure_bonus is not None:
            return ctx.total + modifier.failure_bonus, ModifierEntry(
                kind=modifier.type,
                description="Consolation bonus",
                added_value=modifier.failure_bonus,
            )
        return ctx.total, ModifierEntry(
            kind=modifier.type,
            description=f"Failed threshold {modifier.threshold}",
        )

    def _apply_explosion(self, modifier: Explosion, ctx: ModifierContext):
        pending = sum(1 for face in ctx.rolls if face >= modifier.threshold)
        if pending == 0:
            return ctx.total, ModifierEntry(
                kind=modifier.type,
                description="No explosions",
                triggers=0,
            )

        triggers = pending
        extra_rolls: List[int] = []
        rounds = 0
        while pending > 0 and rounds < self.max_explosion_rounds:
            new_rolls = [roll_die(ctx.dice, modifier.extra_dice.sides) for _ in range(pending)]
            extra_rolls.extend(new_rolls)
            pending = sum(1 for face in new_rolls if face >= modifier.threshold)
            triggers += pending
            rounds += 1
        if pending:
            logger.debug("Explosion cascade stopped at %d rounds with %d pending", rounds, pending)

        added = sum(extra_rolls)
        return ctx.total + added, ModifierEntry(
            kind=modifier.type,
            description=f"{triggers} explosions",
            added_value=added,
            extra_rolls=tuple(extra_rolls),
            triggers=triggers,
        )

    def _apply_divisor(self, modifier: Divisor, ctx: ModifierContext):
        return math.floor(ctx.total / modifier.divisor), ModifierEntry(
            kind=modifier.type,
            description=f"Divided by {modifier.divisor}",
            multiplier=1 / modifier.divisor,
        )

    def _apply_aoe_divisor(self, modifier: AoeDivisor, ctx: ModifierContext):
        # Area-of-effect resolution is not modelled; every roll is single target
        return ctx.total, ModifierEntry(kind=modifier.type, description="Single target")

    def _apply_bonus_conversion(self, modifier: BonusConversion, ctx: ModifierContext):
        conversions = ctx.other_bonus // modifier.rate
        extra_dice = conversions * modifier.convert_to.count
        if extra_dice <= 0:
            return ctx.total, ModifierEntry(kind=modifier.type, description="No conversion")

        leftover = ctx.other_bonus % modifier.rate
        rolls = tuple(roll_die(ctx.dice, modifier.convert_to.sides) for _ in range(extra_dice))
        # The bonus was already added in full; swap it for the dice plus the leftover
        added = sum(rolls) + leftover - ctx.other_bonus
        return ctx.total + added, ModifierEntry(
            kind=modifier.type,
            description=f"Converted {extra_dice} dice",
            added_value=added,
            extra_rolls=rolls,
            converted_dice=extra_dice,
        )

    def _apply_conditional(self, modifier: Conditional, ctx: ModifierContext):
        return ctx.total, ModifierEntry(kind=modifier.type, description="Conditional not met")
