"""Die sources, dice-count resolution and dice-group rolling."""

import logging
import random
from typing import Iterable, List, Protocol

from actionroll.exceptions import CatalogConfigurationError, DieSourceError
from actionroll.models import (
    DiceCount,
    DiceGroupResult,
    DiceGroupSpec,
    MasteryLevel,
    RankScaled,
    RankTier,
    WeaponLevel,
    lookup_by_rank,
)

logger = logging.getLogger(__name__)


class DieSource(Protocol):
    """Anything that can roll a single die."""

    def roll(self, sides: int) -> int:
        ...


class RandomDieSource:
    """
    Uniform die rolls from a ``random.Random`` stream.
    Not cryptographic; pass a seed for a reproducible session.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    def roll(self, sides: int) -> int:
        return self._rng.randint(1, sides)


class ScriptedDieSource:
    """Replays a fixed sequence of faces, one per roll, ignoring the die size."""

    def __init__(self, faces: Iterable[int]):
        self._faces = iter(faces)
        self.requested: List[int] = []          # Sides asked for, in call order

    def roll(self, sides: int) -> int:
        self.requested.append(sides)
        try:
            return next(self._faces)
        except StopIteration:
            raise DieSourceError(
                f"Scripted die source exhausted after {len(self.requested) - 1} rolls"
            ) from None


def roll_die(source: DieSource, sides: int) -> int:
    """Roll one die and check the face is in [1, sides]."""
    face = source.roll(sides)
    if not isinstance(face, int) or isinstance(face, bool) or not 1 <= face <= sides:
        raise DieSourceError(f"Die source returned {face!r} for a d{sides}")
    return face


def resolve_dice_count(count: DiceCount, weapon_rank: RankTier, mastery_rank: RankTier) -> int:
    """Turn a literal or symbolic dice count into a number for this rank context."""
    if isinstance(count, int):
        return count
    if isinstance(count, MasteryLevel):
        return mastery_rank.level
    if isinstance(count, WeaponLevel):
        return weapon_rank.level
    if isinstance(count, RankScaled):
        return lookup_by_rank(count.by_rank, mastery_rank, "dice count by rank")
    raise CatalogConfigurationError(f"Unresolvable dice count: {count!r}")


def roll_dice_group(spec: DiceGroupSpec, count: int, source: DieSource) -> DiceGroupResult:
    """
    Roll ``count`` dice for a group.

    Keep-highest/lowest selects from a stable sort, so equal faces are kept in
    roll order. All raw faces stay on the result for display.
    """
    rolls = tuple(roll_die(source, spec.sides) for _ in range(count))

    kept = None
    if spec.keep_highest is not None:
        kept = tuple(sorted(rolls, reverse=True)[:spec.keep_highest])
    elif spec.keep_lowest is not None:
        kept = tuple(sorted(rolls)[:spec.keep_lowest])

    counted = kept if kept is not None else rolls
    group = DiceGroupResult(
        label=f"{count}d{spec.sides}",
        count=count,
        sides=spec.sides,
        rolls=rolls,
        kept=kept,
        sum=sum(counted),
    )
    logger.debug("Rolled %s: %s (kept %s) = %d", group.label, rolls, kept, group.sum)
    return group
