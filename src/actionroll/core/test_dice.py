"""Tests for die sources, count resolution and dice-group rolling."""

import random

import pytest

from actionroll.core.dice import (
    RandomDieSource,
    ScriptedDieSource,
    resolve_dice_count,
    roll_dice_group,
    roll_die,
)
from actionroll.exceptions import DieSourceError
from actionroll.models import DiceGroupSpec, MasteryLevel, RankScaled, RankTier, WeaponLevel


def test_random_die_source_range_and_coverage():
    source = RandomDieSource(seed=1234)
    faces = [source.roll(6) for _ in range(2000)]
    assert all(1 <= face <= 6 for face in faces)
    assert set(faces) == {1, 2, 3, 4, 5, 6}


def test_random_die_source_seed_is_reproducible():
    a = RandomDieSource(seed=99)
    b = RandomDieSource(seed=99)
    assert [a.roll(100) for _ in range(20)] == [b.roll(100) for _ in range(20)]

    shared = random.Random(5)
    wrapped = RandomDieSource(rng=shared)
    assert 1 <= wrapped.roll(20) <= 20


def test_scripted_die_source():
    source = ScriptedDieSource([3, 4])
    assert source.roll(6) == 3
    assert source.roll(8) == 4
    assert source.requested == [6, 8]
    with pytest.raises(DieSourceError):
        source.roll(6)


def test_roll_die_rejects_out_of_range_faces():
    with pytest.raises(DieSourceError):
        roll_die(ScriptedDieSource([21]), 20)
    with pytest.raises(DieSourceError):
        roll_die(ScriptedDieSource([0]), 20)
    assert roll_die(ScriptedDieSource([20]), 20) == 20


def test_resolve_dice_count():
    assert resolve_dice_count(7, RankTier.E, RankTier.E) == 7
    assert resolve_dice_count(MasteryLevel(), RankTier.E, RankTier.A) == 4
    assert resolve_dice_count(WeaponLevel(), RankTier.C, RankTier.S) == 2

    burst = RankScaled(by_rank={RankTier.E: 12, RankTier.B: 13, RankTier.S: 14})
    assert resolve_dice_count(burst, RankTier.S, RankTier.B) == 13
    assert resolve_dice_count(burst, RankTier.S, RankTier.C) == 12   # falls back to E
    assert resolve_dice_count(burst, RankTier.E, RankTier.S) == 14   # keyed by mastery


def test_plain_group_sums_every_roll():
    spec = DiceGroupSpec(count=3, sides=6)
    group = roll_dice_group(spec, 3, ScriptedDieSource([2, 6, 5]))
    assert group.label == "3d6"
    assert group.rolls == (2, 6, 5)
    assert group.kept is None
    assert group.sum == 13
    assert group.counted == (2, 6, 5)


def test_advantage_keeps_highest_and_shows_all_rolls():
    spec = DiceGroupSpec(count=2, sides=20, keep_highest=1)
    group = roll_dice_group(spec, 2, ScriptedDieSource([5, 18]))
    assert group.rolls == (5, 18)
    assert group.kept == (18,)
    assert group.sum == 18


def test_keep_with_ties_and_keep_lowest():
    highest = roll_dice_group(DiceGroupSpec(count=3, sides=6, keep_highest=2), 3, ScriptedDieSource([4, 6, 4]))
    assert highest.kept == (6, 4)
    assert highest.sum == 10

    lowest = roll_dice_group(DiceGroupSpec(count=3, sides=6, keep_lowest=1), 3, ScriptedDieSource([4, 2, 5]))
    assert lowest.rolls == (4, 2, 5)
    assert lowest.kept == (2,)
    assert lowest.sum == 2


def test_level_count_below_keep_keeps_every_die_rolled():
    # Rank-level counts are 0..5, so low ranks may roll fewer dice than keep
    spec = DiceGroupSpec(count=MasteryLevel(), sides=20, keep_highest=3)
    group = roll_dice_group(spec, 2, ScriptedDieSource([7, 9]))
    assert group.kept == (9, 7)
    assert group.sum == 16
