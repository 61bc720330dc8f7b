from enum import Enum
from typing import Mapping, TypeVar

from actionroll.exceptions import CatalogConfigurationError, InvalidRankError

V = TypeVar("V")

# ============================================================
# RANK TIERS
# ============================================================

class RankTier(str, Enum):
    """Skill grade gating rank bonuses and rank-scaled dice counts. E is lowest, S highest."""
    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"

    @property
    def level(self) -> int:
        return RANK_LEVELS[self]

    @property
    def bonus(self) -> int:
        return RANK_BONUSES[self]

    # Ordered by level; the str mixin would otherwise compare alphabetically
    def __lt__(self, other):
        if not isinstance(other, RankTier):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other):
        if not isinstance(other, RankTier):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other):
        if not isinstance(other, RankTier):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other):
        if not isinstance(other, RankTier):
            return NotImplemented
        return self.level >= other.level

    @classmethod
    def parse(cls, value) -> "RankTier":
        """Accepts a RankTier or a tier symbol (case-insensitive)."""
        if isinstance(value, RankTier):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidRankError(value)


RANK_LEVELS: dict[RankTier, int] = {
    RankTier.E: 0,
    RankTier.D: 1,
    RankTier.C: 2,
    RankTier.B: 3,
    RankTier.A: 4,
    RankTier.S: 5,
}

RANK_BONUSES: dict[RankTier, int] = {
    RankTier.E: 0,
    RankTier.D: 10,
    RankTier.C: 20,
    RankTier.B: 30,
    RankTier.A: 40,
    RankTier.S: 50,
}


def lookup_by_rank(table: Mapping[RankTier, V], rank: RankTier, what: str = "rank table") -> V:
    """
    Per-rank lookup with fallback to the E entry.

    Presence decides the fallback, so an explicit 0 for a rank is honoured.
    """
    if rank in table:
        return table[rank]
    if RankTier.E in table:
        return table[RankTier.E]
    raise CatalogConfigurationError(
        f"{what} has no entry for rank {rank.value} and no E fallback"
    )
