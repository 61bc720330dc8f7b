"""
The trusted action catalog.
Loaded once at startup; every structural problem is raised here, not mid-roll.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from pydantic import ValidationError

from actionroll.exceptions import CatalogConfigurationError, UnknownActionError
from actionroll.models import (
    ActionDefinition,
    CatalogDocument,
    RankScaled,
    RankTier,
    RANK_BONUSES,
    SuccessBonus,
    ThresholdMultiplier,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "content/actions.json"


def _rank_tables(action: ActionDefinition) -> Iterator[Tuple[str, Mapping]]:
    """Yield (location, table) for every per-rank table an action uses."""
    for i, group in enumerate(action.dice):
        if isinstance(group.count, RankScaled):
            yield f"dice[{i}].count", group.count.by_rank
    for i, modifier in enumerate(action.modifiers):
        if isinstance(modifier, ThresholdMultiplier) and modifier.multiplier_by_rank is not None:
            yield f"modifiers[{i}].multiplier_by_rank", modifier.multiplier_by_rank
        elif isinstance(modifier, SuccessBonus) and modifier.bonus_by_rank is not None:
            yield f"modifiers[{i}].bonus_by_rank", modifier.bonus_by_rank


class ActionCatalog:
    """
    Immutable name -> ActionDefinition table.

    Validation on construction:
    - action names are unique
    - every action's category is declared (when categories are given)
    - every per-rank table has an E entry to fall back on
    """

    def __init__(self, actions: Iterable[ActionDefinition], categories: Sequence[str] | None = None):
        self._actions: Dict[str, ActionDefinition] = {}
        problems: List[str] = []

        for action in actions:
            if action.name in self._actions:
                problems.append(f"duplicate action name {action.name!r}")
                continue
            if categories and action.category not in categories:
                problems.append(f"{action.name}: undeclared category {action.category!r}")
            for where, table in _rank_tables(action):
                if RankTier.E not in table:
                    problems.append(f"{action.name}: {where} has no E entry")
            self._actions[action.name] = action

        if problems:
            raise CatalogConfigurationError("Invalid action catalog: " + "; ".join(problems))

        if categories:
            self._categories = tuple(categories)
        else:
            self._categories = tuple(dict.fromkeys(a.category for a in self._actions.values()))

        logger.debug("Loaded %d actions in %d categories", len(self._actions), len(self._categories))

    # ------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------

    @classmethod
    def from_json(cls, text: str | bytes) -> "ActionCatalog":
        try:
            document = CatalogDocument.model_validate_json(text)
        except ValidationError as e:
            raise CatalogConfigurationError(f"Action catalog failed validation: {e}") from e
        return cls(document.actions, document.categories)

    @classmethod
    def from_path(cls, path: Path | str) -> "ActionCatalog":
        path = Path(path)
        logger.info("Loading action catalog from %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogConfigurationError(f"Cannot read action catalog {path}: {e}") from e
        return cls.from_json(text)

    @classmethod
    def load_default(cls) -> "ActionCatalog":
        """The catalog shipped with the package."""
        text = resources.files("actionroll").joinpath(DEFAULT_CATALOG_RESOURCE).read_text(encoding="utf-8")
        return cls.from_json(text)

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def get(self, name: str) -> ActionDefinition:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[ActionDefinition]:
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def names(self) -> List[str]:
        return list(self._actions)

    @property
    def categories(self) -> Tuple[str, ...]:
        return self._categories

    def by_category(self, category: str) -> List[ActionDefinition]:
        return [a for a in self._actions.values() if a.category == category]

    def rank_bonuses(self) -> Dict[str, int]:
        """Rank symbol -> flat bonus, for clients that display the table."""
        return {rank.value: bonus for rank, bonus in RANK_BONUSES.items()}
