"""Rank-scaled action rolls with auditable dice breakdowns."""

from actionroll.core import (
    ActionCatalog,
    ActionRoll,
    FormulaEvaluator,
    RandomDieSource,
    RollService,
    ScriptedDieSource,
    initialize_roll_service,
)
from actionroll.exceptions import (
    ActionRollError,
    CatalogConfigurationError,
    DieSourceError,
    InvalidBonusError,
    InvalidRankError,
    RequestValidationError,
    UnknownActionError,
)
from actionroll.models import ActionDefinition, EvaluationResult, RankTier

__version__ = "0.1.0"

__all__ = [
    "ActionCatalog",
    "ActionDefinition",
    "ActionRoll",
    "ActionRollError",
    "CatalogConfigurationError",
    "DieSourceError",
    "EvaluationResult",
    "FormulaEvaluator",
    "InvalidBonusError",
    "InvalidRankError",
    "RandomDieSource",
    "RankTier",
    "RequestValidationError",
    "RollService",
    "ScriptedDieSource",
    "UnknownActionError",
    "initialize_roll_service",
]
