from actionroll.config import Settings, settings as default_settings
from actionroll.core.breakdown import render_expression
from actionroll.core.catalog import ActionCatalog
from actionroll.core.dice import (
    DieSource,
    RandomDieSource,
    ScriptedDieSource,
    resolve_dice_count,
    roll_dice_group,
    roll_die,
)
from actionroll.core.evaluator import DEFAULT_MAX_EXPLOSION_ROUNDS, FormulaEvaluator
from actionroll.core.roll_service import ActionRoll, RollService, parse_bonus


def initialize_roll_service(settings: Settings | None = None) -> RollService:
    """Build the catalog, evaluator and roll service from configuration."""
    settings = settings or default_settings

    if settings.catalog_path is not None:
        catalog = ActionCatalog.from_path(settings.catalog_path)
    else:
        catalog = ActionCatalog.load_default()

    evaluator = FormulaEvaluator(
        die_source=RandomDieSource(seed=settings.rng_seed),
        max_explosion_rounds=settings.explosion_max_rounds,
    )
    return RollService(catalog=catalog, evaluator=evaluator)

__all__ = [
    'ActionCatalog',
    'ActionRoll',
    'DEFAULT_MAX_EXPLOSION_ROUNDS',
    'DieSource',
    'FormulaEvaluator',
    'RandomDieSource',
    'RollService',
    'ScriptedDieSource',
    'initialize_roll_service',
    'parse_bonus',
    'render_expression',
    'resolve_dice_count',
    'roll_dice_group',
    'roll_die',
]
