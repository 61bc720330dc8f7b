"""Tests for loading and validating the action catalog."""

import json

import pytest

from actionroll.core.catalog import ActionCatalog
from actionroll.exceptions import CatalogConfigurationError, UnknownActionError
from actionroll.models import BonusTag, Explosion, RankScaled


def catalog_json(*actions, categories=("Basic",)):
    return json.dumps({"categories": list(categories), "actions": list(actions)})


ATTACK = {
    "category": "Basic",
    "name": "Attack",
    "dice": [{"count": 1, "sides": 100}],
    "bonuses": ["mastery", "weapon"],
}


def test_default_catalog_loads():
    catalog = ActionCatalog.load_default()
    assert len(catalog) == 16
    assert catalog.categories == ("Basic", "Defense", "Offense", "Support")
    assert [a.name for a in catalog.by_category("Support")] == ["Heal", "Power Heal", "Buff", "Power Buff"]
    assert "Sneak Attack" in catalog
    assert catalog.names[0] == "Attack"
    print(f"✓ Default catalog has {len(catalog)} actions")


def test_default_catalog_shapes():
    catalog = ActionCatalog.load_default()

    stable = catalog.get("Stable Attack")
    assert stable.bonuses == frozenset({BonusTag.WEAPON})
    assert isinstance(stable.modifiers[0], Explosion)
    assert stable.modifiers[0].chance == 0.2

    reckless = catalog.get("Special Reckless Attack")
    assert isinstance(reckless.dice[1].count, RankScaled)

    recover = catalog.get("Recover")
    assert recover.dice[0].keep_highest == 1
    assert recover.bonuses == frozenset()


def test_rank_bonuses_payload():
    catalog = ActionCatalog.load_default()
    assert catalog.rank_bonuses() == {"E": 0, "D": 10, "C": 20, "B": 30, "A": 40, "S": 50}


def test_unknown_action():
    catalog = ActionCatalog.from_json(catalog_json(ATTACK))
    with pytest.raises(UnknownActionError) as excinfo:
        catalog.get("Fireball")
    assert "Fireball" in str(excinfo.value)


def test_duplicate_names_rejected():
    with pytest.raises(CatalogConfigurationError, match="duplicate"):
        ActionCatalog.from_json(catalog_json(ATTACK, ATTACK))


def test_undeclared_category_rejected():
    stray = dict(ATTACK, name="Stray", category="Mystery")
    with pytest.raises(CatalogConfigurationError, match="undeclared category"):
        ActionCatalog.from_json(catalog_json(ATTACK, stray))


def test_rank_table_without_e_rejected():
    partial = dict(
        ATTACK,
        name="Partial",
        modifiers=[{"type": "success_bonus", "threshold": 30, "bonus_by_rank": {"D": 30, "S": 50}}],
    )
    with pytest.raises(CatalogConfigurationError, match="no E entry"):
        ActionCatalog.from_json(catalog_json(partial))


def test_malformed_dice_rejected():
    broken = dict(ATTACK, dice=[{"count": 1, "sides": 0}])
    with pytest.raises(CatalogConfigurationError):
        ActionCatalog.from_json(catalog_json(broken))

    unknown_modifier = dict(ATTACK, modifiers=[{"type": "vampiric", "value": 5}])
    with pytest.raises(CatalogConfigurationError):
        ActionCatalog.from_json(catalog_json(unknown_modifier))


def test_categories_inferred_when_not_declared():
    heal = dict(ATTACK, name="Heal", category="Support")
    catalog = ActionCatalog.from_json(json.dumps({"actions": [ATTACK, heal]}))
    assert catalog.categories == ("Basic", "Support")


def test_from_path(tmp_path):
    path = tmp_path / "actions.json"
    path.write_text(catalog_json(ATTACK), encoding="utf-8")
    catalog = ActionCatalog.from_path(path)
    assert catalog.names == ["Attack"]

    with pytest.raises(CatalogConfigurationError):
        ActionCatalog.from_path(tmp_path / "missing.json")


def test_keep_larger_than_rank_scaled_count_rejected():
    lopsided = dict(
        ATTACK,
        name="Lopsided",
        dice=[{"count": {"kind": "by_rank", "by_rank": {"E": 1}}, "sides": 20, "keep_highest": 3}],
    )
    with pytest.raises(CatalogConfigurationError):
        ActionCatalog.from_json(catalog_json(lopsided))
