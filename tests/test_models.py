import pytest

from perishable.models import (
    ConfigurationError,
    EvalConfig,
    InventoryPolicy,
    ItemSpec,
    MarkdownRule,
    ScoreWeights,
    SimulationConfig,
)


def test_item_spec_from_dict():
    item = ItemSpec.from_dict(
        {
            "sku": "MILK",
            "unit_cost": 2.35,
            "base_price": 3.99,
            "shelf_life_days": 10,
            "lead_time_days": 2,
            "base_daily_demand": 38,
            "price_elasticity": -0.6,
        }
    )
    assert item.sku == "MILK"
    assert item.can_freeze is False
    assert item.category == "other"


def test_policy_from_dict_fills_sku_and_rules():
    policy = InventoryPolicy.from_dict(
        {
            "id": "p1",
            "name": "Markdown heavy",
            "per_sku": {
                "MILK": {
                    "reorder_point": 20,
                    "order_up_to": 45,
                    "pricing": [{"days_to_expire_at_most": 1, "price_multiplier": 0.6}],
                    "donate_days_to_expire_at_most": 1,
                    "donate_max_fraction_per_day": 0.2,
                }
            },
        }
    )
    milk = policy.per_sku["MILK"]
    assert milk.sku == "MILK"
    assert milk.pricing == (MarkdownRule(days_to_expire_at_most=1, price_multiplier=0.6),)
    assert milk.donate_max_fraction_per_day == 0.2
    assert milk.freeze_max_units_per_day == 0


def test_config_from_dict():
    sim = SimulationConfig.from_dict({"days": 14, "seed": 3})
    assert (sim.days, sim.seed, sim.count_stockouts) == (14, 3, True)

    ev = EvalConfig.from_dict(
        {"weights": {"profit": 1, "waste_reduction": 0, "satisfaction": 0, "humanitarian": 0}}
    )
    assert ev.weights == ScoreWeights(profit=1, waste_reduction=0, satisfaction=0, humanitarian=0)
    assert ev.waste_rate_target == 0.08


def test_item_spec_rejects_unknown_category():
    with pytest.raises(ConfigurationError, match="'snacks'.*produce"):
        ItemSpec.from_dict(
            {
                "sku": "CHIPS",
                "unit_cost": 1.0,
                "base_price": 2.0,
                "shelf_life_days": 90,
                "lead_time_days": 3,
                "base_daily_demand": 10,
                "category": "snacks",
            }
        )


def test_item_spec_rejects_unknown_field():
    with pytest.raises(ConfigurationError, match="'CHIPS'"):
        ItemSpec.from_dict({"sku": "CHIPS", "unit_cost": 1.0, "colour": "red"})


def test_policy_entry_with_misspelled_field():
    with pytest.raises(ConfigurationError, match="'BANANA'"):
        InventoryPolicy.from_dict(
            {"per_sku": {"BANANA": {"reorder_pt": 1, "order_up_to": 2}}}
        )


def test_policy_without_per_sku():
    with pytest.raises(ConfigurationError, match="per_sku"):
        InventoryPolicy.from_dict({"id": "bad"})
