"""Built-in sample store data and a heuristic starting policy."""

from dataclasses import dataclass, field

from perishable.models import (
    ConfigurationError,
    EvalConfig,
    InventoryPolicy,
    ItemPolicy,
    ItemSpec,
    MarkdownRule,
    ScoreWeights,
    SimulationConfig,
)
from perishable.state import round_half_up

DEFAULT_PRESET = "richmond-va-small"

DEFAULT_MARKDOWNS = (
    MarkdownRule(days_to_expire_at_most=2, price_multiplier=0.9),
    MarkdownRule(days_to_expire_at_most=1, price_multiplier=0.75),
    MarkdownRule(days_to_expire_at_most=0, price_multiplier=0.55),
)


@dataclass(frozen=True)
class StoreInfo:
    name: str
    region: str
    notes: str = ""


@dataclass(frozen=True)
class BaselineHint:
    """Multipliers of daily demand used to size a starting policy."""

    reorder_point_multiplier: float = 0.7
    order_up_to_multiplier: float = 1.2


@dataclass(frozen=True)
class Dataset:
    store: StoreInfo
    items: list[ItemSpec]
    sim_config: SimulationConfig
    eval_config: EvalConfig
    baseline_hint: BaselineHint = field(default_factory=BaselineHint)


def _richmond_va_small() -> Dataset:
    # Stylised numbers for exercising the loop, not real store data
    items = [
        ItemSpec(
            sku="BANANA",
            name="Bananas (lb)",
            category="produce",
            unit_cost=0.32,
            base_price=0.69,
            shelf_life_days=5,
            lead_time_days=1,
            base_daily_demand=140,
            price_elasticity=-1.1,
            shrink_rate=0.01,
            can_freeze=True,
            freeze_cost_per_unit=0.03,
            frozen_shelf_life_days=30,
            frozen_price_multiplier=0.75,
        ),
        ItemSpec(
            sku="MILK_1GAL",
            name="Whole Milk 1 gal",
            category="dairy",
            unit_cost=2.35,
            base_price=3.99,
            shelf_life_days=10,
            lead_time_days=2,
            base_daily_demand=38,
            price_elasticity=-0.6,
            shrink_rate=0.005,
        ),
        ItemSpec(
            sku="CHICKEN_BREAST",
            name="Chicken Breast (lb)",
            category="meat",
            unit_cost=2.9,
            base_price=4.99,
            shelf_life_days=4,
            lead_time_days=1,
            base_daily_demand=22,
            price_elasticity=-1.3,
            shrink_rate=0.01,
            can_freeze=True,
            freeze_cost_per_unit=0.08,
            frozen_shelf_life_days=60,
            frozen_price_multiplier=0.85,
        ),
        ItemSpec(
            sku="BAGUETTE",
            name="Baguette",
            category="bakery",
            unit_cost=0.55,
            base_price=1.79,
            shelf_life_days=2,
            lead_time_days=0,
            base_daily_demand=55,
            price_elasticity=-1.8,
            shrink_rate=0.02,
        ),
    ]

    return Dataset(
        store=StoreInfo(
            name="Richmond Sample Store",
            region="Richmond, VA",
            notes="Synthetic starter dataset for iterating on policy shape.",
        ),
        items=items,
        sim_config=SimulationConfig(
            days=28,
            seed=42,
            holding_cost_per_unit_per_day=0.01,
            waste_disposal_cost_per_unit=0.05,
            demand_noise_std_dev=0.18,
            count_stockouts=True,
        ),
        eval_config=EvalConfig(
            weights=ScoreWeights(
                profit=0.45, waste_reduction=0.25, satisfaction=0.2, humanitarian=0.1
            ),
            profit_per_day_target=180,
            waste_rate_target=0.08,
            satisfaction_target=0.97,
            donation_rate_target=0.02,
        ),
    )


PRESETS = {
    DEFAULT_PRESET: _richmond_va_small,
}


def load_preset(name: str = DEFAULT_PRESET) -> Dataset:
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown preset: {name!r} (available: {', '.join(sorted(PRESETS))})"
        ) from None
    return factory()


def baseline_policy(
    items: list[ItemSpec],
    policy_id: str = "baseline",
    hint: BaselineHint | None = None,
) -> InventoryPolicy:
    """
    Heuristic starting policy sized from each item's daily demand.

    Orders up to ~1.2 days of demand when stock falls to ~0.7 days, marks
    down the last two days of shelf life, donates 10% of stock on its last
    day and freezes up to 15% of a day's demand where the item allows it.
    """
    hint = hint or BaselineHint()
    per_sku = {}

    for item in items:
        daily = max(1, round_half_up(item.base_daily_demand))
        per_sku[item.sku] = ItemPolicy(
            sku=item.sku,
            reorder_point=max(0, round_half_up(daily * hint.reorder_point_multiplier)),
            order_up_to=max(1, round_half_up(daily * hint.order_up_to_multiplier)),
            pricing=DEFAULT_MARKDOWNS,
            donate_days_to_expire_at_most=1,
            donate_max_fraction_per_day=0.1,
            freeze_days_to_expire_at_most=1 if item.can_freeze else 0,
            freeze_max_units_per_day=(
                max(0, round_half_up(daily * 0.15)) if item.can_freeze else 0
            ),
        )

    return InventoryPolicy(id=policy_id, name="Baseline policy (heuristic)", per_sku=per_sku)
