import pytest

from perishable.models import InventoryPolicy, ItemPolicy, ItemSpec, SimulationConfig
from perishable.state import BatchLedger, InventoryBatch, StoreState


def make_item(**overrides) -> ItemSpec:
    values = dict(
        sku="X",
        unit_cost=1.0,
        base_price=2.0,
        shelf_life_days=5,
        lead_time_days=1,
        base_daily_demand=50,
        price_elasticity=0.0,
        shrink_rate=0.0,
    )
    values.update(overrides)
    return ItemSpec(**values)


def make_policy(item_policy: ItemPolicy, policy_id: str = "test") -> InventoryPolicy:
    return InventoryPolicy(id=policy_id, name=policy_id, per_sku={item_policy.sku: item_policy})


def make_state(*batches: InventoryBatch) -> StoreState:
    return StoreState(current_day=0, ledger=BatchLedger(list(batches)))


@pytest.fixture
def quiet_config() -> SimulationConfig:
    """One day, no noise, no holding or disposal costs."""
    return SimulationConfig(
        days=1,
        seed=7,
        holding_cost_per_unit_per_day=0.0,
        waste_disposal_cost_per_unit=0.0,
        demand_noise_std_dev=0.0,
        count_stockouts=True,
    )
