"""Simulation driver: days x SKUs over one store."""

import copy
import logging

from perishable.models import (
    ConfigurationError,
    DayMetrics,
    InventoryPolicy,
    ItemSpec,
    RunTotals,
    SimulationConfig,
    SimulationResult,
    ensure_policy_complete,
)
from perishable.pipeline import DailyPipeline, receive_deliveries
from perishable.rng import Rng
from perishable.state import StoreState, initial_state

logger = logging.getLogger(__name__)


class InventorySimulator:
    """
    Replays a store's perishable inventory under one policy.

    Owns the RNG and the store state for the duration of a run. Separate
    simulators share nothing, so runs for different candidate policies can
    execute in parallel.
    """

    def __init__(
        self,
        items: list[ItemSpec],
        policy: InventoryPolicy,
        config: SimulationConfig,
        state: StoreState | None = None,
    ):
        """
        Args:
            items: Catalog, processed in this order every day
            policy: Must cover every catalog SKU
            config: Run length, seed, cost rates and demand noise
            state: Opening state (copied); defaults to ``initial_state``

        Raises:
            ConfigurationError: A catalog SKU has no policy entry, or the
                day count is negative
        """
        ensure_policy_complete(items, policy)
        if config.days < 0:
            raise ConfigurationError(f"days must be >= 0, got {config.days}")

        self.items = list(items)
        self.catalog = {item.sku: item for item in self.items}
        self.policy = policy
        self.config = config
        self.rng = Rng(config.seed)
        self.state = (
            copy.deepcopy(state) if state is not None else initial_state(items, policy)
        )
        self.pipeline = DailyPipeline(config, self.rng)

        self.days: list[DayMetrics] = []
        self.totals = RunTotals()

    def step(self) -> DayMetrics:
        """Simulate the current day for every SKU and advance the clock."""
        arrivals = receive_deliveries(self.state, self.catalog)

        per_sku = []
        for item in self.items:
            metrics = self.pipeline.run(
                self.state,
                item,
                self.policy.per_sku[item.sku],
                arrivals=arrivals.get(item.sku, 0),
            )
            per_sku.append(metrics)
            self.totals.add(metrics)

        day = DayMetrics(day=self.state.current_day, per_sku=tuple(per_sku))
        self.days.append(day)
        self.state.current_day += 1

        logger.debug(
            "Day %d: sold=%d wasted=%d donated=%d stockout=%d",
            day.day,
            sum(m.sold for m in per_sku),
            sum(m.wasted for m in per_sku),
            sum(m.donated for m in per_sku),
            sum(m.stockout for m in per_sku),
        )
        return day

    def run(self) -> SimulationResult:
        logger.info(
            "Simulating policy %r: %d SKUs over %d days (seed %d)",
            self.policy.id,
            len(self.items),
            self.config.days,
            self.config.seed,
        )

        while len(self.days) < self.config.days:
            self.step()

        self.totals.close()
        logger.info(
            "Policy %r: profit=%.2f sold=%d wasted=%d donated=%d stockout=%d",
            self.policy.id,
            self.totals.profit,
            self.totals.sold,
            self.totals.wasted,
            self.totals.donated,
            self.totals.stockout,
        )

        return SimulationResult(
            config=self.config,
            policy=self.policy,
            items=self.items,
            days=self.days,
            totals=self.totals,
        )


def simulate_inventory(
    items: list[ItemSpec],
    policy: InventoryPolicy,
    config: SimulationConfig,
    state: StoreState | None = None,
) -> SimulationResult:
    """Run one full simulation; see ``InventorySimulator``."""
    return InventorySimulator(items, policy, config, state=state).run()
