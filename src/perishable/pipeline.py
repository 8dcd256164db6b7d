"""Daily per-SKU operations pipeline."""

import logging
from dataclasses import dataclass

import numpy as np

from perishable.models import (
    FRESH,
    FROZEN,
    DaySkuMetrics,
    ItemPolicy,
    ItemSpec,
    SimulationConfig,
    Sku,
)
from perishable.rng import Rng
from perishable.state import (
    InventoryBatch,
    PendingDelivery,
    StoreState,
    round_half_up,
)

logger = logging.getLogger(__name__)

MIN_PRICE_EFFECT_MULTIPLIER = 0.05


def _clamp01(x: float) -> float:
    return float(np.clip(x, 0.0, 1.0))


def receive_deliveries(state: StoreState, items: dict[Sku, ItemSpec]) -> dict[Sku, int]:
    """
    Count down pending deliveries and shelve the ones that have arrived.

    Runs once per day before any SKU is processed. Arrivals become fresh
    batches at full shelf life.

    Returns:
        Units received per SKU
    """
    arrived: dict[Sku, int] = {}
    still_pending = []

    for delivery in state.pending_deliveries:
        delivery.arriving_in_days -= 1
        if delivery.arriving_in_days > 0:
            still_pending.append(delivery)
            continue

        item = items.get(delivery.sku)
        if item is None:
            logger.warning("Dropping delivery for unknown sku %r", delivery.sku)
            continue

        qty = max(0, round_half_up(delivery.quantity))
        state.ledger.add(
            InventoryBatch(
                sku=item.sku,
                quantity=qty,
                days_to_expire=max(1, round_half_up(item.shelf_life_days)),
                state=FRESH,
            )
        )
        arrived[item.sku] = arrived.get(item.sku, 0) + qty

    state.pending_deliveries = still_pending
    return arrived


@dataclass
class _SkuDay:
    """Scratch record threaded through the stages for one SKU on one day."""

    item: ItemSpec
    policy: ItemPolicy
    arrivals: int
    starting_fresh: int
    starting_frozen: int

    frozen_moved: int = 0
    donated: int = 0
    price: float = 0.0
    price_multiplier: float = 1.0
    demand: int = 0
    sold_fresh: int = 0
    sold_frozen: int = 0
    frozen_price: float = 0.0
    unmet: int = 0
    shrink_lost_fresh: int = 0
    shrink_lost_frozen: int = 0
    held: int = 0
    wasted_fresh: int = 0
    wasted_frozen: int = 0
    ordered: int = 0


class DailyPipeline:
    """
    Runs one SKU through one day of store operations.

    Stages run in this fixed order, each seeing the ledger as the previous
    stage left it:
        1. Receive deliveries (``receive_deliveries``, once per day)
        2. Freeze near-expiry fresh stock, up to the daily cap
        3. Donate a fraction of near-expiry fresh stock
        4. Price from the markdown rules
        5. Realise demand
        6. Sell fresh (FIFO), then frozen
        7. Shrink, fresh first then frozen
        8. Age all batches, expired stock becomes waste
        9. Reorder up to the target when fresh stock is at the reorder point
        10. Roll up revenue and costs
    """

    def __init__(self, config: SimulationConfig, rng: Rng):
        self.config = config
        self.rng = rng
        self.stages = (
            self._freeze,
            self._donate,
            self._price,
            self._realize_demand,
            self._fulfil,
            self._shrink,
            self._age,
            self._replenish,
        )

    def run(
        self,
        state: StoreState,
        item: ItemSpec,
        policy: ItemPolicy,
        arrivals: int = 0,
    ) -> DaySkuMetrics:
        """
        Apply stages 2-10 to ``item`` on the current day.

        Args:
            state: Store state, mutated in place
            item: Catalog entry
            policy: Control parameters for this SKU
            arrivals: Units of this SKU received earlier today

        Returns:
            Metrics for this SKU and day
        """
        ledger = state.ledger
        day = _SkuDay(
            item=item,
            policy=policy,
            arrivals=arrivals,
            starting_fresh=ledger.quantity(item.sku, FRESH) - arrivals,
            starting_frozen=ledger.quantity(item.sku, FROZEN),
        )

        for stage in self.stages:
            stage(state, day)

        return self._rollup(state, day)

    def _freeze(self, state: StoreState, day: _SkuDay) -> None:
        item, policy = day.item, day.policy
        cap = max(0, int(np.floor(policy.freeze_max_units_per_day)))
        if not item.can_freeze or cap <= 0:
            return

        moved = state.ledger.take(
            item.sku,
            FRESH,
            cap,
            max_days_to_expire=policy.freeze_days_to_expire_at_most,
        )
        state.ledger.add(
            InventoryBatch(
                sku=item.sku,
                quantity=moved,
                days_to_expire=max(1, round_half_up(item.frozen_shelf_life_days)),
                state=FROZEN,
            )
        )
        day.frozen_moved = moved

    def _donate(self, state: StoreState, day: _SkuDay) -> None:
        item, policy = day.item, day.policy
        if policy.donate_max_fraction_per_day <= 0:
            return

        fraction = _clamp01(policy.donate_max_fraction_per_day)
        threshold = policy.donate_days_to_expire_at_most
        eligible = state.ledger.eligible_quantity(item.sku, FRESH, threshold)
        cap = int(np.floor(eligible * fraction))
        day.donated = state.ledger.take(
            item.sku, FRESH, cap, max_days_to_expire=threshold
        )

    def _price(self, state: StoreState, day: _SkuDay) -> None:
        """Price off the most urgent fresh batch."""
        item = day.item
        min_days = state.ledger.min_days_to_expire(item.sku, FRESH)
        if min_days is None:
            min_days = item.shelf_life_days
        min_days = max(0, int(np.floor(min_days)))

        multiplier = 1.0
        for rule in sorted(day.policy.pricing, key=lambda r: r.days_to_expire_at_most):
            if min_days <= rule.days_to_expire_at_most:
                multiplier = rule.price_multiplier
                break

        day.price_multiplier = multiplier
        day.price = max(0.0, item.base_price * multiplier)

    def _realize_demand(self, state: StoreState, day: _SkuDay) -> None:
        item = day.item
        base = max(0.0, item.base_daily_demand)

        # With negative elasticity a lower price raises demand
        price_effect = max(MIN_PRICE_EFFECT_MULTIPLIER, day.price_multiplier) ** item.price_elasticity

        # Always draw so every SKU-day consumes the same amount of randomness
        noise = max(0.0, 1.0 + self.rng.normal(0.0, self.config.demand_noise_std_dev))

        day.demand = max(0, int(np.floor(base * price_effect * noise)))

    def _fulfil(self, state: StoreState, day: _SkuDay) -> None:
        item = day.item
        day.sold_fresh = state.ledger.take(item.sku, FRESH, day.demand)

        remaining = day.demand - day.sold_fresh
        day.frozen_price = item.base_price * item.frozen_price_multiplier
        if remaining > 0:
            day.sold_frozen = state.ledger.take(item.sku, FROZEN, remaining)

        day.unmet = day.demand - day.sold_fresh - day.sold_frozen

    def _shrink(self, state: StoreState, day: _SkuDay) -> None:
        # Fresh goes before frozen even though frozen usually lasts longer
        item = day.item
        loss = int(np.floor(state.on_hand(item.sku) * _clamp01(item.shrink_rate)))
        if loss > 0:
            day.shrink_lost_fresh = state.ledger.take(item.sku, FRESH, loss)
            remainder = loss - day.shrink_lost_fresh
            if remainder > 0:
                day.shrink_lost_frozen = state.ledger.take(item.sku, FROZEN, remainder)

        # Stock carried through the day, before anything expires overnight
        day.held = state.on_hand(item.sku)

    def _age(self, state: StoreState, day: _SkuDay) -> None:
        day.wasted_fresh, day.wasted_frozen = state.ledger.age(day.item.sku)

    def _replenish(self, state: StoreState, day: _SkuDay) -> None:
        item, policy = day.item, day.policy
        fresh = state.ledger.quantity(item.sku, FRESH)
        if fresh > policy.reorder_point:
            return

        need = max(0, round_half_up(policy.order_up_to) - fresh)
        if need > 0:
            state.pending_deliveries.append(
                PendingDelivery(
                    sku=item.sku,
                    quantity=need,
                    arriving_in_days=max(0, round_half_up(item.lead_time_days)),
                )
            )
            day.ordered = need

    def _rollup(self, state: StoreState, day: _SkuDay) -> DaySkuMetrics:
        item, config = day.item, self.config
        sold = day.sold_fresh + day.sold_frozen
        wasted = day.wasted_fresh + day.wasted_frozen

        return DaySkuMetrics(
            sku=item.sku,
            starting_fresh=day.starting_fresh,
            starting_frozen=day.starting_frozen,
            arrivals=day.arrivals,
            price=day.price,
            price_multiplier=day.price_multiplier,
            frozen_price=day.frozen_price,
            demand=day.demand,
            sold_fresh=day.sold_fresh,
            sold_frozen=day.sold_frozen,
            unmet=day.unmet,
            stockout=day.unmet if config.count_stockouts else 0,
            donated=day.donated,
            frozen_moved=day.frozen_moved,
            shrink_lost_fresh=day.shrink_lost_fresh,
            shrink_lost_frozen=day.shrink_lost_frozen,
            wasted_fresh=day.wasted_fresh,
            wasted_frozen=day.wasted_frozen,
            ordered=day.ordered,
            ending_fresh=state.ledger.quantity(item.sku, FRESH),
            ending_frozen=state.ledger.quantity(item.sku, FROZEN),
            revenue=day.sold_fresh * day.price + day.sold_frozen * day.frozen_price,
            cogs=sold * item.unit_cost,
            holding_cost=day.held * config.holding_cost_per_unit_per_day,
            waste_cost=wasted * config.waste_disposal_cost_per_unit,
            freeze_cost=day.frozen_moved * item.freeze_cost_per_unit,
        )
