"""Batch ledger and store state."""

import math
from dataclasses import dataclass, field

from perishable.models import (
    FRESH,
    FROZEN,
    BatchState,
    InventoryPolicy,
    ItemSpec,
    Sku,
    ensure_policy_complete,
)


@dataclass
class InventoryBatch:
    """Units of one SKU sharing a state and remaining shelf life."""

    sku: Sku
    quantity: int
    days_to_expire: int
    state: BatchState = FRESH


@dataclass
class PendingDelivery:
    sku: Sku
    quantity: int
    arriving_in_days: int


class BatchLedger:
    """
    Inventory batches indexed by (sku, state).

    Each pair owns a list kept in expiry order, soonest first, so every
    consumer (sales, freezing, donation, shrink) works FIFO-by-expiry.
    Emptied batches are compacted out after each removal, so any batch
    present has quantity > 0.
    """

    def __init__(self, batches: list[InventoryBatch] | None = None):
        self._batches: dict[tuple[Sku, BatchState], list[InventoryBatch]] = {}
        for batch in batches or ():
            self.add(batch)

    def add(self, batch: InventoryBatch) -> None:
        if batch.quantity <= 0:
            return
        pool = self._batches.setdefault((batch.sku, batch.state), [])
        pool.append(batch)
        # Stable: equal expiry keeps arrival order
        pool.sort(key=lambda b: b.days_to_expire)

    def batches(self, sku: Sku, state: BatchState) -> list[InventoryBatch]:
        """Batches for the pair, soonest-expiring first."""
        return list(self._batches.get((sku, state), ()))

    def quantity(self, sku: Sku, state: BatchState) -> int:
        return sum(b.quantity for b in self._batches.get((sku, state), ()))

    def eligible_quantity(
        self, sku: Sku, state: BatchState, max_days_to_expire: int
    ) -> int:
        """Units whose batches have at most ``max_days_to_expire`` days left."""
        return sum(
            b.quantity
            for b in self._batches.get((sku, state), ())
            if b.days_to_expire <= max_days_to_expire
        )

    def min_days_to_expire(self, sku: Sku, state: BatchState) -> int | None:
        pool = self._batches.get((sku, state))
        if not pool:
            return None
        return pool[0].days_to_expire

    def take(
        self,
        sku: Sku,
        state: BatchState,
        amount: int,
        max_days_to_expire: int | None = None,
    ) -> int:
        """
        Remove up to ``amount`` units, soonest-expiring first.

        Args:
            sku: Item identifier
            state: Pool to draw from
            amount: Units wanted
            max_days_to_expire: Only draw from batches with at most this
                many days left (all batches if None)

        Returns:
            Units actually removed (<= amount)
        """
        if amount <= 0:
            return 0
        pool = self._batches.get((sku, state))
        if not pool:
            return 0

        remaining = amount
        for batch in pool:
            if remaining <= 0:
                break
            if max_days_to_expire is not None and batch.days_to_expire > max_days_to_expire:
                # Pool is sorted, nothing further is eligible
                break
            taken = min(batch.quantity, remaining)
            batch.quantity -= taken
            remaining -= taken

        self._compact(sku, state)
        return amount - remaining

    def age(self, sku: Sku) -> tuple[int, int]:
        """
        Advance one day for every batch of ``sku``.

        Returns:
            (wasted_fresh, wasted_frozen): units in batches that reached
            zero days left and were removed
        """
        wasted = {}
        for state in (FRESH, FROZEN):
            pool = self._batches.get((sku, state), [])
            survivors = []
            expired = 0
            for batch in pool:
                batch.days_to_expire -= 1
                if batch.days_to_expire <= 0:
                    expired += batch.quantity
                else:
                    survivors.append(batch)
            if pool:
                self._batches[(sku, state)] = survivors
            wasted[state] = expired
        return wasted[FRESH], wasted[FROZEN]

    def _compact(self, sku: Sku, state: BatchState) -> None:
        pool = self._batches.get((sku, state))
        if pool is not None:
            self._batches[(sku, state)] = [b for b in pool if b.quantity > 0]


@dataclass
class StoreState:
    """The only state carried from one day to the next."""

    current_day: int = 0
    ledger: BatchLedger = field(default_factory=BatchLedger)
    pending_deliveries: list[PendingDelivery] = field(default_factory=list)

    def on_hand(self, sku: Sku) -> int:
        """Fresh plus frozen units of ``sku``."""
        return self.ledger.quantity(sku, FRESH) + self.ledger.quantity(sku, FROZEN)


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def initial_state(items: list[ItemSpec], policy: InventoryPolicy) -> StoreState:
    """
    Create the default opening state.

    Each SKU starts with one fresh batch filled to its order-up-to level at
    full shelf life.
    """
    ensure_policy_complete(items, policy)
    ledger = BatchLedger()

    for item in items:
        start_qty = max(0, round_half_up(policy.per_sku[item.sku].order_up_to))
        ledger.add(
            InventoryBatch(
                sku=item.sku,
                quantity=start_qty,
                days_to_expire=max(1, round_half_up(item.shelf_life_days)),
                state=FRESH,
            )
        )

    return StoreState(current_day=0, ledger=ledger, pending_deliveries=[])
