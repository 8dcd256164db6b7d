import pytest

from perishable.models import FRESH, FROZEN, ConfigurationError, InventoryPolicy, ItemPolicy
from perishable.state import BatchLedger, InventoryBatch, initial_state

from conftest import make_item


def fresh(qty, days, sku="X"):
    return InventoryBatch(sku=sku, quantity=qty, days_to_expire=days, state=FRESH)


def frozen(qty, days, sku="X"):
    return InventoryBatch(sku=sku, quantity=qty, days_to_expire=days, state=FROZEN)


class TestBatchLedger:
    def test_quantity_is_scoped_to_sku_and_state(self):
        ledger = BatchLedger([fresh(5, 3), fresh(7, 2), frozen(4, 20), fresh(9, 1, sku="Y")])
        assert ledger.quantity("X", FRESH) == 12
        assert ledger.quantity("X", FROZEN) == 4
        assert ledger.quantity("Y", FRESH) == 9
        assert ledger.quantity("Z", FRESH) == 0

    def test_empty_batches_are_never_stored(self):
        ledger = BatchLedger([fresh(0, 3)])
        assert ledger.batches("X", FRESH) == []

    def test_batches_sorted_soonest_expiring_first(self):
        ledger = BatchLedger([fresh(1, 4), fresh(2, 1), fresh(3, 3)])
        assert [b.days_to_expire for b in ledger.batches("X", FRESH)] == [1, 3, 4]
        assert ledger.min_days_to_expire("X", FRESH) == 1
        assert ledger.min_days_to_expire("X", FROZEN) is None

    def test_take_consumes_soonest_expiring_first(self):
        ledger = BatchLedger([fresh(10, 4), fresh(5, 1), fresh(8, 2)])
        assert ledger.take("X", FRESH, 9) == 9
        remaining = [(b.days_to_expire, b.quantity) for b in ledger.batches("X", FRESH)]
        assert remaining == [(2, 4), (4, 10)]

    def test_take_returns_at_most_available(self):
        ledger = BatchLedger([fresh(3, 2)])
        assert ledger.take("X", FRESH, 10) == 3
        assert ledger.batches("X", FRESH) == []

    def test_take_nothing(self):
        ledger = BatchLedger([fresh(3, 2)])
        assert ledger.take("X", FRESH, 0) == 0
        assert ledger.take("X", FROZEN, 5) == 0
        assert ledger.quantity("X", FRESH) == 3

    def test_take_respects_expiry_limit(self):
        ledger = BatchLedger([fresh(4, 1), fresh(4, 2), fresh(4, 5)])
        assert ledger.take("X", FRESH, 100, max_days_to_expire=2) == 8
        assert [(b.days_to_expire, b.quantity) for b in ledger.batches("X", FRESH)] == [(5, 4)]

    def test_eligible_quantity(self):
        ledger = BatchLedger([fresh(4, 1), fresh(6, 2), fresh(8, 3)])
        assert ledger.eligible_quantity("X", FRESH, 2) == 10
        assert ledger.eligible_quantity("X", FRESH, 0) == 0

    def test_age_decrements_once_and_wastes_expired(self):
        ledger = BatchLedger([fresh(4, 1), fresh(6, 3), frozen(2, 1), fresh(5, 1, sku="Y")])
        assert ledger.age("X") == (4, 2)
        assert [(b.days_to_expire, b.quantity) for b in ledger.batches("X", FRESH)] == [(2, 6)]
        assert ledger.batches("X", FROZEN) == []
        # Other SKUs untouched
        assert ledger.batches("Y", FRESH)[0].days_to_expire == 1

    def test_age_wastes_batches_already_at_zero(self):
        ledger = BatchLedger([fresh(3, 0)])
        assert ledger.age("X") == (3, 0)


def test_initial_state_fills_to_order_up_to():
    item = make_item(shelf_life_days=4)
    policy = InventoryPolicy(
        id="p", name="p", per_sku={"X": ItemPolicy(sku="X", reorder_point=10, order_up_to=30)}
    )
    state = initial_state([item], policy)
    assert state.current_day == 0
    assert state.pending_deliveries == []
    [batch] = state.ledger.batches("X", FRESH)
    assert (batch.quantity, batch.days_to_expire) == (30, 4)


def test_initial_state_requires_policy_for_every_sku():
    policy = InventoryPolicy(id="p", name="p", per_sku={})
    with pytest.raises(ConfigurationError, match="'X'"):
        initial_state([make_item()], policy)
