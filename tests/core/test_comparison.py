from fba_core.comparison import (
    calculate_velocity_trend,
    compare_snapshots,
    latest_snapshot_name,
    order_snapshots,
)
from fba_core.models import NEW_SELLER_TREND, Snapshot


def _snapshot(name, *records):
    return Snapshot(name=name, data=tuple(records))


def test_velocity_trend():
    assert calculate_velocity_trend(15, 10) == 50
    assert calculate_velocity_trend(5, 10) == -50
    assert calculate_velocity_trend(10, 0) == NEW_SELLER_TREND
    assert calculate_velocity_trend(0, 0) == 0


def test_sku_that_started_selling_gets_new_seller_trend(record_factory):
    old = _snapshot("2024-01", record_factory("X", shipped_t30=0))
    new = _snapshot("2024-02", record_factory("X", shipped_t30=10))

    [compared] = compare_snapshots(new, old)
    assert compared.velocity_trend == NEW_SELLER_TREND
    assert compared.shipped_change == 10


def test_matched_sku_deltas(record_factory):
    old = _snapshot(
        "old",
        record_factory("A", available=100, shipped_t30=20, total_inv_age_days=50,
                       risk_score=10, inventory_value=500),
    )
    new = _snapshot(
        "new",
        record_factory("A", available=80, shipped_t30=30, total_inv_age_days=70,
                       risk_score=25, inventory_value=400),
    )

    [compared] = compare_snapshots(new, old)
    assert compared.inventory_change == -20
    assert compared.shipped_change == 10
    assert compared.age_change == 20
    assert compared.risk_score_change == 15
    assert compared.velocity_trend == 50
    assert compared.inventory_value_change == -100
    assert compared.available == 80


def test_inventory_value_change_needs_both_sides(record_factory):
    old = _snapshot("old", record_factory("A", available=1))
    new = _snapshot("new", record_factory("A", available=2, inventory_value=10))
    [compared] = compare_snapshots(new, old)
    assert compared.inventory_value_change is None


def test_new_sku_is_growth_from_zero(record_factory):
    old = _snapshot("old")
    new = _snapshot(
        "new",
        record_factory("N", available=40, shipped_t30=0, total_inv_age_days=45, risk_score=15,
                       inventory_value=80),
    )
    [compared] = compare_snapshots(new, old)
    assert compared.inventory_change == 40
    assert compared.shipped_change == 0
    assert compared.age_change == 45
    assert compared.risk_score_change == 15
    assert compared.velocity_trend == 0
    assert compared.inventory_value_change == 80


def test_discontinued_skus_are_not_reported(record_factory):
    old = _snapshot("old", record_factory("A"), record_factory("GONE"))
    new = _snapshot("new", record_factory("A"), record_factory("B"))
    assert [item.sku for item in compare_snapshots(new, old)] == ["A", "B"]


def test_inputs_are_not_modified(record_factory):
    old = _snapshot("old", record_factory("A", available=1))
    new = _snapshot("new", record_factory("A", available=2))
    compare_snapshots(new, old)
    assert new.data[0].inventory_change is None
    assert old.data[0].inventory_change is None


def test_order_and_latest_snapshot():
    early, late = _snapshot("2024-01-01"), _snapshot("2024-03-01")
    assert order_snapshots(late, early) == (early, late)
    assert order_snapshots(early, late) == (early, late)
    assert latest_snapshot_name({"2024-01-01": early, "2024-03-01": late}) == "2024-03-01"
    assert latest_snapshot_name({}) is None
