"""
Snapshot-to-snapshot comparison.

Matches SKUs between an older and a newer snapshot and attaches deltas to
the newer records. SKUs that only exist in the older snapshot (discontinued
or sold out and delisted) are not part of the output.
"""

from typing import Mapping

from .models import NEW_SELLER_TREND, ProductRecord, Snapshot


def calculate_velocity_trend(new_shipped: float, old_shipped: float) -> float:
    """
    Percentage change in 30-day shipped units.

    Returns NEW_SELLER_TREND when the SKU started selling this period and 0
    when it sold nothing in either.
    """
    if old_shipped > 0:
        return (new_shipped - old_shipped) / old_shipped * 100
    if new_shipped > 0:
        return NEW_SELLER_TREND
    return 0


def _matched_deltas(new: ProductRecord, old: ProductRecord) -> dict:
    deltas = {
        "inventory_change": new.available - old.available,
        "shipped_change": new.shipped_t30 - old.shipped_t30,
        "age_change": new.total_inv_age_days - old.total_inv_age_days,
        "risk_score_change": new.risk_score - old.risk_score,
        "velocity_trend": calculate_velocity_trend(new.shipped_t30, old.shipped_t30),
    }
    if new.inventory_value is not None and old.inventory_value is not None:
        deltas["inventory_value_change"] = new.inventory_value - old.inventory_value
    return deltas


def _new_sku_deltas(new: ProductRecord) -> dict:
    # A SKU new to this period is treated as growth from zero
    deltas = {
        "inventory_change": new.available,
        "shipped_change": new.shipped_t30,
        "age_change": new.total_inv_age_days,
        "risk_score_change": new.risk_score,
        "velocity_trend": NEW_SELLER_TREND if new.shipped_t30 > 0 else 0,
    }
    if new.inventory_value is not None:
        deltas["inventory_value_change"] = new.inventory_value
    return deltas


def compare_snapshots(new_snapshot: Snapshot, old_snapshot: Snapshot) -> list[ProductRecord]:
    """
    Attach period-over-period deltas to every record of the newer snapshot.

    Returns fresh records; neither snapshot is modified.
    """
    old_index: Mapping[str, ProductRecord] = {item.sku: item for item in old_snapshot.data}

    compared = []
    for new_item in new_snapshot.data:
        old_item = old_index.get(new_item.sku)
        deltas = (
            _matched_deltas(new_item, old_item)
            if old_item is not None
            else _new_sku_deltas(new_item)
        )
        compared.append(new_item.model_copy(update=deltas))
    return compared


def order_snapshots(first: Snapshot, second: Snapshot) -> tuple[Snapshot, Snapshot]:
    """Return (older, newer), where newer is the lexically later name."""
    if first.name <= second.name:
        return first, second
    return second, first


def latest_snapshot_name(snapshots: Mapping[str, Snapshot]) -> str | None:
    """Name of the most recent snapshot, or None when nothing is loaded."""
    return max(snapshots, default=None)
