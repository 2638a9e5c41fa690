"""
Inventory health analysis over product records.

Computes:
- Snapshot statistics (totals, weighted age, sell-through, at-risk count)
- Stat deltas between two snapshots
- Chart series (age distribution, top at-risk, top sellers)
- Proactive alerts (stockout, sales stagnation, long-term storage fees)
- Mission KPIs tracked across snapshots
"""

from dataclasses import dataclass, field
from typing import Literal, Sequence

from .models import ProductRecord, Stats
from .parsers import round_half_up
from .records import calculate_sell_through
from .risk import RISK_SCORE_THRESHOLDS

SELL_THROUGH_THRESHOLDS = {"HOT_ITEM": 70}

ALERT_CONFIG = {
    "STOCKOUT_DAYS": 14,
    "STAGNATION_TREND": -40,
    "SAMPLE_SKUS": 3,
}

AGE_BUCKET_LABELS = {
    "inv_age_0_to_90": "0-90 days",
    "inv_age_91_to_180": "91-180 days",
    "inv_age_181_to_270": "181-270 days",
    "inv_age_271_to_365": "271-365 days",
    "inv_age_365_plus": "365+ days",
}


def calculate_stats(records: Sequence[ProductRecord]) -> Stats:
    """
    Aggregate a record collection in a single pass.

    Average age is weighted by available units; an empty collection gives
    all-zero stats.
    """
    total_available = 0
    total_pending = 0
    total_shipped = 0
    weighted_days = 0
    at_risk = 0

    for item in records:
        total_available += item.available
        total_pending += item.pending_removal
        total_shipped += item.shipped_t30
        weighted_days += item.total_inv_age_days * item.available
        if item.risk_score > RISK_SCORE_THRESHOLDS["MEDIUM_RISK"]:
            at_risk += 1

    avg_days = round_half_up(weighted_days / total_available) if total_available > 0 else 0

    return Stats(
        total_products=len(records),
        total_available=total_available,
        total_pending=total_pending,
        total_shipped=total_shipped,
        avg_days_inventory=avg_days,
        sell_through_rate=calculate_sell_through(total_available, total_shipped),
        at_risk_skus=at_risk,
    )


def compare_stats(new: Stats, old: Stats) -> Stats:
    """Field-wise change from the old snapshot's stats to the new one's."""
    return Stats(
        **{
            name: getattr(new, name) - getattr(old, name)
            for name in Stats.model_fields
        }
    )


def age_distribution(records: Sequence[ProductRecord]) -> list[dict]:
    """Units per age bucket, omitting empty buckets."""
    distribution = [
        {"name": label, "value": sum(getattr(item, field_name) for item in records)}
        for field_name, label in AGE_BUCKET_LABELS.items()
    ]
    return [bucket for bucket in distribution if bucket["value"] > 0]


def top_at_risk(
    records: Sequence[ProductRecord], limit: int = 8, min_score: int = 50
) -> list[dict]:
    """Highest risk scores above min_score, for the at-risk chart."""
    ranked = sorted(
        (item for item in records if item.risk_score > min_score),
        key=lambda item: item.risk_score,
        reverse=True,
    )
    return [{"name": item.sku, "risk": item.risk_score} for item in ranked[:limit]]


def top_sell_through(records: Sequence[ProductRecord], limit: int = 10) -> list[dict]:
    """Best sell-through rates among SKUs that shipped anything."""
    ranked = sorted(
        (item for item in records if item.sell_through_rate > 0),
        key=lambda item: item.sell_through_rate,
        reverse=True,
    )
    return [
        {"name": item.sku, "sell_through": item.sell_through_rate}
        for item in ranked[:limit]
    ]


@dataclass
class Alert:
    """A single proactive alert for the dashboard."""

    id: str
    type: Literal["critical", "warning", "info"]
    title: str
    message: str
    skus: list[str] = field(default_factory=list)


def _sample(skus: list[str]) -> str:
    sample_size = ALERT_CONFIG["SAMPLE_SKUS"]
    text = ", ".join(skus[:sample_size])
    return text + (" and more" if len(skus) > sample_size else "")


def generate_alerts(
    records: Sequence[ProductRecord], comparison_mode: bool = False
) -> list[Alert]:
    """
    Build stockout, stagnation and storage-fee alerts.

    Stagnation needs velocity trends, so it only fires in comparison mode.
    """
    alerts: list[Alert] = []
    if not records:
        return alerts

    # 1. Projected stockouts (critical)
    stockouts = sorted(
        (
            (item.available / item.daily_sales, item.sku)
            for item in records
            if item.available > 0 and item.shipped_t30 > 0
        ),
    )
    stockout_skus = [sku for days, sku in stockouts if days < ALERT_CONFIG["STOCKOUT_DAYS"]]
    if stockout_skus:
        alerts.append(
            Alert(
                id="stockout-alert",
                type="critical",
                title=f"Projected Stockout Risk: {len(stockout_skus)} SKU(s)",
                message=(
                    f"Projected to stock out in under {ALERT_CONFIG['STOCKOUT_DAYS']} days: "
                    f"{_sample(stockout_skus)}."
                ),
                skus=stockout_skus,
            )
        )

    # 2. Sales stagnation (warning, comparison mode only)
    if comparison_mode:
        stagnant = sorted(
            (
                item
                for item in records
                if (item.velocity_trend or 0) < ALERT_CONFIG["STAGNATION_TREND"]
                and item.available > 0
            ),
            key=lambda item: item.velocity_trend or 0,
        )
        if stagnant:
            skus = [item.sku for item in stagnant]
            alerts.append(
                Alert(
                    id="stagnation-alert",
                    type="warning",
                    title=f"Sales Stagnation: {len(skus)} SKU(s)",
                    message=(
                        f"Sales dropped over {abs(ALERT_CONFIG['STAGNATION_TREND'])}% for "
                        f"{_sample(skus)}. Review pricing and marketing."
                    ),
                    skus=skus,
                )
            )

    # 3. Long-term storage fees (warning)
    aged = [item for item in records if item.inv_age_365_plus > 0]
    if aged:
        aged_units = sum(item.inv_age_365_plus for item in aged)
        aged_value = sum(item.inv_age_365_plus * (item.cogs or 0) for item in aged)
        alerts.append(
            Alert(
                id="fee-alert",
                type="warning",
                title=f"Long-Term Storage Fee Risk: {len(aged)} SKU(s)",
                message=(
                    f"{aged_units:,} units aged over 365 days, representing "
                    f"~${aged_value:,.0f} in capital at risk for high fees."
                ),
                skus=[item.sku for item in aged],
            )
        )

    return alerts


def kpi_name(goal: str) -> str:
    """Human-readable name of the KPI that tracks a mission goal."""
    goal_lower = goal.lower()
    if "risk" in goal_lower:
        return f"At-Risk SKUs (Risk Score > {RISK_SCORE_THRESHOLDS['MEDIUM_RISK']})"
    if "sell-through" in goal_lower:
        return "Overall Sell-Through Rate (%)"
    if "storage fees" in goal_lower:
        return "Units Aged 181+ Days"
    if "cash flow" in goal_lower or "profitable" in goal_lower:
        return "Available Units of Top 20% SKUs"
    return "Primary Metric"


def calculate_mission_kpi(goal: str, records: Sequence[ProductRecord]) -> int | float:
    """Value of the goal's KPI for one snapshot's records."""
    if not records:
        return 0

    goal_lower = goal.lower()

    if "risk" in goal_lower:
        return sum(
            1 for item in records if item.risk_score > RISK_SCORE_THRESHOLDS["MEDIUM_RISK"]
        )

    if "sell-through" in goal_lower:
        return calculate_sell_through(
            sum(item.available for item in records),
            sum(item.shipped_t30 for item in records),
        )

    if "storage fees" in goal_lower:
        return sum(
            item.inv_age_181_to_270 + item.inv_age_271_to_365 + item.inv_age_365_plus
            for item in records
        )

    if "cash flow" in goal_lower or "profitable" in goal_lower:
        ranked = sorted(records, key=lambda item: item.sell_through_rate, reverse=True)
        top = ranked[: int(len(ranked) * 0.2)]
        return sum(item.available for item in top)

    return 0
