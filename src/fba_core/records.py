"""
Builds canonical product records from raw Amazon report rows.

A primary inventory row (FBA Inventory / Inventory Health export) is turned
into a ProductRecord with:
- Unit-weighted average inventory age
- Trailing-30-day sell-through rate
- Logistics metrics (net stock, days of cover, urgency) when a Manage FBA
  Inventory row exists for the SKU
- Inventory valuation when cost/price data exists for the SKU
- Risk score

Rows are expected to be keyed by normalized (lower-case) header names.
Rows without a SKU are dropped silently.
"""

import logging
from typing import Any, Iterable, Mapping

from .models import (
    INFINITE_COVER_DAYS,
    FinancialRecord,
    LogisticsRecord,
    ProductRecord,
    UrgencyStatus,
)
from .parsers import is_blank, normalize_row, normalize_sku, parse_numeric, round_half_up
from .risk import calculate_risk_score

logger = logging.getLogger(__name__)

# Midpoint (in days) assigned to every unit in each age bucket
INVENTORY_AGE_WEIGHTS = {
    "inv-age-0-to-90-days": 45,
    "inv-age-91-to-180-days": 135,
    "inv-age-181-to-270-days": 225,
    "inv-age-271-to-365-days": 318,
    "inv-age-365-plus-days": 400,
}

URGENCY_CONFIG = {
    "COVERAGE_CRITICAL_DAYS": 2,
    "COVERAGE_WARNING_DAYS": 5,
    "URGENCY_SCORE_THRESHOLD": 0,  # positive score means demand exceeds stock
}


def weighted_inventory_age(buckets: Iterable[float]) -> float:
    """
    Unit-weighted mean age across the five age buckets.

    Args:
        buckets: Unit counts in bucket order (0-90, 91-180, 181-270, 271-365, 365+)

    Returns 0 when every bucket is empty.
    """
    counts = list(buckets)
    total_units = sum(counts)
    if total_units == 0:
        return 0
    weighted = sum(
        count * weight for count, weight in zip(counts, INVENTORY_AGE_WEIGHTS.values())
    )
    return weighted / total_units


def calculate_sell_through(available: float, shipped_t30: float) -> int:
    """Shipped units as a percentage of available + shipped, 0 when both are 0."""
    denominator = available + shipped_t30
    if denominator == 0:
        return 0
    return round_half_up(shipped_t30 / denominator * 100)


def calculate_logistics(
    available: float,
    shipped_t30: float,
    sell_through_rate: int,
    logistics: LogisticsRecord,
) -> dict[str, Any]:
    """
    Net available stock, days of cover and urgency for one SKU.

    net stock   = available + inbound working + inbound shipped - reserved
    cover       = net stock / daily sales (999 when stock but no sales)
    urgency     = sell-through share of daily sales - net stock
    """
    daily_sales = shipped_t30 / 30
    net_stock = (
        available + logistics.inbound_working + logistics.inbound_shipped
    ) - logistics.reserved_quantity

    if daily_sales > 0:
        days_of_cover = round_half_up(net_stock / daily_sales)
    else:
        days_of_cover = INFINITE_COVER_DAYS if net_stock > 0 else 0

    raw_urgency = (sell_through_rate / 100) * daily_sales - net_stock

    status: UrgencyStatus = "Healthy"
    if (
        days_of_cover <= URGENCY_CONFIG["COVERAGE_CRITICAL_DAYS"]
        or raw_urgency > URGENCY_CONFIG["URGENCY_SCORE_THRESHOLD"]
    ):
        status = "Critical"
    elif days_of_cover <= URGENCY_CONFIG["COVERAGE_WARNING_DAYS"]:
        status = "Warning"

    return {
        "inbound_working": logistics.inbound_working,
        "inbound_shipped": logistics.inbound_shipped,
        "inbound_receiving": logistics.inbound_receiving,
        "reserved_quantity": logistics.reserved_quantity,
        "net_available_stock": net_stock,
        "days_of_cover": days_of_cover,
        "urgency_score": round(raw_urgency, 2),
        "urgency_status": status,
    }


def calculate_financials(available: float, financial: FinancialRecord) -> dict[str, Any]:
    return {
        "cogs": financial.cogs,
        "price": financial.price,
        "inventory_value": available * financial.cogs,
        "potential_revenue": available * financial.price,
        "gross_profit_per_unit": financial.price - financial.cogs,
    }


def build_logistics_index(rows: Iterable[Mapping[str, Any]]) -> dict[str, LogisticsRecord]:
    """Index Manage FBA Inventory rows by normalized SKU. The last row for a SKU wins."""
    index: dict[str, LogisticsRecord] = {}
    for raw in rows:
        row = normalize_row(raw)
        sku = normalize_sku(row.get("sku"))
        if not sku:
            continue
        index[sku] = LogisticsRecord(
            sku=sku,
            inbound_working=parse_numeric(row.get("afn-inbound-working-quantity")),
            inbound_shipped=parse_numeric(row.get("afn-inbound-shipped-quantity")),
            inbound_receiving=parse_numeric(row.get("afn-inbound-receiving-quantity")),
            reserved_quantity=parse_numeric(row.get("afn-reserved-quantity")),
            mfn_fulfillable=parse_numeric(row.get("mfn-fulfillable-quantity")),
        )
    return index


def build_financial_index(rows: Iterable[Mapping[str, Any]]) -> dict[str, FinancialRecord]:
    """Index cost/price rows by normalized SKU. The last row for a SKU wins."""
    index: dict[str, FinancialRecord] = {}
    for raw in rows:
        row = normalize_row(raw)
        sku = normalize_sku(row.get("sku"))
        if not sku:
            continue
        index[sku] = FinancialRecord(
            sku=sku,
            cogs=parse_numeric(row.get("cogs")),
            price=parse_numeric(row.get("price")),
        )
    return index


def _inline_financials(sku: str, row: Mapping[str, Any]) -> FinancialRecord | None:
    """Cost/price columns carried on the primary row itself, if any are filled in."""
    cogs = row.get("cogs")
    price = row.get("price")
    if is_blank(cogs) and is_blank(price):
        return None
    return FinancialRecord(sku=sku, cogs=parse_numeric(cogs), price=parse_numeric(price))


def _text(row: Mapping[str, Any], key: str, default: str = "") -> str:
    value = row.get(key)
    if is_blank(value):
        return default
    return str(value).strip()


def build_product_record(
    raw_row: Mapping[str, Any],
    logistics_index: Mapping[str, LogisticsRecord] | None = None,
    financial_index: Mapping[str, FinancialRecord] | None = None,
) -> ProductRecord | None:
    """
    Map one primary inventory row into a ProductRecord.

    Returns None for rows whose SKU is blank after normalization.
    """
    row = normalize_row(raw_row)
    sku = normalize_sku(row.get("sku"))
    if not sku:
        return None

    available = parse_numeric(row.get("available"))
    shipped_t30 = parse_numeric(row.get("units-shipped-t30"))
    pending_removal = parse_numeric(row.get("pending-removal-quantity"))
    buckets = [parse_numeric(row.get(column)) for column in INVENTORY_AGE_WEIGHTS]

    total_inv_age_days = round_half_up(weighted_inventory_age(buckets))
    sell_through_rate = calculate_sell_through(available, shipped_t30)

    fields: dict[str, Any] = {
        "sku": sku,
        "asin": _text(row, "asin"),
        "name": _text(row, "product-name"),
        "condition": _text(row, "condition"),
        "category": _text(row, "category", "Unknown"),
        "available": available,
        "pending_removal": pending_removal,
        "inv_age_0_to_90": buckets[0],
        "inv_age_91_to_180": buckets[1],
        "inv_age_181_to_270": buckets[2],
        "inv_age_271_to_365": buckets[3],
        "inv_age_365_plus": buckets[4],
        "total_inv_age_days": total_inv_age_days,
        "shipped_t30": shipped_t30,
        "sell_through_rate": sell_through_rate,
        "recommended_action": _text(row, "recommended-action", "No Action"),
    }

    logistics = logistics_index.get(sku) if logistics_index else None
    if logistics is not None:
        fields.update(
            calculate_logistics(available, shipped_t30, sell_through_rate, logistics)
        )

    # A matching financial-report row overrides cost/price columns on the row itself
    financial = financial_index.get(sku) if financial_index else None
    if financial is None:
        financial = _inline_financials(sku, row)
    if financial is not None:
        fields.update(calculate_financials(available, financial))

    fields["risk_score"] = calculate_risk_score(
        total_inv_age_days, available, shipped_t30, pending_removal
    )
    return ProductRecord(**fields)


def process_rows(
    rows: Iterable[Mapping[str, Any]],
    logistics_index: Mapping[str, LogisticsRecord] | None = None,
    financial_index: Mapping[str, FinancialRecord] | None = None,
) -> list[ProductRecord]:
    """
    Build product records for every valid row.

    A SKU that appears more than once keeps the values of its last row but
    the position of its first.
    """
    records: dict[str, ProductRecord] = {}
    dropped = 0
    for row in rows:
        record = build_product_record(row, logistics_index, financial_index)
        if record is None:
            dropped += 1
            continue
        records[record.sku] = record

    if dropped:
        logger.debug("Dropped %d row(s) without a SKU", dropped)
    return list(records.values())
