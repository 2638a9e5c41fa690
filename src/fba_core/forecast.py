"""
Restock recommendations for FBA SKUs.

ideal level = forecast daily sales x (lead time + dynamic safety-stock days)
recommendation = ideal level - available, rounded up to a shipment quantity

The daily-sales forecast is the trailing-30-day rate, scaled by the user's
demand adjustment and by the SKU's velocity trend when comparing snapshots.
"""

import math
from typing import Iterable

from .models import NEW_SELLER_TREND, ForecastSettings, ProductRecord

FORECAST_CONFIG = {
    "SHIPMENT_QUANTITY_TIERS": [30, 50, 100, 150, 200, 250, 300, 400, 500],
    "LARGE_SHIPMENT_ROUNDING_UNIT": 50,
    # (trend % threshold, multiplier); growth bands use ">", decline bands "<"
    "GROWTH_BANDS": [(25, 1.25), (10, 1.10)],
    "DECLINE_BANDS": [(-25, 0.75), (-10, 0.90)],
    "HIGH_SELL_THROUGH": (75, 1.5),
    "LOW_SELL_THROUGH": (25, 0.5),
}


def round_to_shipment_quantity(quantity: float) -> int:
    """
    Round a raw restock quantity up to the nearest standard shipment size.

    Quantities above the largest tier round up to the next multiple of 50.
    """
    if quantity <= 0:
        return 0

    for tier in FORECAST_CONFIG["SHIPMENT_QUANTITY_TIERS"]:
        if quantity <= tier:
            return tier

    unit = FORECAST_CONFIG["LARGE_SHIPMENT_ROUNDING_UNIT"]
    return math.ceil(quantity / unit) * unit


def trend_adjustment(velocity_trend: float | None) -> float:
    """Demand multiplier from the snapshot-over-snapshot velocity trend."""
    if velocity_trend is None or velocity_trend == NEW_SELLER_TREND:
        return 1.0
    for threshold, multiplier in FORECAST_CONFIG["GROWTH_BANDS"]:
        if velocity_trend > threshold:
            return multiplier
    for threshold, multiplier in FORECAST_CONFIG["DECLINE_BANDS"]:
        if velocity_trend < threshold:
            return multiplier
    return 1.0


def dynamic_safety_stock_days(safety_stock_days: float, sell_through_rate: float) -> float:
    """Pad fast movers and trim slow movers."""
    high_rate, high_multiplier = FORECAST_CONFIG["HIGH_SELL_THROUGH"]
    low_rate, low_multiplier = FORECAST_CONFIG["LOW_SELL_THROUGH"]
    if sell_through_rate > high_rate:
        return safety_stock_days * high_multiplier
    if sell_through_rate < low_rate:
        return safety_stock_days * low_multiplier
    return safety_stock_days


def calculate_restock_recommendation(
    record: ProductRecord, settings: ForecastSettings
) -> int:
    """Units to send in, or 0 for non-sellers and SKUs flagged for removal."""
    if record.shipped_t30 <= 0 or "removal" in record.recommended_action.lower():
        return 0

    forecast_daily_sales = (
        record.daily_sales
        * (1 + settings.demand_forecast_percent / 100)
        * trend_adjustment(record.velocity_trend)
    )
    safety_days = dynamic_safety_stock_days(
        settings.safety_stock_days, record.sell_through_rate
    )

    ideal_level = (
        forecast_daily_sales * settings.lead_time_days
        + forecast_daily_sales * safety_days
    )
    return round_to_shipment_quantity(ideal_level - record.available)


def apply_forecast(
    records: Iterable[ProductRecord], settings: ForecastSettings
) -> list[ProductRecord]:
    """Return copies of the records carrying their restock recommendation."""
    return [
        record.model_copy(
            update={
                "restock_recommendation": calculate_restock_recommendation(record, settings)
            }
        )
        for record in records
    ]
