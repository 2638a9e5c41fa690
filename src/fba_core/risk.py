"""
Overstock / stagnation risk scoring for FBA inventory.

The score (0-100) adds three capped components:
- Inventory age (max 40)
- Days of cover at the trailing-30-day sales rate (max 40)
- Share of units pending removal (max 20)

Bands are exclusive and evaluated highest-first; there is no interpolation.
Stockout risk is deliberately not part of this score; it is covered by the
restock forecaster and the stock-status filters.
"""

from typing import Literal

from .models import ProductRecord

RISK_SCORE_THRESHOLDS = {
    "HIGH_RISK": 85,
    "MEDIUM_RISK": 70,
}

RISK_SCORE_CONFIG = {
    "MAX_SCORE": 100,
    # (threshold in days, points), highest first
    "AGE": [(365, 40), (180, 25), (90, 15)],
    "STRANDED_POINTS": 40,
    "DAYS_OF_COVER": [(180, 35), (90, 20), (60, 10)],
    "REMOVAL_RATIO": [(0.5, 20), (0.2, 10), (0.1, 5)],
}


def _band_points(value: float, bands: list[tuple[float, int]]) -> int:
    """Points for the first band whose threshold the value strictly exceeds."""
    for threshold, points in bands:
        if value > threshold:
            return points
    return 0


def age_points(total_inv_age_days: float) -> int:
    return _band_points(total_inv_age_days, RISK_SCORE_CONFIG["AGE"])


def cover_points(available: float, shipped_t30: float) -> int:
    """Stranded stock scores the maximum; otherwise score by days of cover."""
    daily_sales = shipped_t30 / 30
    if daily_sales <= 0:
        return RISK_SCORE_CONFIG["STRANDED_POINTS"] if available > 0 else 0
    return _band_points(available / daily_sales, RISK_SCORE_CONFIG["DAYS_OF_COVER"])


def removal_points(available: float, pending_removal: float) -> int:
    total_stock = available + pending_removal
    if total_stock <= 0:
        return 0
    return _band_points(pending_removal / total_stock, RISK_SCORE_CONFIG["REMOVAL_RATIO"])


def calculate_risk_score(
    total_inv_age_days: float,
    available: float,
    shipped_t30: float,
    pending_removal: float,
) -> int:
    """
    Score a SKU's inventory risk.

    Returns:
        Integer risk score clamped to [0, 100].
    """
    score = (
        age_points(total_inv_age_days)
        + cover_points(available, shipped_t30)
        + removal_points(available, pending_removal)
    )
    return max(0, min(round(score), RISK_SCORE_CONFIG["MAX_SCORE"]))


def score_record(record: ProductRecord) -> int:
    """Risk score for an already-built record."""
    return calculate_risk_score(
        record.total_inv_age_days,
        record.available,
        record.shipped_t30,
        record.pending_removal,
    )


def risk_level(score: int) -> Literal["high", "medium", "low"]:
    if score > RISK_SCORE_THRESHOLDS["HIGH_RISK"]:
        return "high"
    if score > RISK_SCORE_THRESHOLDS["MEDIUM_RISK"]:
        return "medium"
    return "low"
