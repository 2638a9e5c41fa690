"""
Composable record filters.

Each filter takes the working collection and one filter value and returns
the matching records; an empty value returns the collection unchanged.
apply_filters runs them in a fixed order so chained results are
deterministic.
"""

import math
import numbers
import re
from typing import Any, Sequence

from .models import FilterState, ProductRecord

STOCK_STATUS_THRESHOLDS = {
    "LOW_STOCK_DAYS": 30,
    "HIGH_STOCK_DAYS": 180,
    "STRANDED_HIGH_UNITS": 100,
}

# Inclusive upper bounds on average inventory age, per age bracket
AGE_BRACKETS = {
    "0-90": (None, 90),
    "91-180": (90, 180),
    "181-365": (180, 365),
    "365+": (365, None),
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Records = Sequence[ProductRecord]


def apply_search_filter(records: Records, search: str) -> Records:
    """Case-insensitive substring match on SKU, ASIN or product name."""
    if not search:
        return records
    needle = search.lower()
    return [
        item
        for item in records
        if needle in item.sku.lower()
        or needle in item.asin.lower()
        or needle in item.name.lower()
    ]


def apply_action_filter(records: Records, action: str) -> Records:
    """'removal' keeps SKUs Amazon recommends removing; 'normal' keeps the rest."""
    if action == "removal":
        return [item for item in records if "removal" in item.recommended_action.lower()]
    if action == "normal":
        return [
            item for item in records if "removal" not in item.recommended_action.lower()
        ]
    return records


def apply_age_filter(records: Records, age: str) -> Records:
    bracket = AGE_BRACKETS.get(age)
    if bracket is None:
        return records
    lower, upper = bracket
    return [
        item
        for item in records
        if (lower is None or item.total_inv_age_days > lower)
        and (upper is None or item.total_inv_age_days <= upper)
    ]


def apply_category_filter(records: Records, category: str) -> Records:
    if not category:
        return records
    return [item for item in records if item.category == category]


def apply_condition_filter(records: Records, condition: str) -> Records:
    if not condition:
        return records
    return [item for item in records if item.condition == condition]


def _is_low_stock(item: ProductRecord) -> bool:
    return (
        item.shipped_t30 > 0
        and item.available / item.daily_sales < STOCK_STATUS_THRESHOLDS["LOW_STOCK_DAYS"]
    )


def _is_high_stock(item: ProductRecord) -> bool:
    if item.shipped_t30 > 0:
        return item.available / item.daily_sales > STOCK_STATUS_THRESHOLDS["HIGH_STOCK_DAYS"]
    return item.available > STOCK_STATUS_THRESHOLDS["STRANDED_HIGH_UNITS"]


def _is_stranded(item: ProductRecord) -> bool:
    return item.available > 0 and item.shipped_t30 == 0


STOCK_STATUS_PREDICATES = {
    "low": _is_low_stock,
    "high": _is_high_stock,
    "stranded": _is_stranded,
}


def apply_stock_status_filter(records: Records, stock_status: str) -> Records:
    """
    Filter by days of cover at the trailing-30-day sales rate.

    - low: selling, with under 30 days of cover
    - high: over 180 days of cover, or no sales and more than 100 units
    - stranded: units on hand but nothing shipped
    """
    predicate = STOCK_STATUS_PREDICATES.get(stock_status)
    if predicate is None:
        return records
    return [item for item in records if predicate(item)]


def parse_stock_bound(value: Any) -> int | None:
    """Leading integer of a bound ("12", " 40 units"), or None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def apply_min_stock_filter(records: Records, min_stock: Any) -> Records:
    bound = parse_stock_bound(min_stock)
    if bound is None:
        return records
    return [item for item in records if item.available >= bound]


def apply_max_stock_filter(records: Records, max_stock: Any) -> Records:
    bound = parse_stock_bound(max_stock)
    if bound is None:
        return records
    return [item for item in records if item.available <= bound]


def apply_filters(records: Records, state: FilterState) -> list[ProductRecord]:
    """
    Run every filter in order: search, action, age, category, condition,
    stock status, min stock, max stock.
    """
    filtered = records
    filtered = apply_search_filter(filtered, state.search)
    filtered = apply_action_filter(filtered, state.action)
    filtered = apply_age_filter(filtered, state.age)
    filtered = apply_category_filter(filtered, state.category)
    filtered = apply_condition_filter(filtered, state.condition)
    filtered = apply_stock_status_filter(filtered, state.stock_status)
    filtered = apply_min_stock_filter(filtered, state.min_stock)
    filtered = apply_max_stock_filter(filtered, state.max_stock)
    return list(filtered)
