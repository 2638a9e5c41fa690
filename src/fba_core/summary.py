"""
Plain-text data summary handed to an external text-generation service.

All numbers are computed here; the model is only asked to interpret them.
"""

from typing import Callable, Sequence

from . import settings
from .analysis import SELL_THROUGH_THRESHOLDS
from .models import ProductRecord
from .risk import RISK_SCORE_THRESHOLDS

AGED_INVENTORY_DAYS = 180


def _top(
    records: Sequence[ProductRecord],
    keep: Callable[[ProductRecord], bool],
    rank: Callable[[ProductRecord], float],
    limit: int,
) -> list[ProductRecord]:
    return sorted((item for item in records if keep(item)), key=rank, reverse=True)[:limit]


def _section(lines: list[str]) -> str:
    return "\n".join(lines) or "None"


def summarize_for_prompt(
    records: Sequence[ProductRecord], top_n: int = settings.PROMPT_TOP_N
) -> str:
    """
    Summarize a snapshot for an LLM prompt.

    Includes SKU and unit totals plus the top-N high-risk, hot-selling and
    oldest SKUs.
    """
    at_risk = _top(
        records,
        lambda item: item.risk_score > RISK_SCORE_THRESHOLDS["MEDIUM_RISK"],
        lambda item: item.risk_score,
        top_n,
    )
    hot = _top(
        records,
        lambda item: item.sell_through_rate > SELL_THROUGH_THRESHOLDS["HOT_ITEM"],
        lambda item: item.sell_through_rate,
        top_n,
    )
    aged = _top(
        records,
        lambda item: item.total_inv_age_days > AGED_INVENTORY_DAYS,
        lambda item: item.total_inv_age_days,
        top_n,
    )

    risk_lines = [
        f"- SKU: {d.sku}, Risk Score: {d.risk_score}, Available: {d.available}, "
        f"Avg Age: {d.total_inv_age_days} days"
        for d in at_risk
    ]
    hot_lines = [
        f"- SKU: {d.sku}, Sell-Through: {d.sell_through_rate}%, Available: {d.available}"
        for d in hot
    ]
    aged_lines = [
        f"- SKU: {d.sku}, Avg Age: {d.total_inv_age_days} days, Available: {d.available}"
        for d in aged
    ]

    return f"""FBA Inventory Analysis Report:
- Total SKUs: {len(records)}
- Total Available Units: {sum(item.available for item in records)}

Top {top_n} High-Risk SKUs (by risk score):
{_section(risk_lines)}

Top {top_n} Hot-Selling SKUs (by sell-through rate):
{_section(hot_lines)}

Top {top_n} Oldest Inventory SKUs (by average age):
{_section(aged_lines)}
"""
