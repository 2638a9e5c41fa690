"""
CSV export of record tables.

Columns follow a fixed order mirroring ProductRecord; comparison columns are
appended when the records carry snapshot deltas. Fields containing a comma,
quote or line break are quoted with internal quotes doubled (RFC 4180).
"""

import csv
import re
from typing import Any, Sequence

import pandas as pd

from .models import ProductRecord

EXPORT_COLUMNS: list[tuple[str, str]] = [
    ("sku", "SKU"),
    ("asin", "ASIN"),
    ("name", "Product Name"),
    ("condition", "Condition"),
    ("available", "Available"),
    ("pending_removal", "Pending Removal"),
    ("inv_age_0_to_90", "Inv Age 0-90"),
    ("inv_age_91_to_180", "Inv Age 91-180"),
    ("inv_age_181_to_270", "Inv Age 181-270"),
    ("inv_age_271_to_365", "Inv Age 271-365"),
    ("inv_age_365_plus", "Inv Age 365+"),
    ("total_inv_age_days", "Avg Inv Age (Days)"),
    ("shipped_t30", "Shipped T30"),
    ("sell_through_rate", "Sell-Through (%)"),
    ("recommended_action", "Recommended Action"),
    ("risk_score", "Risk Score"),
    ("category", "Category"),
]

COMPARISON_COLUMNS: list[tuple[str, str]] = [
    ("inventory_change", "Inventory Change"),
    ("shipped_change", "Shipped Change"),
    ("age_change", "Age Change"),
    ("risk_score_change", "Risk Score Change"),
    ("velocity_trend", "Velocity Trend (%)"),
    ("inventory_value_change", "Inventory Value Change"),
]

_NEEDS_QUOTING = re.compile(r'[",\r\n]')


def _plain_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def format_csv_field(value: Any) -> str:
    """Render one value as a CSV field, quoting it when required."""
    text = _plain_text(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def columns_for(records: Sequence[ProductRecord]) -> list[tuple[str, str]]:
    """Export columns, with comparison columns when the first record has deltas."""
    if records and records[0].inventory_change is not None:
        return EXPORT_COLUMNS + COMPARISON_COLUMNS
    return list(EXPORT_COLUMNS)


def export_rows(records: Sequence[ProductRecord]) -> list[dict[str, str]]:
    """Records as title-keyed rows of display text."""
    columns = columns_for(records)
    return [
        {title: _plain_text(getattr(item, field_name)) for field_name, title in columns}
        for item in records
    ]


def to_frame(records: Sequence[ProductRecord]) -> pd.DataFrame:
    """Export rows as a DataFrame of strings, in export column order."""
    titles = [title for _, title in columns_for(records)]
    return pd.DataFrame(export_rows(records), columns=titles, dtype=object)


def to_csv(records: Sequence[ProductRecord]) -> str:
    """Serialize records to CSV text. No records gives an empty string."""
    if not records:
        return ""
    return to_frame(records).to_csv(
        index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n"
    )
