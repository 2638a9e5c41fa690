"""
Parsers for the cell values found in Amazon inventory report exports.

These handle the messy reality of seller-central CSVs:
- Currency strings and thousands separators ("$1,200.50")
- Placeholder tokens for empty cells ("-", "N/A", "null")
- SKUs with stray whitespace or mixed case across reports
- Header rows with BOMs and inconsistent casing
"""

import math
import numbers
import re
from typing import Any, Mapping

import numpy as np
import pandas as pd

Number = int | float

# Tokens seller-central and spreadsheet tools emit for "no value"
EMPTY_TOKENS = frozenset({"-", "n/a", "null", "undefined", "nan"})

_STRIP_PATTERN = re.compile(r"[$,\s]")
_BOM = "\ufeff"


def parse_numeric(value: Any) -> Number:
    """
    Coerce an arbitrary cell value into a number. Never raises.

    Returns 0 for None, blanks, placeholder tokens and anything that fails
    numeric coercion after stripping "$", "," and whitespace. Integral values
    come back as ``int`` so unit counts stay whole numbers.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, (numbers.Real, np.number)):
        result = float(value)
    else:
        text = str(value).strip()
        if not text or text.lower() in EMPTY_TOKENS or "_" in text:
            return 0
        try:
            result = float(_STRIP_PATTERN.sub("", text))
        except ValueError:
            return 0

    if not math.isfinite(result):
        return 0
    return int(result) if result.is_integer() else result


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as spreadsheet users expect."""
    return int(math.floor(value + 0.5))


def normalize_header(header: Any) -> str:
    """Lower-case, trim and strip a byte-order mark from a column header."""
    return str(header).replace(_BOM, "").strip().lower()


def normalize_row(row: Mapping[Any, Any]) -> dict[str, Any]:
    """Return a copy of a parsed row keyed by normalized header names."""
    return {normalize_header(key): value for key, value in row.items()}


def is_blank(value: Any) -> bool:
    """True for None, NaN (e.g. cells missing from a short CSV row) and whitespace."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return True
    return not str(value).strip()


class SKUNormalizer:
    """
    Normalizes seller SKUs so rows from different reports can be joined.

    Amazon reports agree on the SKU text itself but not on its casing or
    surrounding whitespace, so normalization is trim + optional uppercase.
    """

    def __init__(self, uppercase: bool = True):
        self.uppercase = uppercase

    def normalize(self, sku: Any) -> str:
        """Normalize a single SKU. Missing values become an empty string."""
        if is_blank(sku):
            return ""
        result = str(sku).strip()
        return result.upper() if self.uppercase else result

    def normalize_series(self, series: pd.Series) -> pd.Series:
        """Normalize an entire pandas Series of SKUs."""
        return series.apply(self.normalize)


DEFAULT_SKU_NORMALIZER = SKUNormalizer()


def normalize_sku(sku: Any) -> str:
    """Trim and uppercase a SKU using the default normalizer."""
    return DEFAULT_SKU_NORMALIZER.normalize(sku)
