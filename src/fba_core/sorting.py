"""
Multi-column sorting and pagination for record tables.

Sort state is an ordered list of SortCriterion; the first criterion has the
highest priority and ties fall through to the next. The sort is stable, so
rows that tie on every key keep their incoming order. Missing values always
sort last, whatever the direction.
"""

import locale
import math
from functools import cmp_to_key
from typing import Any, Sequence

from .models import DEFAULT_SORT, ProductRecord, SortCriterion


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _collation_key(text: str) -> tuple[str, str, str]:
    # strxfrm rejects NUL; the raw text breaks ties so the order stays total
    collatable = text.replace("\x00", "")
    return locale.strxfrm(collatable.casefold()), locale.strxfrm(collatable), text


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: Any, b: Any) -> int:
    """Compare two present field values: numbers numerically, strings by collation."""
    if isinstance(a, str) and isinstance(b, str):
        return _cmp(_collation_key(a), _collation_key(b))
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return _cmp(a, b)
    # Mixed types fall back to their text form
    return _cmp(_collation_key(str(a)), _collation_key(str(b)))


def _compare_records(
    left: ProductRecord, right: ProductRecord, criteria: Sequence[SortCriterion]
) -> int:
    for criterion in criteria:
        a = getattr(left, criterion.key, None)
        b = getattr(right, criterion.key, None)
        a_missing, b_missing = _is_missing(a), _is_missing(b)

        if a_missing and b_missing:
            continue
        if a_missing:
            return 1
        if b_missing:
            return -1

        comparison = compare_values(a, b)
        if comparison:
            return comparison if criterion.direction == "asc" else -comparison
    return 0


def sort_records(
    records: Sequence[ProductRecord], criteria: Sequence[SortCriterion] = DEFAULT_SORT
) -> list[ProductRecord]:
    """Return a new list sorted by the criteria in priority order."""
    if not criteria:
        return list(records)
    return sorted(
        records, key=cmp_to_key(lambda a, b: _compare_records(a, b, criteria))
    )


def update_sort(
    criteria: Sequence[SortCriterion], key: str, additive: bool = False
) -> list[SortCriterion]:
    """
    Next sort state after a column-header click.

    A plain click sorts by that column alone (ascending), or flips its
    direction when it already is the only sort key. An additive click
    (shift-click) flips the column in place if it is already sorted, or
    appends it as the lowest-priority key.
    """
    if not additive:
        if len(criteria) == 1 and criteria[0].key == key:
            return [criteria[0].toggled()]
        return [SortCriterion(key=key, direction="asc")]

    updated = list(criteria)
    for position, criterion in enumerate(updated):
        if criterion.key == key:
            updated[position] = criterion.toggled()
            return updated
    updated.append(SortCriterion(key=key, direction="asc"))
    return updated


def total_pages(count: int, per_page: int) -> int:
    if per_page <= 0:
        return 0
    return math.ceil(count / per_page)


def paginate(
    records: Sequence[ProductRecord], page: int, per_page: int
) -> list[ProductRecord]:
    """Slice out a 1-based page. Pages before the first clamp to page 1."""
    if per_page <= 0:
        return []
    start = (max(page, 1) - 1) * per_page
    return list(records[start : start + per_page])
