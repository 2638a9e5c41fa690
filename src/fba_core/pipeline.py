"""
Snapshot assembly and the table view pipeline.

Files are processed one at a time, in the order given:
- Manage FBA Inventory (logistics) and cost/price (financial) reports are
  merged into working SKU indexes
- Inventory snapshots are built against the indexes as they stand at that
  point, so a logistics report must come before the snapshots it enriches

The view pipeline derives the table shown to the user:
base records (one snapshot, or a comparison of two) -> restock forecast
-> filters -> multi-key sort.
"""

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from pydantic import BaseModel, Field

from .analysis import calculate_stats
from .comparison import compare_snapshots
from .exceptions import SnapshotNotFoundError
from .filters import apply_filters
from .forecast import apply_forecast
from .models import (
    DEFAULT_SORT,
    FilterState,
    FinancialRecord,
    ForecastSettings,
    LogisticsRecord,
    ProductRecord,
    Snapshot,
    SortCriterion,
)
from .parsers import normalize_header
from .records import build_financial_index, build_logistics_index, process_rows
from .sorting import sort_records

logger = logging.getLogger(__name__)

# Columns that only appear in the Manage FBA Inventory report
LOGISTICS_MARKER_COLUMNS = frozenset(
    {
        "afn-inbound-working-quantity",
        "afn-inbound-shipped-quantity",
        "afn-reserved-quantity",
    }
)
FINANCIAL_MARKER_COLUMNS = frozenset({"cogs", "price"})


class ReportKind(Enum):
    """What an uploaded report contains."""

    SNAPSHOT = "snapshot"  # FBA inventory / inventory health export
    LOGISTICS = "logistics"  # Manage FBA Inventory (inbound, reserved)
    FINANCIAL = "financial"  # seller-maintained cost and price sheet


def classify_report(headers: Iterable[Any]) -> ReportKind:
    """
    Decide a report's kind from its header row alone.

    A cost/price sheet is only treated as financial when it has no
    "available" column; snapshots may carry their own cost/price columns.
    """
    columns = {normalize_header(header) for header in headers}
    if columns & LOGISTICS_MARKER_COLUMNS:
        return ReportKind.LOGISTICS
    if FINANCIAL_MARKER_COLUMNS & columns and "available" not in columns:
        return ReportKind.FINANCIAL
    return ReportKind.SNAPSHOT


def create_snapshot(
    name: str,
    rows: Iterable[Mapping[str, Any]],
    logistics_index: Mapping[str, LogisticsRecord] | None = None,
    financial_index: Mapping[str, FinancialRecord] | None = None,
    timestamp: str = "",
) -> Snapshot:
    """Build an immutable snapshot, with its stats, from primary report rows."""
    data = process_rows(rows, logistics_index, financial_index)
    return Snapshot(
        name=name, data=tuple(data), stats=calculate_stats(data), timestamp=timestamp
    )


class SnapshotBuilder:
    """
    Turns a sequence of parsed reports into named snapshots.

    Usage:
        builder = SnapshotBuilder()
        builder.add_report("mfi", mfi_rows)
        builder.add_report("2024-05-01", snapshot_rows, timestamp=loaded_at)
        snapshots = builder.snapshots
    """

    def __init__(self):
        self.logistics_index: dict[str, LogisticsRecord] = {}
        self.financial_index: dict[str, FinancialRecord] = {}
        self.snapshots: dict[str, Snapshot] = {}

    def add_report(
        self,
        name: str,
        rows: Sequence[Mapping[str, Any]],
        headers: Iterable[Any] | None = None,
        timestamp: str = "",
    ) -> ReportKind:
        """
        Classify and absorb one report. Returns the detected kind.

        Args:
            headers: Header row; defaults to the keys of the first row
        """
        if headers is None:
            headers = rows[0].keys() if rows else []
        kind = classify_report(headers)

        if kind is ReportKind.LOGISTICS:
            self.logistics_index.update(build_logistics_index(rows))
            logger.info("Merged logistics report '%s' (%d SKUs indexed)", name, len(self.logistics_index))
        elif kind is ReportKind.FINANCIAL:
            self.financial_index.update(build_financial_index(rows))
            logger.info("Merged financial report '%s' (%d SKUs indexed)", name, len(self.financial_index))
        else:
            snapshot = create_snapshot(
                name, rows, self.logistics_index, self.financial_index, timestamp
            )
            self.snapshots[name] = snapshot
            logger.info("Built snapshot '%s' with %d SKUs", name, len(snapshot.data))

        return kind


class ViewRequest(BaseModel):
    """Everything the table view depends on besides the snapshots themselves."""

    snapshot: str | None = None
    compare_base: str | None = Field(default=None, description="Older snapshot")
    compare_target: str | None = Field(default=None, description="Newer snapshot")
    filters: FilterState = Field(default_factory=FilterState)
    sort: list[SortCriterion] = Field(default_factory=lambda: list(DEFAULT_SORT))
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)

    @property
    def comparison_mode(self) -> bool:
        return bool(self.compare_base and self.compare_target)


def _lookup(snapshots: Mapping[str, Snapshot], name: str) -> Snapshot:
    try:
        return snapshots[name]
    except KeyError:
        raise SnapshotNotFoundError(name) from None


def base_records(
    snapshots: Mapping[str, Snapshot], request: ViewRequest
) -> list[ProductRecord]:
    """The unfiltered records for a view: a comparison, one snapshot, or nothing."""
    if request.comparison_mode:
        old = _lookup(snapshots, request.compare_base)
        new = _lookup(snapshots, request.compare_target)
        return compare_snapshots(new, old)
    if request.snapshot:
        return list(_lookup(snapshots, request.snapshot).data)
    return []


def build_view(
    snapshots: Mapping[str, Snapshot], request: ViewRequest
) -> list[ProductRecord]:
    """Forecast, filter and sort the records a view request selects."""
    records = base_records(snapshots, request)
    records = apply_forecast(records, request.forecast)
    records = apply_filters(records, request.filters)
    return sort_records(records, request.sort)
