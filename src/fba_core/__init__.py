# Core analytics for FBA inventory snapshots
# Pure transformations over already-parsed report rows; no file or network I/O

from .models import (
    INFINITE_COVER_DAYS,
    NEW_SELLER_TREND,
    FilterState,
    FinancialRecord,
    ForecastSettings,
    LogisticsRecord,
    ProductRecord,
    Snapshot,
    SortCriterion,
    Stats,
)
from .parsers import SKUNormalizer, parse_numeric
from .records import build_financial_index, build_logistics_index, build_product_record, process_rows
from .risk import calculate_risk_score
from .forecast import calculate_restock_recommendation, apply_forecast
from .analysis import calculate_stats, compare_stats, generate_alerts
from .comparison import compare_snapshots
from .filters import apply_filters
from .sorting import sort_records, update_sort, paginate
from .export import to_csv
from .summary import summarize_for_prompt
from .quality import DataQualityChecker, DataQualityReport
from .pipeline import ReportKind, SnapshotBuilder, ViewRequest, build_view, classify_report, create_snapshot

__all__ = [
    "INFINITE_COVER_DAYS",
    "NEW_SELLER_TREND",
    "FilterState",
    "FinancialRecord",
    "ForecastSettings",
    "LogisticsRecord",
    "ProductRecord",
    "Snapshot",
    "SortCriterion",
    "Stats",
    "SKUNormalizer",
    "parse_numeric",
    "build_financial_index",
    "build_logistics_index",
    "build_product_record",
    "process_rows",
    "calculate_risk_score",
    "calculate_restock_recommendation",
    "apply_forecast",
    "calculate_stats",
    "compare_stats",
    "generate_alerts",
    "compare_snapshots",
    "apply_filters",
    "sort_records",
    "update_sort",
    "paginate",
    "to_csv",
    "summarize_for_prompt",
    "DataQualityChecker",
    "DataQualityReport",
    "ReportKind",
    "SnapshotBuilder",
    "ViewRequest",
    "build_view",
    "classify_report",
    "create_snapshot",
]
