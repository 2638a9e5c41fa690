"""
Data quality checks for uploaded inventory reports.

Reports what the record builder will silently repair (blank SKUs dropped,
duplicate SKUs collapsed, junk numbers coerced to 0) so users can fix the
export at the source. Checks never change the derived records.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

import pandas as pd

from .parsers import EMPTY_TOKENS, SKUNormalizer, is_blank, parse_numeric

# Columns every primary inventory snapshot must carry
REQUIRED_SNAPSHOT_COLUMNS = [
    "sku",
    "asin",
    "product-name",
    "condition",
    "available",
    "pending-removal-quantity",
    "inv-age-0-to-90-days",
    "inv-age-91-to-180-days",
    "inv-age-181-to-270-days",
    "inv-age-271-to-365-days",
    "inv-age-365-plus-days",
    "units-shipped-t30",
    "recommended-action",
    "category",
]

QUANTITY_COLUMNS = [
    "available",
    "pending-removal-quantity",
    "inv-age-0-to-90-days",
    "inv-age-91-to-180-days",
    "inv-age-181-to-270-days",
    "inv-age-271-to-365-days",
    "inv-age-365-plus-days",
    "units-shipped-t30",
]


@dataclass
class DataQualityIssue:
    """A single data quality issue found in a report."""

    column: str
    issue_type: str  # e.g., "missing_sku", "duplicate", "non_numeric", "negative"
    severity: str  # "critical", "warning", "info"
    count: int
    percentage: float
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""


@dataclass
class DataQualityReport:
    """Summary report of data quality for a single report file."""

    source_name: str
    total_rows: int
    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    @property
    def warning_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_critical_issues(self) -> bool:
        return len(self.critical_issues) > 0

    def summary(self) -> dict:
        """Return a summary dict for display."""
        return {
            "source": self.source_name,
            "total_rows": self.total_rows,
            "critical": len(self.critical_issues),
            "warnings": len(self.warning_issues),
            "info": len([i for i in self.issues if i.severity == "info"]),
        }


def _pct(count: int, total: int) -> float:
    return (count / total) * 100 if total else 0.0


class DataQualityChecker:
    """
    Quality checker for raw report rows held in a DataFrame.

    Extend by adding custom checks via add_check().
    """

    def __init__(self, source_name: str):
        self.source_name = source_name
        self._checks: list[Callable[[pd.DataFrame], list[DataQualityIssue]]] = []

    def add_check(
        self, check_fn: Callable[[pd.DataFrame], list[DataQualityIssue]]
    ) -> "DataQualityChecker":
        """Add a custom check function. Returns self for chaining."""
        self._checks.append(check_fn)
        return self

    def check_required_columns(self, columns: list[str]) -> "DataQualityChecker":
        """Flag expected columns that are absent from the header row."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            missing = [col for col in columns if col not in df.columns]
            if not missing:
                return []
            return [
                DataQualityIssue(
                    column=", ".join(missing),
                    issue_type="missing_column",
                    severity="critical" if "sku" in missing else "warning",
                    count=len(missing),
                    percentage=_pct(len(missing), len(columns)),
                    description=f"{len(missing)} expected column(s) missing",
                )
            ]

        self._checks.append(check)
        return self

    def check_blank_skus(self, sku_column: str = "sku") -> "DataQualityChecker":
        """Rows without a SKU are dropped from the snapshot."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if sku_column not in df.columns:
                return []
            blank = df[sku_column].apply(is_blank).sum()
            if blank == 0:
                return []
            return [
                DataQualityIssue(
                    column=sku_column,
                    issue_type="missing_sku",
                    severity="warning",
                    count=int(blank),
                    percentage=_pct(blank, len(df)),
                    description=f"{blank:,} rows without a SKU will be skipped",
                )
            ]

        self._checks.append(check)
        return self

    def check_duplicates(
        self,
        sku_column: str = "sku",
        normalizer: SKUNormalizer | None = None,
        severity: str = "warning",
    ) -> "DataQualityChecker":
        """SKUs repeated after normalization; only the last row is kept."""
        normalizer = normalizer or SKUNormalizer()

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if sku_column not in df.columns:
                return []
            skus = normalizer.normalize_series(df[sku_column])
            skus = skus[skus != ""]
            dupes = skus[skus.duplicated(keep=False)]
            if dupes.empty:
                return []
            return [
                DataQualityIssue(
                    column=sku_column,
                    issue_type="duplicate",
                    severity=severity,
                    count=len(dupes),
                    percentage=_pct(len(dupes), len(df)),
                    sample_values=dupes.drop_duplicates().head(5).tolist(),
                    description=f"{len(dupes):,} rows share a SKU; the last row wins",
                )
            ]

        self._checks.append(check)
        return self

    def check_numeric(self, columns: list[str], severity: str = "info") -> "DataQualityChecker":
        """Non-blank cells that do not parse as numbers (they are read as 0)."""

        def unparseable(value: Any) -> bool:
            if is_blank(value) or str(value).strip().lower() in EMPTY_TOKENS:
                return False
            return parse_numeric(value) == 0 and str(value).strip().lstrip("+-$0.,") != ""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            issues = []
            for column in columns:
                if column not in df.columns:
                    continue
                mask = df[column].apply(unparseable)
                invalid = int(mask.sum())
                if invalid > 0:
                    issues.append(
                        DataQualityIssue(
                            column=column,
                            issue_type="non_numeric",
                            severity=severity,
                            count=invalid,
                            percentage=_pct(invalid, len(df)),
                            sample_values=df.loc[mask, column].head(5).tolist(),
                            description=f"{invalid:,} non-numeric values read as 0",
                        )
                    )
            return issues

        self._checks.append(check)
        return self

    def check_negative(self, columns: list[str], severity: str = "warning") -> "DataQualityChecker":
        """Quantities below zero."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            issues = []
            for column in columns:
                if column not in df.columns:
                    continue
                values = df[column].apply(parse_numeric)
                mask = values < 0
                negatives = int(mask.sum())
                if negatives > 0:
                    issues.append(
                        DataQualityIssue(
                            column=column,
                            issue_type="negative",
                            severity=severity,
                            count=negatives,
                            percentage=_pct(negatives, len(df)),
                            sample_values=df.loc[mask, column].head(5).tolist(),
                            description=f"{negatives:,} negative quantities",
                        )
                    )
            return issues

        self._checks.append(check)
        return self

    def run(self, df: pd.DataFrame) -> DataQualityReport:
        """Run all checks and return a quality report."""
        all_issues = []
        for check_fn in self._checks:
            all_issues.extend(check_fn(df))

        return DataQualityReport(
            source_name=self.source_name, total_rows=len(df), issues=all_issues
        )


def snapshot_checker(source_name: str) -> DataQualityChecker:
    """Default checks for a primary inventory snapshot."""
    return (
        DataQualityChecker(source_name)
        .check_required_columns(REQUIRED_SNAPSHOT_COLUMNS)
        .check_blank_skus()
        .check_duplicates()
        .check_numeric(QUANTITY_COLUMNS)
        .check_negative(QUANTITY_COLUMNS)
    )


def rows_to_frame(rows: list[dict[str, Any]]) -> pd.DataFrame:
    """Raw row mappings as a DataFrame for quality checking."""
    return pd.DataFrame.from_records(rows) if rows else pd.DataFrame()
