"""
Loader for Amazon Seller Central inventory report files.

THIS FILE HOLDS THE FILE-FORMAT SPECIFICS OF AMAZON'S EXPORTS:
- Reports may be comma or tab separated depending on where they were
  downloaded from (Reports > Fulfillment vs. the Inventory Health page)
- Headers sometimes carry a UTF-8 BOM and vary in casing
- Older exports are Windows-1252/latin-1 encoded
- The Manage FBA Inventory report is told apart from a snapshot only by
  its columns

Everything after reading (classification, record building, scoring) is
delegated to fba_core, which only ever sees lists of row dicts.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from fba_core import settings
from fba_core.exceptions import ReportParseError, ReportTooLargeError
from fba_core.models import Snapshot
from fba_core.parsers import normalize_header
from fba_core.pipeline import ReportKind, SnapshotBuilder
from fba_core.quality import DataQualityReport, snapshot_checker

logger = logging.getLogger(__name__)

REPORT_SUFFIXES = (".csv", ".tsv", ".txt")


@dataclass
class LoadedReports:
    """Container for all snapshots and quality reports from one load."""

    snapshots: dict[str, Snapshot]
    report_kinds: dict[str, ReportKind] = field(default_factory=dict)
    quality_reports: dict[str, DataQualityReport] = field(default_factory=dict)


class AmazonReportLoader:
    """
    Reads Amazon inventory reports from disk and builds snapshots.

    Files are processed sequentially so that logistics/financial reports are
    merged before the snapshots that follow them. When discovered from
    data_dir, files are taken in name order; name logistics reports so they
    sort first (e.g. "00_mfi.csv").
    """

    def __init__(self, data_dir: Path | str | None = None, max_file_size_mb: float | None = None):
        self.data_dir = Path(data_dir) if data_dir is not None else settings.INPUT_DIR
        self.max_file_size_mb = (
            max_file_size_mb if max_file_size_mb is not None else settings.MAX_FILE_SIZE_MB
        )

    def discover(self) -> list[Path]:
        """Report files in data_dir, sorted by name."""
        if not self.data_dir.exists():
            logger.warning("Input directory %s does not exist", self.data_dir)
            return []
        return sorted(
            path
            for path in self.data_dir.iterdir()
            if path.is_file() and path.suffix.lower() in REPORT_SUFFIXES
        )

    def _check_size(self, path: Path) -> None:
        size_mb = path.stat().st_size / (1024 * 1024)
        if self.max_file_size_mb and size_mb > self.max_file_size_mb:
            raise ReportTooLargeError(path.name, size_mb, self.max_file_size_mb)

    def read_frame(self, path: Path | str) -> pd.DataFrame:
        """
        Read a report into a DataFrame of strings with normalized headers.

        Tries UTF-8 (with BOM support) first and falls back to latin-1,
        which can decode any byte sequence.
        """
        path = Path(path)
        if not path.exists():
            raise ReportParseError(path.name, "file not found")
        self._check_size(path)

        read_options = dict(
            sep=None,  # sniff comma vs tab
            engine="python",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
        try:
            try:
                df = pd.read_csv(path, encoding="utf-8-sig", **read_options)
            except UnicodeDecodeError:
                logger.info("UTF-8 decoding failed for %s. Retrying with latin-1.", path.name)
                df = pd.read_csv(path, encoding="latin-1", **read_options)
        except pd.errors.EmptyDataError:
            raise ReportParseError(path.name, "file is empty") from None
        except (pd.errors.ParserError, csv.Error, ValueError) as e:
            raise ReportParseError(path.name, str(e)) from e

        # Short rows (dropped trailing fields) leave NaN even with keep_default_na=False
        df = df.fillna("")
        df.columns = [normalize_header(col) for col in df.columns]
        return df

    def read_rows(self, path: Path | str) -> list[dict[str, str]]:
        """Read a report as a list of header-keyed row dicts."""
        return self.read_frame(path).to_dict("records")

    def load_all(self, paths: list[Path | str] | None = None) -> LoadedReports:
        """
        Load reports in order and build snapshots.

        Args:
            paths: Files to load; defaults to everything discovered in data_dir
        """
        paths = [Path(p) for p in paths] if paths is not None else self.discover()

        builder = SnapshotBuilder()
        kinds: dict[str, ReportKind] = {}
        quality_reports: dict[str, DataQualityReport] = {}

        for path in paths:
            name = path.stem
            df = self.read_frame(path)
            rows = df.to_dict("records")
            loaded_at = datetime.now(timezone.utc).isoformat()

            kind = builder.add_report(name, rows, headers=list(df.columns), timestamp=loaded_at)
            kinds[name] = kind

            if kind is ReportKind.SNAPSHOT:
                quality_reports[name] = snapshot_checker(name).run(df)

        logger.info(
            "Loaded %d file(s): %d snapshot(s)", len(paths), len(builder.snapshots)
        )
        return LoadedReports(
            snapshots=builder.snapshots,
            report_kinds=kinds,
            quality_reports=quality_reports,
        )
