# Source-specific report adapters
# Each module knows one marketplace's export formats and hands rows to fba_core

from .amazon_reports import AmazonReportLoader, LoadedReports

__all__ = ["AmazonReportLoader", "LoadedReports"]
