"""Errors surfaced to callers of the report loader and view pipeline."""


class FBAInsightsError(Exception):
    """Base class for all package errors."""


class ReportParseError(FBAInsightsError):
    """A report file could not be read as a delimited table."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not parse report '{source}': {reason}")


class ReportTooLargeError(FBAInsightsError):
    """A report file exceeds the configured upload limit."""

    def __init__(self, source: str, size_mb: float, limit_mb: float):
        self.source = source
        self.size_mb = size_mb
        self.limit_mb = limit_mb
        super().__init__(
            f"Report '{source}' is {size_mb:.1f} MB, above the {limit_mb:g} MB limit"
        )


class SnapshotNotFoundError(FBAInsightsError, KeyError):
    """A view request referenced a snapshot name that was never loaded."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown snapshot: {name!r}")

    def __str__(self) -> str:
        return self.args[0]
