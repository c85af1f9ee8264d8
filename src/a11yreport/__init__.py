"""
a11yreport -- consolidates accessibility scanner output into one report.

Components:
  - readers: load axe / Pa11y / Lighthouse / IBM Equal Access result files
  - normalizer: map each tool's schema into NormalizedViolation
  - aggregator: concatenate in fixed tool order, compute summary counts
  - writer: timestamped snapshot + latest pointer
  - index: history of written reports, archiving
"""

from .aggregator import build_report
from .config import AggregatorConfig
from .errors import AggregatorError, ReportWriteError, UnknownToolError
from .models import ConsolidatedReport, Impact, NormalizedViolation, ReportSummary
from .pipeline import generate_consolidated_report
from .writer import write_report

__version__ = "0.1.0"

__all__ = [
    "AggregatorConfig",
    "AggregatorError",
    "ConsolidatedReport",
    "Impact",
    "NormalizedViolation",
    "ReportSummary",
    "ReportWriteError",
    "UnknownToolError",
    "build_report",
    "generate_consolidated_report",
    "write_report",
]
