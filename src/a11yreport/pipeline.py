"""
Aggregation pipeline -- one linear run from tool output to written report.

INIT -> READ (x4) -> NORMALIZE (x4) -> AGGREGATE -> SUMMARIZE -> WRITE -> DONE

Reader failures stay local to their tool. Only the WRITE stage can fail
the run (ReportWriteError propagates to the caller).
"""

import logging
from dataclasses import dataclass

from .aggregator import Clock, build_report
from .config import AggregatorConfig
from .index import record_report
from .models import ConsolidatedReport
from .readers import read_all
from .writer import WrittenReport, write_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    """What one aggregation run produced."""

    report: ConsolidatedReport
    written: WrittenReport
    indexed: bool = False


def generate_consolidated_report(
    config: AggregatorConfig | None = None, clock: Clock | None = None
) -> RunResult:
    """Read every tool's output, aggregate it and write the report files."""
    config = config or AggregatorConfig.from_env()
    logger.info(f"[Pipeline] Aggregating accessibility results from {config.reports_dir}")

    tool_results = read_all(config.reports_dir)
    report = build_report(tool_results, config=config, clock=clock)
    written = write_report(report, config.reports_dir)
    indexed = record_report(config.reports_dir, written, report)

    return RunResult(report=report, written=written, indexed=indexed)
