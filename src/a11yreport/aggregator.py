"""
Aggregator -- merges normalized violations and computes summary counts.

Tools are processed in a fixed order (axe, pa11y, lighthouse, ibm). The
merged list is a plain concatenation: a rule flagged by two tools shows
up twice.

Trigger: After all sources are read.
Output: ConsolidatedReport, ready for the writer.
Task Boundary: Pure computation. Does NOT touch the filesystem.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable

from .config import AggregatorConfig
from .models import ConsolidatedReport, NormalizedViolation, ReportMetadata, ReportSummary, ToolResult
from .normalizer import normalize_tool_result
from .readers import TOOL_SOURCES

logger = logging.getLogger(__name__)

TOOL_ORDER = ("axe", "pa11y", "lighthouse", "ibm")
REPORTED_TOOLS = ["axe-core", "pa11y", "lighthouse", "ibm-equal-access"]

# WCAG 1.4.3 / 1.4.6 appear as 1_4_3 / 1_4_6 in HTML_CodeSniffer codes
CONTRAST_RULE_RE = re.compile(r"contrast|1_4_3|1_4_6", re.IGNORECASE)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def aggregate_violations(
    tool_results: dict[str, ToolResult], default_url: str = ""
) -> list[NormalizedViolation]:
    """Concatenate every tool's normalized violations in TOOL_ORDER."""
    violations: list[NormalizedViolation] = []
    for tool in TOOL_ORDER:
        result = tool_results.get(tool)
        if not result:
            continue
        violations.extend(normalize_tool_result(tool, result, default_url))
    return violations


def summarize(violations: list[NormalizedViolation]) -> ReportSummary:
    """Compute the summary block for a violation list."""
    coverage = {tool: 0 for tool in TOOL_ORDER}
    for v in violations:
        coverage[v.tool] = coverage.get(v.tool, 0) + 1

    return ReportSummary(
        total_violations=len(violations),
        critical_issues=sum(1 for v in violations if v.is_critical),
        warnings=sum(1 for v in violations if v.type == "warning"),
        contrast_issues=sum(1 for v in violations if CONTRAST_RULE_RE.search(v.rule_id)),
        tools_coverage=coverage,
    )


def build_report(
    tool_results: dict[str, ToolResult],
    *,
    config: AggregatorConfig | None = None,
    clock: Clock | None = None,
) -> ConsolidatedReport:
    """
    Build a consolidated report from raw tool results.

    Args:
        tool_results: Raw result per tool key; missing keys are filled with
            the tool's empty result
        config: Supplies test_url and wcag_version for the metadata
        clock: Returns the run time; defaults to the current UTC time

    Returns:
        A fresh ConsolidatedReport. Identical inputs and clock give an
        identical report.
    """
    config = config or AggregatorConfig()
    clock = clock or utc_now

    complete = {
        tool: tool_results[tool] if tool in tool_results else TOOL_SOURCES[tool].empty()
        for tool in TOOL_ORDER
    }

    violations = aggregate_violations(complete, default_url=config.test_url)
    summary = summarize(violations)

    logger.info(
        f"[Aggregator] {summary.total_violations} violations "
        f"({summary.critical_issues} critical) across {len(TOOL_ORDER)} tools"
    )

    return ConsolidatedReport(
        metadata=ReportMetadata(
            timestamp=iso_timestamp(clock()),
            tools=list(REPORTED_TOOLS),
            wcag_version=config.wcag_version,
            test_url=config.test_url,
        ),
        summary=summary,
        violations=violations,
        tool_results=complete,
    )
