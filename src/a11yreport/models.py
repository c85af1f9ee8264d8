"""
Data models for the consolidated accessibility report.

ToolResult is the raw parsed JSON of one scanner and stays a plain dict
because every tool ships a different shape. Everything produced by the
pipeline (violations, summary, metadata) is a dataclass.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

ToolResult = dict[str, Any]


# =============================================================================
# ENUMS
# =============================================================================


class Impact(Enum):
    """Normalized severity of a single violation."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "Impact":
        """Map a raw impact value onto the enum, falling back to UNKNOWN."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


CRITICAL_IMPACTS = (Impact.CRITICAL, Impact.SERIOUS)


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class NormalizedViolation:
    """A single violation mapped into the common shape.

    Attributes:
        tool: Short tool key ("axe", "pa11y", "lighthouse", "ibm").
        rule_id: The tool's own rule identifier (not reconciled across tools).
        impact: Normalized severity.
        message: Human-readable description of the failure.
        target_selector: CSS selector / DOM path of the offending element.
        url: Page the violation was found on.
        type: Raw tool severity label (pa11y ``type``, IBM ``level``).
    """

    tool: str
    rule_id: str = ""
    impact: Impact = Impact.UNKNOWN
    message: str = ""
    target_selector: str = ""
    url: str = ""
    type: str = ""

    @property
    def is_critical(self) -> bool:
        return self.impact in CRITICAL_IMPACTS or self.type == "error"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["impact"] = self.impact.value
        return data


@dataclass(frozen=True)
class ReportMetadata:
    """Run-level metadata stamped on every report."""

    timestamp: str
    tools: list[str] = field(default_factory=list)
    wcag_version: str = "2.2"
    test_url: str = "http://localhost:3000"


@dataclass(frozen=True)
class ReportSummary:
    """Counts computed over the consolidated violation list."""

    total_violations: int = 0
    critical_issues: int = 0
    warnings: int = 0
    contrast_issues: int = 0
    tools_coverage: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ConsolidatedReport:
    """The merged output of one aggregation run. Never mutated once written."""

    metadata: ReportMetadata
    summary: ReportSummary
    violations: list[NormalizedViolation] = field(default_factory=list)
    tool_results: dict[str, ToolResult] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": asdict(self.metadata),
            "summary": asdict(self.summary),
            "violations": [v.to_dict() for v in self.violations],
            "tool_results": dict(self.tool_results),
        }
