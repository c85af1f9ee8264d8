"""
Pydantic models -- the on-disk shape of reports and the report index.

The pipeline works with dataclasses; these models sit at the file
boundary. Reports are validated on the way out, index entries on the
way in.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


# =============================================================================
# CONSOLIDATED REPORT
# =============================================================================


class ViolationModel(BaseModel):
    """One normalized violation as written to disk."""

    tool: str = Field(min_length=1)
    rule_id: str = ""
    impact: Literal["critical", "serious", "moderate", "minor", "unknown"] = "unknown"
    message: str = ""
    target_selector: str = ""
    url: str = ""
    type: str = ""


class MetadataModel(BaseModel):
    """Run metadata."""

    timestamp: str
    tools: list[str] = Field(default_factory=list)
    wcag_version: str
    test_url: str


class SummaryModel(BaseModel):
    """Summary counts."""

    total_violations: int = Field(default=0, ge=0)
    critical_issues: int = Field(default=0, ge=0)
    warnings: int = Field(default=0, ge=0)
    contrast_issues: int = Field(default=0, ge=0)
    tools_coverage: dict[str, int] = Field(default_factory=dict)


class ConsolidatedReportModel(BaseModel):
    """Complete consolidated report file."""

    metadata: MetadataModel
    summary: SummaryModel
    violations: list[ViolationModel] = Field(default_factory=list)
    tool_results: dict[str, dict[str, Any]] = Field(default_factory=dict)


# =============================================================================
# REPORT INDEX
# =============================================================================


class IndexEntry(BaseModel):
    """One written report, as tracked in report-metadata.json."""

    file_name: str
    timestamp: str
    size: int = 0
    checksum: str = ""
    test_url: str = ""
    tools: list[str] = Field(default_factory=list)
    violation_count: int = 0
    critical_issues: int = 0
    archived: bool = False
