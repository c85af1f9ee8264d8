"""
Report Writer -- persists a consolidated report as JSON.

Every run writes two files into the reports directory:
  1. consolidated-accessibility-report-<timestamp>.json (kept as history)
  2. latest-consolidated-report.json (overwritten each run)

A failure at this stage is fatal for the run. The timestamped file of the
failed run is removed so no partial snapshot is left behind.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .errors import ReportWriteError
from .models import ConsolidatedReport
from .schema import ConsolidatedReportModel

logger = logging.getLogger(__name__)

REPORT_PREFIX = "consolidated-accessibility-report-"
LATEST_FILENAME = "latest-consolidated-report.json"


@dataclass(frozen=True)
class WrittenReport:
    """Where a report landed and what was written."""

    path: Path
    latest_path: Path
    size: int
    checksum: str

    @property
    def file_name(self) -> str:
        return self.path.name


def report_filename(timestamp: str) -> str:
    """Filesystem-safe snapshot name for an ISO-8601 timestamp."""
    safe = timestamp.replace(":", "-").replace(".", "-")
    return f"{REPORT_PREFIX}{safe}.json"


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"[Writer] Could not remove partial snapshot {path}: {e}")


def results_checksum(report_data: dict) -> str:
    """SHA-256 of a serialized report with its timestamp left out.

    Two runs over the same tool output hash the same, which is what
    duplicate detection in the index keys on.
    """
    metadata = {k: v for k, v in report_data.get("metadata", {}).items() if k != "timestamp"}
    stable = {**report_data, "metadata": metadata}
    canonical = json.dumps(stable, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def serialize_report(report: ConsolidatedReport) -> str:
    """Validate the report against the file schema and render it as JSON."""
    try:
        model = ConsolidatedReportModel.model_validate(report.to_dict())
    except ValidationError as e:
        raise ReportWriteError(f"Report failed schema validation: {e}") from e
    return json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False)


def write_report(report: ConsolidatedReport, reports_dir: str | Path) -> WrittenReport:
    """
    Write the timestamped snapshot and the latest pointer.

    Args:
        report: The report to persist
        reports_dir: Destination directory, created if missing

    Returns:
        WrittenReport with both paths, byte size and results checksum

    Raises:
        ReportWriteError: the report could not be serialized or written
    """
    reports_dir = Path(reports_dir)
    content = serialize_report(report)
    checksum = results_checksum(json.loads(content))
    encoded = content.encode("utf-8")

    path = reports_dir / report_filename(report.metadata.timestamp)
    latest_path = reports_dir / LATEST_FILENAME

    try:
        reports_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encoded)
        latest_path.write_bytes(encoded)
    except OSError as e:
        _discard(path)
        logger.error(f"[Writer] Failed to write report to {reports_dir}: {e}")
        raise ReportWriteError(f"Could not write report to {reports_dir}: {e}") from e

    logger.info(f"[Writer] Saved {path.name} ({len(encoded)} bytes)")
    return WrittenReport(
        path=path,
        latest_path=latest_path,
        size=len(encoded),
        checksum=checksum,
    )
