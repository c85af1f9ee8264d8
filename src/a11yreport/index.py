"""
Report Index - JSON history of every consolidated report written.

Keeps report-metadata.json next to the reports so past runs can be
listed without opening each snapshot, old snapshots can be moved
into reports/archive/, and repeated results can be pruned.

Trigger: After each successful write; from the history, archive, dedupe
and stats commands.
Output: report-metadata.json, newest entry first.
Task Boundary: Bookkeeping only. A failure here never fails a run.
"""

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from .models import ConsolidatedReport
from .schema import IndexEntry
from .writer import WrittenReport

logger = logging.getLogger(__name__)

INDEX_FILENAME = "report-metadata.json"
ARCHIVE_DIRNAME = "archive"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 report timestamp; None if it is not one."""
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass
class ReportIndex:
    """
    Newest-first list of written reports with JSON persistence.

    Usage:
        index = ReportIndex.load(reports_dir / INDEX_FILENAME)
        index.record(written, report)
        index.save()
    """

    path: Path
    entries: list[IndexEntry] = field(default_factory=list)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def recent(self, limit: int = 50, since: datetime | None = None,
               include_archived: bool = True) -> list[IndexEntry]:
        """Entries newest first, optionally filtered by time and archive state."""
        if since is not None and since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        selected = []
        for entry in self.entries:
            if not include_archived and entry.archived:
                continue
            if since is not None:
                moment = parse_timestamp(entry.timestamp)
                if moment is None or moment < since:
                    continue
            selected.append(entry)
        return selected[:limit] if limit > 0 else selected

    def get(self, file_name: str) -> IndexEntry | None:
        """Get an entry by snapshot file name."""
        for entry in self.entries:
            if entry.file_name == file_name:
                return entry
        return None

    # =========================================================================
    # UPDATES
    # =========================================================================

    def record(self, written: WrittenReport, report: ConsolidatedReport) -> IndexEntry:
        """Add an entry for a freshly written report."""
        entry = IndexEntry(
            file_name=written.file_name,
            timestamp=report.metadata.timestamp,
            size=written.size,
            checksum=written.checksum,
            test_url=report.metadata.test_url,
            tools=list(report.metadata.tools),
            violation_count=report.summary.total_violations,
            critical_issues=report.summary.critical_issues,
        )
        self.entries = [e for e in self.entries if e.file_name != entry.file_name]
        self.entries.append(entry)
        self._sort()
        return entry

    def _sort(self) -> None:
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        self.entries.sort(
            key=lambda e: parse_timestamp(e.timestamp) or epoch, reverse=True
        )

    # =========================================================================
    # PERSISTENCE (JSON)
    # =========================================================================

    def save(self) -> bool:
        """Write the index. Returns False (and logs) on failure."""
        data = [e.model_dump(mode="json") for e in self.entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"[ReportIndex] Save failed for {self.path}: {e}", exc_info=True)
            return False

        logger.debug(f"[ReportIndex] Saved {len(self.entries)} entries to {self.path}")
        return True

    @classmethod
    def load(cls, path: str | Path) -> "ReportIndex":
        """Load the index; a missing or corrupt file yields an empty index."""
        path = Path(path)
        if not path.exists():
            logger.debug(f"[ReportIndex] No index at {path}, starting fresh")
            return cls(path=path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"[ReportIndex] Could not read {path}, starting fresh: {e}")
            return cls(path=path)

        entries = []
        for raw in data if isinstance(data, list) else []:
            try:
                entries.append(IndexEntry.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"[ReportIndex] Skipping malformed entry in {path}: {e}")

        index = cls(path=path, entries=entries)
        index._sort()
        logger.debug(f"[ReportIndex] Loaded {len(entries)} entries from {path}")
        return index

    @classmethod
    def for_dir(cls, reports_dir: str | Path) -> "ReportIndex":
        return cls.load(Path(reports_dir) / INDEX_FILENAME)


# =============================================================================
# HELPERS
# =============================================================================


def record_report(
    reports_dir: str | Path, written: WrittenReport, report: ConsolidatedReport
) -> bool:
    """Add a written report to the directory's index (best-effort)."""
    index = ReportIndex.for_dir(reports_dir)
    index.record(written, report)
    return index.save()


def archive_old_reports(
    reports_dir: str | Path, days_old: int = 30, now: datetime | None = None
) -> list[str]:
    """
    Move snapshots older than `days_old` days into reports_dir/archive/.

    Only indexed timestamped snapshots move; the latest pointer, the index
    and the tool input files stay where they are.

    Returns:
        File names that were moved
    """
    reports_dir = Path(reports_dir)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=days_old)
    archive_dir = reports_dir / ARCHIVE_DIRNAME

    index = ReportIndex.for_dir(reports_dir)
    moved: list[str] = []

    for entry in index.entries:
        if entry.archived:
            continue
        moment = parse_timestamp(entry.timestamp)
        if moment is None or moment >= cutoff:
            continue

        source = reports_dir / entry.file_name
        if not source.is_file():
            logger.debug(f"[ReportIndex] {entry.file_name} already gone, skipping")
            continue
        try:
            archive_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(archive_dir / entry.file_name))
        except OSError as e:
            logger.warning(f"[ReportIndex] Could not archive {entry.file_name}: {e}")
            continue

        entry.archived = True
        moved.append(entry.file_name)

    if moved:
        index.save()
        logger.info(f"[ReportIndex] Archived {len(moved)} reports older than {days_old} days")
    return moved


def dedupe_reports(reports_dir: str | Path) -> list[str]:
    """
    Delete snapshots whose results repeat a newer snapshot.

    Entries are grouped by results checksum; the newest of each group is
    kept. Archived entries and entries without a checksum are left alone.

    Returns:
        File names that were removed
    """
    reports_dir = Path(reports_dir)
    index = ReportIndex.for_dir(reports_dir)
    seen: set[str] = set()
    removed: list[str] = []

    # entries are newest first, so the first of each checksum is the keeper
    for entry in index.entries:
        if entry.archived or not entry.checksum:
            continue
        if entry.checksum not in seen:
            seen.add(entry.checksum)
            continue
        try:
            (reports_dir / entry.file_name).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"[ReportIndex] Could not remove duplicate {entry.file_name}: {e}")
            continue
        removed.append(entry.file_name)

    if removed:
        index.entries = [e for e in index.entries if e.file_name not in removed]
        index.save()
        logger.info(f"[ReportIndex] Removed {len(removed)} duplicate reports")
    return removed


@dataclass(frozen=True)
class StorageStats:
    """Totals over the indexed reports of one directory."""

    total_reports: int = 0
    total_size: int = 0
    archived_reports: int = 0
    archived_size: int = 0
    oldest: str | None = None
    newest: str | None = None

    @property
    def average_size(self) -> int:
        return self.total_size // self.total_reports if self.total_reports else 0


def storage_stats(reports_dir: str | Path) -> StorageStats:
    """Summarize report count, bytes on record and the covered time span."""
    entries = ReportIndex.for_dir(reports_dir).entries
    if not entries:
        return StorageStats()

    archived = [e for e in entries if e.archived]
    return StorageStats(
        total_reports=len(entries),
        total_size=sum(e.size for e in entries),
        archived_reports=len(archived),
        archived_size=sum(e.size for e in archived),
        oldest=entries[-1].timestamp,
        newest=entries[0].timestamp,
    )
