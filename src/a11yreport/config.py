"""
Aggregator settings, resolved from environment variables.

CLI flags take precedence; anything left unset falls back to the
environment and then to the defaults below.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_REPORTS_DIR = "reports"
DEFAULT_TEST_URL = "http://localhost:3000"
DEFAULT_WCAG_VERSION = "2.2"
DEFAULT_ARCHIVE_DAYS = 30


def _archive_days_from_env() -> int:
    raw = os.environ.get("A11Y_ARCHIVE_DAYS", "").strip()
    if not raw:
        return DEFAULT_ARCHIVE_DAYS
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning(f"[Config] Ignoring non-integer A11Y_ARCHIVE_DAYS={raw!r}")
        return DEFAULT_ARCHIVE_DAYS


@dataclass(frozen=True)
class AggregatorConfig:
    """Where to read tool output from and what to stamp on the report."""

    reports_dir: Path = Path(DEFAULT_REPORTS_DIR)
    test_url: str = DEFAULT_TEST_URL
    wcag_version: str = DEFAULT_WCAG_VERSION
    archive_days: int = DEFAULT_ARCHIVE_DAYS

    @classmethod
    def from_env(cls) -> "AggregatorConfig":
        """Build a config from A11Y_* environment variables."""
        return cls(
            reports_dir=Path(os.environ.get("A11Y_REPORTS_DIR", "").strip() or DEFAULT_REPORTS_DIR),
            test_url=os.environ.get("A11Y_TEST_URL", "").strip() or DEFAULT_TEST_URL,
            wcag_version=os.environ.get("A11Y_WCAG_VERSION", "").strip() or DEFAULT_WCAG_VERSION,
            archive_days=_archive_days_from_env(),
        )

    def with_overrides(self, **overrides) -> "AggregatorConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "reports_dir" in values:
            values["reports_dir"] = Path(values["reports_dir"])
        return replace(self, **values)
