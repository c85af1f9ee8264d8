"""Test fixtures -- temp reports directory, fixed clock, tool file writer."""

import json
from datetime import datetime, timezone

import pytest

from a11yreport.config import AggregatorConfig
from a11yreport.readers import TOOL_SOURCES


@pytest.fixture
def reports_dir(tmp_path):
    """Empty reports directory."""
    path = tmp_path / "reports"
    path.mkdir()
    return path


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2025-03-14T09:26:53.589Z."""
    moment = datetime(2025, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def config(reports_dir):
    return AggregatorConfig(reports_dir=reports_dir)


@pytest.fixture
def write_tool(reports_dir):
    """Write a tool's result file: write_tool("axe", {...}) or raw text."""

    def _write(tool, payload):
        path = reports_dir / TOOL_SOURCES[tool].filename
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
