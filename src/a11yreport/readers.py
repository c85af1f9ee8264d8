"""
Source Readers -- load raw scanner output from the reports directory.

Each tool writes one JSON file by convention (axe-results.json, ...).
A missing or broken file is never fatal: the tool falls back to an
empty-but-valid result of its own shape and a warning is logged.

Trigger: First stage of every aggregation run.
Output: ToolResult dict per tool.
Task Boundary: Reading only. Does NOT normalize or count.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import MissingSourceFile, SourceParseError, UnknownToolError
from .models import ToolResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSource:
    """Where a tool's output lives and what it looks like when absent."""

    key: str
    filename: str
    label: str
    empty_result: ToolResult = field(default_factory=dict)

    def empty(self) -> ToolResult:
        """Fresh copy of the empty fallback, safe to hand out."""
        return copy.deepcopy(self.empty_result)


TOOL_SOURCES: dict[str, ToolSource] = {
    "axe": ToolSource(
        key="axe",
        filename="axe-results.json",
        label="axe-core",
        empty_result={"violations": [], "passes": [], "incomplete": []},
    ),
    "pa11y": ToolSource(
        key="pa11y",
        filename="pa11y-results.json",
        label="Pa11y",
        empty_result={"issues": []},
    ),
    "lighthouse": ToolSource(
        key="lighthouse",
        filename="lighthouse-results.json",
        label="Lighthouse",
        empty_result={"audits": {}, "score": 0},
    ),
    "ibm": ToolSource(
        key="ibm",
        filename="ibm-results.json",
        label="IBM Equal Access",
        empty_result={"results": []},
    ),
}


def get_source(tool: str) -> ToolSource:
    """Look up a tool in the registry."""
    try:
        return TOOL_SOURCES[tool]
    except KeyError:
        raise UnknownToolError(
            f"Unknown tool '{tool}' (expected one of: {', '.join(TOOL_SOURCES)})"
        ) from None


def _load_json_object(path: Path) -> ToolResult:
    if not path.is_file():
        raise MissingSourceFile(f"{path} not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise SourceParseError(f"{path}: {e}") from e
    if not isinstance(data, dict):
        raise SourceParseError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def read_tool_result(reports_dir: str | Path, tool: str) -> ToolResult:
    """
    Read one tool's result file, falling back to its empty shape.

    Args:
        reports_dir: Directory holding the *-results.json files
        tool: Registry key ("axe", "pa11y", "lighthouse", "ibm")

    Returns:
        The parsed JSON object, or the tool's empty result if the file
        is missing or cannot be parsed.

    Raises:
        UnknownToolError: tool is not a registered source.
    """
    source = get_source(tool)
    path = Path(reports_dir) / source.filename

    try:
        result = _load_json_object(path)
    except MissingSourceFile:
        logger.warning(f"[Reader] {source.label} results not found at {path}, skipping")
        return source.empty()
    except SourceParseError as e:
        logger.warning(f"[Reader] {source.label} results unreadable, skipping: {e}")
        return source.empty()

    logger.debug(f"[Reader] Loaded {source.label} results from {path}")
    return result


def read_all(reports_dir: str | Path) -> dict[str, ToolResult]:
    """Read every registered tool, in registry order."""
    return {tool: read_tool_result(reports_dir, tool) for tool in TOOL_SOURCES}
