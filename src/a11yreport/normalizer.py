"""
Normalizer -- maps each tool's violation schema into NormalizedViolation.

Record lookup checks `violations`, then `issues`, then `results`; the first
non-empty list wins. Lighthouse output that only carries `audits` therefore
contributes nothing. No deduplication and no cross-tool rule-id
reconciliation happen here.
"""

import logging
from typing import Any

from .models import Impact, NormalizedViolation, ToolResult

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("violations", "issues", "results")

RULE_ID_KEYS = ("id", "code", "ruleId")
MESSAGE_KEYS = ("help", "description", "message")
URL_KEYS = ("url", "pageUrl", "documentURL")
TYPE_KEYS = ("type", "level")


def _first_str(record: dict, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _target_selector(record: dict) -> str:
    selector = record.get("selector")
    if isinstance(selector, str) and selector:
        return selector

    # axe: nodes[].target is a list of selectors (iframes nest further)
    nodes = record.get("nodes")
    for node in nodes if isinstance(nodes, list) else []:
        if not isinstance(node, dict):
            continue
        target = node.get("target")
        if isinstance(target, list) and target:
            first = target[0]
            return " ".join(str(part) for part in first) if isinstance(first, list) else str(first)
        if isinstance(target, str) and target:
            return target

    # IBM Equal Access: path.dom
    path = record.get("path")
    if isinstance(path, dict) and isinstance(path.get("dom"), str):
        return path["dom"]
    return ""


def extract_records(tool_result: ToolResult) -> list[dict[str, Any]]:
    """Return the first non-empty record list of a tool result."""
    for field_name in RECORD_FIELDS:
        records = tool_result.get(field_name)
        if isinstance(records, list) and records:
            return [r for r in records if isinstance(r, dict)]
    return []


def normalize_record(
    tool: str, record: dict[str, Any], default_url: str = ""
) -> NormalizedViolation:
    """Map a single raw record into the common shape."""
    return NormalizedViolation(
        tool=tool,
        rule_id=_first_str(record, RULE_ID_KEYS),
        impact=Impact.parse(record.get("impact")),
        message=_first_str(record, MESSAGE_KEYS),
        target_selector=_target_selector(record),
        url=_first_str(record, URL_KEYS) or default_url,
        type=_first_str(record, TYPE_KEYS),
    )


def normalize_tool_result(
    tool: str, tool_result: ToolResult, default_url: str = ""
) -> list[NormalizedViolation]:
    """
    Normalize every record of one tool result.

    Args:
        tool: Tool key stamped on each violation
        tool_result: Raw parsed output of the tool
        default_url: Used when neither the record nor the result names a page

    Returns:
        Violations in the order the tool reported them. A record whose
        fields cannot be read still counts, as a bare violation of that tool.
    """
    page_url = _first_str(tool_result, URL_KEYS) or default_url
    violations = []
    for position, record in enumerate(extract_records(tool_result)):
        try:
            violations.append(normalize_record(tool, record, page_url))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"[Normalizer] {tool}: record {position} has an unexpected shape: {e}")
            violations.append(NormalizedViolation(tool=tool, url=page_url))
    logger.debug(f"[Normalizer] {tool}: {len(violations)} violations")
    return violations
