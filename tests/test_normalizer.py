"""
Normalizer tests -- record lookup priority and per-tool field mapping.
"""

from a11yreport import normalizer
from a11yreport.models import Impact
from a11yreport.normalizer import extract_records, normalize_record, normalize_tool_result


class TestExtractRecords:
    """violations -> issues -> results; first non-empty list wins."""

    def test_violations_take_priority(self):
        result = {"violations": [{"id": "a"}], "issues": [{"code": "b"}], "results": [{"ruleId": "c"}]}
        assert extract_records(result) == [{"id": "a"}]

    def test_empty_violations_fall_through_to_issues(self):
        result = {"violations": [], "issues": [{"code": "b"}], "results": [{"ruleId": "c"}]}
        assert extract_records(result) == [{"code": "b"}]

    def test_results_used_last(self):
        assert extract_records({"results": [{"ruleId": "c"}]}) == [{"ruleId": "c"}]

    def test_audits_only_yields_nothing(self):
        """Lighthouse output without a record list contributes no violations."""
        assert extract_records({"audits": {"color-contrast": {"score": 0}}, "score": 0.7}) == []

    def test_non_dict_entries_dropped(self):
        assert extract_records({"issues": ["oops", {"code": "x"}, 3]}) == [{"code": "x"}]

    def test_non_list_field_ignored(self):
        assert extract_records({"violations": "nope", "issues": [{"code": "x"}]}) == [{"code": "x"}]


class TestNormalizeRecord:
    def test_axe_violation(self):
        record = {
            "id": "color-contrast",
            "impact": "serious",
            "help": "Elements must have sufficient color contrast",
            "nodes": [{"target": ["#main > p.note"]}],
        }
        v = normalize_record("axe", record, "http://localhost:3000")
        assert v.tool == "axe"
        assert v.rule_id == "color-contrast"
        assert v.impact is Impact.SERIOUS
        assert v.message.startswith("Elements must have")
        assert v.target_selector == "#main > p.note"
        assert v.url == "http://localhost:3000"

    def test_axe_iframe_target_joined(self):
        v = normalize_record("axe", {"nodes": [{"target": [["iframe#a", "button"]]}]})
        assert v.target_selector == "iframe#a button"

    def test_pa11y_issue(self):
        record = {
            "code": "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail",
            "type": "error",
            "message": "Insufficient contrast",
            "selector": "html > body > a",
        }
        v = normalize_record("pa11y", record)
        assert v.rule_id.endswith("G18.Fail")
        assert v.type == "error"
        assert v.impact is Impact.UNKNOWN
        assert v.target_selector == "html > body > a"
        assert v.is_critical

    def test_ibm_result(self):
        record = {
            "ruleId": "img_alt_valid",
            "level": "violation",
            "message": "Image missing alt",
            "path": {"dom": "/html[1]/body[1]/img[1]"},
        }
        v = normalize_record("ibm", record)
        assert v.rule_id == "img_alt_valid"
        assert v.type == "violation"
        assert v.target_selector == "/html[1]/body[1]/img[1]"

    def test_unmapped_impact_defaults_to_unknown(self):
        assert normalize_record("axe", {"impact": "catastrophic"}).impact is Impact.UNKNOWN
        assert normalize_record("axe", {"impact": None}).impact is Impact.UNKNOWN
        assert normalize_record("axe", {}).impact is Impact.UNKNOWN

    def test_impact_is_case_insensitive(self):
        assert normalize_record("axe", {"impact": " Critical "}).impact is Impact.CRITICAL

    def test_record_url_beats_default(self):
        v = normalize_record("pa11y", {"pageUrl": "http://example.test/a"}, "http://default")
        assert v.url == "http://example.test/a"

    def test_type_kept_verbatim(self):
        """Only an exact lowercase "error" type is critical."""
        v = normalize_record("pa11y", {"type": "ERROR", "code": "WCAG2AA.X"})
        assert v.type == "ERROR"
        assert not v.is_critical


class TestMalformedNodes:
    """Odd axe node shapes degrade to an empty or stringified selector."""

    def test_non_list_nodes(self):
        v = normalize_record("axe", {"id": "region", "impact": "moderate", "nodes": 5})
        assert v.target_selector == ""
        assert v.rule_id == "region"

    def test_non_string_target_parts(self):
        v = normalize_record("axe", {"nodes": [{"target": [[1, 2]]}]})
        assert v.target_selector == "1 2"

    def test_non_dict_nodes_skipped(self):
        v = normalize_record("axe", {"nodes": ["oops", {"target": ["#ok"]}]})
        assert v.target_selector == "#ok"


class TestNormalizeToolResult:
    def test_preserves_tool_order_of_records(self):
        result = {"issues": [{"code": "first"}, {"code": "second"}]}
        assert [v.rule_id for v in normalize_tool_result("pa11y", result)] == ["first", "second"]

    def test_result_level_url_used_for_records(self):
        result = {"url": "http://example.test/page", "violations": [{"id": "x"}]}
        assert normalize_tool_result("axe", result, "http://default")[0].url == "http://example.test/page"

    def test_every_violation_has_tool_and_impact(self):
        result = {"results": [{}, {"impact": "minor"}]}
        for v in normalize_tool_result("ibm", result):
            assert v.tool == "ibm"
            assert isinstance(v.impact, Impact)

    def test_unreadable_record_still_counts(self, monkeypatch):
        """A record that cannot be mapped becomes a bare violation of that tool."""
        def _explode(record):
            raise TypeError("unhashable selector")

        monkeypatch.setattr(normalizer, "_target_selector", _explode)
        result = {"url": "http://example.test", "violations": [{"id": "a"}, {"id": "b"}]}
        violations = normalize_tool_result("axe", result)
        assert len(violations) == 2
        assert all(v.tool == "axe" and v.rule_id == "" for v in violations)
        assert violations[0].url == "http://example.test"
