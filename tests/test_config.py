"""
Config tests -- environment resolution and CLI overrides.
"""

from pathlib import Path

from a11yreport.config import DEFAULT_ARCHIVE_DAYS, AggregatorConfig


class TestFromEnv:
    def test_defaults(self, monkeypatch):
        for var in ("A11Y_REPORTS_DIR", "A11Y_TEST_URL", "A11Y_WCAG_VERSION", "A11Y_ARCHIVE_DAYS"):
            monkeypatch.delenv(var, raising=False)
        config = AggregatorConfig.from_env()
        assert config.reports_dir == Path("reports")
        assert config.test_url == "http://localhost:3000"
        assert config.wcag_version == "2.2"
        assert config.archive_days == DEFAULT_ARCHIVE_DAYS

    def test_env_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("A11Y_REPORTS_DIR", str(tmp_path))
        monkeypatch.setenv("A11Y_TEST_URL", "https://staging.example.test")
        monkeypatch.setenv("A11Y_WCAG_VERSION", "2.1")
        monkeypatch.setenv("A11Y_ARCHIVE_DAYS", "7")
        config = AggregatorConfig.from_env()
        assert config.reports_dir == tmp_path
        assert config.test_url == "https://staging.example.test"
        assert config.wcag_version == "2.1"
        assert config.archive_days == 7

    def test_bad_archive_days_falls_back(self, monkeypatch):
        monkeypatch.setenv("A11Y_ARCHIVE_DAYS", "soon")
        assert AggregatorConfig.from_env().archive_days == DEFAULT_ARCHIVE_DAYS


class TestOverrides:
    def test_none_overrides_ignored(self):
        config = AggregatorConfig(test_url="http://a").with_overrides(test_url=None, reports_dir=None)
        assert config.test_url == "http://a"
        assert config.reports_dir == Path("reports")

    def test_reports_dir_coerced_to_path(self):
        config = AggregatorConfig().with_overrides(reports_dir="/tmp/out")
        assert config.reports_dir == Path("/tmp/out")
