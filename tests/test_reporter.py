"""Tests for the file reporter hook."""

import xml.etree.ElementTree as ET
from unittest.mock import MagicMock

import pytest

from src.nunit_reporter.config import ReporterConfig
from src.nunit_reporter.exceptions import ReportWriteError
from src.nunit_reporter.models import TestCase, TestSession, TestSuite
from src.nunit_reporter.reporter import NUnitFileReporter, nunit_reporter


def _sessions(root):
    return [
        TestSession(
            browser_name="Chromium",
            test_file=str(root / "test" / "a.test.js"),
            test_results=TestSuite("", tests=[TestCase("works", passed=True, duration=3)]),
        )
    ]


class TestNUnitFileReporter:
    """Tests for NUnitFileReporter."""

    def test_default_output_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        reporter = nunit_reporter()
        assert reporter.output_path == tmp_path.resolve() / "test-report.xml"

    def test_writes_report_on_finish(self, tmp_path):
        config = ReporterConfig(output_path="reports/nunit.xml", root_dir=str(tmp_path))
        path = nunit_reporter(config).on_test_run_finished(_sessions(tmp_path))
        assert path == tmp_path.resolve() / "reports" / "nunit.xml"
        root = ET.parse(path).getroot()
        assert root.get("total") == "1"
        assert root.find("results/test-suite").get("name") == "Chromium test/a.test.js"

    def test_report_name_from_config(self, tmp_path):
        config = ReporterConfig(root_dir=str(tmp_path), report_name="Nightly")
        path = NUnitFileReporter(config).on_test_run_finished([])
        assert ET.parse(path).getroot().get("name") == "Nightly"

    def test_uses_injected_generator(self, tmp_path):
        generator = MagicMock()
        generator.generate.return_value = "<test-results/>"
        config = ReporterConfig(root_dir=str(tmp_path))
        path = NUnitFileReporter(config, generator=generator).on_test_run_finished([])
        generator.generate.assert_called_once_with([])
        assert path.read_text() == "<test-results/>"

    def test_write_failure_propagates(self, tmp_path):
        (tmp_path / "blocker").write_text("file")
        config = ReporterConfig(output_path="blocker/report.xml", root_dir=str(tmp_path))
        with pytest.raises(ReportWriteError):
            nunit_reporter(config).on_test_run_finished([])
