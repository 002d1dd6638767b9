"""
Reporter that writes an NUnit XML file once a test run has finished.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import ReporterConfig
from .models import TestSession
from .reporting import NUnitReporter
from .writer import write_report

logger = logging.getLogger(__name__)


class NUnitFileReporter:
    """Generate the NUnit report for a finished run and persist it."""

    def __init__(self, config: ReporterConfig, generator: Optional[NUnitReporter] = None):
        self.config = config
        self.output_path = config.resolved_output_path()
        self.generator = generator or NUnitReporter(
            name=config.report_name,
            root_dir=str(config.resolved_root_dir()),
        )

    def on_test_run_finished(self, sessions: Sequence[TestSession]) -> Path:
        """
        Write the report for all sessions of the run.

        Raises:
            ReportWriteError: If the report cannot be written
        """
        logger.info("Test run finished with %d sessions", len(sessions))
        report = self.generator.generate(sessions)
        return write_report(report, self.output_path)


def nunit_reporter(config: Optional[ReporterConfig] = None) -> NUnitFileReporter:
    """Create a file reporter, using default configuration when none is given."""
    return NUnitFileReporter(config or ReporterConfig())
