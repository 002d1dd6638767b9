"""
Reporting modules for the NUnit reporter.
"""

from .base import ReportGenerator
from .nunit import NUnitReporter

__all__ = ["ReportGenerator", "NUnitReporter"]
