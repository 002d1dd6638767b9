"""
Custom exceptions for the NUnit reporter.
"""


class NUnitReporterError(Exception):
    """Base exception for NUnit reporter errors."""

    pass


class ResultsFileError(NUnitReporterError):
    """Raised when a results file cannot be read or does not describe sessions."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load test results from {path}: {reason}")


class ReportWriteError(NUnitReporterError):
    """Raised when the generated report cannot be persisted."""

    def __init__(self, path: str, original_error: Exception):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Failed to write report to {path}: {original_error}")
