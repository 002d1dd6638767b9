"""
Base class for report generators.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import TestSession


class ReportGenerator(ABC):
    """Base class for generating test reports."""

    @abstractmethod
    def generate(self, sessions: Sequence[TestSession]) -> str:
        """
        Generate a report from test sessions.

        Args:
            sessions: Finished test sessions, in the order they should appear

        Returns:
            Report as a string
        """
        pass
