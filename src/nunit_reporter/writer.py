"""
Persisting generated reports.
"""

import logging
from pathlib import Path
from typing import Union

from .exceptions import ReportWriteError

logger = logging.getLogger(__name__)


def write_report(report: str, output_path: Union[str, Path]) -> Path:
    """
    Write a report in a single call, creating parent directories.

    Args:
        report: Serialized report
        output_path: Destination file

    Returns:
        The path written to

    Raises:
        ReportWriteError: If the directory or file cannot be written
    """
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(str(path), e) from e
    logger.info("Report written to %s", path)
    return path
