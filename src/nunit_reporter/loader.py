"""
Loading finished test sessions from JSON or YAML result files.
"""

import logging
import math
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ResultsFileError
from .models import TestCase, TestError, TestSession, TestSuite

logger = logging.getLogger(__name__)


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present, accepting camelCase and snake_case spellings."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _parse_error(data: Any) -> Optional[TestError]:
    if data is None:
        return None
    if isinstance(data, str):
        return TestError(message=data)
    return TestError(
        name=data.get("name"),
        message=data.get("message"),
        stack=data.get("stack"),
    )


def _parse_duration(value: Any) -> Optional[float]:
    """Return the duration in milliseconds, or None when it is not a finite number."""
    if value is None:
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric test duration: %r", value)
        return None
    if not math.isfinite(duration):
        logger.warning("Ignoring non-finite test duration: %r", value)
        return None
    return duration


def _parse_test(data: Dict[str, Any]) -> TestCase:
    return TestCase(
        name=str(data.get("name", "")),
        passed=bool(data.get("passed", False)),
        skipped=bool(data.get("skipped", False)),
        duration=_parse_duration(data.get("duration")),
        error=_parse_error(data.get("error")),
    )


def _parse_suite(data: Dict[str, Any]) -> TestSuite:
    return TestSuite(
        name=str(data.get("name", "")),
        suites=[_parse_suite(s) for s in data.get("suites") or []],
        tests=[_parse_test(t) for t in data.get("tests") or []],
    )


def parse_session(data: Dict[str, Any]) -> TestSession:
    """
    Build a TestSession from a plain mapping.

    Args:
        data: Session mapping using either camelCase or snake_case keys

    Returns:
        TestSession instance
    """
    browser_name = _get(data, "browserName", "browser_name")
    if browser_name is None and isinstance(data.get("browser"), dict):
        browser_name = data["browser"].get("name")

    test_results = _get(data, "testResults", "test_results")
    return TestSession(
        browser_name=str(browser_name or ""),
        test_file=str(_get(data, "testFile", "test_file", default="")),
        test_results=_parse_suite(test_results) if test_results else None,
        request_errors=[
            _parse_error(e) for e in _get(data, "requestErrors", "request_errors") or []
        ],
        id=data.get("id"),
        passed=data.get("passed"),
    )


def load_sessions(path: str) -> List[TestSession]:
    """
    Load test sessions from a JSON or YAML file.

    The file holds either a list of sessions or a mapping with a
    ``sessions`` key.

    Args:
        path: Path to the results file

    Returns:
        List of TestSession objects in file order

    Raises:
        ResultsFileError: If the file cannot be read or has the wrong shape
    """
    logger.info("Loading test results from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ResultsFileError(path, "file not found")
    except yaml.YAMLError as e:
        raise ResultsFileError(path, f"invalid JSON/YAML: {e}")
    except OSError as e:
        raise ResultsFileError(path, str(e))

    if isinstance(data, dict):
        data = data.get("sessions")
    if data is None:
        data = []
    if not isinstance(data, list):
        raise ResultsFileError(path, "expected a list of sessions")

    try:
        sessions = [parse_session(item) for item in data]
    except (AttributeError, TypeError) as e:
        raise ResultsFileError(path, f"malformed session data: {e}")

    logger.debug("Loaded %d sessions from %s", len(sessions), path)
    return sessions
