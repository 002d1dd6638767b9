"""
Recursive roll-up of test results into NUnit 2 XML elements.

Every ``process_*`` function returns the element it built together with the
:class:`~.models.State` of the subtree it covers. Parents merge the states of
their children and stamp their own attributes from the merged state, so no
counters are shared across calls.
"""

import logging
import os
import re
from decimal import Decimal
from typing import List, Optional, Tuple
from xml.dom.minidom import Document, Element

from .models import State, TestCase, TestError, TestOutcome, TestSession, TestSuite

logger = logging.getLogger(__name__)

# Origins of the dev server (http://localhost:8000/) and the random session
# ids it appends to module urls. Both change between runs.
_SANITIZE_PATTERN = re.compile(
    r"[a-z][a-z0-9+.\-]*://[^/\s:?#]+:\d+/?"
    r"|\b(?:localhost|\d{1,3}(?:\.\d{1,3}){3}):\d+/?"
    r"|[?&]wtr-session-id=[\w\-]+"
    r"|\b[0-9a-z]{4,}(?:-[0-9a-z]{4,}){4}\b",
    re.IGNORECASE,
)

# Characters outside the XML 1.0 Char production, e.g. ANSI escapes.
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_ERROR_KIND_PATTERN = re.compile(r"^\s*(\w*Error):")

Result = Tuple[Element, State]


def format_bool(value: bool) -> str:
    return "True" if value else "False"


def format_seconds(duration_ms: Optional[float]) -> str:
    """
    Render a duration in milliseconds as seconds.

    Decimal arithmetic keeps every digit of the input, e.g. ``10 -> "0.01"``,
    ``1500 -> "1.5"`` and ``0 -> "0"``.
    """
    seconds = Decimal(str(duration_ms or 0)) / 1000
    return format(seconds.normalize(), "f")


def xml_safe(text: str) -> str:
    """Drop characters that may not appear in an XML document."""
    return _INVALID_XML_CHARS.sub("", text)


def sanitize_stack(stack: str) -> str:
    """Strip host:port origins and session ids so reports diff cleanly."""
    previous = None
    while previous != stack:
        previous = stack
        stack = _SANITIZE_PATTERN.sub("", stack)
    return stack


def error_kind(error: TestError) -> str:
    """
    Return the kind of an error.

    The declared name wins; otherwise the leading ``SomethingError:`` token of
    the stack trace is used as a best-effort guess.
    """
    if error.name:
        return error.name
    if error.stack:
        match = _ERROR_KIND_PATTERN.match(error.stack)
        if match:
            return match.group(1)
    return ""


def _cdata_element(doc: Document, tag: str, text: str) -> Element:
    element = doc.createElement(tag)
    text = xml_safe(text)
    if "]]>" in text:
        # Cannot be wrapped in CDATA; an escaped text node carries the same value.
        element.appendChild(doc.createTextNode(text))
    else:
        element.appendChild(doc.createCDATASection(text))
    return element


def build_failure(doc: Document, error: Optional[TestError]) -> Element:
    """Build a ``failure`` element with message and optional stack trace."""
    error = error or TestError()
    failure = doc.createElement("failure")
    message = f"{error_kind(error)}: {error.message or ''}"
    failure.appendChild(_cdata_element(doc, "message", message))
    if error.stack:
        failure.appendChild(_cdata_element(doc, "stack-trace", sanitize_stack(error.stack)))
    return failure


def process_test(doc: Document, test: TestCase) -> Result:
    """Build the ``test-case`` element for a single test."""
    state = State.from_test(test)
    if test.skipped:
        outcome = TestOutcome.NOT_RUNNABLE
    elif test.passed:
        outcome = TestOutcome.SUCCESS
    else:
        outcome = TestOutcome.FAILURE

    element = doc.createElement("test-case")
    element.setAttribute("name", xml_safe(test.name))
    element.setAttribute("executed", format_bool(not test.skipped))
    element.setAttribute("result", outcome)
    element.setAttribute("success", format_bool(test.passed))
    element.setAttribute("time", format_seconds(test.duration))

    if outcome == TestOutcome.FAILURE:
        element.appendChild(build_failure(doc, test.error))
    return element, state


def _stamp_suite(element: Element, suite_type: str, name: str, state: State) -> None:
    element.setAttribute("type", suite_type)
    element.setAttribute("name", xml_safe(name))
    element.setAttribute("executed", format_bool(state.executed))
    element.setAttribute("result", state.result)
    element.setAttribute("success", format_bool(state.success))
    element.setAttribute("time", format_seconds(state.time))
    element.setAttribute("asserts", "0")


def _process_children(
    doc: Document, suites: List[TestSuite], tests: List[TestCase]
) -> Result:
    """Process child suites, then child tests, into a ``results`` container."""
    results = doc.createElement("results")
    states = []
    for child in suites:
        child_element, child_state = process_suite(doc, child)
        results.appendChild(child_element)
        states.append(child_state)
    for test in tests:
        test_element, test_state = process_test(doc, test)
        results.appendChild(test_element)
        states.append(test_state)
    return results, State.merge_all(states)


def process_suite(doc: Document, suite: TestSuite, suite_type: str = "TestFixture") -> Result:
    """Build the ``test-suite`` element for a suite and everything below it."""
    element = doc.createElement("test-suite")
    results, state = _process_children(doc, suite.suites, suite.tests)
    _stamp_suite(element, suite_type, suite.name, state)
    element.appendChild(results)
    return element, state


def session_name(session: TestSession, root_dir: Optional[str] = None) -> str:
    """Name a session by its browser and the test file relative to ``root_dir``."""
    test_file = session.test_file
    if root_dir and os.path.isabs(test_file):
        try:
            test_file = os.path.relpath(test_file, root_dir)
        except ValueError:
            # Different drives on Windows; keep the absolute path.
            pass
    return f"{session.browser_name} {test_file.replace(os.sep, '/')}"


def process_session(
    doc: Document, session: TestSession, root_dir: Optional[str] = None
) -> Result:
    """
    Build the ``test-suite`` element for a session.

    Request errors of the session are appended as extra ``failure`` elements.
    They are not tied to a test, so they leave the counters untouched.
    """
    name = session_name(session, root_dir)
    logger.debug("Processing session %s", name)

    root = session.test_results or TestSuite(name="")
    element = doc.createElement("test-suite")
    results, state = _process_children(doc, root.suites, root.tests)
    _stamp_suite(element, "Assembly", name, state)
    element.appendChild(results)

    for request_error in session.request_errors:
        element.appendChild(build_failure(doc, request_error))

    logger.debug(
        "Session %s: %d tests, %d failures, %d skipped",
        name,
        state.total,
        state.failures,
        state.skipped,
    )
    return element, state
