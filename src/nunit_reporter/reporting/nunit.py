"""
NUnit 2 XML reporter for test sessions.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence, Tuple
from xml.dom.minidom import Document, getDOMImplementation

from ..aggregator import process_session
from ..environment import HostEnvironment
from ..models import State, TestSession
from .base import ReportGenerator

logger = logging.getLogger(__name__)

NUNIT_VERSION = "2.5.8.0"
CLR_VERSION = "2.0.50727.1433"
CULTURE = "en-US"


def format_date(moment: datetime) -> str:
    """Format a date as ``YYYY-M-D`` without zero padding."""
    return f"{moment.year}-{moment.month}-{moment.day}"


def format_time(moment: datetime) -> str:
    """Format a time of day as ``H:M:S`` without zero padding."""
    return f"{moment.hour}:{moment.minute}:{moment.second}"


class NUnitReporter(ReportGenerator):
    """
    Generate NUnit 2.5 XML for CI dashboards.

    Host details and the clock are injectable so that a report is a pure
    function of its inputs. When they are not supplied, the host is captured
    and the local clock read once per generated report.
    """

    def __init__(
        self,
        name: str = "",
        host: Optional[HostEnvironment] = None,
        clock: Optional[Callable[[], datetime]] = None,
        root_dir: Optional[str] = None,
    ) -> None:
        self.name = name
        self.host = host
        self.clock = clock or datetime.now
        self.root_dir = root_dir

    def assemble(self, sessions: Sequence[TestSession]) -> Tuple[Document, State]:
        """Build the report document and the grand total of all sessions."""
        host = self.host or HostEnvironment.capture()
        generated_at = self.clock()

        doc = getDOMImplementation().createDocument(None, "test-results", None)
        root = doc.documentElement
        root.appendChild(self._environment(doc, host))
        root.appendChild(self._culture_info(doc))

        results = doc.createElement("results")
        root.appendChild(results)

        total = State()
        for session in sessions:
            element, state = process_session(doc, session, self.root_dir)
            results.appendChild(element)
            total = total.merge(state)

        root.setAttribute("name", self.name)
        root.setAttribute("total", str(total.total))
        root.setAttribute("errors", str(total.errors))
        root.setAttribute("failures", str(total.failures))
        root.setAttribute("inconclusive", str(total.inconclusive))
        root.setAttribute("not-run", str(total.not_run))
        root.setAttribute("ignored", str(total.ignored))
        root.setAttribute("skipped", str(total.skipped))
        root.setAttribute("invalid", str(total.invalid))
        root.setAttribute("date", format_date(generated_at))
        root.setAttribute("time", format_time(generated_at))

        logger.info(
            "Built NUnit report for %d sessions: %d tests, %d failures, %d skipped",
            len(sessions),
            total.total,
            total.failures,
            total.skipped,
        )
        return doc, total

    @staticmethod
    def serialize(doc: Document) -> str:
        """Serialize a report document with a UTF-8 XML declaration."""
        xml_bytes = doc.toprettyxml(indent="  ", encoding="utf-8", standalone=False)
        return xml_bytes.decode("utf-8")

    def generate(self, sessions: Sequence[TestSession]) -> str:
        """Generate the NUnit XML report as a string."""
        doc, _ = self.assemble(sessions)
        return self.serialize(doc)

    @staticmethod
    def _environment(doc: Document, host: HostEnvironment):
        environment = doc.createElement("environment")
        environment.setAttribute("nunit-version", NUNIT_VERSION)
        environment.setAttribute("clr-version", CLR_VERSION)
        environment.setAttribute("os-version", host.os_version)
        environment.setAttribute("platform", host.platform)
        environment.setAttribute("cwd", host.cwd)
        environment.setAttribute("machine-name", host.machine_name)
        environment.setAttribute("user", host.user)
        environment.setAttribute("user-domain", host.user_domain)
        return environment

    @staticmethod
    def _culture_info(doc: Document):
        culture_info = doc.createElement("culture-info")
        culture_info.setAttribute("current-culture", CULTURE)
        culture_info.setAttribute("current-uiculture", CULTURE)
        return culture_info
