"""
Data models for the NUnit reporter.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Optional


class TestOutcome:
    """Values of the NUnit ``result`` attribute."""

    SUCCESS = "Success"
    FAILURE = "Failure"
    NOT_RUNNABLE = "NotRunnable"


@dataclass
class TestError:
    """Error detail attached to a failed test or to a session."""

    name: Optional[str] = None
    message: Optional[str] = None
    stack: Optional[str] = None


@dataclass
class TestCase:
    """Outcome of a single test."""

    name: str
    passed: bool = False
    skipped: bool = False
    duration: Optional[float] = None
    error: Optional[TestError] = None


@dataclass
class TestSuite:
    """A named group of tests and nested suites, in definition order."""

    name: str
    suites: List["TestSuite"] = field(default_factory=list)
    tests: List[TestCase] = field(default_factory=list)


@dataclass
class TestSession:
    """One execution of a test file in one browser or runtime."""

    browser_name: str
    test_file: str
    test_results: Optional[TestSuite] = None
    request_errors: List[TestError] = field(default_factory=list)
    id: Optional[str] = None
    passed: Optional[bool] = None


@dataclass(frozen=True)
class State:
    """
    Roll-up statistics for a subtree of results.

    States form a commutative monoid under :meth:`merge` with ``State()`` as
    the identity. ``total`` counts every leaf visited; the NUnit 2 schema has
    no explicit counter for passed tests.

    Skipped tests never affect ``success``. ``time`` is held as a Decimal so
    that roll-ups of fractional durations add up exactly.
    """

    success: bool = True
    time: Decimal = Decimal(0)
    total: int = 0
    errors: int = 0
    failures: int = 0
    inconclusive: int = 0
    not_run: int = 0
    ignored: int = 0
    skipped: int = 0
    invalid: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.time, Decimal):
            object.__setattr__(self, "time", Decimal(str(self.time)))

    @classmethod
    def from_test(cls, test: TestCase) -> "State":
        """Build the leaf state of a single test."""
        state = cls(total=1, time=test.duration or 0)
        if test.skipped:
            return replace(state, skipped=1)
        if not test.passed:
            return replace(state, failures=1, success=False)
        return state

    @classmethod
    def merge_all(cls, states: Iterable["State"]) -> "State":
        """Merge any number of states, starting from the identity."""
        merged = cls()
        for state in states:
            merged = merged.merge(state)
        return merged

    def merge(self, other: "State") -> "State":
        """Combine two states: counters and time add, success is a logical AND."""
        return State(
            success=self.success and other.success,
            time=self.time + other.time,
            total=self.total + other.total,
            errors=self.errors + other.errors,
            failures=self.failures + other.failures,
            inconclusive=self.inconclusive + other.inconclusive,
            not_run=self.not_run + other.not_run,
            ignored=self.ignored + other.ignored,
            skipped=self.skipped + other.skipped,
            invalid=self.invalid + other.invalid,
        )

    @property
    def executed_count(self) -> int:
        """Number of leaves that actually ran."""
        return self.total - self.skipped

    @property
    def executed(self) -> bool:
        return self.executed_count > 0

    @property
    def result(self) -> str:
        """NUnit result of a composite node with this state."""
        if not self.executed:
            return TestOutcome.NOT_RUNNABLE
        return TestOutcome.SUCCESS if self.success else TestOutcome.FAILURE
