"""Base class and runner entry point for cluster test cases."""

import time
from abc import ABC, abstractmethod

from typing import TYPE_CHECKING

from pydantic import BaseModel

from cluster_test.helpers.errors import ScenarioError, TestFailure
from cluster_test.helpers.logging import get_logger


if TYPE_CHECKING:
    from cluster_test.test_case.context import TestContext


logger = get_logger(__name__)


class TestCase(ABC):
    """Abstract base class for scenarios run against a live cluster.

    Subclasses must implement:
    - name(): Stable identifier used in reports
    - description(): Human readable summary
    - run(): Execute the scenario, raising ``TestFailure`` on the first error
    """

    __test__ = False

    @abstractmethod
    def name(self) -> str:
        """Return the stable identifier of this test case."""
        ...

    @abstractmethod
    def description(self) -> str:
        """Return a human readable summary of this test case."""
        ...

    @abstractmethod
    async def run(self, ctx: "TestContext") -> None:
        """Run the scenario.

        The context is borrowed for the duration of the call and must not be
        retained afterwards.

        Raises:
            TestFailure: Wrapping the first error, annotated with its step
        """
        ...


class TestResult(BaseModel):
    """Outcome of one test case run."""

    __test__ = False

    name: str
    description: str
    passed: bool
    step: str | None = None
    error: str | None = None
    duration_seconds: float


async def run_test_case(case: TestCase, ctx: "TestContext") -> TestResult:
    """Run ``case`` and turn its outcome into a ``TestResult``.

    Only ``TestFailure`` and scenario errors become failed results; anything
    else is a bug in the harness and propagates.

    Args:
        case: Test case to run
        ctx: Context handed to the case for the duration of the run

    Returns:
        Passed result, or failed result carrying the failing step and error
    """
    logger.info("Running test case %s: %s", case.name(), case.description())
    start = time.monotonic()
    try:
        await case.run(ctx)
    except TestFailure as e:
        logger.error("Test case %s failed at %s: %s", case.name(), e.step, e.cause)
        return TestResult(
            name=case.name(),
            description=case.description(),
            passed=False,
            step=e.step,
            error=f"{type(e.cause).__name__}: {e.cause}",
            duration_seconds=time.monotonic() - start,
        )
    except ScenarioError as e:
        logger.error("Test case %s failed: %s", case.name(), e)
        return TestResult(
            name=case.name(),
            description=case.description(),
            passed=False,
            error=f"{type(e).__name__}: {e}",
            duration_seconds=time.monotonic() - start,
        )

    logger.info("Test case %s passed", case.name())
    return TestResult(
        name=case.name(),
        description=case.description(),
        passed=True,
        duration_seconds=time.monotonic() - start,
    )


__all__ = ["TestCase", "TestResult", "run_test_case"]
