"""Per-test screenshot numbering.

The counter restarts at 0 whenever a screenshot belongs to a different
test than the previous screenshot, and increments otherwise. The reset
follows the last screenshotted test, not the last started one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from tcreport.models.stats import TestStats


@dataclass(frozen=True)
class ScreenshotSequence:
    """Sequencer state. Transitions return a new instance."""

    current_test: TestStats | None = None
    previous_test_uid: str | None = None
    counter: int = 0


def observe_test_start(state: ScreenshotSequence, test: TestStats) -> ScreenshotSequence:
    """Record the test that owns subsequent screenshots."""
    return replace(state, current_test=test)


def observe_screenshot(state: ScreenshotSequence) -> ScreenshotSequence:
    """Assign the next index to a screenshot of the current test.

    Returns:
        New state whose counter is the index of this screenshot

    Raises:
        ValueError: If no test has started yet
    """
    test = state.current_test
    if test is None:
        raise ValueError("Screenshot taken outside of a test")

    if test.uid == state.previous_test_uid:
        counter = state.counter + 1
    else:
        counter = 0

    return replace(state, counter=counter, previous_test_uid=test.uid)
