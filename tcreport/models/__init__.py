"""Data models for tcreport."""

from tcreport.models.stats import (
    Capabilities,
    CommandEvent,
    RunnerState,
    SuiteStats,
    TestError,
    TestStats,
)

__all__ = [
    "Capabilities",
    "CommandEvent",
    "RunnerState",
    "SuiteStats",
    "TestError",
    "TestStats",
]
