"""Service-message templates and placeholder resolution.

Templates carry two levels of placeholders. Protocol tokens such as
``{name}`` or ``{id}`` are resolved here and escaped. ``{name}`` expands
the user-configurable message, which has its own ``[browser]`` and
``[title]`` placeholders.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from tcreport.core.escape import escape

if TYPE_CHECKING:
    from tcreport.core.options import ReporterOptions
    from tcreport.models.stats import RunnerState

TOKEN_PATTERN = re.compile(r"\{[a-z]+\}", re.IGNORECASE)

# Removed from every template when flow tracking is off
FLOW_ID_ATTRIBUTE = " flowId='{id}'"

SUITE_STARTED = "##teamcity[testSuiteStarted name='{name}' flowId='{id}']"
SUITE_FINISHED = "##teamcity[testSuiteFinished name='{name}' flowId='{id}']"
TEST_STARTED = (
    "##teamcity[testStarted name='{name}' captureStandardOutput='{capture}' flowId='{id}']"
)
TEST_FINISHED = "##teamcity[testFinished name='{name}' duration='{ms}' flowId='{id}']"
TEST_FAILED = (
    "##teamcity[testFailed name='{name}' message='{error}' details='{stack}' flowId='{id}']"
)
TEST_IGNORED = "##teamcity[testIgnored name='{name}' message='skipped' flowId='{id}']"


def attempt_failed_template(attempt: str) -> str:
    """Interim message for a failure that will be retried.

    Args:
        attempt: Already escaped "<attempts>/<retries>" ratio
    """
    return (
        f"##teamcity[message name='{{name}}' text='attempt {attempt} failed: {{error}}'"
        " flowId='{id}']"
    )


def screenshot_metadata_template(index: int, filename: str) -> str:
    """Metadata line linking a screenshot artifact to the running test.

    Args:
        index: Zero-based screenshot index within the test
        filename: Artifact file name
    """
    return (
        f"##teamcity[testMetadata name='Screenshot {index + 1}' type='image'"
        f" value='{filename}' flowId='{{id}}']"
    )


def _format_ms(duration: float) -> str:
    if isinstance(duration, float) and duration.is_integer():
        return str(int(duration))
    return str(duration)


class MessageFormatter:
    """Resolve templates into service-message lines."""

    def __init__(self, options: ReporterOptions):
        """Initialize formatter.

        Args:
            options: Normalized reporter options
        """
        self._options = options

    def resolve(self, template: str, stats: Any, runner: RunnerState | None) -> str:
        """Substitute placeholders and return one newline-terminated line.

        Args:
            template: Message template with {token} placeholders
            stats: Suite or test record the message describes
            runner: Runner state, required for {id} and [browser]

        Returns:
            The resolved line, ending in "\\n"

        Raises:
            AssertionError: If stats is None
            ValueError: If the template needs data the record does not have
        """
        assert stats is not None, "resolve(): missing stats argument"

        if not self._options.flow_id:
            template = template.replace(FLOW_ID_ATTRIBUTE, "")

        line = TOKEN_PATTERN.sub(
            lambda match: escape(self._fragment(match.group(0), stats, runner)),
            template,
        )
        return line + "\n"

    def test_name(self, stats: Any, runner: RunnerState | None) -> str:
        """Expand the configured message for a suite or test."""
        name = self._options.message
        if "[browser]" in name:
            assert runner is not None, "test_name(): [browser] needs runner state"
            name = name.replace("[browser]", runner.capabilities.browser_label)
        if "[title]" in name:
            name = name.replace("[title]", stats.title)
        return name

    def _fragment(self, token: str, stats: Any, runner: RunnerState | None) -> Any:
        if token == "{capture}":
            return "true" if self._options.capture_standard_output else "false"
        if token == "{id}":
            assert runner is not None, "resolve(): {id} needs runner state"
            return f"{runner.session_id}/{stats.cid}"
        if token == "{ms}":
            duration = getattr(stats, "duration", None)
            if duration is None:
                raise ValueError(f"No duration recorded for {stats.title!r}")
            return _format_ms(duration)
        if token == "{name}":
            return self.test_name(stats, runner)
        if token == "{state}":
            return getattr(stats, "state", None)
        if token in ("{error}", "{stack}"):
            error = getattr(stats, "error", None)
            if error is None:
                raise ValueError(f"No error recorded for failed test {stats.title!r}")
            return error.message if token == "{error}" else error.stack
        return ""
