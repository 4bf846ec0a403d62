"""TeamCity service-message reporter."""

from __future__ import annotations

import base64
import binascii
import logging
import re
import sys
import threading
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

from tcreport.core.escape import escape
from tcreport.core.messages import (
    SUITE_FINISHED,
    SUITE_STARTED,
    TEST_FAILED,
    TEST_FINISHED,
    TEST_IGNORED,
    TEST_STARTED,
    MessageFormatter,
    attempt_failed_template,
    screenshot_metadata_template,
)
from tcreport.core.options import ReporterOptions, as_number
from tcreport.core.screenshot_saver import ScreenshotSaver
from tcreport.core.sequencer import ScreenshotSequence, observe_screenshot, observe_test_start
from tcreport.models.stats import CommandEvent, RunnerState, SuiteStats, TestStats

logger = logging.getLogger("tcreport.reporter")

SCREENSHOT_ENDPOINT = re.compile(r"/session/[^/]*/screenshot")


class TeamcityReporter:
    """Translate test lifecycle events into TeamCity service messages.

    The host runner calls the on_* hooks in event order. Every hook writes
    at most one line to the output stream, except on_test_end for skipped
    tests and on_test_pass, which write nothing.

    Usage:
        reporter = TeamcityReporter({"flowId": False})
        reporter.on_runner_start(runner_state)
        reporter.on_suite_start(suite)
        reporter.on_test_start(test)
        reporter.on_test_end(test)
        reporter.on_suite_end(suite)
        reporter.close()
    """

    def __init__(
        self,
        options: ReporterOptions | Mapping[str, Any] | None = None,
        *,
        runner: RunnerState | None = None,
        stream: IO[str] | None = None,
        cwd: Path | None = None,
        saver: ScreenshotSaver | None = None,
    ):
        """Initialize reporter.

        Args:
            options: ReporterOptions or a raw option mapping (normalized)
            runner: Runner state; can also arrive later via on_runner_start
            stream: Output sink for service messages (default: stdout)
            cwd: Base directory for a relative screenshotPath (default: cwd)
            saver: Screenshot saver (created from screenshotPath if not provided)
        """
        if not isinstance(options, ReporterOptions):
            options = ReporterOptions.from_mapping(options)
        self._options = options
        self._runner = runner
        self._stream = stream or sys.stdout
        self._formatter = MessageFormatter(options)

        screenshot_dir = Path(cwd or Path.cwd()) / options.screenshot_path
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        self._saver = saver or ScreenshotSaver(screenshot_dir)

        self._sequence = ScreenshotSequence()
        self._lock = threading.Lock()

    @property
    def options(self) -> ReporterOptions:
        return self._options

    @property
    def runner(self) -> RunnerState | None:
        return self._runner

    @property
    def sequence(self) -> ScreenshotSequence:
        """Current screenshot sequencer state."""
        with self._lock:
            return self._sequence

    @property
    def screenshot_dir(self) -> Path:
        return self._saver.output_dir

    def on_runner_start(self, runner: RunnerState) -> None:
        self._runner = runner

    def on_suite_start(self, suite: SuiteStats) -> None:
        self._message(SUITE_STARTED, suite)

    def on_suite_end(self, suite: SuiteStats) -> None:
        self._message(SUITE_FINISHED, suite)

    def on_test_start(self, test: TestStats) -> None:
        with self._lock:
            self._sequence = observe_test_start(self._sequence, test)
        self._message(TEST_STARTED, test)

    def on_test_end(self, test: TestStats) -> None:
        # Skipped tests are reported by on_test_skip only
        if test.state == "skipped":
            return
        self._message(TEST_FINISHED, test)

    def on_test_pass(self, test: TestStats) -> None:
        pass

    def on_test_fail(self, test: TestStats) -> None:
        """Report a failure, or an interim message when a retry will follow.

        Only the last allowed attempt produces testFailed, so the build is
        not marked red for a failure that a retry may still fix.
        """
        config = self._runner.config if self._runner else {}
        attempts = as_number(config.get("specFileRetryAttempts"), 0)
        retries = as_number(config.get("specFileRetries"), 0)

        if attempts == retries:
            self._message(TEST_FAILED, test)
        else:
            logger.info("Attempt %s/%s of %r failed, retry pending", attempts, retries, test.title)
            self._message(attempt_failed_template(escape(f"{attempts}/{retries}")), test)

    def on_test_skip(self, test: TestStats) -> None:
        self._message(TEST_IGNORED, test)

    def on_after_command(self, command: CommandEvent) -> None:
        """Save screenshot responses and link them to the running test.

        Commands that are not screenshots, or carry no image data, are ignored.
        """
        data = command.screenshot_data
        if not SCREENSHOT_ENDPOINT.search(command.endpoint) or not data:
            return

        try:
            image = base64.b64decode(data)
        except (binascii.Error, TypeError, ValueError) as e:
            logger.warning("Ignoring screenshot with undecodable payload: %s", e)
            return

        with self._lock:
            try:
                self._sequence = observe_screenshot(self._sequence)
            except ValueError as e:
                logger.warning("Ignoring screenshot from %s: %s", command.endpoint, e)
                return
            test = self._sequence.current_test
            index = self._sequence.counter

        filename = self._saver.get_filename(index, str(uuid.uuid4()))
        self._saver.save_async(image, filename)
        logger.debug("Screenshot %d of %r -> %s", index + 1, test.title, filename)

        self._message(screenshot_metadata_template(index, filename), test)

    def drain(self, timeout: float | None = None) -> int:
        """Wait for pending screenshot writes. Returns the number that failed."""
        return self._saver.drain(timeout)

    def close(self) -> None:
        """Flush screenshot writes and stop the writer thread."""
        self._saver.close()

    def _message(self, template: str, stats: Any) -> None:
        line = self._formatter.resolve(template, stats, self._runner)
        self._stream.write(line)
        self._stream.flush()
