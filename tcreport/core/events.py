"""Replay a recorded JSON-lines event stream into a reporter.

Each line is one JSON object naming the event and carrying its payload,
either inline or under a "payload" key:

    {"event": "suite:start", "title": "Login", "cid": "0-0", "uid": "suite-1"}
    {"event": "test:end", "payload": {"title": "should log in", "_duration": 120}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from tcreport.core.reporter import TeamcityReporter
from tcreport.models.stats import CommandEvent, RunnerState, SuiteStats, TestStats

logger = logging.getLogger("tcreport.events")


class ReplayError(Exception):
    """Error reading an event stream."""

    pass


class EventReplayer:
    """Dispatch recorded events to reporter hooks."""

    def __init__(self, reporter: TeamcityReporter):
        """Initialize replayer.

        Args:
            reporter: Reporter receiving the events
        """
        self._reporter = reporter
        self._handlers: dict[str, tuple[Callable[[dict[str, Any]], Any], Callable[[Any], None]]] = {
            "runner:start": (RunnerState.from_dict, reporter.on_runner_start),
            "suite:start": (SuiteStats.from_dict, reporter.on_suite_start),
            "suite:end": (SuiteStats.from_dict, reporter.on_suite_end),
            "test:start": (TestStats.from_dict, reporter.on_test_start),
            "test:end": (TestStats.from_dict, reporter.on_test_end),
            "test:pass": (TestStats.from_dict, reporter.on_test_pass),
            "test:fail": (TestStats.from_dict, reporter.on_test_fail),
            "test:skip": (TestStats.from_dict, reporter.on_test_skip),
            "client:afterCommand": (CommandEvent.from_dict, reporter.on_after_command),
        }

    @property
    def events(self) -> list[str]:
        """Event names this replayer understands."""
        return list(self._handlers)

    def replay(self, lines: Iterable[str]) -> int:
        """Replay events from JSON lines.

        Args:
            lines: Iterable of JSON-encoded events (blank lines are skipped)

        Returns:
            Number of events dispatched

        Raises:
            ReplayError: If a line is not a JSON object
        """
        dispatched = 0
        for line_number, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ReplayError(f"Line {line_number}: invalid JSON: {e}")

            if not isinstance(record, dict):
                raise ReplayError(f"Line {line_number}: event must be a JSON object")

            if self.dispatch(record):
                dispatched += 1

        logger.debug("Replayed %d events", dispatched)
        return dispatched

    def replay_file(self, path: Path) -> int:
        """Replay events from a JSON-lines file.

        Raises:
            ReplayError: If the file is missing or malformed
        """
        try:
            with open(path, encoding="utf-8") as f:
                return self.replay(f)
        except FileNotFoundError:
            raise ReplayError(f"Event file not found: {path}")

    def dispatch(self, record: dict[str, Any]) -> bool:
        """Send one event record to its hook.

        Returns:
            True if the event was dispatched, False if its kind is unknown
        """
        name = record.get("event")
        handler = self._handlers.get(name) if isinstance(name, str) else None
        if handler is None:
            logger.debug("Skipping unknown event %r", name)
            return False

        payload = record.get("payload")
        if not isinstance(payload, dict):
            payload = {k: v for k, v in record.items() if k != "event"}

        build, hook = handler
        hook(build(payload))
        return True
