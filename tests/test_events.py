"""Tests for event stream replay."""

import base64
import io
import json

import pytest

from tcreport.core.events import EventReplayer, ReplayError
from tcreport.core.reporter import TeamcityReporter


def event_lines(*events):
    return [json.dumps(event) for event in events]


RUNNER_START = {
    "event": "runner:start",
    "sessionId": "sess1",
    "cid": "0-0",
    "capabilities": {"browserName": "chrome", "browserVersion": "120"},
    "config": {"specFileRetries": 1, "specFileRetryAttempts": 0},
}


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def reporter(tmp_path, stream):
    reporter = TeamcityReporter(stream=stream, cwd=tmp_path)
    yield reporter
    reporter.close()


class TestEventReplayer:
    """Test dispatching of recorded events."""

    def test_replays_lifecycle(self, reporter, stream):
        lines = event_lines(
            RUNNER_START,
            {"event": "suite:start", "title": "Login", "cid": "0-0", "uid": "s1"},
            {"event": "test:start", "title": "should log in", "cid": "0-0", "uid": "t1"},
            {"event": "test:pass", "title": "should log in", "cid": "0-0", "uid": "t1", "state": "passed"},
            {
                "event": "test:end",
                "payload": {
                    "title": "should log in",
                    "cid": "0-0",
                    "uid": "t1",
                    "state": "passed",
                    "_duration": 120,
                },
            },
            {"event": "suite:end", "title": "Login", "cid": "0-0", "uid": "s1"},
        )

        count = EventReplayer(reporter).replay(lines)

        assert count == 6
        assert stream.getvalue().splitlines() == [
            "##teamcity[testSuiteStarted name='Login' flowId='sess1/0-0']",
            "##teamcity[testStarted name='should log in' captureStandardOutput='false' flowId='sess1/0-0']",
            "##teamcity[testFinished name='should log in' duration='120' flowId='sess1/0-0']",
            "##teamcity[testSuiteFinished name='Login' flowId='sess1/0-0']",
        ]

    def test_replays_retry_failure(self, reporter, stream):
        lines = event_lines(
            RUNNER_START,
            {
                "event": "test:fail",
                "title": "checkout",
                "cid": "0-0",
                "uid": "t2",
                "state": "failed",
                "errors": [{"message": "timeout", "stack": "Error: timeout"}],
            },
        )

        EventReplayer(reporter).replay(lines)

        assert "text='attempt 0/1 failed: timeout'" in stream.getvalue()

    def test_replays_screenshot(self, reporter, stream, tmp_path):
        data = base64.b64encode(b"\x89PNG fake").decode()
        lines = event_lines(
            RUNNER_START,
            {"event": "test:start", "title": "t", "cid": "0-0", "uid": "t1"},
            {
                "event": "client:afterCommand",
                "endpoint": "/session/sess1/screenshot",
                "method": "GET",
                "result": {"value": data},
            },
        )

        EventReplayer(reporter).replay(lines)
        reporter.drain()

        assert "testMetadata name='Screenshot 1'" in stream.getvalue()
        (saved,) = (tmp_path / "temp" / "screenshots").iterdir()
        assert saved.name.startswith("0-")
        assert saved.read_bytes() == b"\x89PNG fake"

    def test_skips_blank_lines_and_unknown_events(self, reporter, stream):
        lines = ["", "   "] + event_lines({"event": "hook:start", "title": "before all"}, {"title": "no event"})

        assert EventReplayer(reporter).replay(lines) == 0
        assert stream.getvalue() == ""

    def test_invalid_json_raises(self, reporter):
        lines = event_lines(RUNNER_START) + ["{not json"]

        with pytest.raises(ReplayError, match="Line 2"):
            EventReplayer(reporter).replay(lines)

    def test_non_object_raises(self, reporter):
        with pytest.raises(ReplayError, match="JSON object"):
            EventReplayer(reporter).replay(["[1, 2]"])

    def test_replay_file(self, reporter, stream, tmp_path):
        events_file = tmp_path / "events.jsonl"
        events_file.write_text(
            "\n".join(
                event_lines(RUNNER_START, {"event": "suite:start", "title": "S", "cid": "0-0"})
            )
        )

        assert EventReplayer(reporter).replay_file(events_file) == 2
        assert "testSuiteStarted name='S'" in stream.getvalue()

    def test_replay_missing_file(self, reporter, tmp_path):
        with pytest.raises(ReplayError, match="not found"):
            EventReplayer(reporter).replay_file(tmp_path / "missing.jsonl")

    def test_known_events(self, reporter):
        events = EventReplayer(reporter).events

        assert "client:afterCommand" in events
        assert "test:skip" in events
