"""Event payload models supplied by the host test runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class TestError:
    """Error attached to a failed test."""

    # Tell pytest not to collect this as a test class
    __test__ = False

    message: str = ""
    stack: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> TestError | None:
        if not isinstance(data, dict) or not data:
            return None
        return cls(message=_text(data.get("message")), stack=_text(data.get("stack")))


@dataclass
class SuiteStats:
    """One suite instance."""

    title: str
    full_title: str = ""
    cid: str = ""
    uid: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SuiteStats:
        return cls(
            title=_text(data.get("title")),
            full_title=_text(_pick(data, "fullTitle", "full_title")),
            cid=_text(data.get("cid")),
            uid=_text(data.get("uid")),
        )


@dataclass
class TestStats:
    """One test execution."""

    # Tell pytest not to collect this as a test class
    __test__ = False

    title: str
    cid: str = ""
    uid: str = ""
    state: str = "pending"  # passed, failed, skipped, pending
    duration: float | None = None  # Milliseconds
    error: TestError | None = None
    full_title: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestStats:
        """Build from a host payload.

        Accepts the runner's own keys (``_duration``, ``fullTitle``) and the
        snake_case equivalents. When only an ``errors`` list is present the
        first entry is used.
        """
        error_data = data.get("error")
        if error_data is None and data.get("errors"):
            error_data = data["errors"][0]

        duration = _pick(data, "_duration", "duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            duration = None

        return cls(
            title=_text(data.get("title")),
            cid=_text(data.get("cid")),
            uid=_text(data.get("uid")),
            state=_text(data.get("state")) or "pending",
            duration=duration,
            error=TestError.from_dict(error_data),
            full_title=_text(_pick(data, "fullTitle", "full_title")),
        )


@dataclass
class Capabilities:
    """Browser capabilities of the session."""

    browser_name: str | None = None
    browser_version: str | None = None
    version: str | None = None  # Legacy JSONWP capability

    @property
    def browser_label(self) -> str:
        """Browser name and version, e.g. "chrome 120"."""
        return f"{self.browser_name} {self.browser_version or self.version}"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Capabilities:
        data = data or {}
        return cls(
            browser_name=_pick(data, "browserName", "browser_name"),
            browser_version=_pick(data, "browserVersion", "browser_version"),
            version=data.get("version"),
        )


@dataclass
class RunnerState:
    """Session-scoped state of the runner process."""

    session_id: str
    cid: str = ""
    capabilities: Capabilities = field(default_factory=Capabilities)
    config: dict[str, Any] = field(default_factory=dict)  # Runner config, incl. retry settings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunnerState:
        config = dict(data.get("config") or {})
        # Retry settings are sometimes flattened onto the runner payload
        for key in ("specFileRetries", "specFileRetryAttempts"):
            if key in data and key not in config:
                config[key] = data[key]

        return cls(
            session_id=_text(_pick(data, "sessionId", "session_id")),
            cid=_text(data.get("cid")),
            capabilities=Capabilities.from_dict(data.get("capabilities")),
            config=config,
        )


@dataclass
class CommandEvent:
    """An automation command that completed."""

    endpoint: str
    method: str = "GET"
    result: dict[str, Any] | None = None

    @property
    def screenshot_data(self) -> str | None:
        """Base64 payload of the response, if any."""
        if not isinstance(self.result, dict):
            return None
        return self.result.get("value") or None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommandEvent:
        result = data.get("result")
        return cls(
            endpoint=_text(data.get("endpoint")),
            method=_text(data.get("method")) or "GET",
            result=result if isinstance(result, dict) else None,
        )
