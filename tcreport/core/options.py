"""Reporter options with permissive type normalization.

Every option falls back to its default when the supplied value has the
wrong type. Nothing here raises: a broken option bag must never stop the
reporter from starting.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_MESSAGE = "[title]"
DEFAULT_SCREENSHOT_PATH = "temp/screenshots/"


def as_bool(value: Any, fallback: bool) -> bool:
    """Return value if it is a bool, else fallback."""
    return value if isinstance(value, bool) else fallback


def as_number(value: Any, fallback: int | float) -> int | float:
    """Return value if it is an int or float (but not a bool), else fallback."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    return value


def as_string(value: Any, fallback: str) -> str:
    """Return value if it is a str, else fallback."""
    return value if isinstance(value, str) else fallback


def _lookup(mapping: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in mapping:
        return mapping[camel]
    return mapping.get(snake)


@dataclass(frozen=True)
class ReporterOptions:
    """Normalized reporter configuration."""

    capture_standard_output: bool = False
    flow_id: bool = True
    message: str = DEFAULT_MESSAGE  # Supports [browser] and [title]
    screenshot_path: str = DEFAULT_SCREENSHOT_PATH

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> ReporterOptions:
        """Build options from a loosely-typed mapping.

        Accepts the camelCase keys (captureStandardOutput, flowId, message,
        screenshotPath) and their snake_case equivalents.
        """
        mapping = mapping if isinstance(mapping, Mapping) else {}
        return cls(
            capture_standard_output=as_bool(
                _lookup(mapping, "captureStandardOutput", "capture_standard_output"), False
            ),
            flow_id=as_bool(_lookup(mapping, "flowId", "flow_id"), True),
            message=as_string(mapping.get("message"), DEFAULT_MESSAGE),
            screenshot_path=as_string(
                _lookup(mapping, "screenshotPath", "screenshot_path"), DEFAULT_SCREENSHOT_PATH
            ),
        )
