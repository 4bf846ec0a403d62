"""Core modules for tcreport."""

from tcreport.core.config import ConfigLoader, ReporterConfig, setup_logging
from tcreport.core.escape import escape, unescape
from tcreport.core.events import EventReplayer, ReplayError
from tcreport.core.messages import MessageFormatter
from tcreport.core.options import ReporterOptions, as_bool, as_number, as_string
from tcreport.core.reporter import TeamcityReporter
from tcreport.core.screenshot_saver import ScreenshotSaver
from tcreport.core.sequencer import ScreenshotSequence, observe_screenshot, observe_test_start

__all__ = [
    "ConfigLoader",
    "EventReplayer",
    "MessageFormatter",
    "ReplayError",
    "ReporterConfig",
    "ReporterOptions",
    "ScreenshotSaver",
    "ScreenshotSequence",
    "TeamcityReporter",
    "as_bool",
    "as_number",
    "as_string",
    "escape",
    "observe_screenshot",
    "observe_test_start",
    "setup_logging",
    "unescape",
]
