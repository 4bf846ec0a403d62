"""Configuration loader with layered priority.

Priority order (highest to lowest):
1. Explicit overrides (CLI flags, reporter constructor options)
2. Environment variables (TCREPORT_FLOW_ID, TCREPORT_MESSAGE, ...)
3. Project config (.tcreport.yaml in current directory)
4. Global config (~/.tcreport.yaml)
5. Default values
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tcreport.core.options import ReporterOptions

# Config file paths
GLOBAL_CONFIG = Path.home() / ".tcreport.yaml"
PROJECT_CONFIG = Path.cwd() / ".tcreport.yaml"

# Environment variable -> option key
ENV_BOOL_OPTIONS = {
    "TCREPORT_CAPTURE_STDOUT": "captureStandardOutput",
    "TCREPORT_FLOW_ID": "flowId",
}
ENV_STRING_OPTIONS = {
    "TCREPORT_MESSAGE": "message",
    "TCREPORT_SCREENSHOT_PATH": "screenshotPath",
}


def _parse_bool(value: Any, default: bool = False) -> bool:
    """Parse boolean value from various formats.

    Handles:
    - None -> default
    - bool -> as-is
    - str -> "true", "1", "yes", "on" are True
    - other -> bool(value)
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on")
    return bool(value)


@dataclass
class ReporterConfig:
    """Main configuration for tcreport."""

    options: ReporterOptions = field(default_factory=ReporterOptions)
    verbose: bool = False


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    @classmethod
    def load(cls, overrides: dict[str, Any] | None = None) -> ReporterConfig:
        """Load configuration with layered priority.

        Args:
            overrides: Highest-priority option values (None entries are ignored)

        Returns:
            Merged ReporterConfig instance
        """
        config_dict: dict[str, Any] = {}

        # Layer 1: Global config (~/.tcreport.yaml)
        if GLOBAL_CONFIG.exists():
            config_dict.update(cls._load_yaml(GLOBAL_CONFIG))

        # Layer 2: Project config (.tcreport.yaml)
        if PROJECT_CONFIG.exists():
            config_dict.update(cls._load_yaml(PROJECT_CONFIG))

        # Layer 3: Environment variables
        config_dict.update(cls._get_env_overrides())

        # Layer 4: Explicit overrides
        if overrides:
            config_dict.update({k: v for k, v in overrides.items() if v is not None})

        return ReporterConfig(
            options=ReporterOptions.from_mapping(config_dict),
            verbose=_parse_bool(config_dict.get("verbose"), False),
        )

    @classmethod
    def _load_yaml(cls, path: Path) -> dict[str, Any]:
        """Load YAML file safely."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (yaml.YAMLError, OSError):
            return {}

    @classmethod
    def _get_env_overrides(cls) -> dict[str, Any]:
        """Get configuration overrides from environment variables."""
        overrides: dict[str, Any] = {}

        # Env values are always strings, so booleans are parsed here
        # before the option normalizer sees them
        for env_name, key in ENV_BOOL_OPTIONS.items():
            if env_name in os.environ:
                overrides[key] = _parse_bool(os.environ[env_name])

        for env_name, key in ENV_STRING_OPTIONS.items():
            if env_name in os.environ:
                overrides[key] = os.environ[env_name]

        if "TCREPORT_VERBOSE" in os.environ:
            overrides["verbose"] = _parse_bool(os.environ["TCREPORT_VERBOSE"])

        return overrides


def setup_logging(verbose: bool, log_dir: Path | None) -> Path | None:
    """Configure file-based DEBUG logging.

    Logging never goes to stdout, which carries the service messages.

    Args:
        verbose: Enable logging when True
        log_dir: Directory to write debug.log

    Returns:
        Path to log file if created, None otherwise
    """
    if not verbose or log_dir is None:
        return None

    log_file = log_dir / "debug.log"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Create file handler
    handler = logging.FileHandler(log_file, mode="w")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)-5s] %(name)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    # Configure root tcreport logger (clear existing handlers to prevent duplicates)
    root_logger = logging.getLogger("tcreport")
    for old in root_logger.handlers[:]:
        old.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    return log_file
