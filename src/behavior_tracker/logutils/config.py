"""Logging configuration for the behavior tracker.

Defaults depend on where the dashboard runs: a developer laptop gets
colourised Rich output, CI and tests get plain text, production gets JSON
suitable for a log shipper.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

_TRUTHY = ("true", "1", "yes")


class Environment(Enum):
    """Runtime environment of the dashboard."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"
    CI = "ci"


class LogOutput(Enum):
    """Where log records are written."""

    CONSOLE = "console"
    FILE = "file"
    BOTH = "both"


@dataclass
class LogConfig:
    """Logging configuration container."""

    level: str = "INFO"
    output: LogOutput = LogOutput.CONSOLE
    json_format: bool = False
    use_rich: bool = True
    mask_sensitive: bool = True
    log_file: Path | None = None
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    # Per-logger overrides, e.g. {"httpx": "WARNING"}
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> LogConfig:
        """Build a configuration from the environment.

        Environment variables:
            LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            LOG_OUTPUT: console, file or both
            LOG_JSON: emit JSON on the console (true/false)
            LOG_RICH: use the Rich console handler (true/false)
            LOG_MASK_SENSITIVE: mask credentials and PII (true/false)
            LOG_FILE: path of the log file for file output

        Returns:
            LogConfig with environment defaults and overrides applied
        """
        config = cls.for_environment(detect_environment())

        if level := os.getenv("LOG_LEVEL"):
            config.level = level.upper()

        if output := os.getenv("LOG_OUTPUT"):
            try:
                config.output = LogOutput(output.lower())
            except ValueError:
                pass

        if json_format := os.getenv("LOG_JSON"):
            config.json_format = json_format.lower() in _TRUTHY

        if use_rich := os.getenv("LOG_RICH"):
            config.use_rich = use_rich.lower() in _TRUTHY

        if mask_sensitive := os.getenv("LOG_MASK_SENSITIVE"):
            config.mask_sensitive = mask_sensitive.lower() in _TRUTHY

        if log_file := os.getenv("LOG_FILE"):
            config.log_file = Path(log_file)

        return config

    @classmethod
    def for_environment(cls, env: Environment) -> LogConfig:
        """Return the default configuration for an environment."""
        # httpx logs every request at INFO, which drowns the dashboard logs
        quiet = {"httpx": "WARNING", "httpcore": "WARNING"}

        if env == Environment.PRODUCTION:
            return cls(
                level="INFO",
                output=LogOutput.CONSOLE,
                json_format=True,
                use_rich=False,
                module_levels=quiet,
            )

        if env in (Environment.CI, Environment.TESTING):
            return cls(
                level="DEBUG" if env == Environment.TESTING else "INFO",
                use_rich=False,
                module_levels=quiet,
            )

        return cls(level="DEBUG", use_rich=True, module_levels=quiet)


def detect_environment() -> Environment:
    """Work out which environment the process is running in."""
    if os.getenv("CI") or os.getenv("GITHUB_ACTIONS"):
        return Environment.CI

    env_name = os.getenv("ENVIRONMENT", os.getenv("ENV", "")).lower()
    if env_name in ("prod", "production"):
        return Environment.PRODUCTION
    if env_name in ("test", "testing"):
        return Environment.TESTING

    if os.getenv("PYTEST_CURRENT_TEST"):
        return Environment.TESTING

    return Environment.DEVELOPMENT


_config: LogConfig | None = None


def get_config() -> LogConfig:
    """Return the active configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = LogConfig.from_env()
    return _config


def set_config(config: LogConfig) -> None:
    """Replace the active configuration."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the active configuration so the next call re-reads the env."""
    global _config
    _config = None
