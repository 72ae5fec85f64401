"""Logger factory for the behavior tracker.

Every module does::

    from behavior_tracker.logutils import get_logger

    logger = get_logger(__name__)

and gets a logger wired to the handlers chosen by :class:`LogConfig`.
"""

from __future__ import annotations

import logging
import sys

from .config import LogConfig, LogOutput, get_config
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush

_configured_loggers: set[str] = set()
_root_configured = False


def get_logger(name: str | None = None, config: LogConfig | None = None) -> logging.Logger:
    """Return a configured logger.

    Args:
        name: Logger name, usually ``__name__``; None for the root logger
        config: Configuration to apply instead of the global one

    Returns:
        The logger, configured on first request only
    """
    logger = logging.getLogger(name)
    key = name or "root"
    if key not in _configured_loggers:
        _configure_logger(logger, config or get_config())
        _configured_loggers.add(key)
    return logger


def _configure_logger(logger: logging.Logger, config: LogConfig) -> None:
    level = config.module_levels.get(logger.name, config.level)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.handlers.clear()
    if logger.name != "root":
        logger.propagate = False

    for handler in _create_handlers(config):
        logger.addHandler(handler)


def _create_handlers(config: LogConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.output in (LogOutput.CONSOLE, LogOutput.BOTH):
        handler: logging.Handler
        if config.json_format:
            handler = StreamHandlerWithFlush(sys.stderr)
            handler.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
        elif config.use_rich:
            handler = RichConsoleHandler()
            handler.setFormatter(CompactFormatter(mask_sensitive=config.mask_sensitive))
        else:
            handler = StreamHandlerWithFlush(sys.stderr)
            handler.setFormatter(StandardFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(handler)

    if config.output in (LogOutput.FILE, LogOutput.BOTH) and config.log_file:
        file_handler = SafeRotatingFileHandler(
            filename=config.log_file,
            max_bytes=config.max_file_size,
            backup_count=config.backup_count,
        )
        # Files are always JSON so they can be shipped as-is
        file_handler.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(file_handler)

    return handlers


def configure_root_logger(config: LogConfig | None = None) -> None:
    """Configure the root logger and the per-module level overrides.

    Called once when the Streamlit app starts; later calls are no-ops.
    """
    global _root_configured
    if _root_configured:
        return

    cfg = config or get_config()
    _configure_logger(logging.getLogger(), cfg)
    for module, level in cfg.module_levels.items():
        logging.getLogger(module).setLevel(getattr(logging, level.upper(), logging.WARNING))
    _root_configured = True


def reset_logging() -> None:
    """Drop handlers from every logger configured here (used by tests)."""
    global _root_configured
    for name in _configured_loggers:
        logging.getLogger(None if name == "root" else name).handlers.clear()
    if _root_configured:
        logging.getLogger().handlers.clear()
    _configured_loggers.clear()
    _root_configured = False
