"""Logging infrastructure for the behavior tracker.

Usage:
    from behavior_tracker.logutils import get_logger, with_context

    logger = get_logger(__name__)

    with with_context(operation="load", panel="incidents"):
        logger.info("Loading rows", extra={"extra_data": {"table": "incidents"}})
"""

from .config import Environment, LogConfig, LogOutput, get_config, reset_config, set_config
from .context import (
    LogContext,
    clear_context,
    get_context,
    get_correlation_id,
    submit_with_context,
    update_context,
    with_context,
)
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush
from .logger import configure_root_logger, get_logger, reset_logging
from .masking import MASK, SensitiveValue, is_sensitive_key, mask_dict, mask_sensitive_string

__all__ = [
    "get_logger",
    "configure_root_logger",
    "reset_logging",
    "with_context",
    "submit_with_context",
    "get_context",
    "clear_context",
    "get_correlation_id",
    "update_context",
    "LogContext",
    "LogConfig",
    "LogOutput",
    "Environment",
    "get_config",
    "set_config",
    "reset_config",
    "JSONFormatter",
    "StandardFormatter",
    "CompactFormatter",
    "RichConsoleHandler",
    "SafeRotatingFileHandler",
    "StreamHandlerWithFlush",
    "mask_sensitive_string",
    "mask_dict",
    "is_sensitive_key",
    "SensitiveValue",
    "MASK",
]
