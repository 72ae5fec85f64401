"""Log formatters: JSON for shipping, plain text for terminals."""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from .context import get_context
from .masking import mask_dict, mask_sensitive_string


def _masked_message(record: logging.LogRecord, mask_sensitive: bool) -> str:
    message = record.getMessage()
    return mask_sensitive_string(message) if mask_sensitive else message


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Structured data passed as ``extra={"extra_data": {...}}`` is emitted
    under the ``extra`` key, after masking.
    """

    def __init__(self, mask_sensitive: bool = True, include_context: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _masked_message(record, self.mask_sensitive),
            "source": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if self.include_context:
            log_data["context"] = get_context().to_dict()

        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": mask_sensitive_string(str(record.exc_info[1])),
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        extra = getattr(record, "extra_data", None)
        if extra:
            if self.mask_sensitive and isinstance(extra, dict):
                extra = mask_dict(extra)
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable single-line format with the correlation id.

    Format: TIMESTAMP - LEVEL - LOGGER - [CORRELATION_ID] - MESSAGE
    """

    DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - [%(correlation_id)s] - %(message)s"
    DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__(fmt=self.DEFAULT_FORMAT, datefmt=self.DEFAULT_DATE_FORMAT)
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_context().correlation_id
        result = super().format(record)
        return mask_sensitive_string(result) if self.mask_sensitive else result


class CompactFormatter(logging.Formatter):
    """Bare message with the panel in front, for the Rich console."""

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        message = _masked_message(record, self.mask_sensitive)
        panel = get_context().panel
        if panel:
            message = f"{panel}: {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message
