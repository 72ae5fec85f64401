"""Log handlers for the console and for rotating log files."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO

from rich.console import Console
from rich.text import Text


class RichConsoleHandler(logging.Handler):
    """Write records to a Rich console with a coloured level tag."""

    LEVEL_STYLES = {
        "DEBUG": "dim",
        "INFO": "blue",
        "WARNING": "yellow",
        "ERROR": "red bold",
        "CRITICAL": "red bold reverse",
    }

    def __init__(self, console: Console | None = None, show_path: bool = False) -> None:
        super().__init__()
        self.console = console or Console(stderr=True)
        self.show_path = show_path

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = Text(f"[{record.levelname:8}]", style=self.LEVEL_STYLES.get(record.levelname, ""))
            text.append(" ")
            # Messages may contain user input; never interpret it as markup
            text.append(Text(self.format(record)))
            if self.show_path:
                text.append(Text(f" ({record.filename}:{record.lineno})", style="dim"))
            self.console.print(text)
        except Exception:
            self.handleError(record)


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating UTF-8 file handler that creates its directory."""

    def __init__(
        self,
        filename: str | Path,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        log_path = Path(filename)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            filename=str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )


class StreamHandlerWithFlush(logging.StreamHandler):
    """StreamHandler that flushes after every record (CI, containers)."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__(stream or sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            super().emit(record)
            self.flush()
        except Exception:
            self.handleError(record)
