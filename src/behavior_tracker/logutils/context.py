"""Per-request logging context.

Streamlit runs every script rerun on its own thread, so the context lives
in a ``ContextVar`` rather than a module global. A rerun that signs a user
in, loads a panel and patches a row can tag all of its log lines with the
same correlation id, operation and panel.
"""

from __future__ import annotations

import uuid
from concurrent.futures import Executor, Future
from contextvars import ContextVar, Token, copy_context
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class LogContext:
    """Contextual fields attached to every log record."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    operation: str | None = None
    user_id: str | None = None
    panel: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"correlation_id": self.correlation_id}
        if self.operation:
            result["operation"] = self.operation
        if self.user_id:
            result["user_id"] = self.user_id
        if self.panel:
            result["panel"] = self.panel
        result.update(self.extra)
        return result


_log_context: ContextVar[LogContext | None] = ContextVar("log_context", default=None)


def get_context() -> LogContext:
    """Return the current context, creating one on first access."""
    ctx = _log_context.get()
    if ctx is None:
        ctx = LogContext()
        _log_context.set(ctx)
    return ctx


def clear_context() -> None:
    _log_context.set(None)


def get_correlation_id() -> str:
    return get_context().correlation_id


def update_context(**kwargs: Any) -> None:
    """Set fields on the current context; unknown names go to ``extra``."""
    ctx = get_context()
    for key, value in kwargs.items():
        if key != "extra" and hasattr(ctx, key):
            setattr(ctx, key, value)
        else:
            ctx.extra[key] = value


class with_context:  # noqa: N801 - used like a function
    """Scope a logging context to a ``with`` block.

    Fields not given explicitly are inherited from the enclosing context,
    so nested scopes keep the correlation id of the rerun that opened them.

    Usage:
        with with_context(operation="submit", panel="incidents"):
            logger.info("Creating row")
    """

    def __init__(
        self,
        correlation_id: str | None = None,
        operation: str | None = None,
        user_id: str | None = None,
        panel: str | None = None,
        **extra: Any,
    ) -> None:
        self._overrides = {
            "correlation_id": correlation_id,
            "operation": operation,
            "user_id": user_id,
            "panel": panel,
        }
        self._extra = extra
        self._token: Token[LogContext | None] | None = None

    def __enter__(self) -> LogContext:
        parent = _log_context.get()
        ctx = LogContext(
            correlation_id=(
                self._overrides["correlation_id"]
                or (parent.correlation_id if parent else uuid.uuid4().hex[:12])
            ),
            operation=self._overrides["operation"] or (parent.operation if parent else None),
            user_id=self._overrides["user_id"] or (parent.user_id if parent else None),
            panel=self._overrides["panel"] or (parent.panel if parent else None),
            extra={**(parent.extra if parent else {}), **self._extra},
        )
        self._token = _log_context.set(ctx)
        return ctx

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def submit_with_context(pool: Executor, fn: Callable[..., Any], *args: Any) -> Future:
    """Submit ``fn(*args)`` to ``pool`` under a copy of the caller's context.

    Pool threads start with an empty context, so without the copy their log
    lines would carry a new correlation id and no operation or panel.
    Each call takes its own copy; one context cannot run on two threads.
    """
    return pool.submit(copy_context().run, fn, *args)
