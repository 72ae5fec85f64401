"""Authentication state shared by the dashboard."""

from .store import (
    DEFAULT_SIGN_UP_ROLE,
    SessionState,
    SessionStatus,
    SessionStore,
    SignUpResult,
)

__all__ = [
    "DEFAULT_SIGN_UP_ROLE",
    "SessionState",
    "SessionStatus",
    "SessionStore",
    "SignUpResult",
]
