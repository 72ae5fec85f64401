"""Errors raised by the gateway client.

The Supabase SDK raises its own exception types (``PostgrestAPIError`` for
table requests, ``supabase.AuthError`` subclasses for auth calls) and lets
``httpx`` transport errors through untouched. Everything above the gateway
sees only the types defined here.
"""

from typing import Any, Optional

from supabase import AuthError as SupabaseAuthError
from supabase import PostgrestAPIError


class GatewayError(Exception):
    """A request to the hosted data/auth service failed.

    ``message`` is the server's own wording; callers that show errors to
    staff display it unchanged.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint

    @classmethod
    def from_api_error(cls, error: PostgrestAPIError) -> "GatewayError":
        """Translate a PostgREST error body (message, code, details, hint)."""
        return cls(
            message=error.message or repr(error),
            code=_as_str(error.code),
            details=_as_str(error.details),
            hint=_as_str(error.hint),
        )


class AuthError(GatewayError):
    """Sign-up, sign-in, sign-out or token refresh was rejected."""

    @classmethod
    def from_auth_error(cls, error: SupabaseAuthError) -> "AuthError":
        return cls(error.message, status_code=getattr(error, "status", None), code=_as_str(error.code))


class NotAuthenticatedError(GatewayError):
    """An operation needs a signed-in identity and there is none."""

    def __init__(self, message: str = "Not signed in"):
        super().__init__(message)


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
