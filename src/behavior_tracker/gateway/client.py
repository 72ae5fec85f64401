"""Client for the hosted data/auth service, built on the Supabase SDK.

``supabase.create_client`` supplies both halves of the service:

- ``client.auth``: email/password accounts and JWT sessions (GoTrue)
- ``client.table(...)``: one resource per table, with filtering, ordering
  and relation embedding (PostgREST)

``GatewayClient`` keeps that SDK client and adds what the dashboard needs on
top: SDK models translated into this package's models, SDK errors translated
into :class:`GatewayError`, and a session check before every table request,
so a token that expired while the dashboard sat idle is refreshed (or the
session ended) before the request goes out with it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import ClientOptions, SupabaseException, create_client

from ..config import AppConfig, ConfigError
from ..logutils import get_logger
from ..models import AuthSession, Identity
from .errors import AuthError
from .query import TableQuery

logger = get_logger(__name__)

# Failures of an auth call, from the service or from the network
AUTH_FAILURES = (SupabaseAuthError, httpx.HTTPError)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


@dataclass
class AuthResponse:
    """Result of sign-up or sign-in.

    ``session`` is None after a sign-up that still needs email confirmation.
    """

    user: Optional[Identity]
    session: Optional[AuthSession]


def _identity(user: Any) -> Optional[Identity]:
    return Identity(id=user.id, email=user.email) if user is not None else None


def _session(session: Any) -> Optional[AuthSession]:
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
        expires_at=session.expires_at,
        user=_identity(session.user),
    )


def _auth_error(error: Exception) -> AuthError:
    if isinstance(error, SupabaseAuthError):
        return AuthError.from_auth_error(error)
    return AuthError(f"Could not reach the authentication service: {error}")


class AuthClient:
    """Email/password authentication on top of the SDK's auth client.

    Listeners registered here receive this package's :class:`AuthEvent` and
    :class:`AuthSession`; SDK events outside :class:`AuthEvent` (password
    recovery, MFA, user updates) are not forwarded.
    """

    def __init__(self, sdk_auth: Any):
        self._auth = sdk_auth
        self._listeners: list[AuthListener] = []
        self._current: Optional[AuthSession] = None
        # Refresh tokens are single use; concurrent refreshes would revoke each other
        self._refresh_lock = threading.RLock()
        self._subscription = sdk_auth.on_auth_state_change(self._forward)

    # ---- subscriptions ----

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Register ``callback(event, session)``; returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _forward(self, event: str, session: Any) -> None:
        if event not in AuthEvent.__members__:
            return
        self._emit(AuthEvent(event), _session(session))

    def _emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        self._current = None if event == AuthEvent.SIGNED_OUT else session
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed", extra={"extra_data": {"event": event.value}})

    # ---- operations ----

    def sign_up(self, email: str, password: str) -> AuthResponse:
        """Create an account.

        Raises:
            AuthError: With the service's message, e.g. a weak password.
        """
        try:
            response = self._auth.sign_up({"email": email, "password": password})
        except AUTH_FAILURES as e:
            raise _auth_error(e) from e

        user = _identity(response.user)
        if response.session is None:
            logger.info("Account created, confirmation pending")
        else:
            logger.info("Account created and signed in", extra={"extra_data": {"user_id": user.id}})
        return AuthResponse(user=user, session=_session(response.session))

    def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        """Exchange credentials for a session.

        Raises:
            AuthError: With the service's message, e.g. "Invalid login credentials".
        """
        try:
            response = self._auth.sign_in_with_password({"email": email, "password": password})
        except AUTH_FAILURES as e:
            raise _auth_error(e) from e

        session = _session(response.session)
        logger.info("Signed in", extra={"extra_data": {"user_id": session.user.id}})
        return AuthResponse(user=session.user, session=session)

    def sign_out(self) -> None:
        """End the session on the server and locally.

        A logout the service rejects still ends the local session. When the
        service cannot be reached at all, the local session is ended anyway
        and the error is raised afterwards.
        """
        try:
            self._auth.sign_out()
        except AUTH_FAILURES as e:
            self._end_local_session()
            raise _auth_error(e) from e

    def _end_local_session(self) -> None:
        try:
            self._auth.sign_out({"scope": "local"})
        except AUTH_FAILURES:
            logger.exception("Could not clear the local session")
            self._emit(AuthEvent.SIGNED_OUT, None)


    def refresh_session(self) -> AuthSession:
        """Trade the refresh token for a new access token, expired or not.

        On failure the session is ended (``SIGNED_OUT`` is emitted) and the
        error is raised.
        """
        with self._refresh_lock:
            if self._current is None:
                raise AuthError("No session to refresh")
            try:
                response = self._auth.refresh_session()
            except AUTH_FAILURES as e:
                error = _auth_error(e)
                logger.warning("Session ended: token refresh rejected", extra={"extra_data": {"error": error.message}})
                self._end_local_session()
                raise error from e
        return _session(response.session)

    def get_session(self) -> Optional[AuthSession]:
        """Return the current session, refreshing it first if it has expired.

        Returns None when signed out or when an expired session could not be
        refreshed; in the latter case the session is ended.
        """
        with self._refresh_lock:
            try:
                return _session(self._auth.get_session())
            except AUTH_FAILURES as e:
                logger.warning(
                    "Session ended: token refresh rejected",
                    extra={"extra_data": {"error": _auth_error(e).message}},
                )
                self._end_local_session()
                return None

    @property
    def access_token(self) -> Optional[str]:
        """The access token last issued, without checking its expiry."""
        session = self._current
        return session.access_token if session else None

    def close(self) -> None:
        self._subscription.unsubscribe()
        self._listeners.clear()


class GatewayClient:
    """Entry point for auth and table access.

    Args:
        config: Endpoint, API key and client options.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.

    Raises:
        ConfigError: If the SDK rejects the URL or key.
    """

    def __init__(self, config: AppConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        # Shared by the SDK's auth and table clients
        self.http = httpx.Client(timeout=config.timeout, transport=transport, follow_redirects=True)
        options = ClientOptions(httpx_client=self.http, auto_refresh_token=config.auto_refresh_token)
        try:
            self.supabase = create_client(config.supabase_url, config.anon_key, options)
        except SupabaseException as e:
            self.http.close()
            raise ConfigError(e.message) from e
        self.auth = AuthClient(self.supabase.auth)

    def table(self, name: str) -> TableQuery:
        """Start a query on ``name`` under the current, unexpired session.

        An expired session is refreshed first; if the refresh fails the
        session ends and the query goes out under the anon key.
        """
        self.auth.get_session()
        return TableQuery(self.supabase.table(name), name)

    def close(self) -> None:
        self.auth.close()
        self.http.close()

    def __enter__(self) -> GatewayClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
