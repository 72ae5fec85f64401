"""Session store: who is signed in, and who needs to know when that changes.

States::

    UNKNOWN --start()--> ANONYMOUS | AUTHENTICATED
    ANONYMOUS --sign_in / sign_up--> AUTHENTICATED
    AUTHENTICATED --sign_out / session ended--> ANONYMOUS

There is no terminal state. Transitions are driven by the gateway's auth
events, so a session that ends on the server side (refresh rejected) moves
the store to ANONYMOUS the same way an explicit sign-out does.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..gateway import AuthError, AuthEvent, GatewayClient, GatewayError, NotAuthenticatedError
from ..logutils import get_logger, with_context
from ..models import AuthSession, Identity, RoleName

logger = get_logger(__name__)

DEFAULT_SIGN_UP_ROLE = RoleName.TEACHER


class SessionStatus(str, Enum):
    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    identity: Optional[Identity] = None

    @classmethod
    def unknown(cls) -> SessionState:
        return cls(SessionStatus.UNKNOWN)

    @classmethod
    def anonymous(cls) -> SessionState:
        return cls(SessionStatus.ANONYMOUS)

    @classmethod
    def authenticated(cls, identity: Identity) -> SessionState:
        return cls(SessionStatus.AUTHENTICATED, identity)

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED


@dataclass(frozen=True)
class SignUpResult:
    """Outcome of a sign-up.

    Attributes:
        identity: The new account, or None when nothing came back.
        signed_in: The service returned a session (no confirmation step).
        role_assigned: A ``user_roles`` row was written for the chosen role.
            False means the account exists without a role.
    """

    identity: Optional[Identity]
    signed_in: bool
    role_assigned: bool


Listener = Callable[[SessionState, SessionState], None]


class SessionStore:
    """Holds the current :class:`SessionState` and notifies subscribers.

    Listeners are called as ``listener(new_state, old_state)`` exactly once
    per real change; a transition to an equal state is dropped.
    """

    def __init__(self, gateway: GatewayClient):
        self._gateway = gateway
        self._state = SessionState.unknown()
        self._listeners: list[Listener] = []
        self._unsubscribe_gateway = gateway.auth.on_auth_state_change(self._on_auth_event)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_identity(self) -> Identity:
        """The signed-in identity.

        Raises:
            NotAuthenticatedError: When nobody is signed in.
        """
        if self._state.identity is None:
            raise NotAuthenticatedError()
        return self._state.identity

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Stop following gateway auth events."""
        self._unsubscribe_gateway()
        self._listeners.clear()

    # ---- transitions ----

    def _transition(self, new_state: SessionState) -> None:
        old_state = self._state
        if new_state == old_state:
            return
        self._state = new_state
        logger.info(
            "Session state changed",
            extra={"extra_data": {"from": old_state.status.value, "to": new_state.status.value}},
        )
        for listener in list(self._listeners):
            listener(new_state, old_state)

    def _on_auth_event(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        if session is not None and event in (AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED):
            self._transition(SessionState.authenticated(session.user))
        elif event == AuthEvent.SIGNED_OUT:
            self._transition(SessionState.anonymous())

    # ---- operations ----

    def start(self) -> SessionState:
        """Resolve UNKNOWN from whatever session the gateway already holds.

        Only the first call does anything; later calls return the current state.
        """
        if self._state.status != SessionStatus.UNKNOWN:
            return self._state

        try:
            session = self._gateway.auth.get_session()
        except GatewayError:
            logger.exception("Could not check for an existing session")
            session = None

        # get_session() may already have moved us via a refresh event
        if self._state.status == SessionStatus.UNKNOWN:
            if session is not None:
                self._transition(SessionState.authenticated(session.user))
            else:
                self._transition(SessionState.anonymous())
        return self._state

    def sign_in(self, email: str, password: str) -> None:
        """Sign in with email and password.

        The state change reaches subscribers through the gateway's auth event.

        Raises:
            AuthError: With the service's message, unchanged.
        """
        with with_context(operation="sign_in"):
            self._gateway.auth.sign_in_with_password(email, password)

    def sign_up(self, email: str, password: str, role: str = DEFAULT_SIGN_UP_ROLE.value) -> SignUpResult:
        """Create an account, then try to attach ``role`` to it.

        The role step is best effort: if the role lookup or the ``user_roles``
        insert fails, the failure is logged and reported as
        ``role_assigned=False``. The account is kept either way.

        Raises:
            AuthError: If the account itself could not be created.
        """
        with with_context(operation="sign_up"):
            response = self._gateway.auth.sign_up(email, password)
            role_assigned = False
            if response.user is not None:
                role_assigned = self._assign_role(response.user, role)
            return SignUpResult(
                identity=response.user,
                signed_in=response.session is not None,
                role_assigned=role_assigned,
            )

    def _assign_role(self, identity: Identity, role: str) -> bool:
        try:
            found = self._gateway.table("roles").select("id").eq("name", role).maybe_single().execute()
            if not found.data:
                logger.warning(
                    "Role not found, account left without a role",
                    extra={"extra_data": {"role": role, "user_id": identity.id}},
                )
                return False
            self._gateway.table("user_roles").insert(
                {"user_id": identity.id, "role_id": found.data["id"]}
            ).execute()
        except GatewayError as e:
            logger.warning(
                "Role assignment failed, account left without a role",
                extra={"extra_data": {"role": role, "user_id": identity.id, "error": e.message}},
            )
            return False
        return True

    def sign_out(self) -> None:
        """Sign out. Failures are logged, never raised."""
        with with_context(operation="sign_out"):
            try:
                self._gateway.auth.sign_out()
            except AuthError:
                logger.exception("Error signing out")
