"""Sign-in / sign-up form shown to anonymous visitors."""

from typing import Optional

import streamlit as st

from ..gateway import AuthError
from ..models import RoleName
from ..session import DEFAULT_SIGN_UP_ROLE, SessionStore

MIN_PASSWORD_LENGTH = 6

_MODE_KEY = "auth_mode_sign_in"
_ERROR_KEY = "auth_error"


def render_auth_form(store: SessionStore, app_title: str) -> None:
    """Render the credential form and run sign-in or sign-up on submit.

    Errors from the gateway are shown verbatim under the form; a successful
    sign-in changes the session state and reruns the script.
    """
    is_login = st.session_state.setdefault(_MODE_KEY, True)

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.markdown(f"## {app_title}")
        st.caption("Sign in to your account" if is_login else "Create a new account")

        with st.form("auth_form"):
            email = st.text_input("Email", placeholder="Enter your email")
            password = st.text_input("Password", type="password", placeholder="Enter your password")
            role = DEFAULT_SIGN_UP_ROLE.value
            if not is_login:
                roles = [r.value for r in RoleName]
                role = st.selectbox(
                    "User Role",
                    roles,
                    index=roles.index(DEFAULT_SIGN_UP_ROLE.value),
                    format_func=lambda value: RoleName(value).label,
                )
            submitted = st.form_submit_button("Sign In" if is_login else "Sign Up", use_container_width=True)

        if submitted:
            st.session_state[_ERROR_KEY] = _submit(store, is_login, email.strip(), password, role)
            if st.session_state[_ERROR_KEY] is None and store.state.is_authenticated:
                st.rerun()

        error = st.session_state.get(_ERROR_KEY)
        if error:
            st.error(error)

        toggle_label = "Don't have an account? Sign up" if is_login else "Already have an account? Sign in"
        if st.button(toggle_label):
            st.session_state[_MODE_KEY] = not is_login
            st.session_state[_ERROR_KEY] = None
            st.rerun()


def _submit(store: SessionStore, is_login: bool, email: str, password: str, role: str) -> Optional[str]:
    """Run the auth call; returns an error message or None."""
    if not email or not password:
        return "Please enter both email and password."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password should be at least {MIN_PASSWORD_LENGTH} characters."

    try:
        if is_login:
            store.sign_in(email, password)
        else:
            result = store.sign_up(email, password, role)
            if not result.signed_in:
                st.info("Account created. Check your email to confirm it, then sign in.")
    except AuthError as e:
        return e.message
    return None
