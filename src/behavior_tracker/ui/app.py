"""Behavior Tracker dashboard.

Flow on every rerun:
1. Build (or reuse) this browser session's gateway, session store and shell
2. Resolve the session on first run (loading placeholder meanwhile)
3. Show the credential form to anonymous visitors
4. Show the sidebar and the mounted panel to signed-in staff
"""

import streamlit as st

from ..config import ConfigError
from ..logutils import configure_root_logger, get_logger, with_context
from ..shell import Screen
from .auth_form import render_auth_form
from .layout import render_sidebar
from .overview_view import render_overview
from .panel_view import render_panel
from .state import get_app_context, mount, unmount

logger = get_logger(__name__)


def main() -> None:
    st.set_page_config(page_title="Behavior Tracker", page_icon="🏫", layout="wide")
    configure_root_logger()

    try:
        context = get_app_context()
    except ConfigError as e:
        logger.error("Startup configuration invalid: %s", e)
        st.error(f"Configuration error: {e}")
        st.stop()
        return

    store, shell = context.store, context.shell
    identity = store.state.identity
    with with_context(user_id=identity.id if identity else None):
        screen = shell.screen(store.state)

        if screen == Screen.LOADING:
            with st.spinner("Loading..."):
                store.start()
            screen = shell.screen(store.state)

        if screen == Screen.SIGN_IN:
            unmount()
            render_auth_form(store, context.config.app_title)
            return

        render_sidebar(shell, store, context.config.app_title)
        mounted = mount(context)
        if mounted.panel is not None:
            render_panel(mounted.panel)
        elif mounted.stats is not None:
            render_overview(mounted.stats, shell)
