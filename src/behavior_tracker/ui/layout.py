"""Sidebar navigation and the signed-in user block."""

import streamlit as st

from ..session import SessionStore
from ..shell import Tab, ViewSwitcher
from .state import unmount


def render_sidebar(shell: ViewSwitcher, store: SessionStore, app_title: str) -> None:
    with st.sidebar:
        st.header(app_title)
        st.caption("Behavior Tracking System")

        for tab in Tab:
            selected = tab == shell.active_tab
            if st.button(
                tab.label,
                key=f"nav-{tab.value}",
                type="primary" if selected else "secondary",
                use_container_width=True,
            ) and not selected:
                shell.select(tab)
                st.rerun()

        st.divider()
        identity = store.state.identity
        st.markdown(f"**{identity.email if identity and identity.email else 'Signed in'}**")
        st.caption("Staff Member")
        if st.button("Sign Out", key="sign-out", use_container_width=True):
            store.sign_out()
            unmount()
            st.rerun()
