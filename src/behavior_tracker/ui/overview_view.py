"""Overview tab: headline metrics and quick actions."""

import streamlit as st

from ..overview import QUICK_ACTIONS, OverviewStats
from ..shell import ViewSwitcher
from .state import OPEN_FORM_ON_MOUNT_KEY


def render_overview(stats: OverviewStats, shell: ViewSwitcher) -> None:
    st.title("Dashboard Overview")
    st.caption("Welcome to the Student Management System")

    cards = (
        ("Total Students", stats.total_students),
        ("Open Incidents", stats.open_incidents),
        ("Counseling Sessions", stats.counseling_sessions),
        ("Active Interventions", stats.active_interventions),
    )
    for column, (title, value) in zip(st.columns(len(cards)), cards):
        with column, st.container(border=True):
            st.metric(title, value)

    st.subheader("Quick Actions")
    for column, action in zip(st.columns(len(QUICK_ACTIONS)), QUICK_ACTIONS):
        with column:
            if st.button(action.title, help=action.description, key=f"quick-{action.tab}", use_container_width=True):
                shell.select(action.tab)
                st.session_state[OPEN_FORM_ON_MOUNT_KEY] = True
                st.rerun()
