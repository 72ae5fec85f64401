"""Per-browser-session objects kept in ``st.session_state``.

Each browser tab gets its own gateway client, session store and view
switcher; they live exactly as long as the Streamlit session.
"""

from dataclasses import dataclass
from typing import Optional

import streamlit as st

from ..config import AppConfig
from ..gateway import GatewayClient
from ..overview import OverviewStats
from ..panels import PANELS, ResourcePanel
from ..session import SessionStore
from ..shell import Tab, ViewSwitcher

_CONTEXT_KEY = "app_context"
_MOUNTED_KEY = "mounted_view"
OPEN_FORM_ON_MOUNT_KEY = "open_form_on_mount"


@dataclass
class AppContext:
    config: AppConfig
    gateway: GatewayClient
    store: SessionStore
    shell: ViewSwitcher


def get_app_context() -> AppContext:
    """Return this browser session's context, creating it on first use.

    Raises:
        ConfigError: If the gateway settings are missing.
    """
    context: Optional[AppContext] = st.session_state.get(_CONTEXT_KEY)
    if context is None:
        config = AppConfig.from_env()
        gateway = GatewayClient(config)
        store = SessionStore(gateway)
        shell = ViewSwitcher()
        shell.attach(store)
        context = AppContext(config=config, gateway=gateway, store=store, shell=shell)
        st.session_state[_CONTEXT_KEY] = context
    return context


@dataclass
class MountedView:
    """The view currently on screen; replaced whenever the tab changes."""

    tab: Tab
    panel: Optional[ResourcePanel] = None
    stats: Optional[OverviewStats] = None


def mount(context: AppContext) -> MountedView:
    """Return the mounted view for the active tab, mounting it if needed.

    Mounting builds a fresh panel and loads it, so nothing carries over
    from an earlier visit to the same tab.
    """
    tab = context.shell.active_tab
    mounted: Optional[MountedView] = st.session_state.get(_MOUNTED_KEY)
    if mounted is not None and mounted.tab == tab:
        return mounted

    if tab == Tab.OVERVIEW:
        with st.spinner("Loading..."):
            mounted = MountedView(tab=tab, stats=OverviewStats.load(context.gateway))
    else:
        panel = ResourcePanel(PANELS[tab.value], context.gateway, context.store)
        with st.spinner("Loading..."):
            panel.load()
        if st.session_state.pop(OPEN_FORM_ON_MOUNT_KEY, False):
            panel.open_form()
        mounted = MountedView(tab=tab, panel=panel)

    st.session_state[_MOUNTED_KEY] = mounted
    return mounted


def unmount() -> None:
    st.session_state.pop(_MOUNTED_KEY, None)
