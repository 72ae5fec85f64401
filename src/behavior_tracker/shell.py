"""Which screen and which tab the dashboard shows.

Selection is in-memory only; it is never written to the URL or storage.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Union

from .logutils import get_logger
from .session import SessionState, SessionStatus, SessionStore

logger = get_logger(__name__)


class Tab(str, Enum):
    OVERVIEW = "overview"
    STUDENTS = "students"
    INCIDENTS = "incidents"
    COUNSELING = "counseling"
    MEDIATION = "mediation"
    DEVICES = "devices"

    @property
    def label(self) -> str:
        return TAB_LABELS[self]

    @classmethod
    def parse(cls, value: Union[str, Tab, None]) -> Tab:
        """Map an identifier to a tab; anything unknown means the overview."""
        try:
            return cls(value)
        except ValueError:
            return cls.OVERVIEW


TAB_LABELS = {
    Tab.OVERVIEW: "Overview",
    Tab.STUDENTS: "Students",
    Tab.INCIDENTS: "Incidents",
    Tab.COUNSELING: "Counseling",
    Tab.MEDIATION: "Peer Mediation",
    Tab.DEVICES: "Device Usage",
}

DEFAULT_TAB = Tab.OVERVIEW


class Screen(str, Enum):
    LOADING = "loading"
    SIGN_IN = "sign_in"
    DASHBOARD = "dashboard"


class ViewSwitcher:
    """Holds the selected tab and gates the dashboard behind sign-in."""

    def __init__(self, active_tab: Tab = DEFAULT_TAB):
        self.active_tab = active_tab
        self._detach: Optional[Callable[[], None]] = None

    @staticmethod
    def screen(state: SessionState) -> Screen:
        if state.status == SessionStatus.UNKNOWN:
            return Screen.LOADING
        if state.status == SessionStatus.ANONYMOUS:
            return Screen.SIGN_IN
        return Screen.DASHBOARD

    def select(self, tab: Union[str, Tab]) -> bool:
        """Select a tab; returns True if the selection changed."""
        new_tab = Tab.parse(tab)
        if new_tab == self.active_tab:
            return False
        logger.debug("Tab %s -> %s", self.active_tab.value, new_tab.value)
        self.active_tab = new_tab
        return True

    def attach(self, store: SessionStore) -> None:
        """Follow ``store`` so every fresh sign-in lands on the default tab."""
        if self._detach is not None:
            self._detach()
        self._detach = store.subscribe(self._on_session_change)

    def _on_session_change(self, new: SessionState, old: SessionState) -> None:
        if new.is_authenticated and not old.is_authenticated:
            logger.debug("Signed in, resetting tab to %s", DEFAULT_TAB.value)
            self.active_tab = DEFAULT_TAB
