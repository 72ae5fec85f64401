"""Tests for tab selection and screen gating."""

import pytest

from behavior_tracker.models import Identity
from behavior_tracker.session import SessionState
from behavior_tracker.shell import DEFAULT_TAB, Screen, Tab, ViewSwitcher

pytestmark = pytest.mark.unit


class TestTab:
    """Tests for the Tab enum."""

    def test_labels(self):
        assert Tab.MEDIATION.label == "Peer Mediation"
        assert Tab.DEVICES.label == "Device Usage"

    @pytest.mark.parametrize("value", ["reports", "", None])
    def test_unknown_identifier_falls_back_to_overview(self, value):
        assert Tab.parse(value) == Tab.OVERVIEW

    def test_parse_known(self):
        assert Tab.parse("incidents") == Tab.INCIDENTS
        assert Tab.parse(Tab.DEVICES) == Tab.DEVICES


class TestScreen:
    """Tests for which screen each session state gets."""

    def test_unknown_is_loading(self):
        assert ViewSwitcher.screen(SessionState.unknown()) == Screen.LOADING

    def test_anonymous_gets_sign_in(self):
        assert ViewSwitcher.screen(SessionState.anonymous()) == Screen.SIGN_IN

    def test_authenticated_gets_dashboard(self):
        state = SessionState.authenticated(Identity(id="u1", email="t@school.edu"))
        assert ViewSwitcher.screen(state) == Screen.DASHBOARD


class TestViewSwitcher:
    """Tests for tab selection."""

    def test_default_tab(self):
        assert ViewSwitcher().active_tab == DEFAULT_TAB == Tab.OVERVIEW

    def test_select(self):
        shell = ViewSwitcher()
        assert shell.select("students")
        assert shell.active_tab == Tab.STUDENTS
        assert not shell.select(Tab.STUDENTS)

    def test_select_unknown_goes_to_overview(self):
        shell = ViewSwitcher(Tab.DEVICES)
        shell.select("attendance")
        assert shell.active_tab == Tab.OVERVIEW

    def test_sign_in_resets_to_overview(self, store, staff_account):
        shell = ViewSwitcher(Tab.COUNSELING)
        shell.attach(store)
        store.start()

        store.sign_in(staff_account["email"], staff_account["password"])

        assert shell.active_tab == Tab.OVERVIEW

    def test_sign_out_keeps_tab(self, signed_in_store):
        shell = ViewSwitcher()
        shell.attach(signed_in_store)
        shell.select(Tab.INCIDENTS)

        signed_in_store.sign_out()

        assert shell.active_tab == Tab.INCIDENTS

    def test_attach_twice_subscribes_once(self, store):
        shell = ViewSwitcher()
        shell.attach(store)
        shell.attach(store)
        assert len(store._listeners) == 1
