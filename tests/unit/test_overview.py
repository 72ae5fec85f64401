"""Tests for overview counts and quick actions."""

import pytest

from behavior_tracker.overview import QUICK_ACTIONS, OverviewStats, find_quick_action
from behavior_tracker.shell import Tab

pytestmark = pytest.mark.unit


class TestOverviewStats:
    """Tests for OverviewStats.load."""

    def test_counts(self, gateway, fake_supabase):
        for name in ("Ana", "Ben", "Carla"):
            fake_supabase.insert_row("students", full_name=name)
        fake_supabase.insert_row("incidents", student_id="s1", status="open")
        fake_supabase.insert_row("incidents", student_id="s1", status="open")
        fake_supabase.insert_row("incidents", student_id="s1", status="closed")
        fake_supabase.insert_row("counseling_records", student_id="s1")
        fake_supabase.insert_row("behavioral_interventions", student_id="s1")

        stats = OverviewStats.load(gateway)

        assert stats == OverviewStats(
            total_students=3, open_incidents=2, counseling_sessions=1, active_interventions=1
        )

    def test_counts_are_head_requests(self, gateway, fake_supabase):
        OverviewStats.load(gateway)

        for table in ("students", "incidents", "counseling_records", "behavioral_interventions"):
            request = fake_supabase.requests_to(table)[-1]
            assert request.method == "HEAD"
            assert "count=exact" in request.headers["prefer"]
        assert fake_supabase.requests_to("incidents")[-1].url.params["status"] == "eq.open"

    def test_empty_backend(self, gateway):
        assert OverviewStats.load(gateway) == OverviewStats()

    def test_failed_count_reads_zero_others_kept(self, gateway, fake_supabase):
        fake_supabase.insert_row("students", full_name="Ana")
        fake_supabase.insert_row("incidents", student_id="s1", status="open")
        fake_supabase.insert_row("counseling_records", student_id="s1")
        fake_supabase.failing.add("counseling_records")

        assert OverviewStats.load(gateway) == OverviewStats(total_students=1, open_incidents=1)

    def test_every_count_failing_reads_all_zero(self, gateway, fake_supabase):
        fake_supabase.insert_row("students", full_name="Ana")
        fake_supabase.failing.update({"students", "incidents", "counseling_records", "behavioral_interventions"})

        assert OverviewStats.load(gateway) == OverviewStats()


class TestQuickActions:
    """Tests for quick-action targets."""

    def test_targets_are_tabs(self):
        for action in QUICK_ACTIONS:
            assert Tab.parse(action.tab).value == action.tab

    def test_find(self):
        assert find_quick_action("Report Incident").tab == "incidents"
        assert find_quick_action("Add Student").tab == "students"
        assert find_quick_action("Schedule Counseling").tab == "counseling"
        assert find_quick_action("Order Pizza") is None
