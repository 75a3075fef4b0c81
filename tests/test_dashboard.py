#!/usr/bin/env python3
"""Tests for the dashboard summary and snapshots."""

import pytest
from datetime import date, timedelta
from garage import (
    Dashboard,
    DuePolicy,
    Part,
    ServiceRecord,
    Snapshot,
    TaxRecord,
    Vehicle,
    calc_odometer_margin,
    classify_part_margin,
    classify_service_margin,
    classify_tax_timing,
    Status,
    summarize_dashboard,
    TaxStatus,
)

TODAY = date(2025, 6, 15)


def make_snapshot(**kwargs):
    defaults = dict(
        owner_id="alice",
        vehicles=[
            Vehicle("v1", "alice", "Honda", "Vario", current_mileage=19800),
            Vehicle("v2", "alice", "Toyota", "Avanza", vehicle_type="car"),
        ],
    )
    defaults.update(kwargs)
    return Snapshot(**defaults)


class TestSnapshot:
    """Tests for Snapshot."""

    def test_collections_are_tuples(self):
        snapshot = make_snapshot(services=[])
        assert isinstance(snapshot.vehicles, tuple)
        assert isinstance(snapshot.services, tuple)

    def test_vehicles_by_id(self):
        snapshot = make_snapshot()
        assert snapshot.vehicles_by_id["v2"].model == "Avanza"

    def test_for_vehicle_narrows_records(self):
        snapshot = make_snapshot(
            services=[
                ServiceRecord("s1", "v1", "alice", "oil"),
                ServiceRecord("s2", "v2", "alice", "oil"),
            ],
            parts=[Part("p1", "v2", "alice", "wipers", needs_replacement=True)],
            taxes=[TaxRecord("t1", "v1", "alice", "annual", "2025-07-01")],
        )
        narrowed = snapshot.for_vehicle("v1")
        assert [s.id for s in narrowed.services] == ["s1"]
        assert narrowed.parts == ()
        assert [t.id for t in narrowed.taxes] == ["t1"]
        # Vehicle list stays whole for lookups and filter menus
        assert len(narrowed.vehicles) == 2


class TestDashboard:
    """Tests for the Dashboard view model."""

    def test_counts_follow_lists(self):
        dashboard = Dashboard(
            vehicle_count=2,
            limit=5,
            upcoming_services=["a", "b"],
            parts_needing_replacement=[],
            upcoming_taxes=["c"],
        )
        assert dashboard.upcoming_service_count == 2
        assert dashboard.parts_needing_replacement_count == 0
        assert dashboard.upcoming_tax_count == 1

    def test_is_capped(self):
        dashboard = Dashboard(vehicle_count=1, limit=2, upcoming_services=["a", "b"])
        assert dashboard.is_capped("services")
        assert not dashboard.is_capped("parts")

    def test_is_capped_unknown_category(self):
        dashboard = Dashboard(vehicle_count=0, limit=5)
        with pytest.raises(ValueError):
            dashboard.is_capped("vehicles")

    def test_as_dict(self):
        dashboard = Dashboard(vehicle_count=3, limit=5, upcoming_taxes=["t"])
        assert dashboard.as_dict() == {
            "vehicleCount": 3,
            "upcomingServiceCount": 0,
            "partsNeedingReplacementCount": 0,
            "upcomingTaxCount": 1,
        }


class TestSummarizeDashboard:
    """Tests for summarize_dashboard."""

    def test_end_to_end_scenario(self):
        """One vehicle at 19,800 km with a mix of records."""
        snapshot = make_snapshot(
            vehicles=[Vehicle("v1", "alice", "Honda", "Vario", current_mileage=19800)],
            services=[
                ServiceRecord("s-near", "v1", "alice", "oil", next_service_km=20000),
                ServiceRecord("s-far", "v1", "alice", "oil", next_service_km=25000),
            ],
            parts=[
                Part("p-passed", "v1", "alice", "belt", 15000, "2024-01-01", 19000),
                Part("p-flag", "v1", "alice", "wipers", needs_replacement=True),
            ],
            taxes=[TaxRecord("t1", "v1", "alice", "annual", TODAY + timedelta(days=10))],
        )

        dashboard = summarize_dashboard(snapshot, TODAY)

        assert dashboard.vehicle_count == 1
        assert [s.id for s in dashboard.upcoming_services] == ["s-near"]
        assert [p.id for p in dashboard.parts_needing_replacement] == [
            "p-passed",
            "p-flag",
        ]
        assert [t.id for t in dashboard.upcoming_taxes] == ["t1"]
        assert dashboard.upcoming_service_count == 1
        assert dashboard.parts_needing_replacement_count == 2
        assert dashboard.upcoming_tax_count == 1

        # The far service is outside the window but would be OK on its own
        margin = calc_odometer_margin(25000, 19800)
        assert margin == 5200
        assert classify_service_margin(margin) == Status.OK
        assert classify_service_margin(calc_odometer_margin(20000, 19800)) == Status.URGENT
        assert classify_part_margin(calc_odometer_margin(19000, 19800)) == Status.OVERDUE

    def test_passed_target_still_listed(self):
        """Same service on a vehicle at 25,000 km is 5,000 km overdue and listed."""
        service = ServiceRecord("s1", "v1", "alice", "oil", next_service_km=20000)
        snapshot = make_snapshot(
            vehicles=[Vehicle("v1", "alice", "Honda", "Vario", current_mileage=25000)],
            services=[service],
            taxes=[TaxRecord("t1", "v1", "alice", "annual", TODAY + timedelta(days=10))],
        )

        dashboard = summarize_dashboard(snapshot, TODAY)

        assert calc_odometer_margin(20000, 25000) == -5000
        assert classify_service_margin(-5000) == Status.OVERDUE
        assert dashboard.upcoming_services == [service]
        # Not inside the 7-day chip, but inside the 60-day dashboard horizon
        assert classify_tax_timing(TODAY + timedelta(days=10), False, TODAY) == (
            TaxStatus.PENDING
        )
        assert dashboard.upcoming_tax_count == 1

    def test_empty_snapshot(self):
        dashboard = summarize_dashboard(Snapshot(owner_id="alice"), TODAY)
        assert dashboard.vehicle_count == 0
        assert dashboard.as_dict()["upcomingServiceCount"] == 0
        assert not dashboard.is_capped("services")

    def test_counts_capped_at_limit(self):
        snapshot = make_snapshot(
            parts=[
                Part(f"p{i}", "v1", "alice", "part", needs_replacement=True)
                for i in range(8)
            ],
        )
        dashboard = summarize_dashboard(snapshot, TODAY)
        assert dashboard.parts_needing_replacement_count == 5
        assert dashboard.is_capped("parts")
        assert [p.id for p in dashboard.parts_needing_replacement] == [
            "p0",
            "p1",
            "p2",
            "p3",
            "p4",
        ]

    def test_policy_overrides(self):
        snapshot = make_snapshot(
            services=[
                ServiceRecord(f"s{i}", "v1", "alice", "oil", next_service_km=21500)
                for i in range(3)
            ],
        )
        policy = DuePolicy(service_window_km=2000, list_limit=2)
        dashboard = summarize_dashboard(snapshot, TODAY, policy)
        assert dashboard.limit == 2
        assert [s.id for s in dashboard.upcoming_services] == ["s0", "s1"]
        assert dashboard.is_capped("services")

    def test_paid_and_distant_taxes_excluded(self):
        snapshot = make_snapshot(
            taxes=[
                TaxRecord("paid", "v1", "alice", "annual", "2025-01-01", is_paid=True),
                TaxRecord("far", "v1", "alice", "annual", "2026-01-01"),
                TaxRecord("late", "v1", "alice", "annual", "2025-05-01"),
            ],
        )
        dashboard = summarize_dashboard(snapshot, TODAY)
        assert [t.id for t in dashboard.upcoming_taxes] == ["late"]

    def test_orphans_do_not_raise(self):
        snapshot = make_snapshot(
            services=[ServiceRecord("s1", "gone", "alice", "oil", next_service_km=1)],
            parts=[Part("p1", "gone", "alice", "belt", 0, None, 1)],
        )
        dashboard = summarize_dashboard(snapshot, TODAY)
        assert dashboard.upcoming_services == []
        assert dashboard.parts_needing_replacement == []
