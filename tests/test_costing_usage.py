"""Tests for weekly usage and cost of sales."""

import math
from datetime import datetime, timezone

import pytest

from foodcost.costing.usage import (
    ReportSummary,
    compute_cost_of_sales,
    compute_report_summary,
    compute_usage,
    usage_by_ingredient,
)
from foodcost.types import (
    UNSPECIFIED_VERSION,
    WeeklyCostSnapshotEntry,
    WeeklyInventoryEntry,
)


def _fixed_clock():
    return datetime(2025, 2, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def inventory():
    return [
        WeeklyInventoryEntry("beef", begin=20, received=5, end=8),
        WeeklyInventoryEntry("cheese", begin=10, received=4, end=9),
    ]


@pytest.fixture
def snapshots():
    return [
        WeeklyCostSnapshotEntry("beef", unit_cost=2.5, source_version_id="v-beef"),
        WeeklyCostSnapshotEntry("cheese", unit_cost=1.0, source_version_id="v-cheese"),
    ]


class TestComputeUsage:
    def test_begin_plus_received_minus_end(self):
        assert compute_usage(WeeklyInventoryEntry("x", 20, 5, 8)) == 17

    def test_negative_usage_clamped(self):
        """Ending above begin + received means a miscount, not negative use."""
        assert compute_usage(WeeklyInventoryEntry("x", 2, 0, 10)) == 0

    def test_invalid_counts_treated_as_zero(self):
        assert compute_usage(WeeklyInventoryEntry("x", math.nan, 5, 0)) == 5
        assert compute_usage(WeeklyInventoryEntry("x", 10, -5, 2)) == 8
        assert compute_usage(WeeklyInventoryEntry("x", math.inf, 0, 0)) == 0

    def test_usage_by_ingredient(self, inventory):
        assert usage_by_ingredient(inventory) == {"beef": 17, "cheese": 5}


class TestCostOfSales:
    def test_usage_times_snapshot_cost(self, snapshots):
        result = compute_cost_of_sales({"beef": 17, "cheese": 5}, snapshots)
        assert result.total == pytest.approx(47.5)
        beef = result.breakdown[0]
        assert beef.cost_of_sales == pytest.approx(42.5)
        assert beef.source_version_id == "v-beef"
        assert not beef.is_unspecified

    def test_missing_snapshot_costs_zero(self, snapshots):
        result = compute_cost_of_sales({"mystery": 3}, snapshots)
        line = result.breakdown[0]
        assert line.unit_cost == 0
        assert line.cost_of_sales == 0
        assert line.source_version_id == UNSPECIFIED_VERSION
        assert line.is_unspecified

    def test_invalid_snapshot_cost(self):
        snap = [WeeklyCostSnapshotEntry("x", unit_cost=math.nan, source_version_id="v1")]
        result = compute_cost_of_sales({"x": 4}, snap)
        assert result.total == 0

    def test_empty(self):
        result = compute_cost_of_sales({}, [])
        assert result.breakdown == []
        assert result.total == 0


class TestReportSummary:
    def test_totals_and_shares(self, inventory, snapshots):
        summary = compute_report_summary(inventory, snapshots, now=_fixed_clock)
        assert summary.computed_at == "2025-02-02T12:00:00.000Z"
        assert summary.total_usage_units == 22
        assert summary.total_cost_of_sales == 47.5
        assert summary.ingredient_cost_share == {"beef": 0.8947, "cheese": 0.1053}
        assert sum(summary.ingredient_cost_share.values()) == pytest.approx(1.0)
        assert summary.unspecified_ingredients == []

    def test_zero_total_gives_zero_shares(self, inventory):
        summary = compute_report_summary(inventory, [], now=_fixed_clock)
        assert summary.total_cost_of_sales == 0
        assert summary.ingredient_cost_share == {"beef": 0.0, "cheese": 0.0}
        assert summary.unspecified_ingredients == ["beef", "cheese"]

    def test_empty_week(self):
        summary = compute_report_summary([], [], now=_fixed_clock)
        assert summary.total_usage_units == 0
        assert summary.breakdown == []
        assert summary.ingredient_cost_share == {}

    def test_money_rounded_half_away_from_zero(self):
        inv = [WeeklyInventoryEntry("x", begin=1, received=0, end=0)]
        snap = [WeeklyCostSnapshotEntry("x", unit_cost=0.125, source_version_id="v")]
        summary = compute_report_summary(inv, snap, now=_fixed_clock)
        assert summary.total_cost_of_sales == 0.13

    def test_default_clock_is_utc(self, inventory, snapshots):
        summary = compute_report_summary(inventory, snapshots)
        assert summary.computed_at.endswith("Z")

    def test_dict_round_trip(self, inventory, snapshots):
        summary = compute_report_summary(inventory, snapshots, now=_fixed_clock)
        data = summary.summary_dict()
        assert data["totals"]["total_cost_of_sales"] == 47.5
        assert data["percentages"]["ingredient_cost_share"]["beef"] == 0.8947
        assert ReportSummary.from_dict(data) == summary
