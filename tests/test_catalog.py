"""Tests for ingredient pricing, versions and cost snapshots."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from foodcost.catalog import (
    build_cost_snapshot,
    create_version,
    inventory_valuation,
    revise_ingredient,
    unit_cost_from_case,
    version_in_effect,
)
from foodcost.errors import InvalidIngredientError
from foodcost.types import (
    UNSPECIFIED_VERSION,
    BatchIngredient,
    IngredientVersion,
    RecipeLine,
    RegularIngredient,
    WeeklyInventoryEntry,
)

NEW_YEAR = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _clock(moment):
    return lambda: moment


@pytest.fixture
def beef():
    return RegularIngredient(
        id="beef",
        name="Ground Beef",
        inventory_unit="lb",
        unit_cost=2.5,
        units_per_case=20,
        case_price=50,
        current_version_id="v1",
    )


@pytest.fixture
def catalog(beef):
    return [
        beef,
        RegularIngredient(
            id="napkins", name="Napkins", inventory_unit="each",
            unit_cost=0.01, category="paper",
        ),
        BatchIngredient(
            id="patties",
            name="Beef Patties",
            recipe_lines=[RecipeLine("beef", 4, "lb")],
            yield_quantity=16,
            yield_unit="each",
        ),
    ]


class TestUnitCostFromCase:
    def test_divides_case_price(self):
        assert unit_cost_from_case(45, 10) == 4.5

    def test_rounds_to_four_places(self):
        assert unit_cost_from_case(10, 3) == 3.3333

    @pytest.mark.parametrize("units", [0, -4, math.nan])
    def test_rejects_non_positive_units(self, units):
        with pytest.raises(InvalidIngredientError):
            unit_cost_from_case(10, units)


class TestVersions:
    def test_create_version(self, beef):
        version = create_version(beef, now=_clock(NEW_YEAR))
        assert version.id == "1735689600000"
        assert version.ingredient_id == "beef"
        assert version.unit_cost == 2.5
        assert version.case_price == 50
        assert version.effective_from == NEW_YEAR
        assert version.effective_to is None

    def test_batch_versions_have_no_unit_cost(self, catalog):
        version = create_version(catalog[2], now=_clock(NEW_YEAR))
        assert version.unit_cost == 0

    def test_revise_ingredient(self, beef):
        previous = create_version(beef, now=_clock(NEW_YEAR))
        later = NEW_YEAR + timedelta(days=7)

        updated, closed, version = revise_ingredient(
            beef, case_price=60, units_per_case=20, previous=previous, now=_clock(later)
        )

        assert updated.unit_cost == 3.0
        assert updated.case_price == 60
        assert updated.current_version_id == version.id
        assert version.unit_cost == 3.0
        assert version.effective_from == later
        assert closed.id == previous.id
        assert closed.effective_to == later
        # The original records are untouched
        assert beef.unit_cost == 2.5
        assert previous.effective_to is None

    def test_revise_without_previous(self, beef):
        _, closed, version = revise_ingredient(beef, 30, 10, now=_clock(NEW_YEAR))
        assert closed is None
        assert version.unit_cost == 3.0

    def test_revise_rejects_zero_units(self, beef):
        with pytest.raises(InvalidIngredientError):
            revise_ingredient(beef, 30, 0, now=_clock(NEW_YEAR))

    def test_version_in_effect(self):
        week = timedelta(days=7)
        v1 = IngredientVersion("1", "beef", 50, 20, 2.5, NEW_YEAR, NEW_YEAR + week)
        v2 = IngredientVersion("2", "beef", 60, 20, 3.0, NEW_YEAR + week)

        assert version_in_effect([v1, v2], NEW_YEAR + timedelta(days=1)) is v1
        assert version_in_effect([v1, v2], NEW_YEAR + week) is v2
        assert version_in_effect([v1, v2], NEW_YEAR + timedelta(days=30)) is v2
        assert version_in_effect([v1, v2], NEW_YEAR - timedelta(days=1)) is None

    def test_version_in_effect_accepts_naive_datetimes(self):
        v1 = IngredientVersion("1", "beef", 50, 20, 2.5, NEW_YEAR)
        assert version_in_effect([v1], datetime(2025, 3, 1)) is v1


class TestCostSnapshot:
    def test_snapshot_current_costs(self, catalog):
        inventory = [
            WeeklyInventoryEntry("beef", 10, 0, 2),
            WeeklyInventoryEntry("napkins", 500, 0, 100),
        ]
        snapshot = build_cost_snapshot(inventory, catalog)
        assert [(s.ingredient_id, s.unit_cost, s.source_version_id) for s in snapshot] == [
            ("beef", 2.5, "v1"),
            ("napkins", 0.01, UNSPECIFIED_VERSION),
        ]

    def test_batch_snapshot_uses_derived_cost(self, catalog):
        snapshot = build_cost_snapshot([WeeklyInventoryEntry("patties", 32, 0, 0)], catalog)
        # 4 lb x 2.50 / 16 patties
        assert snapshot[0].unit_cost == 0.625

    def test_unknown_ingredient(self, catalog):
        snapshot = build_cost_snapshot([WeeklyInventoryEntry("ghost", 1, 1, 1)], catalog)
        assert snapshot[0].unit_cost == 0
        assert snapshot[0].source_version_id == UNSPECIFIED_VERSION

    def test_one_entry_per_ingredient(self, catalog):
        inventory = [WeeklyInventoryEntry("beef", 1, 0, 0), WeeklyInventoryEntry("beef", 2, 0, 0)]
        assert len(build_cost_snapshot(inventory, catalog)) == 1

    def test_snapshot_survives_price_change(self, catalog, beef):
        snapshot = build_cost_snapshot([WeeklyInventoryEntry("beef", 1, 0, 0)], catalog)
        beef.unit_cost = 9.99
        assert snapshot[0].unit_cost == 2.5


def test_inventory_valuation(catalog):
    inventory = [
        WeeklyInventoryEntry("beef", 10, 0, 4),
        WeeklyInventoryEntry("napkins", 500, 0, 250),
        WeeklyInventoryEntry("patties", 0, 32, 16),
        WeeklyInventoryEntry("ghost", 0, 0, 100),
    ]
    valuation = inventory_valuation(inventory, catalog)
    assert valuation.total_value == 22.5
    assert valuation.value_by_category == {"food": 20.0, "paper": 2.5, "other": 0.0}
